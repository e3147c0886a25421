import logging

import pytest

from sitepulse.config import DEFAULT_TIMEOUT_MS, DEFAULT_USER_AGENT, MAX_HTML_BYTES, Settings

ENV_NAMES = (
    "SITEPULSE_UA",
    "SITEPULSE_TIMEOUT_MS",
    "SITEPULSE_MAX_HTML_BYTES",
    "SITEPULSE_CACHE_TTL_SECONDS",
    "SITEPULSE_CACHE_MAX_ENTRIES",
    "SITEPULSE_RATE_CAPACITY",
    "SITEPULSE_RATE_REFILL_PER_SEC",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_env():
    assert Settings.from_env() == Settings()


def test_overrides_from_env(monkeypatch):
    monkeypatch.setenv("SITEPULSE_UA", "TestBot/1.0")
    monkeypatch.setenv("SITEPULSE_TIMEOUT_MS", "2500")
    monkeypatch.setenv("SITEPULSE_MAX_HTML_BYTES", "1000")
    monkeypatch.setenv("SITEPULSE_CACHE_TTL_SECONDS", "30.5")
    monkeypatch.setenv("SITEPULSE_CACHE_MAX_ENTRIES", "10")
    monkeypatch.setenv("SITEPULSE_RATE_CAPACITY", "3")
    monkeypatch.setenv("SITEPULSE_RATE_REFILL_PER_SEC", "0.25")

    settings = Settings.from_env()

    assert settings == Settings(
        user_agent="TestBot/1.0",
        timeout_ms=2500,
        max_html_bytes=1000,
        cache_ttl_seconds=30.5,
        cache_max_entries=10,
        rate_capacity=3.0,
        rate_refill_per_sec=0.25,
    )


def test_non_numeric_value_keeps_default(monkeypatch, caplog):
    monkeypatch.setenv("SITEPULSE_TIMEOUT_MS", "soon")

    with caplog.at_level(logging.WARNING, logger="sitepulse.config"):
        settings = Settings.from_env()

    assert settings.timeout_ms == DEFAULT_TIMEOUT_MS
    assert "SITEPULSE_TIMEOUT_MS" in caplog.text


@pytest.mark.parametrize("raw", ["0", "-5"])
def test_non_positive_value_keeps_default(monkeypatch, caplog, raw):
    monkeypatch.setenv("SITEPULSE_MAX_HTML_BYTES", raw)

    with caplog.at_level(logging.WARNING, logger="sitepulse.config"):
        settings = Settings.from_env()

    assert settings.max_html_bytes == MAX_HTML_BYTES
    assert "non-positive" in caplog.text


def test_float_for_integer_setting_is_rejected(monkeypatch, caplog):
    monkeypatch.setenv("SITEPULSE_CACHE_MAX_ENTRIES", "2.5")

    with caplog.at_level(logging.WARNING, logger="sitepulse.config"):
        assert Settings.from_env().cache_max_entries == 400
    assert "invalid" in caplog.text


@pytest.mark.parametrize("raw", ["", "   "])
def test_blank_values_fall_back_silently(monkeypatch, caplog, raw):
    monkeypatch.setenv("SITEPULSE_UA", raw)
    monkeypatch.setenv("SITEPULSE_RATE_CAPACITY", raw)

    with caplog.at_level(logging.WARNING, logger="sitepulse.config"):
        settings = Settings.from_env()

    assert settings.rate_capacity == 8.0
    assert settings.user_agent == DEFAULT_USER_AGENT
    assert not caplog.records
