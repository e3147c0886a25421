"""Runtime settings read from the environment."""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


DEFAULT_USER_AGENT = "SitePulseBot/0.1 (+https://sitepulse.app)"
DEFAULT_TIMEOUT_MS = 6000
MAX_HTML_BYTES = 2_000_000


def _env_number(name: str, default, cast=int):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r, using %s", name, raw, default)
        return default
    return value


@dataclass(frozen=True)
class Settings:
    """Audit settings. CLI options override these per invocation."""
    user_agent: str = DEFAULT_USER_AGENT
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    max_html_bytes: int = MAX_HTML_BYTES
    cache_ttl_seconds: float = 600.0
    cache_max_entries: int = 400
    rate_capacity: float = 8.0
    rate_refill_per_sec: float = 0.5

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            user_agent=(os.getenv("SITEPULSE_UA") or "").strip() or DEFAULT_USER_AGENT,
            timeout_ms=_env_number("SITEPULSE_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
            max_html_bytes=_env_number("SITEPULSE_MAX_HTML_BYTES", MAX_HTML_BYTES),
            cache_ttl_seconds=_env_number("SITEPULSE_CACHE_TTL_SECONDS", 600.0, float),
            cache_max_entries=_env_number("SITEPULSE_CACHE_MAX_ENTRIES", 400),
            rate_capacity=_env_number("SITEPULSE_RATE_CAPACITY", 8.0, float),
            rate_refill_per_sec=_env_number("SITEPULSE_RATE_REFILL_PER_SEC", 0.5, float),
        )
