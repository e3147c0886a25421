import pytest

from sitepulse.errors import BlockedHost, InvalidUrl
from sitepulse.normalize import is_blocked_host, normalize_url


@pytest.mark.parametrize("raw, expected", [
    ("example.com", "https://example.com/"),
    ("  https://Example.COM/Path?q=1#frag  ", "https://example.com/Path?q=1"),
    ("http://example.com:80/a", "http://example.com/a"),
    ("https://example.com:443", "https://example.com/"),
    ("https://example.com:8443/x", "https://example.com:8443/x"),
    ("HTTP://example.com", "http://example.com/"),
    ("https://user:pw@example.com/", "https://example.com/"),
    ("example.com/search?q=a b", "https://example.com/search?q=a%20b"),
    ("https://example.com/my page/", "https://example.com/my%20page/"),
    ("https://example.com/caf\u00e9?x=%20y&z=1", "https://example.com/caf%C3%A9?x=%20y&z=1"),
])
def test_normalizes(raw, expected):
    assert normalize_url(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "ftp://example.com", "https://", "https://exa mple.com",
                                 "https://example.com:99999/"])
def test_rejects_invalid(raw):
    with pytest.raises(InvalidUrl):
        normalize_url(raw)


@pytest.mark.parametrize("raw", [
    "localhost",
    "http://127.0.0.1:8000/",
    "https://0.0.0.0",
    "10.1.2.3",
    "http://192.168.0.10/admin",
    "172.16.0.1",
    "https://172.31.255.255/",
    "LOCALHOST:3000",
])
def test_blocks_local_and_private_hosts(raw):
    with pytest.raises(BlockedHost):
        normalize_url(raw)


def test_public_172_range_is_allowed():
    assert normalize_url("172.32.0.1") == "https://172.32.0.1/"
    assert not is_blocked_host("172.15.0.1")


def test_invalid_url_error_carries_code_and_hint():
    with pytest.raises(InvalidUrl) as exc_info:
        normalize_url("")
    payload = exc_info.value.to_dict()
    assert payload["code"] == "INVALID_URL"
    assert payload["hint"]
