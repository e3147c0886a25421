"""URL validation and canonicalization."""

import re
from urllib.parse import quote, urlsplit

from .errors import BlockedHost, InvalidUrl


_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)
_LOCAL_HOSTS = {"localhost", "127.0.0.1", "0.0.0.0"}
_PRIVATE_PREFIX_RE = re.compile(r"^(10\.|192\.168\.|172\.(1[6-9]|2\d|3[0-1])\.)")
_DEFAULT_PORTS = {"http": 80, "https": 443}
# Kept literally next to letters, digits and "_.-~". Spaces and non-ASCII get percent-encoded.
_PATH_SAFE = "/%:@!$&'()*+,;=[]|^"
_QUERY_SAFE = _PATH_SAFE + "?"


def is_blocked_host(host: str) -> bool:
    """Lexical check for local and private-network hosts. No DNS lookup."""
    host = host.lower().strip("[]")
    return host in _LOCAL_HOSTS or bool(_PRIVATE_PREFIX_RE.match(host))


def normalize_url(raw: str) -> str:
    """Validate ``raw`` and return a canonical absolute URL.

    Adds ``https://`` when no scheme is given, drops the fragment and any
    credentials, lowercases the host and removes the scheme's default port.
    Spaces and other unsafe characters in the path and query are
    percent-encoded; existing escapes are kept.

    Raises:
        InvalidUrl: empty input, unparseable URL or a non-http(s) scheme.
        BlockedHost: the host is local or on a private network.
    """
    if not raw or not raw.strip():
        raise InvalidUrl("Empty URL")
    work = raw.strip()
    if not _SCHEME_RE.match(work):
        work = "https://" + work
    try:
        parts = urlsplit(work)
        port = parts.port
    except ValueError:
        raise InvalidUrl("Invalid URL") from None
    if any(ch.isspace() for ch in parts.netloc):
        raise InvalidUrl("Invalid URL")

    scheme = parts.scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        raise InvalidUrl("Only http/https allowed")
    host = parts.hostname
    if not host:
        raise InvalidUrl("Invalid URL")
    if is_blocked_host(host):
        raise BlockedHost(host)

    netloc = f"[{host}]" if ":" in host else host
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    path = quote(parts.path, safe=_PATH_SAFE) or "/"
    query = f"?{quote(parts.query, safe=_QUERY_SAFE)}" if parts.query else ""
    return f"{scheme}://{netloc}{path}{query}"
