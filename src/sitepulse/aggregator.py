"""Merge extracted metrics with fetch-level signals."""

from dataclasses import replace

from .fetcher import FetchResult
from .models import RawMetrics, SecurityHeaders


SECURITY_HEADER_NAMES = {
    "csp": "content-security-policy",
    "xfo": "x-frame-options",
    "referrer": "referrer-policy",
    "permissions": "permissions-policy",
}


def _content_length(headers: dict[str, str]) -> int:
    try:
        return int(headers.get("content-length", "0"))
    except ValueError:
        return 0


def aggregate_metrics(parsed: RawMetrics, fetch: FetchResult) -> RawMetrics:
    """Return a copy of ``parsed`` with timing, header and size signals filled in."""
    headers = fetch.headers
    security_headers = SecurityHeaders(
        **{field: bool(headers.get(name)) for field, name in SECURITY_HEADER_NAMES.items()}
    )

    size = parsed.size
    declared = _content_length(headers)
    if declared > 0 and size.total_bytes > 0 and declared < size.total_bytes:
        # Network (compressed) size beats decoded HTML size.
        size = replace(size, total_bytes=declared)

    return replace(
        parsed,
        timing=replace(parsed.timing, ttfb_ms=fetch.ttfb_ms),
        size=size,
        security=replace(parsed.security, headers=security_headers),
    )
