"""Bounded HTML retrieval over HTTP."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Optional

import httpx

from .config import DEFAULT_TIMEOUT_MS, DEFAULT_USER_AGENT, MAX_HTML_BYTES
from .errors import BlockedHost, FetchTimeout, HttpStatusError, NetworkError, NonHtml
from .normalize import is_blocked_host

logger = logging.getLogger(__name__)


DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


@dataclass(frozen=True)
class FetchResult:
    """Outcome of fetching one page."""
    url: str
    final_url: str  # After redirects
    status: int
    headers: dict[str, str] = field(default_factory=dict)  # lower-cased names
    ttfb_ms: int = 0
    html: str = ""
    truncated: bool = False


async def _reject_blocked_hosts(request: httpx.Request) -> None:
    # Runs for the first request and for every redirect hop.
    host = request.url.host
    if is_blocked_host(host):
        raise BlockedHost(host, f"Redirect or request to local/private host refused: {host}")


async def _fetch(client: httpx.AsyncClient, url: str, max_bytes: int) -> FetchResult:
    start = time.monotonic()
    async with client.stream("GET", url) as response:
        ttfb_ms = int((time.monotonic() - start) * 1000)

        if response.status_code >= 400:
            raise HttpStatusError(url, response.status_code)

        headers = {name.lower(): value for name, value in response.headers.items()}
        content_type = headers.get("content-type")
        if not content_type or not content_type.lower().startswith("text/html"):
            raise NonHtml(url, content_type)

        body = bytearray()
        truncated = False
        async for chunk in response.aiter_bytes():
            room = max_bytes - len(body)
            if len(chunk) > room:
                body.extend(chunk[:room])
                truncated = True
                break
            body.extend(chunk)

        final_url = str(response.url)

    if truncated:
        logger.warning("Truncated %s at %d bytes", url, max_bytes)
    logger.debug("Fetched %s -> %s (%d, ttfb %dms, %d bytes)",
                 url, final_url, response.status_code, ttfb_ms, len(body))

    return FetchResult(
        url=url,
        final_url=final_url,
        status=response.status_code,
        headers=headers,
        ttfb_ms=ttfb_ms,
        html=body.decode("utf-8", errors="replace"),
        truncated=truncated,
    )


async def fetch_html(
    url: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    *,
    max_bytes: int = MAX_HTML_BYTES,
    user_agent: str = DEFAULT_USER_AGENT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FetchResult:
    """Fetch ``url`` and return its HTML, capped at ``max_bytes``.

    The whole exchange, body included, must finish within ``timeout_ms``.
    On expiry the in-flight request is cancelled and its connection closed.
    A body larger than the cap is cut at the boundary and flagged as
    truncated rather than treated as an error.

    Raises:
        FetchTimeout: the deadline elapsed.
        HttpStatusError: the response status was 400 or above.
        NonHtml: the content type is missing or not text/html.
        BlockedHost: a request or redirect targeted a local/private host.
        NetworkError: any other transport fault.
    """
    timeout_s = timeout_ms / 1000
    try:
        async with httpx.AsyncClient(
            headers={"User-Agent": user_agent, **DEFAULT_HEADERS},
            timeout=timeout_s,
            follow_redirects=True,
            event_hooks={"request": [_reject_blocked_hosts]},
            transport=transport,
        ) as client:
            return await asyncio.wait_for(_fetch(client, url, max_bytes), timeout=timeout_s)
    except asyncio.TimeoutError:
        raise FetchTimeout(url, timeout_ms) from None
    except httpx.TimeoutException as exc:
        raise FetchTimeout(url, timeout_ms) from exc
    except (httpx.HTTPError, httpx.StreamError, httpx.InvalidURL) as exc:
        raise NetworkError(f"Network error fetching {url}: {exc}") from exc
