import asyncio

import httpx
import pytest

from sitepulse.errors import BlockedHost, FetchTimeout, HttpStatusError, NetworkError, NonHtml
from sitepulse.fetcher import fetch_html


URL = "https://example.com/"


@pytest.mark.asyncio
async def test_fetch_success(make_transport):
    result = await fetch_html(URL, transport=make_transport("<html><title>Hi</title></html>"))

    assert result.status == 200
    assert result.final_url == URL
    assert result.html == "<html><title>Hi</title></html>"
    assert result.headers["content-type"].startswith("text/html")
    assert result.truncated is False
    assert result.ttfb_ms >= 0


@pytest.mark.asyncio
async def test_sends_auditor_user_agent():
    seen = {}

    def handler(request):
        seen["ua"] = request.headers["user-agent"]
        return httpx.Response(200, headers={"content-type": "text/html"}, content=b"<html></html>")

    await fetch_html(URL, transport=httpx.MockTransport(handler))
    assert "SitePulseBot" in seen["ua"]


@pytest.mark.asyncio
async def test_oversized_body_is_truncated_not_an_error(make_transport):
    result = await fetch_html(URL, max_bytes=1000, transport=make_transport("a" * 5000))

    assert result.truncated is True
    assert len(result.html) == 1000


@pytest.mark.asyncio
async def test_body_exactly_at_cap_is_not_truncated(make_transport):
    result = await fetch_html(URL, max_bytes=1000, transport=make_transport("a" * 1000))

    assert result.truncated is False
    assert len(result.html) == 1000


@pytest.mark.asyncio
async def test_malformed_utf8_is_decoded_permissively(make_transport):
    result = await fetch_html(URL, transport=make_transport(b"<html>\xff\xfe ok</html>"))
    assert "�" in result.html
    assert result.html.endswith("ok</html>")


@pytest.mark.asyncio
@pytest.mark.parametrize("headers", [
    {"content-type": "application/pdf"},
    {"content-type": "application/json; charset=utf-8"},
    {},
])
async def test_non_html_content_type(make_transport, headers):
    with pytest.raises(NonHtml):
        await fetch_html(URL, transport=make_transport("%PDF-1.4", headers=headers))


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [404, 410, 500, 503])
async def test_error_status(make_transport, status):
    with pytest.raises(HttpStatusError) as exc_info:
        await fetch_html(URL, transport=make_transport("nope", status=status))
    assert exc_info.value.status == status
    assert exc_info.value.http_status == 502


@pytest.mark.asyncio
async def test_timeout_cancels_request():
    cancelled = asyncio.Event()

    async def handler(request):
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return httpx.Response(200, headers={"content-type": "text/html"}, content=b"late")

    with pytest.raises(FetchTimeout) as exc_info:
        await fetch_html(URL, timeout_ms=50, transport=httpx.MockTransport(handler))

    assert exc_info.value.timeout_ms == 50
    assert cancelled.is_set()


@pytest.mark.asyncio
async def test_transport_fault_becomes_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError):
        await fetch_html(URL, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_redirect_is_followed():
    def handler(request):
        if request.url.path == "/old":
            return httpx.Response(301, headers={"location": "https://example.com/new"})
        return httpx.Response(200, headers={"content-type": "text/html"}, content=b"<html></html>")

    result = await fetch_html("https://example.com/old", transport=httpx.MockTransport(handler))
    assert result.final_url == "https://example.com/new"


@pytest.mark.asyncio
async def test_redirect_to_private_host_is_refused():
    requested = []

    def handler(request):
        requested.append(request.url.host)
        return httpx.Response(302, headers={"location": "http://127.0.0.1/admin"})

    with pytest.raises(BlockedHost):
        await fetch_html(URL, transport=httpx.MockTransport(handler))
    assert requested == ["example.com"]
