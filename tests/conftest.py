"""
Shared fixtures for the SitePulse test suite.

No test touches the network: HTTP is served by ``httpx.MockTransport``.
"""

from dataclasses import replace

import httpx
import pytest

from sitepulse.models import (
    AccessibilitySignals,
    Counts,
    RawMetrics,
    SecurityHeaders,
    SecuritySignals,
    SeoSignals,
    Size,
    Timing,
    UxSignals,
)


GOOD_PAGE = """<!doctype html>
<html lang="en">
<head>
  <title>SitePulse example page with a title of a reasonable length</title>
  <meta name="description" content="An example page used by the SitePulse test suite.">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link rel="canonical" href="https://example.com/">
  <link rel="icon" href="/favicon.ico">
</head>
<body>
  <header></header>
  <main><h1>Example</h1><h2>Section</h2><img src="/a.png" alt="A"></main>
  <footer></footer>
</body>
</html>
"""


@pytest.fixture
def base_metrics() -> RawMetrics:
    """A mostly good page: one defensive header, nothing badly wrong."""
    return RawMetrics(
        timing=Timing(ttfb_ms=400),
        size=Size(total_bytes=420_000, js_bytes=50_000),
        counts=Counts(requests=40, img=10, script=6, css=2),
        accessibility=AccessibilitySignals(
            alt_coverage=0.9, h1_count=1, outline_issues=0, landmarks=3, has_lang=True
        ),
        seo=SeoSignals(title_chars=60, meta_description_chars=140, has_canonical=True, h1_exists=True),
        security=SecuritySignals(https=True, headers=SecurityHeaders(csp=True), mixed_content=0),
        ux=UxSignals(has_viewport=True, has_favicon=True, font_display_percent=80, js_weight_kb=50),
        page_title="Example",
    )


@pytest.fixture
def tweak():
    """Return a copy of metrics with fields of one group replaced."""
    def _tweak(metrics: RawMetrics, group: str, **fields) -> RawMetrics:
        return replace(metrics, **{group: replace(getattr(metrics, group), **fields)})
    return _tweak


def html_transport(body=GOOD_PAGE, status=200, headers=None) -> httpx.MockTransport:
    content = body.encode("utf-8") if isinstance(body, str) else body
    if headers is None:
        headers = {"content-type": "text/html; charset=utf-8"}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, headers=headers, content=content)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_transport():
    """Factory for a transport answering every request with the same page."""
    return html_transport


@pytest.fixture
def good_transport() -> httpx.MockTransport:
    return html_transport(headers={
        "content-type": "text/html; charset=utf-8",
        "content-security-policy": "default-src 'self'",
        "x-frame-options": "DENY",
    })
