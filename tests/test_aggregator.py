from sitepulse.aggregator import aggregate_metrics
from sitepulse.extractor import extract_metrics
from sitepulse.fetcher import FetchResult


HTML = "<html><head><title>Hello</title></head><body>" + "x" * 5000 + "</body></html>"


def fetched(**headers) -> FetchResult:
    return FetchResult(
        url="https://example.com/",
        final_url="https://example.com/",
        status=200,
        headers={"content-type": "text/html", **headers},
        ttfb_ms=321,
        html=HTML,
    )


def test_copies_ttfb_and_security_headers():
    parsed = extract_metrics(HTML, "https://example.com/")
    merged = aggregate_metrics(parsed, fetched(**{
        "content-security-policy": "default-src 'self'",
        "referrer-policy": "no-referrer",
    }))

    assert merged.timing.ttfb_ms == 321
    headers = merged.security.headers
    assert headers.csp and headers.referrer
    assert not headers.xfo and not headers.permissions


def test_prefers_smaller_declared_network_size():
    parsed = extract_metrics(HTML, "https://example.com/")
    merged = aggregate_metrics(parsed, fetched(**{"content-length": "1200"}))
    assert merged.size.total_bytes == 1200


def test_ignores_larger_or_invalid_content_length():
    parsed = extract_metrics(HTML, "https://example.com/")
    raw_size = parsed.size.total_bytes

    assert aggregate_metrics(parsed, fetched(**{"content-length": str(raw_size * 2)})).size.total_bytes == raw_size
    assert aggregate_metrics(parsed, fetched(**{"content-length": "bogus"})).size.total_bytes == raw_size
    assert aggregate_metrics(parsed, fetched(**{"content-length": "0"})).size.total_bytes == raw_size


def test_does_not_mutate_input():
    parsed = extract_metrics(HTML, "https://example.com/")
    aggregate_metrics(parsed, fetched(**{"x-frame-options": "DENY", "content-length": "10"}))

    assert parsed.timing.ttfb_ms == 0
    assert parsed.security.headers.present == 0
    assert parsed.size.total_bytes == len(HTML)


def test_empty_header_value_counts_as_absent():
    parsed = extract_metrics(HTML, "https://example.com/")
    merged = aggregate_metrics(parsed, fetched(**{"permissions-policy": ""}))
    assert not merged.security.headers.permissions
