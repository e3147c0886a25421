"""Performance rules: server latency, page weight and request count."""

from ..models import Pillar, Severity
from .base import Finding, Rule


def _moderate_ttfb(m, s):
    return Finding(
        Severity.LOW,
        f"TTFB {m.timing.ttfb_ms}ms could be improved (ideal <200ms; warning >600ms).",
        "Introduce edge caching, preload critical data, reduce server cold start.",
        min(100, s.performance + 5),
    )


def _slow_ttfb(m, s):
    severity = Severity.HIGH if m.timing.ttfb_ms > 2000 else Severity.MEDIUM
    return Finding(
        severity,
        f"TTFB {m.timing.ttfb_ms}ms is high; indicates server/network latency.",
        "Enable caching/CDN, optimize server rendering, reduce cold start overhead.",
        s.performance + 12,
    )


def _moderate_weight(m, s):
    return Finding(
        Severity.LOW,
        f"Page weight {m.size.total_bytes / 1024:.0f}KB could be slimmer (budget about 300KB for critical HTML).",
        "Remove unused scripts and styles, enable compression, defer non-critical assets.",
        min(100, s.performance + 6),
    )


def _large_weight(m, s):
    severity = Severity.HIGH if m.size.total_bytes > 4_000_000 else Severity.MEDIUM
    return Finding(
        severity,
        f"HTML size {m.size.total_bytes / 1024:.0f}KB exceeds recommended budget (300KB or less ideal).",
        "Defer non-critical scripts, compress assets, remove unused markup.",
        s.performance + 18,
    )


def _moderate_requests(m, s):
    return Finding(
        Severity.LOW,
        f"{m.counts.requests} requests; consider bundling or lazy loading to reduce overhead.",
        "Bundle assets, inline tiny critical CSS, defer analytics until idle.",
        min(100, s.performance + 4),
    )


def _many_requests(m, s):
    return Finding(
        Severity.LOW,
        f"{m.counts.requests} requests; high connection overhead can delay rendering.",
        "Combine files, leverage HTTP/2 multiplexing, code-split only essentials.",
        s.performance + 6,
    )


RULES = [
    Rule("moderate-ttfb", Pillar.PERFORMANCE, lambda m, s: 600 < m.timing.ttfb_ms <= 1200, _moderate_ttfb),
    Rule(
        "moderate-page-weight", Pillar.PERFORMANCE,
        lambda m, s: 600_000 < m.size.total_bytes <= 2_000_000,
        _moderate_weight,
    ),
    Rule(
        "moderate-request-count", Pillar.PERFORMANCE,
        lambda m, s: 40 < m.counts.requests <= 80,
        _moderate_requests,
    ),
    Rule("large-page-weight", Pillar.PERFORMANCE, lambda m, s: m.size.total_bytes > 2_000_000, _large_weight),
    Rule("slow-ttfb", Pillar.PERFORMANCE, lambda m, s: m.timing.ttfb_ms > 1200, _slow_ttfb),
    Rule("many-requests", Pillar.PERFORMANCE, lambda m, s: m.counts.requests > 80, _many_requests),
]
