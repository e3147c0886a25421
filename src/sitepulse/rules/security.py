"""Security rules: transport, mixed content and defensive headers."""

from ..models import Pillar, Severity
from .base import Finding, Rule


def _insecure_transport(m, s):
    # Plain HTTP with no defensive headers at all is the worst case.
    severity = Severity.HIGH if m.security.headers.present == 0 else Severity.MEDIUM
    return Finding(
        severity,
        "Page is served over plain HTTP; traffic can be read or altered in transit.",
        "Serve the site over HTTPS and redirect all HTTP requests to it.",
        s.security + 15,
    )


def _mixed_content(m, s):
    return Finding(
        Severity.MEDIUM,
        f"{m.security.mixed_content} insecure http:// sub-resources loaded on an HTTPS page.",
        "Serve resources over HTTPS or remove them to avoid security warnings.",
        s.security + 10,
    )


def _missing_csp(m, s):
    return Finding(
        Severity.MEDIUM,
        "No Content-Security-Policy header; increases XSS risk.",
        "Add a CSP header (start with default-src 'self'; object-src 'none'; frame-ancestors 'none').",
        s.security + 8,
    )


def _missing_referrer(m, s):
    return Finding(
        Severity.LOW,
        "No Referrer-Policy header; may leak full URLs to third parties.",
        "Add Referrer-Policy: strict-origin-when-cross-origin.",
        s.security + 4,
    )


def _missing_xfo(m, s):
    return Finding(
        Severity.LOW,
        "No X-Frame-Options header; clickjacking protection absent.",
        "Add X-Frame-Options: DENY (or use frame-ancestors in CSP).",
        s.security + 3,
    )


def _missing_permissions(m, s):
    return Finding(
        Severity.LOW,
        "No Permissions-Policy header; cannot restrict powerful API usage.",
        "Add a Permissions-Policy header limiting features (e.g., geolocation=()).",
        s.security + 3,
    )


RULES = [
    Rule("insecure-transport", Pillar.SECURITY, lambda m, s: not m.security.https, _insecure_transport),
    Rule("mixed-content", Pillar.SECURITY, lambda m, s: m.security.mixed_content > 0, _mixed_content),
    Rule("missing-csp", Pillar.SECURITY, lambda m, s: not m.security.headers.csp, _missing_csp),
    Rule(
        "missing-referrer-policy", Pillar.SECURITY,
        lambda m, s: not m.security.headers.referrer,
        _missing_referrer,
    ),
    Rule("missing-xfo", Pillar.SECURITY, lambda m, s: not m.security.headers.xfo, _missing_xfo),
    Rule(
        "missing-permissions-policy", Pillar.SECURITY,
        lambda m, s: not m.security.headers.permissions,
        _missing_permissions,
    ),
]
