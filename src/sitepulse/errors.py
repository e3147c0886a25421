"""Error taxonomy for a single audit.

Every failure is terminal for the audit it belongs to. Each carries a
machine-readable ``code``, a human-readable ``message`` and, where useful, a
``hint`` telling the caller what to try next.
"""

from typing import Optional


class AuditError(Exception):
    """Base class for all audit failures."""

    code = "AUDIT_ERROR"
    http_status = 500
    hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if hint is not None:
            self.hint = hint

    def to_dict(self) -> dict[str, Optional[str]]:
        return {"code": self.code, "message": self.message, "hint": self.hint}


class InvalidUrl(AuditError):
    code = "INVALID_URL"
    http_status = 400
    hint = "Ensure the URL includes a valid protocol (https://) and is publicly reachable."


class BlockedHost(AuditError):
    code = "BLOCKED_HOST"
    http_status = 400
    hint = "Local and private network targets cannot be audited."

    def __init__(self, host: str, message: Optional[str] = None):
        super().__init__(message or f"Local/private host not allowed: {host}")
        self.host = host


class FetchTimeout(AuditError):
    code = "TIMEOUT"
    http_status = 504
    hint = "Try again or check server responsiveness / CDN caching."

    def __init__(self, url: str, timeout_ms: int):
        super().__init__(f"Fetch timed out after {timeout_ms}ms for {url}")
        self.url = url
        self.timeout_ms = timeout_ms


class NonHtml(AuditError):
    code = "NON_HTML"
    http_status = 400
    hint = "Provide a direct page URL (not a file like PDF or image)."

    def __init__(self, url: str, content_type: Optional[str] = None):
        super().__init__(f"Content-Type not HTML for {url} ({content_type or 'unknown'})")
        self.url = url
        self.content_type = content_type


class HttpStatusError(AuditError):
    code = "HTTP_ERROR"
    http_status = 502

    def __init__(self, url: str, status: int):
        if status >= 500:
            hint = "Server error at the target site."
        else:
            hint = "Client error: the page may not exist or requires auth."
        super().__init__(f"Upstream returned status {status} for {url}", hint=hint)
        self.url = url
        self.status = status


class NetworkError(AuditError):
    code = "FETCH_ERROR"
    http_status = 503
    hint = "Verify DNS, HTTPS certificate, and that the site is accessible from the public internet."


class RateLimited(AuditError):
    code = "RATE_LIMIT"
    http_status = 429
    hint = "Limit ~30 audits per minute per client."

    def __init__(self, key: str):
        super().__init__(f"Too many audits for {key}, slow down.")
        self.key = key
