"""SitePulse: single page quality audit with explainable, diffable reports."""

__version__ = "0.1.0"

from .auditor import run_audit
from .diff import compute_pillar_deltas, diff_issues, diff_reports
from .errors import (
    AuditError,
    BlockedHost,
    FetchTimeout,
    HttpStatusError,
    InvalidUrl,
    NetworkError,
    NonHtml,
    RateLimited,
)
from .models import Issue, PillarScores, RawMetrics, Report, Severity, Pillar

__all__ = [
    "__version__",
    "run_audit",
    "compute_pillar_deltas",
    "diff_issues",
    "diff_reports",
    "AuditError",
    "BlockedHost",
    "FetchTimeout",
    "HttpStatusError",
    "InvalidUrl",
    "NetworkError",
    "NonHtml",
    "RateLimited",
    "Issue",
    "Pillar",
    "PillarScores",
    "RawMetrics",
    "Report",
    "Severity",
]
