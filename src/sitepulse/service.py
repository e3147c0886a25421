"""Audit entry point for transports: throttling, storage and diffing."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from .auditor import run_audit
from .cache import ReportStore
from .config import Settings
from .diff import diff_reports
from .errors import AuditError, RateLimited
from .models import Report, ReportDiff
from .throttle import TokenBucket

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditOutcome:
    report: Report
    diff: Optional[ReportDiff] = None  # set when the previous report was still stored

    def to_dict(self) -> dict[str, Any]:
        data = self.report.to_dict()
        if self.diff is not None:
            data["diff"] = self.diff.to_dict()
        return data


def status_for(exc: AuditError) -> int:
    """HTTP status a transport should answer with for ``exc``."""
    return exc.http_status


def error_payload(exc: AuditError) -> dict[str, Any]:
    """Response body for a failed audit: ``{"error": {code, message, hint}}``."""
    return {"error": exc.to_dict()}


class AuditService:
    """Owns the shared report store and throttle used by concurrent audits."""

    def __init__(
        self,
        store: Optional[ReportStore] = None,
        throttle: Optional[TokenBucket] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.store = store or ReportStore(self.settings.cache_ttl_seconds, self.settings.cache_max_entries)
        self.throttle = throttle or TokenBucket(self.settings.rate_capacity, self.settings.rate_refill_per_sec)
        self.transport = transport

    def get_report(self, report_id: str) -> Optional[Report]:
        return self.store.get(report_id)

    async def audit(self, raw_url: str, client_key: str,
                    previous_id: Optional[str] = None) -> AuditOutcome:
        """Audit ``raw_url`` on behalf of ``client_key``.

        Raises:
            RateLimited: the client has no token left
            AuditError: any pipeline failure
        """
        token = self.throttle.take_token(client_key)
        if not token.allowed:
            logger.warning("Rate limit hit for %s", client_key)
            raise RateLimited(client_key)

        previous = self.store.get(previous_id) if previous_id else None
        if previous_id and previous is None:
            logger.info("Previous report %s not found or expired", previous_id)

        try:
            report = await run_audit(raw_url, previous_id, self.settings, self.transport)
        except AuditError as exc:
            logger.warning("Audit of %s failed: %s %s", raw_url, exc.code, exc.message)
            raise

        self.store.put(report.id, report)
        diff = diff_reports(report, previous) if previous is not None else None
        return AuditOutcome(report=report, diff=diff)
