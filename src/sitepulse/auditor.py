"""Audit pipeline: normalize, fetch, extract, aggregate, score, derive issues."""

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlsplit

import httpx

from .aggregator import aggregate_metrics
from .config import Settings
from .extractor import extract_metrics
from .fetcher import fetch_html
from .models import Report
from .normalize import normalize_url
from .rules import derive_issues
from .scoring import compute_scores

logger = logging.getLogger(__name__)


def display_title(page_title: Optional[str], url: str) -> str:
    """Page title, or the hostname without ``www.`` when the page has none."""
    if page_title:
        return page_title
    host = urlsplit(url).hostname or url
    return host[4:] if host.startswith("www.") else host


async def run_audit(
    raw_url: str,
    previous_id: Optional[str] = None,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Report:
    """Run a complete audit on a URL.

    Args:
        raw_url: The URL to audit, as typed by the user
        previous_id: Identifier of an earlier report to link to
        settings: Timeouts, byte cap and user agent; read from the environment when omitted
        transport: Alternate httpx transport, mainly for tests

    Returns:
        A new, immutable Report

    Raises:
        AuditError: any of its subclasses; none are retried here
    """
    settings = settings or Settings.from_env()
    url = normalize_url(raw_url)
    logger.info("Auditing %s", url)
    start = time.monotonic()

    fetched = await fetch_html(
        url,
        settings.timeout_ms,
        max_bytes=settings.max_html_bytes,
        user_agent=settings.user_agent,
        transport=transport,
    )

    parsed = extract_metrics(fetched.html, url)
    metrics = aggregate_metrics(parsed, fetched)
    detail = compute_scores(metrics)
    for pillar, reason in detail.caps.items():
        logger.debug("%s capped: %s", pillar, reason)
    issues = derive_issues(metrics, detail.scores)

    report = Report(
        id=str(uuid.uuid4()),
        url=url,
        page_title=display_title(parsed.page_title, url),
        fetched_at=datetime.now(timezone.utc).isoformat(),
        overall=detail.overall,
        scores=detail.scores,
        metrics=metrics,
        issues=tuple(issues),
        previous_id=previous_id,
    )
    logger.info("Audited %s in %dms: overall %.1f, %d issues%s",
                url, int((time.monotonic() - start) * 1000), report.overall,
                len(report.issues), " (truncated)" if fetched.truncated else "")
    return report
