"""Compare two reports: pillar deltas and issue set changes."""

from typing import Iterable

from .models import Issue, IssueDiff, PillarDeltas, PillarScores, Report, ReportDiff
from .scoring import round_half_up


def compute_pillar_deltas(now: PillarScores, previous: PillarScores,
                          now_overall: float = 0.0, previous_overall: float = 0.0) -> PillarDeltas:
    """Score changes, ``now - previous``, rounded to one decimal."""
    return PillarDeltas(
        performance=round_half_up(now.performance - previous.performance),
        accessibility=round_half_up(now.accessibility - previous.accessibility),
        seo=round_half_up(now.seo - previous.seo),
        security=round_half_up(now.security - previous.security),
        ux=round_half_up(now.ux - previous.ux),
        overall=round_half_up(now_overall - previous_overall),
    )


def diff_issues(now: Iterable[Issue], previous: Iterable[Issue]) -> IssueDiff:
    """Partition issues by identifier. Field contents are not compared."""
    now = list(now)
    previous = list(previous)
    now_ids = {issue.id for issue in now}
    previous_ids = {issue.id for issue in previous}
    return IssueDiff(
        added=tuple(i for i in now if i.id not in previous_ids),
        resolved=tuple(i for i in previous if i.id not in now_ids),
        unchanged=tuple(i for i in now if i.id in previous_ids),
    )


def diff_reports(now: Report, previous: Report) -> ReportDiff:
    return ReportDiff(
        deltas=compute_pillar_deltas(now.scores, previous.scores, now.overall, previous.overall),
        issues=diff_issues(now.issues, previous.issues),
    )
