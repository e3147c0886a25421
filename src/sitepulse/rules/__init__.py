"""Issue derivation rules, one module per pillar."""

import logging

from ..models import Issue, PillarScores, RawMetrics
from .base import Finding, Rule, estimate_gain, impact
from . import accessibility, performance, security, seo, ux

logger = logging.getLogger(__name__)


CATALOGUE: tuple[Rule, ...] = (
    *seo.RULES,
    *performance.RULES,
    *accessibility.RULES,
    *ux.RULES,
    *security.RULES,
)


def derive_issues(metrics: RawMetrics, scores: PillarScores) -> list[Issue]:
    """Evaluate every rule once and rank the triggered issues.

    Highest impact first, then highest estimated gain. Ties keep catalogue order.
    """
    issues = [rule.evaluate(metrics, scores) for rule in CATALOGUE if rule.test(metrics, scores)]
    issues.sort(key=lambda issue: (issue.impact_score, issue.est_score_gain), reverse=True)
    logger.debug("%d of %d rules triggered", len(issues), len(CATALOGUE))
    return issues


__all__ = [
    "CATALOGUE",
    "Finding",
    "Rule",
    "derive_issues",
    "estimate_gain",
    "impact",
]
