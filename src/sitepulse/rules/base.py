"""Rule table primitives shared by every pillar's catalogue."""

from dataclasses import dataclass
from typing import Callable

from ..models import Issue, Pillar, PillarScores, RawMetrics, Severity
from ..scoring import round_half_up


IMPACT = {Severity.HIGH: 9, Severity.MEDIUM: 6, Severity.LOW: 3}
MAX_GAIN = 15


def impact(severity: Severity) -> int:
    return IMPACT[severity]


def estimate_gain(current: float, target: float, cap: int = MAX_GAIN) -> int:
    """Projected score gain from ``current`` toward ``target``, within [0, cap]."""
    return min(max(int(round_half_up(target - current, 0)), 0), cap)


@dataclass(frozen=True)
class Finding:
    """The rule-specific part of an issue, produced by a rule's builder."""
    severity: Severity
    why: str
    fix: str
    target: float  # pillar score the fix is projected to reach


Predicate = Callable[[RawMetrics, PillarScores], bool]
Builder = Callable[[RawMetrics, PillarScores], Finding]


@dataclass(frozen=True)
class Rule:
    """One catalogue entry. The id fixes the category and message templates."""
    id: str
    category: Pillar
    test: Predicate
    build: Builder

    def evaluate(self, metrics: RawMetrics, scores: PillarScores) -> Issue:
        finding = self.build(metrics, scores)
        return Issue(
            id=self.id,
            category=self.category,
            severity=finding.severity,
            why=finding.why,
            fix=finding.fix,
            impact_score=impact(finding.severity),
            est_score_gain=estimate_gain(scores.get(self.category), finding.target),
        )
