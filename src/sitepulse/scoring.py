"""Map raw metrics to pillar scores and an overall composite."""

import math
from dataclasses import dataclass, field

from .models import PillarScores, RawMetrics


PILLAR_WEIGHTS = {
    "performance": 0.30,
    "accessibility": 0.20,
    "seo": 0.20,
    "security": 0.15,
    "ux": 0.15,
}

BAND_FLOOR = 20


@dataclass(frozen=True)
class ScoreDetail:
    scores: PillarScores
    overall: float
    caps: dict[str, str] = field(default_factory=dict)  # pillar -> reason


def round_half_up(value: float, digits: int = 1) -> float:
    """Round with halves going up (2.25 -> 2.3, -2.25 -> -2.2), unlike ``round``."""
    factor = 10 ** digits
    result = math.floor(value * factor + 0.5) / factor
    return result if digits else int(result)


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def linear_decay(value: float, ideal: float, worst: float) -> float:
    """100 at or below ``ideal``, 0 at or above ``worst``, linear in between."""
    if value <= ideal:
        return 100.0
    if value >= worst:
        return 0.0
    return clamp(100 - (value - ideal) / (worst - ideal) * 100)


def banded_ideal(value: float, ideal_min: float, ideal_max: float,
                 hard_min: float, hard_max: float) -> float:
    """100 inside the ideal band, 20 at or past the hard bounds, linear between."""
    if ideal_min <= value <= ideal_max:
        return 100.0
    if value <= hard_min or value >= hard_max:
        return float(BAND_FLOOR)
    if value < ideal_min:
        ratio = (value - hard_min) / (ideal_min - hard_min)
    else:
        ratio = (hard_max - value) / (hard_max - ideal_max)
    return BAND_FLOOR + ratio * (100 - BAND_FLOOR)


def weighted_average(entries: list[tuple[float, float]]) -> float:
    total_weight = sum(weight for _, weight in entries)
    if not total_weight:
        return 0.0
    return sum(value * weight for value, weight in entries) / total_weight


def _performance(m: RawMetrics) -> float:
    return weighted_average([
        (linear_decay(m.timing.ttfb_ms, 200, 1500), 0.4),
        (linear_decay(m.size.total_bytes / 1024, 300, 3000), 0.4),
        (linear_decay(m.counts.requests, 15, 120), 0.2),
    ])


def _accessibility(m: RawMetrics) -> float:
    a11y = m.accessibility
    score = a11y.alt_coverage * 100 - min(a11y.outline_issues * 8, 60)
    if not a11y.has_lang:
        score -= 10
    if a11y.h1_count == 0:
        score -= 20
    return clamp(score)


def _seo(m: RawMetrics, caps: dict[str, str]) -> float:
    seo = m.seo
    if seo.meta_description_chars == 0:
        description = 25.0
    else:
        description = banded_ideal(seo.meta_description_chars, 120, 160, 30, 250)
    score = weighted_average([
        (banded_ideal(seo.title_chars, 55, 65, 10, 90), 0.4),
        (description, 0.4),
        (100 if seo.has_canonical else 40, 0.1),
        (100 if seo.h1_exists else 30, 0.1),
    ])
    reasons = []
    if seo.title_chars == 0:
        score = min(score, 40)
        reasons.append("Missing title caps SEO")
    if seo.meta_description_chars == 0:
        score = min(score, 55)
        reasons.append("Missing meta description")
    if reasons:
        caps["seo"] = "; ".join(reasons)
    return score


def _security(m: RawMetrics, caps: dict[str, str]) -> float:
    sec = m.security
    present = sec.headers.present
    header_score = present / 4 * 100
    if present == 0 and sec.https:
        header_score = 40.0  # baseline credit for HTTPS alone
    score = header_score - min(sec.mixed_content * 5, 40)
    if not sec.https:
        score = min(score, 30)
        caps["security"] = "Non-HTTPS URL"
    elif sec.mixed_content > 0:
        score = min(score, 70)
        caps["security"] = "Mixed content caps security"
    return clamp(score)


def _ux(m: RawMetrics) -> float:
    ux = m.ux
    return clamp(weighted_average([
        (100 if ux.has_viewport else 30, 0.3),
        (100 if ux.has_favicon else 60, 0.1),
        (ux.font_display_percent, 0.3),
        (linear_decay(ux.js_weight_kb, 150, 1500), 0.3),
    ]))


def compute_scores(metrics: RawMetrics) -> ScoreDetail:
    """Score ``metrics`` on all five pillars.

    Pure and deterministic: identical metrics always give identical scores.
    Every score is rounded half-up to one decimal.
    """
    caps: dict[str, str] = {}
    scores = PillarScores(
        performance=round_half_up(_performance(metrics)),
        accessibility=round_half_up(_accessibility(metrics)),
        seo=round_half_up(_seo(metrics, caps)),
        security=round_half_up(_security(metrics, caps)),
        ux=round_half_up(_ux(metrics)),
    )
    overall = round_half_up(weighted_average(
        [(getattr(scores, pillar), weight) for pillar, weight in PILLAR_WEIGHTS.items()]
    ))
    return ScoreDetail(scores=scores, overall=overall, caps=caps)
