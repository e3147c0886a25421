"""Data models for SitePulse audit reports."""

import math
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, Optional


REPORT_VERSION = 1
_RATIOS = {"alt_coverage": 1.0, "font_display_percent": 100.0}


def _number(name: str, value: Any, low: float = 0, high: Optional[float] = None, kind: type = float):
    """Check a wire number against its range; raises ValueError when it is off."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if kind is int and value != int(value):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < low or (high is not None and value > high):
        bounds = f"[{low}, {high}]" if high is not None else f">= {low}"
        raise ValueError(f"{name} out of range {bounds}: {value!r}")
    return kind(value)


def _text(name: str, value: Any, min_length: int = 1) -> str:
    if not isinstance(value, str) or len(value) < min_length:
        raise ValueError(f"{name} must be a string of at least {min_length} characters")
    return value


def _mapping(name: str, value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be an object")
    return value


def _load_group(cls, name: str, data: Any):
    """Build a metric group from wire data. Missing keys keep their defaults."""
    data = _mapping(name, data)
    values = {}
    for f in fields(cls):
        if f.name not in data or f.type not in (bool, int, float):
            continue
        raw = data[f.name]
        label = f"{name}.{f.name}"
        if f.type is bool:
            if not isinstance(raw, bool):
                raise ValueError(f"{label} must be a boolean")
            values[f.name] = raw
        else:
            values[f.name] = _number(label, raw, 0, _RATIOS.get(f.name), f.type)
    return cls(**values)


class Severity(Enum):
    """Severity level for a detected issue."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Pillar(Enum):
    """One of the five scored quality dimensions."""
    PERFORMANCE = "performance"
    ACCESSIBILITY = "accessibility"
    SEO = "seo"
    SECURITY = "security"
    UX = "ux"


@dataclass(frozen=True)
class Timing:
    ttfb_ms: int = 0


@dataclass(frozen=True)
class Size:
    total_bytes: int = 0
    images_bytes: int = 0
    css_bytes: int = 0
    js_bytes: int = 0


@dataclass(frozen=True)
class Counts:
    requests: int = 1  # the document itself
    img: int = 0
    script: int = 0
    css: int = 0


@dataclass(frozen=True)
class AccessibilitySignals:
    alt_coverage: float = 1.0  # 0-1
    h1_count: int = 0
    outline_issues: int = 0
    landmarks: int = 0
    has_lang: bool = False


@dataclass(frozen=True)
class SeoSignals:
    title_chars: int = 0
    meta_description_chars: int = 0
    has_canonical: bool = False
    h1_exists: bool = False


@dataclass(frozen=True)
class SecurityHeaders:
    """Presence of the four defensive response headers."""
    csp: bool = False
    xfo: bool = False
    referrer: bool = False
    permissions: bool = False

    @property
    def present(self) -> int:
        return sum((self.csp, self.xfo, self.referrer, self.permissions))


@dataclass(frozen=True)
class SecuritySignals:
    https: bool = False
    headers: SecurityHeaders = field(default_factory=SecurityHeaders)
    mixed_content: int = 0


@dataclass(frozen=True)
class UxSignals:
    has_viewport: bool = False
    has_favicon: bool = False
    font_display_percent: float = 0.0  # 0-100
    js_weight_kb: float = 0.0


@dataclass(frozen=True)
class RawMetrics:
    """Everything measured from one fetch of one page."""
    timing: Timing = field(default_factory=Timing)
    size: Size = field(default_factory=Size)
    counts: Counts = field(default_factory=Counts)
    accessibility: AccessibilitySignals = field(default_factory=AccessibilitySignals)
    seo: SeoSignals = field(default_factory=SeoSignals)
    security: SecuritySignals = field(default_factory=SecuritySignals)
    ux: UxSignals = field(default_factory=UxSignals)
    page_title: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawMetrics":
        """Rebuild metrics from wire data, rejecting out-of-range values."""
        data = _mapping("metrics", data)
        security = _mapping("metrics.security", data.get("security", {}))
        page_title = data.get("page_title")
        if page_title is not None and not isinstance(page_title, str):
            raise ValueError("metrics.page_title must be a string")
        return cls(
            timing=_load_group(Timing, "metrics.timing", data.get("timing", {})),
            size=_load_group(Size, "metrics.size", data.get("size", {})),
            counts=_load_group(Counts, "metrics.counts", data.get("counts", {})),
            accessibility=_load_group(AccessibilitySignals, "metrics.accessibility",
                                      data.get("accessibility", {})),
            seo=_load_group(SeoSignals, "metrics.seo", data.get("seo", {})),
            security=replace(
                _load_group(SecuritySignals, "metrics.security", security),
                headers=_load_group(SecurityHeaders, "metrics.security.headers", security.get("headers", {})),
            ),
            ux=_load_group(UxSignals, "metrics.ux", data.get("ux", {})),
            page_title=page_title,
        )


@dataclass(frozen=True)
class PillarScores:
    """Five pillar scores, each 0-100."""
    performance: float
    accessibility: float
    seo: float
    security: float
    ux: float

    def get(self, pillar: Pillar) -> float:
        return getattr(self, pillar.value)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class Issue:
    """A single detected problem with an explainable cause and remedy."""
    id: str
    category: Pillar
    severity: Severity
    why: str
    fix: str
    impact_score: int  # 1-10, derived from severity
    est_score_gain: int  # 0-20

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category.value,
            "severity": self.severity.value,
            "why": self.why,
            "fix": self.fix,
            "impact_score": self.impact_score,
            "est_score_gain": self.est_score_gain,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Issue":
        data = _mapping("issue", data)
        try:
            category = Pillar(data["category"])
            severity = Severity(data["severity"])
        except ValueError:
            raise ValueError(f"issue {data.get('id')!r} has an unknown category or severity") from None
        return cls(
            id=_text("issue.id", data["id"]),
            category=category,
            severity=severity,
            why=_text("issue.why", data["why"], 3),
            fix=_text("issue.fix", data["fix"], 3),
            impact_score=_number("issue.impact_score", data["impact_score"], 1, 10, int),
            est_score_gain=_number("issue.est_score_gain", data["est_score_gain"], 0, 20, int),
        )


@dataclass(frozen=True)
class Report:
    """Complete, immutable audit result for a URL."""
    id: str
    url: str
    page_title: str
    fetched_at: str  # ISO-8601, UTC
    overall: float
    scores: PillarScores
    metrics: RawMetrics
    issues: tuple[Issue, ...] = ()
    previous_id: Optional[str] = None
    version: int = REPORT_VERSION

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "version": self.version,
            "url": self.url,
            "page_title": self.page_title,
            "fetched_at": self.fetched_at,
            "overall": self.overall,
            "scores": self.scores.to_dict(),
            "metrics": self.metrics.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
        }
        if self.previous_id is not None:
            data["previous_id"] = self.previous_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Report":
        """Rebuild a saved report.

        Raises:
            KeyError: a required field is missing.
            ValueError: a field has the wrong type, is out of range, or the
                version is not one this code writes.
        """
        data = _mapping("report", data)
        version = data.get("version", REPORT_VERSION)
        if version != REPORT_VERSION or isinstance(version, bool):
            raise ValueError(f"Unsupported report version {version!r}")
        scores = _mapping("scores", data["scores"])
        previous_id = data.get("previous_id")
        if previous_id is not None:
            previous_id = _text("previous_id", previous_id)
        issues = data.get("issues", [])
        if not isinstance(issues, list):
            raise ValueError("issues must be a list")
        return cls(
            id=_text("id", data["id"]),
            version=REPORT_VERSION,
            url=_text("url", data["url"]),
            page_title=_text("page_title", data["page_title"], 0),
            fetched_at=_text("fetched_at", data["fetched_at"], 0),
            overall=_number("overall", data["overall"], 0, 100),
            scores=PillarScores(**{p.value: _number(f"scores.{p.value}", scores[p.value], 0, 100) for p in Pillar}),
            metrics=RawMetrics.from_dict(data["metrics"]),
            issues=tuple(Issue.from_dict(i) for i in issues),
            previous_id=previous_id,
        )


@dataclass(frozen=True)
class PillarDeltas:
    """Per-pillar score change, now minus previous."""
    performance: float
    accessibility: float
    seo: float
    security: float
    ux: float
    overall: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class IssueDiff:
    """Issues partitioned by identifier across two reports."""
    added: tuple[Issue, ...] = ()
    resolved: tuple[Issue, ...] = ()
    unchanged: tuple[Issue, ...] = ()

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "added": [i.to_dict() for i in self.added],
            "resolved": [i.to_dict() for i in self.resolved],
            "unchanged": [i.to_dict() for i in self.unchanged],
        }


@dataclass(frozen=True)
class ReportDiff:
    deltas: PillarDeltas
    issues: IssueDiff

    def to_dict(self) -> dict[str, Any]:
        return {"deltas": self.deltas.to_dict(), "issues": self.issues.to_dict()}
