import copy

import pytest

from sitepulse.models import Issue, Pillar, PillarScores, RawMetrics, Report, Severity


def valid_report_dict():
    report = Report(
        id="3f2a9c1e",
        url="https://example.com/",
        page_title="Example",
        fetched_at="2026-01-01T00:00:00+00:00",
        overall=72.4,
        scores=PillarScores(80, 70.5, 90, 40, 81),
        metrics=RawMetrics(),
        issues=(Issue("missing-csp", Pillar.SECURITY, Severity.HIGH, "why it matters", "how to fix it", 9, 12),),
        previous_id="prev-report",
    )
    return report.to_dict()


def with_value(path, value):
    data = copy.deepcopy(valid_report_dict())
    target = data
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value
    return data


def test_valid_report_loads():
    report = Report.from_dict(valid_report_dict())
    assert report.scores.accessibility == 70.5
    assert report.issues[0].impact_score == 9
    assert report.previous_id == "prev-report"


def test_missing_metric_groups_keep_defaults():
    data = valid_report_dict()
    data["metrics"] = {"counts": {"img": 3}}
    metrics = Report.from_dict(data).metrics
    assert metrics.counts.img == 3
    assert metrics.counts.requests == 1
    assert metrics.accessibility.alt_coverage == 1.0


@pytest.mark.parametrize("path, value", [
    (("overall",), 500),
    (("overall",), "high"),
    (("scores", "performance"), -40),
    (("scores", "ux"), 100.5),
    (("scores", "seo"), float("nan")),
    (("metrics", "accessibility", "alt_coverage"), 7.5),
    (("metrics", "ux", "font_display_percent"), 120),
    (("metrics", "counts", "requests"), -3),
    (("metrics", "counts", "img"), 2.5),
    (("metrics", "timing", "ttfb_ms"), float("inf")),
    (("metrics", "seo", "has_canonical"), "yes"),
    (("metrics", "security", "headers", "csp"), 1),
    (("metrics", "security"), []),
    (("issues", 0, "impact_score"), 99),
    (("issues", 0, "impact_score"), 0),
    (("issues", 0, "est_score_gain"), -50),
    (("issues", 0, "est_score_gain"), 21),
    (("issues", 0, "category"), "speed"),
    (("issues", 0, "severity"), "critical"),
    (("issues", 0, "why"), "no"),
    (("issues", 0, "id"), ""),
    (("issues",), {}),
    (("version",), 2),
    (("version",), True),
    (("id",), ""),
    (("previous_id",), 42),
])
def test_rejects_corrupt_reports(path, value):
    with pytest.raises(ValueError):
        Report.from_dict(with_value(path, value))


def test_rejects_missing_score():
    data = valid_report_dict()
    del data["scores"]["security"]
    with pytest.raises(KeyError):
        Report.from_dict(data)


def test_issue_from_dict_bounds():
    data = valid_report_dict()["issues"][0]
    assert Issue.from_dict({**data, "est_score_gain": 20}).est_score_gain == 20
    with pytest.raises(ValueError):
        Issue.from_dict({**data, "impact_score": 11})
