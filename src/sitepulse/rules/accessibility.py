"""Accessibility rules: headings, alt text and document language."""

from ..models import Pillar, Severity
from .base import Finding, Rule


def _partial_alt(m, s):
    return Finding(
        Severity.LOW,
        f"{m.accessibility.alt_coverage * 100:.0f}% of images have alt text; aim for 100% (decoratives empty).",
        'Provide alt for informative images; use alt="" for decorative ones.',
        min(100, s.accessibility + 4),
    )


def _low_alt(m, s):
    severity = Severity.HIGH if m.accessibility.alt_coverage < 0.3 else Severity.MEDIUM
    return Finding(
        severity,
        f"Only {m.accessibility.alt_coverage * 100:.0f}% of images have alt text.",
        'Add descriptive alt text to informative images; mark decorative images with empty alt="".',
        s.accessibility + 15,
    )


def _duplicate_h1(m, s):
    return Finding(
        Severity.MEDIUM,
        f"Found {m.accessibility.h1_count} <h1> elements; multiple H1s can confuse assistive tech.",
        "Use a single <h1> for the page topic; downgrade others to <h2>/<h3>.",
        s.accessibility + 8,
    )


def _no_h1(m, s):
    return Finding(
        Severity.MEDIUM,
        "No <h1> heading; screen readers rely on a primary heading for orientation.",
        "Add a single <h1> summarizing the page purpose.",
        s.accessibility + 12,
    )


def _outline(m, s):
    return Finding(
        Severity.LOW,
        f"{m.accessibility.outline_issues} heading outline irregularities (skipped levels or extra H1).",
        "Ensure heading levels increase by one without skipping (e.g., h2 after h1).",
        s.accessibility + 5,
    )


def _missing_lang(m, s):
    return Finding(
        Severity.MEDIUM,
        "<html> lang attribute missing; assistive tech cannot determine language.",
        'Add <html lang="en"> (or the appropriate language code).',
        s.accessibility + 6,
    )


RULES = [
    Rule(
        "partial-alt-coverage", Pillar.ACCESSIBILITY,
        lambda m, s: 0.6 <= m.accessibility.alt_coverage < 0.9,
        _partial_alt,
    ),
    Rule("duplicate-h1", Pillar.ACCESSIBILITY, lambda m, s: m.accessibility.h1_count > 1, _duplicate_h1),
    Rule("no-h1", Pillar.ACCESSIBILITY, lambda m, s: m.accessibility.h1_count == 0, _no_h1),
    Rule("low-alt-coverage", Pillar.ACCESSIBILITY, lambda m, s: m.accessibility.alt_coverage < 0.6, _low_alt),
    Rule("outline-issues", Pillar.ACCESSIBILITY, lambda m, s: m.accessibility.outline_issues > 2, _outline),
    Rule("missing-lang", Pillar.ACCESSIBILITY, lambda m, s: not m.accessibility.has_lang, _missing_lang),
]
