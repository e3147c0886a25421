"""SEO rules: title and meta description."""

from ..models import Pillar, Severity
from .base import Finding, Rule


def _title_suboptimal(m, s):
    return Finding(
        Severity.LOW,
        f"Title length {m.seo.title_chars} chars is outside the broadly optimal 30-70 range (ideal 55-65).",
        "Refine <title> to a concise descriptive phrase (55-65 chars sweet spot).",
        min(100, s.seo + 4),
    )


def _description_short(m, s):
    return Finding(
        Severity.LOW,
        f"Meta description only {m.seo.meta_description_chars} chars; may under-inform snippets (aim 120-160).",
        "Expand meta description to 120-160 characters with a compelling summary and keyword context.",
        min(100, s.seo + 3),
    )


def _description_long(m, s):
    return Finding(
        Severity.LOW,
        f"Meta description {m.seo.meta_description_chars} chars; may be truncated in search results.",
        "Trim description toward 160 chars while preserving key intent / call to action.",
        min(100, s.seo + 2),
    )


def _missing_title(m, s):
    return Finding(
        Severity.HIGH,
        "Document has no <title>; search engines and users rely on it for context.",
        "Add a concise, descriptive <title> (55-65 characters ideal).",
        max(70, s.seo + 25),
    )


def _missing_description(m, s):
    return Finding(
        Severity.HIGH,
        "No meta description found; reduces click-through rate and snippet quality.",
        'Add <meta name="description" content="..."> (120-160 chars).',
        max(75, s.seo + 20),
    )


RULES = [
    Rule(
        "title-suboptimal-length", Pillar.SEO,
        lambda m, s: m.seo.title_chars > 0 and (m.seo.title_chars < 30 or m.seo.title_chars > 70),
        _title_suboptimal,
    ),
    Rule(
        "meta-description-short", Pillar.SEO,
        lambda m, s: 0 < m.seo.meta_description_chars < 100,
        _description_short,
    ),
    Rule(
        "meta-description-long", Pillar.SEO,
        lambda m, s: 180 < m.seo.meta_description_chars < 300,
        _description_long,
    ),
    Rule("missing-title", Pillar.SEO, lambda m, s: m.seo.title_chars == 0, _missing_title),
    Rule(
        "missing-meta-description", Pillar.SEO,
        lambda m, s: m.seo.meta_description_chars == 0,
        _missing_description,
    ),
]
