"""UX rules: viewport, favicon, fonts and script weight."""

from ..models import Pillar, Severity
from .base import Finding, Rule


def _high_js(m, s):
    return Finding(
        Severity.LOW,
        f"JS payload {m.ux.js_weight_kb:.0f}KB; can affect interactivity and memory on low-end devices.",
        "Remove unused libraries, enable tree-shaking, defer non-critical scripts.",
        min(100, s.ux + 5),
    )


def _no_font_display(m, s):
    return Finding(
        Severity.LOW,
        "No @font-face uses font-display; may cause invisible text while fonts load.",
        "Add font-display: swap (or optional) to custom font declarations / Google Fonts URLs.",
        min(100, s.ux + 4),
    )


def _low_font_display(m, s):
    return Finding(
        Severity.LOW,
        f"Only {m.ux.font_display_percent:.0f}% of font declarations provide font-display for faster text render.",
        "Add font-display: swap (or optional) to @font-face or use &display=swap on Google Fonts URLs.",
        s.ux + 5,
    )


def _missing_viewport(m, s):
    return Finding(
        Severity.HIGH,
        "Responsive viewport meta missing; mobile layout may be broken.",
        'Add <meta name="viewport" content="width=device-width,initial-scale=1">.',
        s.ux + 20,
    )


def _no_favicon(m, s):
    return Finding(
        Severity.LOW,
        "No favicon detected; reduces recognizability in tabs and history.",
        'Add <link rel="icon" href="/favicon.ico" sizes="any">.',
        s.ux + 4,
    )


RULES = [
    Rule("high-js-weight", Pillar.UX, lambda m, s: 300 < m.ux.js_weight_kb <= 900, _high_js),
    Rule(
        "no-font-display", Pillar.UX,
        lambda m, s: m.ux.font_display_percent == 0 and m.ux.js_weight_kb < 15_000,
        _no_font_display,
    ),
    Rule("missing-viewport", Pillar.UX, lambda m, s: not m.ux.has_viewport, _missing_viewport),
    Rule("no-favicon", Pillar.UX, lambda m, s: not m.ux.has_favicon, _no_favicon),
    Rule(
        "low-font-display-adoption", Pillar.UX,
        lambda m, s: 0 < m.ux.font_display_percent < 40,
        _low_font_display,
    ),
]
