"""Single-pass structural metric extraction from HTML."""

import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from bs4 import BeautifulSoup, Tag

from .models import (
    AccessibilitySignals,
    Counts,
    RawMetrics,
    SecuritySignals,
    SeoSignals,
    Size,
    Timing,
    UxSignals,
)


LANDMARK_TAGS = {"header", "nav", "main", "footer"}
HEADING_TAGS = {f"h{i}": i for i in range(1, 7)}
GOOGLE_FONT_HOSTS = ("fonts.googleapis.com", "fonts.gstatic.com")

_FONT_FACE_RE = re.compile(r"@font-face", re.IGNORECASE)
_FONT_FACE_BLOCK_RE = re.compile(r"@font-face\s*\{([^}]*)\}", re.IGNORECASE)
_FONT_DISPLAY_RE = re.compile(r"font-display\s*:\s*(swap|optional|fallback)", re.IGNORECASE)
_DISPLAY_PARAM_RE = re.compile(r"[?&]display=(swap|optional|fallback)", re.IGNORECASE)


@dataclass
class _WalkContext:
    """Running counters for one traversal. Discarded once metrics are built."""
    https_page: bool
    page_title: Optional[str] = None
    has_lang: bool = False
    h1_count: int = 0
    heading_levels: list[int] = field(default_factory=list)
    img_total: int = 0
    img_with_alt: int = 0
    landmarks: int = 0
    meta_description_chars: int = 0
    has_canonical: bool = False
    has_viewport: bool = False
    has_favicon: bool = False
    font_total: int = 0
    font_with_display: int = 0
    mixed_content: int = 0
    script_count: int = 0
    css_count: int = 0
    inline_script_bytes: int = 0

    def check_mixed(self, ref: str) -> None:
        if self.https_page and ref.lower().startswith("http://"):
            self.mixed_content += 1


def _attr(tag: Tag, name: str) -> str:
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return value


def _visit_html(tag: Tag, ctx: _WalkContext) -> None:
    if _attr(tag, "lang").strip():
        ctx.has_lang = True


def _visit_title(tag: Tag, ctx: _WalkContext) -> None:
    if tag.find_parent("svg") is not None:
        return  # inline SVG label
    text = tag.get_text().strip()
    if text and ctx.page_title is None:
        ctx.page_title = text


def _visit_meta(tag: Tag, ctx: _WalkContext) -> None:
    name = _attr(tag, "name").lower()
    if name == "description":
        ctx.meta_description_chars = len(_attr(tag, "content").strip())
    elif name == "viewport":
        ctx.has_viewport = True


def _visit_link(tag: Tag, ctx: _WalkContext) -> None:
    rels = _attr(tag, "rel").lower().split()
    href = _attr(tag, "href").strip()
    stylesheet = "stylesheet" in rels
    google_font = any(host in href.lower() for host in GOOGLE_FONT_HOSTS)

    if "canonical" in rels:
        ctx.has_canonical = True
    if any("icon" in rel for rel in rels):
        ctx.has_favicon = True
    if stylesheet:
        ctx.css_count += 1
    if stylesheet and "fonts.googleapis.com" in href.lower():
        ctx.font_total += 1
        if _DISPLAY_PARAM_RE.search(href):
            ctx.font_with_display += 1
    preload_font = "preload" in rels and _attr(tag, "as").lower() == "font"
    if stylesheet or google_font or preload_font:
        ctx.check_mixed(href)


def _visit_img(tag: Tag, ctx: _WalkContext) -> None:
    ctx.img_total += 1
    if _attr(tag, "alt").strip():
        ctx.img_with_alt += 1
    ctx.check_mixed(_attr(tag, "src").strip())


def _visit_script(tag: Tag, ctx: _WalkContext) -> None:
    ctx.script_count += 1
    src = _attr(tag, "src").strip()
    if src:
        ctx.check_mixed(src)
    else:
        ctx.inline_script_bytes += len(tag.get_text().encode("utf-8"))


def _visit_style(tag: Tag, ctx: _WalkContext) -> None:
    css = tag.get_text()
    faces = len(_FONT_FACE_RE.findall(css))
    if not faces:
        return
    ctx.font_total += faces
    ctx.font_with_display += sum(
        1 for block in _FONT_FACE_BLOCK_RE.findall(css) if _FONT_DISPLAY_RE.search(block)
    )


_VISITORS: dict[str, Callable[[Tag, _WalkContext], None]] = {
    "html": _visit_html,
    "title": _visit_title,
    "meta": _visit_meta,
    "link": _visit_link,
    "img": _visit_img,
    "script": _visit_script,
    "style": _visit_style,
}


def _walk(soup: BeautifulSoup, ctx: _WalkContext) -> None:
    for node in soup.descendants:
        if not isinstance(node, Tag):
            continue
        name = node.name.lower()
        visitor = _VISITORS.get(name)
        if visitor:
            visitor(node, ctx)
        level = HEADING_TAGS.get(name)
        if level:
            if level == 1:
                ctx.h1_count += 1
            ctx.heading_levels.append(level)
        if name in LANDMARK_TAGS:
            ctx.landmarks += 1


def count_outline_issues(levels: list[int], h1_count: int) -> int:
    """Skipped heading levels plus every h1 beyond the first."""
    issues = 0
    previous = 0
    for level in levels:
        if previous and level > previous + 1:
            issues += 1
        previous = level
    if h1_count > 1:
        issues += h1_count - 1
    return issues


def extract_metrics(html: str, page_url: str) -> RawMetrics:
    """Walk the parsed document once and build raw metrics.

    Time-to-first-byte and the security header flags are left at their
    defaults; the aggregator fills them from the fetch.
    """
    soup = BeautifulSoup(html, "lxml")
    ctx = _WalkContext(https_page=page_url.lower().startswith("https:"))
    _walk(soup, ctx)

    alt_coverage = 1.0 if ctx.img_total == 0 else ctx.img_with_alt / ctx.img_total
    font_display_percent = 0.0
    if ctx.font_total:
        font_display_percent = ctx.font_with_display / ctx.font_total * 100

    return RawMetrics(
        timing=Timing(ttfb_ms=0),
        size=Size(
            total_bytes=len(html.encode("utf-8")),
            js_bytes=ctx.inline_script_bytes,
        ),
        counts=Counts(
            requests=1 + ctx.script_count + ctx.css_count + ctx.img_total,
            img=ctx.img_total,
            script=ctx.script_count,
            css=ctx.css_count,
        ),
        accessibility=AccessibilitySignals(
            alt_coverage=min(max(alt_coverage, 0.0), 1.0),
            h1_count=ctx.h1_count,
            outline_issues=count_outline_issues(ctx.heading_levels, ctx.h1_count),
            landmarks=ctx.landmarks,
            has_lang=ctx.has_lang,
        ),
        seo=SeoSignals(
            title_chars=len(ctx.page_title or ""),
            meta_description_chars=ctx.meta_description_chars,
            has_canonical=ctx.has_canonical,
            h1_exists=ctx.h1_count > 0,
        ),
        security=SecuritySignals(https=ctx.https_page, mixed_content=ctx.mixed_content),
        ux=UxSignals(
            has_viewport=ctx.has_viewport,
            has_favicon=ctx.has_favicon,
            font_display_percent=min(max(font_display_percent, 0.0), 100.0),
            js_weight_kb=ctx.inline_script_bytes / 1024,
        ),
        page_title=ctx.page_title,
    )
