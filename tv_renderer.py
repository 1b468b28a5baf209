"""
Slide rendering for tutorial-video.

Turns a (slide, phase) pair into a self-contained HTML document that the
headless browser rasterizes. Images are inlined as base64 data URIs so the
page never touches the network or the filesystem while it is captured.

Phase 0.0 is the start of a slide's entry animation and 1.0 fully revealed.
Each element reveals on its own clamped, piecewise-linear curve from
``layout_for`` so elements appear in reading order.
"""

import base64
import html
import logging
import mimetypes
import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Dict, Optional, Tuple

from tv_core_utils.slides import (
    ClosingSlide,
    ContentSlide,
    CoverSlide,
    SectionTitleSlide,
    Slide,
    TocSlide,
)

logger = logging.getLogger(__name__)

DEFAULT_RESOLUTION = (1920, 1080)


# =============================================================================
# ELEMENT LAYOUT
# =============================================================================

@dataclass(frozen=True)
class RevealCurve:
    delay: float = 0.0
    rate: float = 1.0
    stagger: float = 0.0
    offset_px: float = 0.0
    axis: str = "y"
    scale_from: float = 1.0


REVEAL_CURVES: Dict[str, RevealCurve] = {
    "cover-logo": RevealCurve(rate=2),
    "cover-title": RevealCurve(delay=0.2, rate=2),
    "cover-subtitle": RevealCurve(delay=0.4, rate=2),
    "cover-meta": RevealCurve(delay=0.6, rate=2.5),
    "toc-item": RevealCurve(rate=3, stagger=0.03, offset_px=30, axis="x"),
    "section-number": RevealCurve(rate=3),
    "section-heading": RevealCurve(delay=0.15, rate=2.5),
    "section-line": RevealCurve(rate=2, scale_from=0.0),
    "content-title": RevealCurve(rate=3),
    "content-item": RevealCurve(delay=0.15, rate=3, stagger=0.04, offset_px=15),
    "content-prose": RevealCurve(delay=0.2, rate=2),
    "content-image": RevealCurve(delay=0.3, rate=2, scale_from=0.95),
    "closing": RevealCurve(rate=2),
}


@dataclass(frozen=True)
class ElementLayout:
    opacity: float
    offset: float
    scale: float
    axis: str = "y"

    def style(self) -> str:
        parts = [f"opacity:{self.opacity:.4f}"]
        transforms = []
        if self.offset:
            transforms.append(f"translate{self.axis.upper()}({self.offset:.2f}px)")
        if self.scale != 1.0:
            transforms.append(f"scale({self.scale:.4f})")
        if transforms:
            parts.append("transform:" + " ".join(transforms))
        return ";".join(parts)


def _clamp(value: float) -> float:
    return max(0.0, min(value, 1.0))


def layout_for(element_kind: str, phase: float, index: int = 0, count: int = 1) -> ElementLayout:
    """
    Opacity, remaining offset and scale of an element at ``phase``.

    Args:
        element_kind: Key of REVEAL_CURVES (e.g. "toc-item")
        phase: Slide animation phase in [0, 1]
        index: Position within a list, later items reveal later
        count: Length of the list; long lists get a tighter stagger so the
            last item is fully shown at phase 1.0

    Raises:
        ValueError: unknown element kind
    """
    try:
        curve = REVEAL_CURVES[element_kind]
    except KeyError:
        raise ValueError(f"Unknown element kind: {element_kind}") from None

    stagger = curve.stagger
    if count > 1:
        stagger = min(stagger, (1 - 1 / curve.rate - curve.delay) / (count - 1))
    reveal = _clamp(round((phase - curve.delay - index * stagger) * curve.rate, 9))
    return ElementLayout(
        opacity=reveal,
        offset=(1 - reveal) * curve.offset_px,
        scale=curve.scale_from + (1 - curve.scale_from) * reveal,
        axis=curve.axis,
    )


# =============================================================================
# TEXT AND MEDIA
# =============================================================================

LABELS = {
    "es": {
        "version": "Versión",
        "date": "Fecha",
        "classification": "Clasificación",
        "thanks": "¡Gracias!",
        "unknown": "Tipo de slide desconocido",
    },
    "en": {
        "version": "Version",
        "date": "Date",
        "classification": "Classification",
        "thanks": "Thank you!",
        "unknown": "Unknown slide type",
    },
}

_SPANISH_MONTHS = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio", "julio",
    "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)


def labels_for(lang: str) -> Dict[str, str]:
    return LABELS.get((lang or "es")[:2].lower(), LABELS["en"])


def format_cover_date(lang: str = "es", today: Optional[date] = None) -> str:
    """Month and year, e.g. 'octubre de 2026' or 'October 2026'."""
    today = today or date.today()
    if (lang or "es").lower().startswith("es"):
        return f"{_SPANISH_MONTHS[today.month - 1]} de {today.year}"
    return today.strftime("%B %Y")


def inline_markup(text: str) -> str:
    """Escape text, then translate **bold** and `code` spans only."""
    escaped = html.escape(text, quote=False)
    escaped = re.sub(r'\*\*([^*]+)\*\*', r'<strong>\1</strong>', escaped)
    escaped = re.sub(r'`([^`]+)`', r'<code>\1</code>', escaped)
    return escaped


def _plain(text: str) -> str:
    return html.escape(text or "").replace("\n", "<br>")


def image_data_uri(path: Optional[str]) -> Optional[str]:
    """Inline an image file; None when it is missing or unreadable."""
    if not path:
        return None
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as e:
        logger.warning(f"⚠️  Image skipped ({p}): {e}")
        return None
    mime = mimetypes.guess_type(p.name)[0] or "image/png"
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


# =============================================================================
# SLIDE TEMPLATES
# =============================================================================

def render_cover(slide: CoverSlide, phase: float, lang: str = "es") -> str:
    labels = labels_for(lang)
    title = layout_for("cover-title", phase).style()
    subtitle = layout_for("cover-subtitle", phase).style()
    meta = layout_for("cover-meta", phase).style()

    logo_html = ""
    logo_src = image_data_uri(slide.logo)
    if logo_src:
        logo_html = (
            f'<img class="cover-logo" src="{logo_src}" alt="" '
            f'style="{layout_for("cover-logo", phase).style()}" />'
        )

    rows = []
    if slide.version:
        rows.append((labels["version"], slide.version))
    rows.append((labels["date"], slide.date or format_cover_date(lang)))
    if slide.classification:
        rows.append((labels["classification"], slide.classification))
    rows.extend(slide.meta)
    meta_rows = "\n".join(
        f'<div class="meta-row"><span class="meta-label">{_plain(label)}</span>'
        f'<span class="meta-value">{_plain(value)}</span></div>'
        for label, value in rows
    )

    subtitle_html = (
        f'<p class="cover-subtitle" style="{subtitle}">{_plain(slide.subtitle)}</p>'
        if slide.subtitle else ""
    )
    footer_html = (
        f'<div class="cover-footer" style="{meta}">{_plain(slide.footer)}</div>'
        if slide.footer else ""
    )

    return f"""
    <div class="slide slide-cover">
      <div class="cover-card">
        {logo_html}
        <div class="cover-divider" style="{title}"></div>
        <h1 class="cover-title" style="{title}">{_plain(slide.title)}</h1>
        {subtitle_html}
        <div class="cover-divider" style="{meta}"></div>
        <div class="cover-meta" style="{meta}">
          {meta_rows}
        </div>
      </div>
      {footer_html}
    </div>"""


def render_toc(slide: TocSlide, phase: float) -> str:
    items = "\n".join(
        f'<li style="{layout_for("toc-item", phase, i, len(slide.items)).style()}">{_plain(item)}</li>'
        for i, item in enumerate(slide.items)
    )
    return f"""
    <div class="slide slide-toc">
      <h2 class="toc-heading">{_plain(slide.title)}</h2>
      <ul class="toc-list">
        {items}
      </ul>
    </div>"""


def render_section_title(slide: SectionTitleSlide, phase: float) -> str:
    number_html = ""
    if slide.section_number:
        number_html = (
            f'<span class="section-number" style="{layout_for("section-number", phase).style()}">'
            f'{_plain(slide.section_number)}</span>'
        )
    heading = layout_for("section-heading", phase).style()
    subtitle_html = (
        f'<p class="section-subtitle" style="{heading}">{_plain(slide.subtitle)}</p>'
        if slide.subtitle else ""
    )
    line_width = layout_for("section-line", phase).scale * 100

    return f"""
    <div class="slide slide-section-title">
      {number_html}
      <h2 class="section-heading" style="{heading}">{_plain(slide.title)}</h2>
      {subtitle_html}
      <div class="section-line" style="width:{line_width:.2f}%"></div>
    </div>"""


def render_content(slide: ContentSlide, phase: float) -> str:
    image_html = ""
    if slide.images:
        first = slide.images[0]
        src = image_data_uri(first.path)
        if src:
            image_html = (
                f'<div class="content-image" style="{layout_for("content-image", phase).style()}">\n'
                f'        <img src="{src}" alt="{html.escape(first.alt)}" />\n'
                f'      </div>'
            )
    layout_class = "layout-split" if image_html else "layout-text-only"

    title_html = (
        f'<h3 class="content-title" style="{layout_for("content-title", phase).style()}">'
        f'{_plain(slide.title)}</h3>'
    )

    text_html = ""
    items = slide.list_items
    if items:
        rows = []
        for i, item in enumerate(items):
            marker = f"{i + 1}. " if slide.is_numbered else "• "
            rows.append(
                f'<li style="{layout_for("content-item", phase, i, len(items)).style()}">'
                f'{marker}{inline_markup(item)}</li>'
            )
        text_html = '<ul class="content-list">' + "\n".join(rows) + "</ul>"
    elif slide.prose:
        text_html = (
            f'<p class="content-prose" style="{layout_for("content-prose", phase).style()}">'
            f'{inline_markup(slide.prose)}</p>'
        )

    return f"""
    <div class="slide slide-content {layout_class}">
      <div class="content-text">
        {title_html}
        {text_html}
      </div>
      {image_html}
    </div>"""


def render_closing(slide: ClosingSlide, phase: float, lang: str = "es") -> str:
    return f"""
    <div class="slide slide-closing">
      <div class="closing-content" style="{layout_for("closing", phase).style()}">
        <h2 class="closing-title">{_plain(slide.subtitle)}</h2>
        <div class="closing-divider"></div>
        <p class="closing-footer">{_plain(slide.title)}</p>
        <p class="closing-thanks">{labels_for(lang)["thanks"]}</p>
      </div>
    </div>"""


def render_placeholder(slide: Slide, lang: str = "es") -> str:
    return f"""
    <div class="slide slide-unknown">
      <p>{labels_for(lang)["unknown"]}: {_plain(slide.type)}</p>
    </div>"""


def render_slide_body(slide: Slide, phase: float = 1.0, lang: str = "es") -> str:
    phase = _clamp(phase)
    if isinstance(slide, CoverSlide):
        return render_cover(slide, phase, lang)
    if isinstance(slide, TocSlide):
        return render_toc(slide, phase)
    if isinstance(slide, SectionTitleSlide):
        return render_section_title(slide, phase)
    if isinstance(slide, ContentSlide):
        return render_content(slide, phase)
    if isinstance(slide, ClosingSlide):
        return render_closing(slide, phase, lang)
    return render_placeholder(slide, lang)


# =============================================================================
# FULL DOCUMENT
# =============================================================================

def _page(body: str, stylesheet: str, resolution: Tuple[int, int], lang: str) -> str:
    width, height = resolution or DEFAULT_RESOLUTION
    return f"""<!DOCTYPE html>
<html lang="{html.escape(lang or 'es')}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width={width}, height={height}">
  <style>
    {stylesheet}
    html, body {{
      margin: 0;
      padding: 0;
      width: {width}px;
      height: {height}px;
      overflow: hidden;
    }}
  </style>
</head>
<body>
  {body}
</body>
</html>"""


def render_slide_html(
    slide: Slide,
    phase: float,
    stylesheet: str,
    resolution: Tuple[int, int] = DEFAULT_RESOLUTION,
    lang: str = "es",
) -> str:
    """
    Build a full HTML page for one slide at one animation phase.

    Args:
        slide: Slide from the parser or a scene recipe
        phase: 0.0 (entry start) to 1.0 (fully revealed)
        stylesheet: Theme CSS text
        resolution: (width, height) of the viewport in pixels
        lang: Deck language, used for labels and the html lang attribute

    Returns:
        Self-contained HTML document
    """
    return _page(render_slide_body(slide, phase, lang), stylesheet, resolution, lang)


def render_black_html(resolution: Tuple[int, int] = DEFAULT_RESOLUTION) -> str:
    """Solid black page used for fade-black transitions."""
    return _page("", "html, body { background: #000; }", resolution, "en")
