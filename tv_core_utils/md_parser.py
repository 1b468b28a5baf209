"""
Markdown tutorial parsing for tutorial-video.

SINGLE SOURCE OF TRUTH for turning a tutorial document into slides.
The parser is tolerant: malformed input degrades to fewer or emptier
slides, it never raises. Only a missing source file is fatal.

Document shape it recovers:

    # Title                      -> dropped (the cover replaces it)
    ## Índice                    -> manual table of contents, dropped
    ## 1. Section                -> section-title slide
    ### 1.1 Subsection           -> content slide (body until next heading)
"""

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .slides import (
    ClosingSlide,
    ContentSlide,
    CoverSlide,
    ImageRef,
    SectionTitleSlide,
    Slide,
    TocSlide,
)


PROSE_LIMIT = 200
ELLIPSIS = "…"
LEGACY_IMAGE_PREFIX = "SS/"

DEFAULT_TOC_MARKERS = (
    "indice",
    "indice de contenidos",
    "table of contents",
    "tabla de contenidos",
    "contents",
    "contenidos",
)
DEFAULT_SUBTITLE_MARKERS = ("guia completa",)

_IMAGE_RE = re.compile(r'!\[([^\]]*)\]\(([^)]+)\)')
_META_LINE_RE = re.compile(
    r'^\*\*(?:Versi[oó]n|Clasificaci[oó]n|Version|Classification):\*\*.*$',
    re.MULTILINE | re.IGNORECASE,
)
_HR_RE = re.compile(r'^---$', re.MULTILINE)
_BLANK_RUN_RE = re.compile(r'\n{3,}')
_BULLET_RE = re.compile(r'^[-*]\s+(.+)$', re.MULTILINE)
_STEP_RE = re.compile(r'^\d+\.\s+(.+)$', re.MULTILINE)
_SECTION_NUMBER_RE = re.compile(r'^(\d+)\.')


# =============================================================================
# OPTIONS
# =============================================================================

@dataclass(frozen=True)
class SlideDurations:
    """Per-type screen time in seconds."""
    content: float = 6.0
    cover: float = 8.0
    toc: float = 6.0
    section_title: float = 4.0
    closing: float = 6.0
    image_bonus: float = 2.0


@dataclass(frozen=True)
class DeckOptions:
    cover: Optional[CoverSlide] = None
    toc_title: str = "Índice de Contenidos"
    durations: SlideDurations = SlideDurations()
    toc_markers: Tuple[str, ...] = DEFAULT_TOC_MARKERS
    subtitle_markers: Tuple[str, ...] = DEFAULT_SUBTITLE_MARKERS


# =============================================================================
# LINE CLASSIFICATION
# =============================================================================

class LineKind(Enum):
    H1 = "h1"
    H2 = "h2"
    H3 = "h3"
    TEXT = "text"


class ParserState(Enum):
    OUTSIDE = "outside"
    IN_IGNORED_TOC = "in-ignored-toc"
    IN_SUBSECTION = "in-subsection"


def classify_line(line: str) -> Tuple[LineKind, str]:
    """Return the line kind and, for headings, the heading text."""
    if line.startswith("# "):
        return LineKind.H1, line[2:].strip()
    if line.startswith("## "):
        return LineKind.H2, line[3:].strip()
    if line.startswith("### "):
        return LineKind.H3, line[4:].strip()
    return LineKind.TEXT, line


def fold_text(text: str) -> str:
    """Lower-case, accent-free form used for marker matching."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold().strip()


def _folded_heading(title: str) -> str:
    # Surrounding emoji / punctuation ("📑 Índice:") is ignored.
    return re.sub(r'^[^\w]+|[^\w]+$', '', fold_text(title))


def _matches_marker(title: str, markers: Sequence[str], whole: bool = False) -> bool:
    folded = _folded_heading(title)
    if whole:
        return any(folded == _folded_heading(m) for m in markers)
    return any(folded.startswith(_folded_heading(m)) for m in markers)


def is_toc_heading(title: str, markers: Sequence[str] = DEFAULT_TOC_MARKERS) -> bool:
    """A TOC heading is exactly one of the markers ("Contenidos del pedido" is a real section)."""
    return _matches_marker(title, markers, whole=True)


def is_subtitle_heading(title: str, markers: Sequence[str] = DEFAULT_SUBTITLE_MARKERS) -> bool:
    return _matches_marker(title, markers)


def extract_section_number(title: str) -> str:
    """Leading numeric prefix: '3. Foo' -> '3', otherwise ''."""
    match = _SECTION_NUMBER_RE.match(title)
    return match.group(1) if match else ""


# =============================================================================
# IMAGE RESOLUTION
# =============================================================================

def resolve_image(href: str, images_dir: Union[str, Path]) -> Optional[str]:
    """
    Resolve an image href to an existing file.

    Candidates, first existing wins:
    1. parent of the images dir (only for the legacy ``SS/`` prefix)
    2. the images dir
    3. the literal path

    Returns:
        Absolute path string, or None when nothing exists.
    """
    images_dir = Path(images_dir)
    candidates = []
    if href.startswith(LEGACY_IMAGE_PREFIX):
        candidates.append(images_dir.parent / href)
    candidates.append(images_dir / href)
    candidates.append(Path(href))

    for candidate in candidates:
        if candidate.is_file():
            return str(candidate.resolve())
    return None


# =============================================================================
# SUBSECTION FINALIZATION
# =============================================================================

def _is_prose_line(line: str) -> bool:
    if not line.strip():
        return False
    if re.match(r'^[-*]\s', line) or re.match(r'^\d+\.\s', line):
        return False
    if line.startswith(">") or line.startswith("```"):
        return False
    if re.match(r'^#+\s', line):
        return False
    return True


def summarize_prose(text: str, limit: int = PROSE_LIMIT) -> str:
    prose = " ".join(line for line in text.split("\n") if _is_prose_line(line))
    prose = re.sub(r'\s+', ' ', prose).strip()
    if len(prose) > limit:
        return prose[:limit] + ELLIPSIS
    return prose


def clean_body(text: str) -> str:
    """Strip images, metadata lines and rules; collapse blank runs."""
    text = _IMAGE_RE.sub("", text)
    text = _META_LINE_RE.sub("", text)
    text = _HR_RE.sub("", text)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    return text.strip()


def finalize_content_slide(
    title: str,
    parent_section: Optional[str],
    lines: List[str],
    images_dir: Union[str, Path],
    default_duration: float,
    image_bonus: float = SlideDurations.image_bonus,
) -> ContentSlide:
    raw = "\n".join(lines).strip()

    images = []
    for alt, href in _IMAGE_RE.findall(raw):
        resolved = resolve_image(href.strip(), images_dir)
        if resolved:
            images.append(ImageRef(alt=alt, path=resolved))

    text = clean_body(raw)
    bullets = tuple(m.strip() for m in _BULLET_RE.findall(text))
    steps = tuple(m.strip() for m in _STEP_RE.findall(text))

    duration = default_duration
    if len(images) > 1:
        duration += image_bonus

    return ContentSlide(
        title=title,
        duration=duration,
        parent_section=parent_section,
        text=text,
        prose=summarize_prose(text),
        bullets=bullets,
        steps=steps,
        images=tuple(images),
    )


# =============================================================================
# DOCUMENT PARSING
# =============================================================================

def parse_markdown(
    markdown_text: str,
    images_dir: Union[str, Path],
    default_duration: float = SlideDurations.content,
    *,
    durations: Optional[SlideDurations] = None,
    toc_markers: Sequence[str] = DEFAULT_TOC_MARKERS,
    subtitle_markers: Sequence[str] = DEFAULT_SUBTITLE_MARKERS,
) -> List[Slide]:
    """
    Parse the document body into section-title and content slides.

    Args:
        markdown_text: Raw markdown content
        images_dir: Directory image hrefs are resolved against
        default_duration: Duration of a content slide before the image bonus
        durations: Section-title duration and image bonus (content duration
            always comes from ``default_duration``)

    Returns:
        Ordered slides (no cover, toc or closing)
    """
    durations = durations or SlideDurations()
    slides: List[Slide] = []
    state = ParserState.OUTSIDE
    current_section: Optional[str] = None
    subsection_title: Optional[str] = None
    buffer: List[str] = []

    def flush() -> None:
        nonlocal subsection_title, buffer
        if subsection_title is not None:
            slides.append(finalize_content_slide(
                subsection_title, current_section, buffer, images_dir,
                default_duration, durations.image_bonus,
            ))
        subsection_title = None
        buffer = []

    for line in markdown_text.replace("\r\n", "\n").split("\n"):
        kind, heading = classify_line(line)

        if state is ParserState.IN_IGNORED_TOC:
            if kind is not LineKind.H2 or is_toc_heading(heading, toc_markers):
                continue
            state = ParserState.OUTSIDE  # this H2 is handled below

        if kind is LineKind.H1:
            continue

        if kind is LineKind.H2:
            if is_toc_heading(heading, toc_markers):
                flush()
                state = ParserState.IN_IGNORED_TOC
                continue
            if is_subtitle_heading(heading, subtitle_markers):
                continue
            flush()
            current_section = heading
            slides.append(SectionTitleSlide(
                title=heading,
                duration=durations.section_title,
                section_number=extract_section_number(heading),
            ))
            state = ParserState.OUTSIDE
            continue

        if kind is LineKind.H3:
            flush()
            subsection_title = heading
            state = ParserState.IN_SUBSECTION
            continue

        if state is ParserState.IN_SUBSECTION:
            buffer.append(line)

    flush()
    return slides


def insert_toc(slides: List[Slide], title: str, duration: float) -> List[Slide]:
    """Insert the TOC right after the cover (or first) when sections exist."""
    items = tuple(s.title for s in slides if isinstance(s, SectionTitleSlide))
    if not items:
        return list(slides)
    position = 1 if slides and isinstance(slides[0], CoverSlide) else 0
    result = list(slides)
    result.insert(position, TocSlide(title=title, duration=duration, items=items))
    return result


def closing_for(cover: Optional[CoverSlide], duration: float) -> ClosingSlide:
    return ClosingSlide(
        title=cover.footer if cover else "",
        subtitle=(cover.title if cover else "") or "Tutorial",
        duration=duration,
    )


def build_slides(
    markdown_text: str,
    images_dir: Union[str, Path],
    options: Optional[DeckOptions] = None,
) -> List[Slide]:
    """Full deck: [cover], [toc], sections/contents, closing."""
    options = options or DeckOptions()
    durations = options.durations

    slides: List[Slide] = []
    if options.cover is not None:
        slides.append(options.cover)

    slides.extend(parse_markdown(
        markdown_text,
        images_dir,
        durations.content,
        durations=durations,
        toc_markers=options.toc_markers,
        subtitle_markers=options.subtitle_markers,
    ))
    slides = insert_toc(slides, options.toc_title, durations.toc)
    slides.append(closing_for(options.cover, durations.closing))
    return slides


def load_slides(
    source: Union[str, Path],
    images_dir: Optional[Union[str, Path]] = None,
    options: Optional[DeckOptions] = None,
) -> List[Slide]:
    """Read the tutorial and build its slides.

    Raises:
        FileNotFoundError: the source document does not exist
    """
    source = Path(source)
    if not source.is_file():
        raise FileNotFoundError(f"Markdown not found: {source}")
    text = source.read_text(encoding="utf-8")
    return build_slides(text, images_dir or source.parent, options)
