"""
Slide model for tutorial videos.

Slides are created once per export run (from the Markdown source or from
scene recipes) and never mutated afterwards.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Tuple


@dataclass(frozen=True)
class ImageRef:
    """An image reference whose file existed at parse time."""
    alt: str
    path: str


@dataclass(frozen=True)
class Slide:
    """Base slide. Instances of the base class render as a placeholder."""
    type: ClassVar[str] = "unknown"

    title: str = ""
    duration: float = 6.0


@dataclass(frozen=True)
class CoverSlide(Slide):
    type: ClassVar[str] = "cover"

    subtitle: str = ""
    logo: Optional[str] = None
    version: str = ""
    classification: str = ""
    footer: str = ""
    date: Optional[str] = None
    meta: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class TocSlide(Slide):
    type: ClassVar[str] = "toc"

    items: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SectionTitleSlide(Slide):
    type: ClassVar[str] = "section-title"

    section_number: str = ""
    subtitle: str = ""


@dataclass(frozen=True)
class ContentSlide(Slide):
    type: ClassVar[str] = "content"

    parent_section: Optional[str] = None
    text: str = ""
    prose: str = ""
    bullets: Tuple[str, ...] = ()
    steps: Tuple[str, ...] = ()
    images: Tuple[ImageRef, ...] = field(default_factory=tuple)

    @property
    def list_items(self) -> Tuple[str, ...]:
        """Numbered steps win over bullets when both are present."""
        return self.steps if self.steps else self.bullets

    @property
    def is_numbered(self) -> bool:
        return bool(self.steps)


@dataclass(frozen=True)
class ClosingSlide(Slide):
    type: ClassVar[str] = "closing"

    subtitle: str = ""


def slide_summary(slide: Slide) -> dict:
    """Plain dict view of a slide for JSON output."""
    data = {"type": slide.type, "title": slide.title, "duration": slide.duration}
    if isinstance(slide, TocSlide):
        data["items"] = list(slide.items)
    elif isinstance(slide, SectionTitleSlide):
        data["sectionNumber"] = slide.section_number
    elif isinstance(slide, ContentSlide):
        data.update({
            "parentSection": slide.parent_section,
            "prose": slide.prose,
            "bullets": list(slide.bullets),
            "steps": list(slide.steps),
            "images": [{"alt": img.alt, "path": img.path} for img in slide.images],
        })
    elif isinstance(slide, ClosingSlide):
        data["subtitle"] = slide.subtitle
    elif isinstance(slide, CoverSlide):
        data["subtitle"] = slide.subtitle
    return data
