"""
Tutorial Video Core Utilities

Slide model, Markdown parsing and frame timing.

This is the core utilities package. Everything here is pure: no browser,
no ffmpeg. CLI commands and the assembler build on these functions.
"""

from .slides import (
    ImageRef,
    Slide,
    CoverSlide,
    TocSlide,
    SectionTitleSlide,
    ContentSlide,
    ClosingSlide,
    slide_summary,
)

from .md_parser import (
    # Main parse functions
    parse_markdown,
    build_slides,
    load_slides,

    # Options
    DeckOptions,
    SlideDurations,

    # Building blocks
    resolve_image,
    summarize_prose,
    extract_section_number,
    insert_toc,
)

from .timeline import (
    Frame,
    frames_for,
    transition_frames,
    plan_frames,
    total_frames,
    estimate_total_duration,
    TRANSITIONS,
)

__all__ = [
    'ImageRef', 'Slide', 'CoverSlide', 'TocSlide', 'SectionTitleSlide', 'ContentSlide',
    'ClosingSlide', 'slide_summary',
    'parse_markdown', 'build_slides', 'load_slides', 'DeckOptions', 'SlideDurations',
    'resolve_image', 'summarize_prose', 'extract_section_number', 'insert_toc',
    'Frame', 'frames_for', 'transition_frames', 'plan_frames', 'total_frames',
    'estimate_total_duration', 'TRANSITIONS',
]
