"""
tv utility commands

Utility operations (slides parse, status).
"""

from pathlib import Path

from tv_common import EncoderNotFoundError, error_response, success_response
from tv_core_utils.md_parser import DeckOptions, SlideDurations, load_slides
from tv_core_utils.slides import slide_summary
from tv_encoder import locate_encoder
from tv_themes import BuiltinThemeRegistry


def register(subparsers):
    """Register utility commands."""

    # tv slides parse
    slides_parser = subparsers.add_parser('slides', help='Slide deck operations')
    slides_sub = slides_parser.add_subparsers(dest='slides_command')

    parse_parser = slides_sub.add_parser('parse', help='Parse a Markdown tutorial into slides')
    parse_parser.add_argument('--input', '-i', required=True, help='Markdown file path')
    parse_parser.add_argument('--images-dir', help='Directory images are resolved against (default: ./SS beside the input)')
    parse_parser.add_argument('--duration', type=float, default=SlideDurations.content, help='Default content slide duration (seconds)')
    parse_parser.set_defaults(func=cmd_slides_parse)

    # tv status
    status_parser = subparsers.add_parser('status', help='Show encoder and browser availability')
    status_parser.set_defaults(func=cmd_status)


def cmd_slides_parse(args) -> dict:
    """Handle tv slides parse command."""
    try:
        source = Path(args.input).expanduser().resolve()
        images_dir = Path(args.images_dir).expanduser().resolve() if args.images_dir else source.parent / "SS"
        options = DeckOptions(durations=SlideDurations(content=args.duration))
        slides = load_slides(source, images_dir, options)
        return success_response(
            input=str(source),
            count=len(slides),
            duration=sum(s.duration for s in slides),
            slides=[slide_summary(s) for s in slides],
        )
    except Exception as e:
        return error_response(e, "slides parse")


def _chromium_status() -> dict:
    try:
        from playwright.sync_api import sync_playwright
    except ImportError as e:
        return {"available": False, "error": str(e)}

    with sync_playwright() as p:
        executable = p.chromium.executable_path
    return {"available": Path(executable).exists(), "executable": executable}


def cmd_status(args) -> dict:
    """Handle tv status command."""
    try:
        locator = locate_encoder()
        encoder = {"available": True, "path": locator.path, "source": locator.source}
    except EncoderNotFoundError as e:
        encoder = {"available": False, "error": str(e)}

    try:
        chromium = _chromium_status()
    except Exception as e:
        return error_response(e, "status")

    return success_response(
        encoder=encoder,
        chromium=chromium,
        themes=BuiltinThemeRegistry().names(),
    )
