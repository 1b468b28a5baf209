"""
Video slide themes.

A theme selector is either a built-in name ("shadcn-dark") or a path to a
.css file. Themes are plain stylesheet text; no code is loaded from disk.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from tv_common import ConfigError

from . import shadcn_dark_video

logger = logging.getLogger(__name__)

DEFAULT_THEME = "shadcn-dark"
VIDEO_SUFFIX = "-video"

BUILTIN_THEMES: Dict[str, str] = {
    "shadcn-dark-video": shadcn_dark_video.CSS,
}


class StylesheetProvider:
    """Maps a theme selector to stylesheet text."""

    def resolve(self, selector: str) -> str:
        raise NotImplementedError


class BuiltinThemeRegistry(StylesheetProvider):
    """Lookup in the bundled themes; unknown names fall back to the default."""

    def __init__(self, themes: Optional[Dict[str, str]] = None):
        self.themes = dict(BUILTIN_THEMES if themes is None else themes)

    def names(self):
        return sorted(self.themes)

    def resolve(self, selector: str) -> str:
        name = selector or DEFAULT_THEME
        if not name.endswith(VIDEO_SUFFIX):
            name += VIDEO_SUFFIX
        if name in self.themes:
            return self.themes[name]

        fallback = DEFAULT_THEME + VIDEO_SUFFIX
        logger.warning(f"⚠️  Video theme '{name}' not found, using {fallback}")
        return BUILTIN_THEMES[fallback]


class FileStylesheetLoader(StylesheetProvider):
    """Reads a .css file, relative paths resolved against ``base_dir``."""

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = base_dir

    def resolve(self, selector: str) -> str:
        path = Path(selector).expanduser()
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        if not path.is_file():
            raise ConfigError(f"Theme stylesheet not found: {path}")
        return path.read_text(encoding="utf-8")


def is_stylesheet_path(selector: Optional[str]) -> bool:
    return bool(selector) and str(selector).lower().endswith(".css")


def resolve_stylesheet(selector: Optional[Union[str, Path]], base_dir: Optional[Path] = None) -> str:
    """Pick the provider for ``selector`` and return the stylesheet text."""
    selector = str(selector) if selector else DEFAULT_THEME
    if is_stylesheet_path(selector):
        provider: StylesheetProvider = FileStylesheetLoader(base_dir)
    else:
        provider = BuiltinThemeRegistry()
    return provider.resolve(selector)
