"""
Configuration for tutorial-video.

Settings come from a JSON file (``tutorial.config.json`` by default) merged
over built-in defaults. Relative paths are resolved against the config
file's directory, so the tool can be run from anywhere.
"""

import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from tv_common import ConfigError, resolve_relative
from tv_core_utils.md_parser import (
    DEFAULT_SUBTITLE_MARKERS,
    DEFAULT_TOC_MARKERS,
    DeckOptions,
    SlideDurations,
)
from tv_core_utils.slides import CoverSlide
from tv_core_utils.timeline import TRANSITION_CROSSFADE, TRANSITIONS
from tv_themes import DEFAULT_THEME

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "tutorial.config.json"

MODE_ANIMATED = "animated"
MODE_SLIDES_ONLY = "slides-only"
MODE_HYBRID = "hybrid"
MODES = (MODE_ANIMATED, MODE_SLIDES_ONLY, MODE_HYBRID)

LANGS = ("es", "en")


def default_config() -> Dict[str, Any]:
    return {
        "input": None,
        "output": None,
        "imagesDir": "./SS",
        "cover": None,
        "theme": DEFAULT_THEME,
        "tocTitle": "Índice de Contenidos",
        "lang": "es",
        "parser": {
            "tocMarkers": list(DEFAULT_TOC_MARKERS),
            "subtitleMarkers": list(DEFAULT_SUBTITLE_MARKERS),
        },
        "video": {
            "output": None,
            "resolution": {"width": 1920, "height": 1080},
            "fps": 30,
            "slideDuration": 6,
            "coverDuration": 8,
            "tocDuration": 6,
            "sectionTitleDuration": 4,
            "closingDuration": 6,
            "imageBonus": 2,
            "transition": TRANSITION_CROSSFADE,
            "transitionDuration": 0.5,
            "audio": None,
            "mode": MODE_ANIMATED,
            "scenes": None,
            "appUrl": "http://localhost:5173",
            "cursor": True,
            "headless": True,
            "theme": None,
        },
    }


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@dataclass(frozen=True)
class VideoConfig:
    output: Path
    resolution: Tuple[int, int] = (1920, 1080)
    fps: float = 30.0
    durations: SlideDurations = SlideDurations()
    transition: str = TRANSITION_CROSSFADE
    transition_duration: float = 0.5
    audio: Optional[Path] = None
    mode: str = MODE_ANIMATED
    scenes: Optional[Path] = None
    app_url: str = "http://localhost:5173"
    cursor: bool = True
    headless: bool = True
    theme: str = DEFAULT_THEME


@dataclass(frozen=True)
class ResolvedConfig:
    """Absolute paths and typed values, ready for an export run."""
    base_dir: Path
    input: Path
    output: Path
    images_dir: Path
    video: VideoConfig
    cover: Optional[CoverSlide] = None
    toc_title: str = "Índice de Contenidos"
    lang: str = "es"
    toc_markers: Tuple[str, ...] = DEFAULT_TOC_MARKERS
    subtitle_markers: Tuple[str, ...] = DEFAULT_SUBTITLE_MARKERS

    def deck_options(self) -> DeckOptions:
        return DeckOptions(
            cover=self.cover,
            toc_title=self.toc_title,
            durations=self.video.durations,
            toc_markers=self.toc_markers,
            subtitle_markers=self.subtitle_markers,
        )


class TutorialConfig:
    """JSON configuration with defaults and dotted-key access."""

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE, data: Optional[Dict[str, Any]] = None):
        self.config_file = Path(config_file).expanduser().resolve()
        self.base_dir = self.config_file.parent
        self.config = _deep_merge(default_config(), data if data is not None else self._load_config())

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from JSON file"""
        if not self.config_file.is_file():
            raise ConfigError(f"Config file not found: {self.config_file}")
        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {self.config_file.name}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{self.config_file.name} must contain a JSON object")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key"""
        keys = key.split(".")
        value = self.config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value if value is not None else default

    def set(self, key: str, value: Any) -> None:
        """Override a value by dotted key (used for CLI flags)."""
        keys = key.split(".")
        target = self.config
        for k in keys[:-1]:
            target = target.setdefault(k, {})
        target[keys[-1]] = value

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def _path(self, key: str) -> Optional[Path]:
        return resolve_relative(self.base_dir, self.get(key))

    def _number(self, key: str) -> float:
        value = self.get(key)
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{key} must be a number, got {value!r}") from None

    def _positive(self, key: str) -> float:
        number = self._number(key)
        if number <= 0:
            raise ConfigError(f"{key} must be positive, got {self.get(key)!r}")
        return number

    def _non_negative(self, key: str) -> float:
        number = self._number(key)
        if number < 0:
            raise ConfigError(f"{key} must not be negative, got {self.get(key)!r}")
        return number

    def _cover(self) -> Optional[CoverSlide]:
        cover = self.get("cover")
        if not cover:
            return None
        if not isinstance(cover, dict):
            raise ConfigError("cover must be an object")
        logo = resolve_relative(self.base_dir, cover.get("logo"))
        meta = cover.get("meta") or {}
        return CoverSlide(
            title=cover.get("title", ""),
            subtitle=cover.get("subtitle", ""),
            logo=str(logo) if logo else None,
            version=str(cover.get("version", "")),
            classification=cover.get("classification", ""),
            footer=cover.get("footer", ""),
            date=cover.get("date"),
            meta=tuple((str(k), str(v)) for k, v in meta.items()),
            duration=self._positive("video.coverDuration"),
        )

    def _video(self, output: Optional[Path]) -> VideoConfig:
        video_output = self._path("video.output")
        if video_output is None:
            if output is None:
                raise ConfigError("Either output or video.output must be set")
            video_output = output.with_suffix(".mp4")

        width = int(self._positive("video.resolution.width"))
        height = int(self._positive("video.resolution.height"))

        mode = self.get("video.mode")
        if mode not in MODES:
            raise ConfigError(f"video.mode must be one of {', '.join(MODES)}, got {mode!r}")

        transition = self.get("video.transition")
        if transition not in TRANSITIONS:
            raise ConfigError(
                f"video.transition must be one of {', '.join(TRANSITIONS)}, got {transition!r}"
            )

        transition_duration = self._non_negative("video.transitionDuration")

        scenes = self._path("video.scenes")
        if mode == MODE_HYBRID and scenes is None:
            raise ConfigError("video.scenes is required for hybrid mode")

        image_bonus = self._non_negative("video.imageBonus")

        return VideoConfig(
            output=video_output,
            resolution=(width, height),
            fps=self._positive("video.fps"),
            durations=SlideDurations(
                content=self._positive("video.slideDuration"),
                cover=self._positive("video.coverDuration"),
                toc=self._positive("video.tocDuration"),
                section_title=self._positive("video.sectionTitleDuration"),
                closing=self._positive("video.closingDuration"),
                image_bonus=image_bonus,
            ),
            transition=transition,
            transition_duration=transition_duration,
            audio=self._path("video.audio"),
            mode=mode,
            scenes=scenes,
            app_url=self.get("video.appUrl"),
            cursor=bool(self.get("video.cursor", True)),
            headless=bool(self.get("video.headless", True)),
            theme=str(self.get("video.theme") or self.get("theme") or DEFAULT_THEME),
        )

    def resolve(self) -> ResolvedConfig:
        """
        Validate and resolve into a ResolvedConfig.

        Raises:
            ConfigError: missing input or invalid values
        """
        input_path = self._path("input")
        if input_path is None:
            raise ConfigError("input (Markdown tutorial path) is required")
        output = self._path("output")

        lang = str(self.get("lang", "es"))[:2].lower()
        if lang not in LANGS:
            logger.warning(f"⚠️  Unsupported lang '{lang}', using 'es'")
            lang = "es"

        return ResolvedConfig(
            base_dir=self.base_dir,
            input=input_path,
            output=output or input_path.with_suffix(".pdf"),
            images_dir=self._path("imagesDir") or self.base_dir / "SS",
            video=self._video(output or input_path.with_suffix(".pdf")),
            cover=self._cover(),
            toc_title=self.get("tocTitle"),
            lang=lang,
            toc_markers=tuple(self.get("parser.tocMarkers") or DEFAULT_TOC_MARKERS),
            subtitle_markers=tuple(self.get("parser.subtitleMarkers") or DEFAULT_SUBTITLE_MARKERS),
        )


def load_config(config_file: str = DEFAULT_CONFIG_FILE, overrides: Optional[Dict[str, Any]] = None) -> ResolvedConfig:
    """Load, apply dotted-key overrides (None values skipped) and resolve."""
    config = TutorialConfig(config_file)
    for key, value in (overrides or {}).items():
        if value is not None:
            config.set(key, value)
    return config.resolve()
