"""
Scene definitions for hybrid videos (slides + live recordings).

Scenes are authored outside the tool, either as JSON or as a Python module
exposing ``SCENES``:

    [
      {"type": "slide", "slideType": "cover", "duration": 6},
      {"type": "recording", "name": "login", "actions": [
          {"action": "click", "selector": "#login"},
          {"action": "type", "selector": "#user", "value": "demo"},
          {"action": "wait", "wait_s": 1.5}
      ]},
      {"type": "slide", "slideType": "closing"}
    ]

A recording routine is anything with ``run(page)``; the assembler treats it
as an opaque callback.
"""

import importlib.util
import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from playwright.sync_api import Error as PlaywrightError

from tv_common import RecordingError, ValidationError
from tv_core_utils.md_parser import resolve_image, summarize_prose
from tv_core_utils.slides import (
    ClosingSlide,
    ContentSlide,
    CoverSlide,
    ImageRef,
    SectionTitleSlide,
    Slide,
)

logger = logging.getLogger(__name__)

SCENE_SLIDE_DURATIONS = {
    "cover": 6.0,
    "section-title": 4.0,
    "closing": 6.0,
    "content": 6.0,
}

CLOSING_TITLES = {"es": "Fin del Tutorial", "en": "End of tutorial"}


# =============================================================================
# RECORDING ROUTINES
# =============================================================================

class RecordingRoutine:
    """Drives a live page during a recording scene."""

    def run(self, page) -> None:
        raise NotImplementedError


class CallableRoutine(RecordingRoutine):
    """Wraps a plain ``func(page)`` from a Python scenes module."""

    def __init__(self, func: Callable[[Any], None]):
        self.func = func

    def run(self, page) -> None:
        try:
            self.func(page)
        except RecordingError:
            raise
        except Exception as e:
            raise RecordingError(f"{getattr(self.func, '__name__', 'routine')}: {e}") from e


class ActionListRoutine(RecordingRoutine):
    """Executes declarative actions (click, type, wait, ...) in order."""

    def __init__(self, actions: Sequence[Dict[str, Any]], default_timeout_ms: int = 30000):
        self.actions = list(actions)
        self.default_timeout_ms = default_timeout_ms

    def run(self, page) -> None:
        for idx, action in enumerate(self.actions):
            try:
                self._execute(page, idx, action)
            except (PlaywrightError, ValueError) as e:
                raise RecordingError(f"Action {idx + 1} ({action.get('action')}): {e}") from e

    def _execute(self, page, idx: int, action: Dict[str, Any]) -> None:
        action_type = (action.get("action") or "").strip().lower()
        selector = action.get("selector")
        value = action.get("value")
        timeout_ms = int(action.get("timeout_ms") or self.default_timeout_ms)

        def _need_selector():
            if not selector:
                raise ValueError(f"Action {idx + 1} missing selector for {action_type}")

        if action_type in ("click", "hover"):
            _need_selector()
            page.wait_for_selector(selector, timeout=timeout_ms, state="visible")
            # Move first so the cursor overlay glides to the target.
            box = page.locator(selector).first.bounding_box()
            if box:
                page.mouse.move(box["x"] + box["width"] / 2, box["y"] + box["height"] / 2, steps=15)
            if action_type == "click":
                page.click(selector)
        elif action_type == "fill":
            _need_selector()
            page.fill(selector, value or "")
        elif action_type == "type":
            _need_selector()
            delay_ms = int(action.get("delay_ms") or 40)
            page.type(selector, value or "", delay=delay_ms)
        elif action_type == "press":
            page.keyboard.press(value or "Enter")
        elif action_type == "scroll":
            page.mouse.wheel(0, int(float(value or 600)))
        elif action_type == "wait":
            wait_s = float(action.get("wait_s") or value or 1.0)
            page.wait_for_timeout(int(wait_s * 1000))
        elif action_type == "wait_selector":
            _need_selector()
            page.wait_for_selector(selector, timeout=timeout_ms)
        elif action_type == "wait_text":
            if not value:
                raise ValueError(f"Action {idx + 1} missing value for wait_text")
            page.wait_for_selector(f"text={value}", timeout=timeout_ms)
        elif action_type == "wait_network_idle":
            page.wait_for_load_state("networkidle", timeout=timeout_ms)
        elif action_type == "goto":
            if not value:
                raise ValueError(f"Action {idx + 1} missing value (URL) for goto")
            page.goto(value, wait_until="networkidle", timeout=timeout_ms)
        else:
            raise ValueError(f"Unknown action type '{action_type}' at step {idx + 1}")


def as_routine(obj: Any) -> RecordingRoutine:
    if isinstance(obj, RecordingRoutine):
        return obj
    if hasattr(obj, "run") and callable(obj.run):
        return CallableRoutine(obj.run)
    if callable(obj):
        return CallableRoutine(obj)
    if isinstance(obj, (list, tuple)):
        return ActionListRoutine(obj)
    raise ValidationError(f"Not a recording routine: {obj!r}")


# =============================================================================
# SCENES
# =============================================================================

@dataclass(frozen=True)
class SlideScene:
    type = "slide"

    slide_type: str = "content"
    title: str = ""
    subtitle: str = ""
    section_number: str = ""
    text: str = ""
    bullets: Tuple[str, ...] = ()
    steps: Tuple[str, ...] = ()
    images: Tuple[str, ...] = ()
    duration: Optional[float] = None

    @property
    def label(self) -> str:
        return self.title or self.slide_type


@dataclass(frozen=True)
class RecordingScene:
    type = "recording"

    name: str
    routine: RecordingRoutine = field(compare=False)
    description: str = ""
    url: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "routine", as_routine(self.routine))

    @property
    def label(self) -> str:
        return self.name or self.description or "recording"


Scene = Union[SlideScene, RecordingScene]


def scene_from_dict(data: Dict[str, Any]) -> Scene:
    scene_type = data.get("type")
    if scene_type == "slide":
        duration = data.get("duration")
        return SlideScene(
            slide_type=data.get("slideType", "content"),
            title=data.get("title", ""),
            subtitle=data.get("subtitle", ""),
            section_number=str(data.get("sectionNumber", "")),
            text=data.get("text", ""),
            bullets=tuple(data.get("bullets") or ()),
            steps=tuple(data.get("steps") or ()),
            images=tuple(data.get("images") or ()),
            duration=float(duration) if duration is not None else None,
        )
    if scene_type == "recording":
        routine = data.get("routine") or data.get("actions")
        if routine is None:
            raise ValidationError(f"Recording scene '{data.get('name', '?')}' has no actions")
        return RecordingScene(
            name=data.get("name", ""),
            routine=as_routine(routine),
            description=data.get("description", ""),
            url=data.get("url"),
        )
    raise ValidationError(f"Unknown scene type: {scene_type!r}")


def _coerce_scene(item: Any) -> Scene:
    if isinstance(item, (SlideScene, RecordingScene)):
        return item
    if isinstance(item, dict):
        return scene_from_dict(item)
    raise ValidationError(f"Unsupported scene entry: {item!r}")


def _load_module_scenes(path: Path) -> List[Any]:
    module_spec = importlib.util.spec_from_file_location(f"tv_scenes_{path.stem}", path)
    if module_spec is None or module_spec.loader is None:
        raise ValidationError(f"Cannot import scenes module: {path}")
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    scenes = getattr(module, "SCENES", None) or getattr(module, "scenes", None)
    if scenes is None:
        raise ValidationError(f"{path.name} does not define SCENES")
    return list(scenes)


def load_scenes(path: Union[str, Path]) -> List[Scene]:
    """
    Load scenes from a .json file or a .py module.

    Raises:
        FileNotFoundError: scenes file missing
        ValidationError: malformed scene entries
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Scenes file not found: {path}")

    if path.suffix.lower() == ".json":
        raw = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(raw, dict):
            raw = raw.get("scenes", [])
    elif path.suffix.lower() == ".py":
        raw = _load_module_scenes(path)
    else:
        raise ValidationError(f"Unsupported scenes file type: {path.suffix}")

    scenes = [_coerce_scene(item) for item in raw]
    slide_count = sum(1 for s in scenes if isinstance(s, SlideScene))
    logger.info(f"Loaded {len(scenes)} scenes ({slide_count} slides + {len(scenes) - slide_count} recordings)")
    return scenes


# =============================================================================
# SLIDE RECIPES
# =============================================================================

def slide_for_scene(
    scene: SlideScene,
    cover: Optional[CoverSlide] = None,
    lang: str = "es",
    images_dir: Optional[Path] = None,
) -> Slide:
    """Build the Slide a slide scene describes."""
    duration = scene.duration or SCENE_SLIDE_DURATIONS.get(scene.slide_type, 6.0)

    if scene.slide_type == "cover":
        if cover is not None:
            return replace(cover, duration=duration)
        return CoverSlide(title=scene.title or "Tutorial", subtitle=scene.subtitle, duration=duration)

    if scene.slide_type == "section-title":
        return SectionTitleSlide(
            title=scene.title,
            subtitle=scene.subtitle,
            section_number=scene.section_number,
            duration=duration,
        )

    if scene.slide_type == "closing":
        closing_title = CLOSING_TITLES.get((lang or "es")[:2], CLOSING_TITLES["en"])
        return ClosingSlide(
            title=scene.title or closing_title,
            subtitle=(cover.footer if cover else "") or scene.subtitle,
            duration=duration,
        )

    images = []
    for href in scene.images:
        resolved = resolve_image(href, images_dir or Path.cwd())
        if resolved:
            images.append(ImageRef(alt="", path=resolved))
        else:
            logger.warning(f"⚠️  Scene image not found: {href}")

    return ContentSlide(
        title=scene.title,
        text=scene.text,
        prose=summarize_prose(scene.text),
        bullets=scene.bullets,
        steps=scene.steps,
        images=tuple(images),
        duration=duration,
    )
