"""
Frame capture for tutorial-video.

A single headless Chromium page is reused for every capture: set the slide
HTML, screenshot, repeat. Captures are strictly sequential so the
"set content" and "screenshot" calls on the shared page never interleave.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from project_paths import ExportPaths
from tv_common import RenderEngineError
from tv_core_utils.slides import Slide
from tv_core_utils.timeline import TRANSITION_CROSSFADE, plan_frames, total_frames
from tv_renderer import render_black_html, render_slide_html

logger = logging.getLogger(__name__)


class SlideCamera:
    """Headless browser session that rasterizes HTML documents to PNG."""

    def __init__(self, resolution: Tuple[int, int], headless: bool = True, warmup_ms: int = 300):
        self.resolution = resolution
        self.headless = headless
        self.warmup_ms = warmup_ms
        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None
        self._captures = 0

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def viewport(self) -> dict:
        return {"width": self.resolution[0], "height": self.resolution[1]}

    def open(self) -> None:
        logger.info("Launching headless Chromium")
        try:
            self.playwright = sync_playwright().start()
            self.browser = self.playwright.chromium.launch(headless=self.headless)
            self.context = self.browser.new_context(viewport=self.viewport, device_scale_factor=1)
            self.page = self.context.new_page()
        except PlaywrightError as e:
            self.close()
            raise RenderEngineError(f"Could not start Chromium: {e}") from e

    def capture(self, html: str, path: Path) -> Path:
        """Load ``html`` into the page and write a PNG screenshot to ``path``."""
        if self.page is None:
            raise RenderEngineError("Camera is not open")
        try:
            self.page.set_content(html, wait_until="domcontentloaded")
            if self._captures == 0 and self.warmup_ms:
                # First paint also loads fonts; later captures reuse them.
                self.page.wait_for_timeout(self.warmup_ms)
            self.page.screenshot(path=str(path), type="png")
        except PlaywrightError as e:
            raise RenderEngineError(f"Capture failed for {Path(path).name}: {e}") from e
        self._captures += 1
        return Path(path)

    def close(self) -> None:
        for closer in (self.context, self.browser):
            if closer is None:
                continue
            try:
                closer.close()
            except PlaywrightError as e:
                logger.debug(f"Ignoring close error: {e}")
        if self.playwright is not None:
            self.playwright.stop()
        self.playwright = self.browser = self.context = self.page = None


@dataclass(frozen=True)
class CaptureProgress:
    percent: int
    frames_written: int
    total_frames: int
    slide_position: int
    slide_count: int
    slide_title: str


ProgressCallback = Callable[[CaptureProgress], None]


def print_progress(progress: CaptureProgress) -> None:
    title = progress.slide_title.replace("\n", " ")[:40]
    print(
        f"\r  📸 Frames: {progress.percent}% ({progress.frames_written}/{progress.total_frames})"
        f"  slide {progress.slide_position + 1}/{progress.slide_count}: {title}          ",
        end="",
        flush=True,
    )


class FrameCaptureDriver:
    """
    Rasterizes every frame of a deck into ``paths.frames_dir``.

    Frame indices come from ``plan_frames`` and are written in order with no
    gaps. Consecutive frames with the same slide and phase (the hold region)
    reuse the previous PNG instead of being captured again.
    """

    def __init__(
        self,
        camera: SlideCamera,
        paths: ExportPaths,
        stylesheet: str,
        fps: float,
        transition: str = TRANSITION_CROSSFADE,
        transition_duration: float = 0.5,
        lang: str = "es",
        progress: Optional[ProgressCallback] = None,
        progress_every: int = 30,
    ):
        self.camera = camera
        self.paths = paths
        self.stylesheet = stylesheet
        self.fps = fps
        self.transition = transition
        self.transition_duration = transition_duration
        self.lang = lang
        self.progress = progress
        self.progress_every = max(1, progress_every)

    def run(self, slides: Sequence[Slide]) -> int:
        """Capture all frames; returns how many were written."""
        resolution = self.camera.resolution
        total = total_frames(slides, self.fps, self.transition, self.transition_duration)
        self.paths.frames_dir.mkdir(parents=True, exist_ok=True)

        black_frame: Optional[Path] = None
        last_key = None
        last_path: Optional[Path] = None
        written = 0
        in_transition = 0

        for frame in plan_frames(slides, self.fps, self.transition, self.transition_duration):
            if frame.index != written:
                raise RuntimeError(f"Frame index gap: expected {written}, got {frame.index}")
            path = self.paths.frame_path(frame.index)

            if frame.slide is None:
                if black_frame is None:
                    black_frame = self.camera.capture(render_black_html(resolution), path)
                else:
                    shutil.copyfile(black_frame, path)
                last_key = None
            else:
                key = (frame.position, frame.phase)
                if key == last_key and last_path is not None:
                    shutil.copyfile(last_path, path)
                else:
                    html = render_slide_html(frame.slide, frame.phase, self.stylesheet, resolution, self.lang)
                    self.camera.capture(html, path)
                last_key = key
            last_path = path
            written += 1
            if frame.transition:
                in_transition += 1

            if self.progress and (written % self.progress_every == 0 or written == total):
                current = slides[frame.position]
                self.progress(CaptureProgress(
                    percent=round(written * 100 / total) if total else 100,
                    frames_written=written,
                    total_frames=total,
                    slide_position=frame.position,
                    slide_count=len(slides),
                    slide_title=current.title,
                ))

        logger.info(f"Captured {written} frames ({in_transition} in transitions) into {self.paths.frames_dir}")
        return written


def capture_still(
    camera: SlideCamera,
    slide: Slide,
    path: Path,
    stylesheet: str,
    lang: str = "es",
) -> Path:
    """One fully revealed capture of ``slide``."""
    html = render_slide_html(slide, 1.0, stylesheet, camera.resolution, lang)
    return camera.capture(html, path)
