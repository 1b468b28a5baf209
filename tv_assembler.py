"""
Video assembly for tutorial-video.

Three modes, one per export run:
- animated: every frame of every slide is captured, then encoded as one clip
- slides-only: one still per slide, each looped into a fixed-duration clip
- hybrid: scenes from a scenes file; slide scenes become still clips,
  recording scenes are recorded live and normalized

All modes finish with the same concat step (optionally muxing background
audio). The temp directory is removed only when the export succeeds.
"""

import logging
import shutil
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from project_paths import ExportPaths, export_paths, prepare_tmp_dir, remove_tmp_dir
from tv_capture import FrameCaptureDriver, ProgressCallback, SlideCamera, capture_still, print_progress
from tv_common import RecordingError, format_size_mb, get_duration, success_response
from tv_config import MODE_ANIMATED, MODE_HYBRID, MODE_SLIDES_ONLY, ResolvedConfig
from tv_core_utils.md_parser import load_slides
from tv_core_utils.slides import Slide, slide_summary
from tv_core_utils.timeline import TRANSITION_CUT, estimate_total_duration, total_frames
from tv_encoder import (
    EncoderLocator,
    concat_clips,
    encode_image_sequence,
    image_to_clip,
    locate_encoder,
    normalize_clip,
)
from tv_recording import record_scene
from tv_scenes import RecordingScene, Scene, SlideScene, load_scenes, slide_for_scene
from tv_themes import resolve_stylesheet

logger = logging.getLogger(__name__)

CameraFactory = Callable[..., SlideCamera]


def estimate_duration(slides: Sequence[Slide], mode: str, transition: str, transition_duration: float) -> float:
    """Seconds of video the slides will produce (recordings not included)."""
    durations = [s.duration for s in slides]
    if mode == MODE_ANIMATED:
        return estimate_total_duration(durations, transition_duration, transition)
    # Still clips are cut together without transitions.
    return estimate_total_duration(durations, 0.0, TRANSITION_CUT)


class VideoAssembler:
    """One export run: slides (or scenes) in, a single MP4 out."""

    def __init__(
        self,
        config: ResolvedConfig,
        locator: Optional[EncoderLocator] = None,
        camera_factory: CameraFactory = SlideCamera,
        progress: Optional[ProgressCallback] = print_progress,
    ):
        self.config = config
        self.video = config.video
        self.locator = locator
        self.camera_factory = camera_factory
        self.progress = progress
        self.paths: ExportPaths = export_paths(self.video.output)
        self.stylesheet = ""
        self.skipped: List[str] = []

    def _camera(self) -> SlideCamera:
        return self.camera_factory(self.video.resolution, headless=self.video.headless)

    # -------------------------------------------------------------------------
    # Inputs
    # -------------------------------------------------------------------------

    def load_slides(self) -> List[Slide]:
        return load_slides(self.config.input, self.config.images_dir, self.config.deck_options())

    def load_scenes(self) -> List[Scene]:
        return load_scenes(self.video.scenes)

    def _audio(self) -> Optional[Path]:
        audio = self.video.audio
        if audio is None:
            return None
        if not audio.is_file():
            logger.warning(f"⚠️  Audio file not found, exporting without audio: {audio}")
            return None
        return audio

    # -------------------------------------------------------------------------
    # Modes
    # -------------------------------------------------------------------------

    def build_animated(self, slides: Sequence[Slide]) -> List[Path]:
        video = self.video
        total = total_frames(slides, video.fps, video.transition, video.transition_duration)
        print(f"📸 Capturing {total} frames ({len(slides)} slides @ {video.fps:g} fps)...")

        with self._camera() as camera:
            driver = FrameCaptureDriver(
                camera,
                self.paths,
                self.stylesheet,
                video.fps,
                transition=video.transition,
                transition_duration=video.transition_duration,
                lang=self.config.lang,
                progress=self.progress,
            )
            written = driver.run(slides)
        if self.progress:
            print()

        print(f"🎞️  Encoding {written} frames...")
        clip = encode_image_sequence(
            self.locator, self.paths.frames_dir, video.fps, self.paths.clip_path(0), video.resolution
        )
        return [clip]

    def build_slides_only(self, slides: Sequence[Slide]) -> List[Path]:
        video = self.video
        clips = []
        with self._camera() as camera:
            for i, slide in enumerate(slides):
                print(f"  🖼️  [{i + 1}/{len(slides)}] {slide.type}: {slide.title[:50]}")
                still = capture_still(camera, slide, self.paths.still_path(i), self.stylesheet, self.config.lang)
                clips.append(image_to_clip(
                    self.locator, still, slide.duration, video.fps, video.resolution, self.paths.clip_path(i)
                ))
        return clips

    def build_hybrid(self, scenes: Sequence[Scene]) -> List[Path]:
        video = self.video
        clips = []
        with self._camera() as camera:
            for i, scene in enumerate(scenes):
                label = scene.label
                if isinstance(scene, SlideScene):
                    print(f"  🖼️  [{i + 1}/{len(scenes)}] slide: {label}")
                    slide = slide_for_scene(scene, self.config.cover, self.config.lang, self.config.images_dir)
                    still = capture_still(camera, slide, self.paths.still_path(i), self.stylesheet, self.config.lang)
                    clips.append(image_to_clip(
                        self.locator, still, slide.duration, video.fps, video.resolution, self.paths.clip_path(i)
                    ))
                    continue

                print(f"  🎬 [{i + 1}/{len(scenes)}] recording: {label}")
                try:
                    recording = record_scene(
                        camera.browser,
                        scene,
                        self.paths,
                        i,
                        video.resolution,
                        video.app_url,
                        cursor=video.cursor,
                    )
                except RecordingError as e:
                    logger.warning(f"⚠️  Skipping recording '{label}': {e}")
                    self.skipped.append(label)
                    continue
                clips.append(normalize_clip(
                    self.locator, recording, video.fps, video.resolution, self.paths.clip_path(i)
                ))
        return clips

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    def run(self) -> dict:
        """
        Export the video.

        Raises:
            EncoderNotFoundError: no ffmpeg (checked before any work)
            FileNotFoundError: tutorial or scenes file missing
            RenderEngineError: Chromium unavailable
            EncoderError: an ffmpeg step failed
        """
        video = self.video
        if self.locator is None:
            self.locator = locate_encoder()
        logger.info(f"Using ffmpeg ({self.locator.source}): {self.locator.path}")

        if video.mode == MODE_HYBRID:
            scenes = self.load_scenes()
            slides: List[Slide] = []
        else:
            scenes = []
            slides = self.load_slides()

        print(f"🎬 Exporting video ({video.mode}) → {video.output}")
        if slides:
            estimate = estimate_duration(slides, video.mode, video.transition, video.transition_duration)
            print(f"   {len(slides)} slides, ~{estimate:.1f}s")

        self.stylesheet = resolve_stylesheet(video.theme, self.config.base_dir)
        prepare_tmp_dir(self.paths)

        try:
            if video.mode == MODE_ANIMATED:
                clips = self.build_animated(slides)
            elif video.mode == MODE_SLIDES_ONLY:
                clips = self.build_slides_only(slides)
            else:
                clips = self.build_hybrid(scenes)

            print(f"🔗 Joining {len(clips)} clip(s)...")
            joined = concat_clips(
                self.locator, clips, self.paths.joined_video, self.paths.concat_manifest, self._audio()
            )
            video.output.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(joined), str(video.output))
        except Exception:
            logger.error(f"Export failed; temp files kept for diagnosis at {self.paths.tmp_dir}")
            raise

        remove_tmp_dir(self.paths)

        size = video.output.stat().st_size
        duration = get_duration(self.locator.path, video.output)
        print(f"✅ Video ready: {video.output} ({format_size_mb(size)}, {duration:.1f}s)")

        return success_response(
            video=str(video.output),
            mode=video.mode,
            size=size,
            size_human=format_size_mb(size),
            duration=duration,
            clips=len(clips),
            slides=len(slides) if slides else len([s for s in scenes if isinstance(s, SlideScene)]),
            skipped_recordings=self.skipped,
        )


def export_video(
    config: ResolvedConfig,
    locator: Optional[EncoderLocator] = None,
    camera_factory: CameraFactory = SlideCamera,
    progress: Optional[ProgressCallback] = print_progress,
) -> dict:
    return VideoAssembler(config, locator, camera_factory, progress).run()


def plan_export(config: ResolvedConfig) -> dict:
    """Parse and time the deck without touching the browser or ffmpeg."""
    video = config.video
    if video.mode == MODE_HYBRID:
        scenes = load_scenes(video.scenes)
        slides = [
            slide_for_scene(s, config.cover, config.lang, config.images_dir)
            for s in scenes if isinstance(s, SlideScene)
        ]
        recordings = [s.label for s in scenes if isinstance(s, RecordingScene)]
    else:
        slides = load_slides(config.input, config.images_dir, config.deck_options())
        recordings = []

    result = success_response(
        mode=video.mode,
        output=str(video.output),
        fps=video.fps,
        resolution={"width": video.resolution[0], "height": video.resolution[1]},
        transition=video.transition,
        slides=[slide_summary(s) for s in slides],
        estimated_duration=estimate_duration(slides, video.mode, video.transition, video.transition_duration),
    )
    if video.mode == MODE_ANIMATED:
        result["frames"] = total_frames(slides, video.fps, video.transition, video.transition_duration)
    if recordings:
        result["recordings"] = recordings
    return result
