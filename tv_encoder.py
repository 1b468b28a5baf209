"""
ffmpeg invocation for tutorial-video.

Three operations, each a synchronous ffmpeg run:
- encode a numbered PNG sequence into one H.264 stream
- turn a single still (or a recording) into a fixed-size, fixed-fps clip
- concatenate clips through a concat manifest, optionally muxing audio

The binary is resolved once per export (``locate_encoder``) and passed in
explicitly as an ``EncoderLocator``.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from project_paths import FRAME_PATTERN
from tv_common import EncoderError, EncoderNotFoundError, ValidationError

logger = logging.getLogger(__name__)

STDERR_TAIL_CHARS = 1500


@dataclass(frozen=True)
class EncoderLocator:
    """Resolved ffmpeg binary and where it came from."""
    path: str
    source: str


def _bundled_ffmpeg() -> Optional[str]:
    try:
        import imageio_ffmpeg
    except ImportError:
        return None
    try:
        exe = imageio_ffmpeg.get_ffmpeg_exe()
    except RuntimeError:
        return None
    if exe and Path(exe).exists():
        return exe
    return None


def locate_encoder() -> EncoderLocator:
    """
    Find ffmpeg.

    Tries in order:
    1. imageio-ffmpeg bundled binary (if the package is installed)
    2. ffmpeg on PATH

    Raises:
        EncoderNotFoundError: neither is available
    """
    bundled = _bundled_ffmpeg()
    if bundled:
        return EncoderLocator(path=bundled, source="imageio-ffmpeg")

    system = shutil.which("ffmpeg")
    if system:
        return EncoderLocator(path=system, source="system")

    raise EncoderNotFoundError(
        "ffmpeg not found. Install system ffmpeg or 'pip install imageio-ffmpeg'"
    )


def run_ffmpeg(locator: EncoderLocator, args: Sequence[str], label: str, timeout: Optional[float] = None) -> None:
    """Run ffmpeg with ``args``; non-zero exit raises EncoderError with the stderr tail."""
    cmd = [locator.path, *[str(a) for a in args]]
    logger.debug(f"ffmpeg {label}: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, errors="replace", timeout=timeout
        )
    except FileNotFoundError as e:
        raise EncoderNotFoundError(f"ffmpeg not runnable at {locator.path}: {e}") from e

    if result.returncode != 0:
        tail = (result.stderr or "")[-STDERR_TAIL_CHARS:]
        raise EncoderError(label, result.returncode, tail)


def _fit_filter(resolution: Tuple[int, int]) -> str:
    """Scale into the frame keeping aspect ratio, pad the rest (letterbox)."""
    w, h = resolution
    return (
        f"scale={w}:{h}:force_original_aspect_ratio=decrease,"
        f"pad={w}:{h}:(ow-iw)/2:(oh-ih)/2"
    )


def encode_image_sequence(
    locator: EncoderLocator,
    frames_dir: Path,
    fps: float,
    output: Path,
    resolution: Optional[Tuple[int, int]] = None,
    pattern: str = FRAME_PATTERN,
) -> Path:
    """Encode frame-000000.png, frame-000001.png, ... at ``fps`` into one stream."""
    args = [
        "-y",
        "-framerate", fps,
        "-start_number", 0,
        "-i", Path(frames_dir) / pattern,
        "-c:v", "libx264",
        "-preset", "medium",
        "-crf", "20",
        "-pix_fmt", "yuv420p",
        "-r", fps,
    ]
    if resolution:
        args += ["-vf", _fit_filter(resolution)]
    args.append(output)
    run_ffmpeg(locator, args, "frames→video")
    return Path(output)


def image_to_clip(
    locator: EncoderLocator,
    image: Path,
    duration: float,
    fps: float,
    resolution: Tuple[int, int],
    output: Path,
) -> Path:
    """Loop a still image for ``duration`` seconds."""
    if duration <= 0:
        raise ValidationError(f"Clip duration must be positive, got {duration}")
    run_ffmpeg(locator, [
        "-y",
        "-loop", "1",
        "-i", image,
        "-t", duration,
        "-c:v", "libx264",
        "-preset", "ultrafast",
        "-pix_fmt", "yuv420p",
        "-r", fps,
        "-vf", _fit_filter(resolution),
        output,
    ], "img→clip")
    return Path(output)


def normalize_clip(
    locator: EncoderLocator,
    source: Path,
    fps: float,
    resolution: Tuple[int, int],
    output: Path,
) -> Path:
    """Re-encode a recording to the deck's size, fps and codec, audio dropped."""
    run_ffmpeg(locator, [
        "-y",
        "-i", source,
        "-c:v", "libx264",
        "-preset", "fast",
        "-crf", "22",
        "-pix_fmt", "yuv420p",
        "-r", fps,
        "-vf", _fit_filter(resolution),
        "-an",
        output,
    ], "normalize")
    return Path(output)


def _manifest_entry(path: Union[str, Path]) -> str:
    posix = str(path).replace("\\", "/").replace("'", "'\\''")
    return f"file '{posix}'"


def write_concat_manifest(clips: Sequence[Path], manifest: Path) -> Path:
    """One ``file '<path>'`` line per clip, in playback order."""
    manifest = Path(manifest)
    manifest.parent.mkdir(parents=True, exist_ok=True)
    manifest.write_text("\n".join(_manifest_entry(c) for c in clips) + "\n", encoding="utf-8")
    return manifest


def concat_clips(
    locator: EncoderLocator,
    clips: Sequence[Path],
    output: Path,
    manifest: Path,
    audio: Optional[Path] = None,
) -> Path:
    """
    Concatenate same-codec clips in order.

    Args:
        clips: Clip files, in playback order
        output: Destination video
        manifest: Where to write the concat list
        audio: Optional background track; padded with silence and cut to the
            video's length

    Raises:
        ValidationError: ``clips`` is empty (no process is started)
        EncoderError: ffmpeg failed
    """
    clip_paths: List[Path] = [Path(c) for c in clips]
    if not clip_paths:
        raise ValidationError("No clips to concatenate")

    write_concat_manifest(clip_paths, manifest)

    args = ["-y", "-f", "concat", "-safe", "0", "-i", manifest]
    if audio:
        args += [
            "-i", audio,
            "-map", "0:v:0",
            "-filter_complex", "[1:a]apad[a]",
            "-map", "[a]",
            "-c:v", "copy",
            "-c:a", "aac",
            "-b:a", "128k",
            "-shortest",
        ]
    else:
        args += ["-c", "copy"]
    args += ["-movflags", "+faststart", output]

    run_ffmpeg(locator, args, "concat")
    return Path(output)
