from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ExportPaths:
    output: Path
    tmp_dir: Path

    @property
    def frames_dir(self) -> Path:
        return self.tmp_dir / "frames"

    @property
    def clips_dir(self) -> Path:
        return self.tmp_dir / "clips"

    @property
    def recordings_dir(self) -> Path:
        return self.tmp_dir / "recordings"

    @property
    def concat_manifest(self) -> Path:
        return self.tmp_dir / "concat.txt"

    @property
    def joined_video(self) -> Path:
        return self.tmp_dir / "final.mp4"

    def frame_path(self, index: int) -> Path:
        return self.frames_dir / frame_filename(index)

    def clip_path(self, index: int) -> Path:
        return self.clips_dir / f"clip-{index:03d}.mp4"

    def still_path(self, index: int) -> Path:
        return self.clips_dir / f"still-{index:03d}.png"

    def recording_dir(self, index: int) -> Path:
        return self.recordings_dir / f"rec-{index:03d}"


FRAME_PATTERN = "frame-%06d.png"


def frame_filename(index: int) -> str:
    return FRAME_PATTERN % index


def export_paths(output: Path) -> ExportPaths:
    """Hidden temp dir lives beside the final video, one per output name."""
    output = Path(output)
    return ExportPaths(
        output=output,
        tmp_dir=output.parent / f".{output.stem}.video-tmp",
    )


def prepare_tmp_dir(paths: ExportPaths) -> None:
    """Clear leftovers from an interrupted run and recreate the layout."""
    if paths.tmp_dir.exists():
        shutil.rmtree(paths.tmp_dir)
    for d in (paths.frames_dir, paths.clips_dir, paths.recordings_dir):
        d.mkdir(parents=True, exist_ok=True)


def remove_tmp_dir(paths: ExportPaths) -> None:
    shutil.rmtree(paths.tmp_dir, ignore_errors=True)
