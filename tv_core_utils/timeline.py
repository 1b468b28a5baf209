"""
Timing utilities for tutorial-video.

Pure functions: given a duration and a frame rate they return the exact
per-frame animation phases. Nothing here touches the browser or ffmpeg,
so the same schedule is reproduced on every run.

Per-slide schedule (total = ceil(duration * fps)):
- first 20%: ease-out-cubic entry from 0 towards 1
- 20%..90%: hold at 1.0
- last 10%: linear dim from 1.0 down to 0.85
"""

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from .slides import Slide


ENTRY_FRACTION = 0.2
HOLD_END_FRACTION = 0.9
DIM_DEPTH = 0.15

TRANSITION_CROSSFADE = "crossfade"
TRANSITION_FADE_BLACK = "fade-black"
TRANSITION_CUT = "cut"
TRANSITIONS = (TRANSITION_CROSSFADE, TRANSITION_FADE_BLACK, TRANSITION_CUT)


@dataclass(frozen=True)
class Frame:
    """One rasterized still: ``slide`` is None for a solid black frame."""
    index: int
    slide: Optional[Slide]
    phase: float
    position: int = 0
    transition: bool = False


def frame_count(duration: float, fps: float) -> int:
    if duration <= 0 or fps <= 0:
        return 0
    # Rounding first keeps 0.1 * 30 at 3 frames instead of 4.
    return math.ceil(round(duration * fps, 6))


def ease_out_cubic(t: float) -> float:
    return 1 - (1 - t) ** 3


def ease_in_out_quad(t: float) -> float:
    if t < 0.5:
        return 2 * t * t
    return 1 - (-2 * t + 2) ** 2 / 2


def frames_for(duration: float, fps: float) -> List[float]:
    """Animation phase for every frame of a slide."""
    total = frame_count(duration, fps)
    entry = int(total * ENTRY_FRACTION)
    hold_end = int(total * HOLD_END_FRACTION)
    dim_frames = total - hold_end

    phases = []
    for i in range(total):
        if i < entry:
            phases.append(ease_out_cubic(i / entry))
        elif i < hold_end:
            phases.append(1.0)
        else:
            t = (i - hold_end + 1) / dim_frames
            phases.append(1.0 - t * DIM_DEPTH)
    return phases


def transition_frames(duration: float, fps: float, kind: str = TRANSITION_CROSSFADE) -> List[float]:
    """
    Phases of the incoming slide during a transition.

    Crossfade eases the incoming slide from 0 to 1; fade-black yields the
    same number of frames (rendered black, the phase is unused); cut yields
    none.
    """
    if kind == TRANSITION_CUT:
        return []
    total = frame_count(duration, fps)
    if kind == TRANSITION_FADE_BLACK:
        return [0.0] * total
    if total == 1:
        return [1.0]
    return [ease_in_out_quad(i / (total - 1)) for i in range(total)]


def estimate_total_duration(
    durations: Sequence[float],
    transition_duration: float,
    transition: str = TRANSITION_CROSSFADE,
) -> float:
    """Sum of slide durations plus one transition between each pair."""
    if not durations:
        return 0.0
    gaps = len(durations) - 1
    per_gap = 0.0 if transition == TRANSITION_CUT else transition_duration
    return float(sum(durations)) + gaps * per_gap


def plan_frames(
    slides: Sequence[Slide],
    fps: float,
    transition: str = TRANSITION_CROSSFADE,
    transition_duration: float = 0.5,
) -> Iterator[Frame]:
    """
    Yield every frame of the deck in order with gapless indices.

    After each slide except the last, transition frames for the *next*
    slide follow (black frames for fade-black, nothing for cut).
    """
    index = 0
    for position, slide in enumerate(slides):
        for phase in frames_for(slide.duration, fps):
            yield Frame(index=index, slide=slide, phase=phase, position=position)
            index += 1

        if position == len(slides) - 1:
            continue
        incoming = slides[position + 1]
        for phase in transition_frames(transition_duration, fps, transition):
            shown = None if transition == TRANSITION_FADE_BLACK else incoming
            yield Frame(index=index, slide=shown, phase=phase, position=position + 1, transition=True)
            index += 1


def total_frames(
    slides: Sequence[Slide],
    fps: float,
    transition: str = TRANSITION_CROSSFADE,
    transition_duration: float = 0.5,
) -> int:
    count = sum(frame_count(s.duration, fps) for s in slides)
    if len(slides) > 1:
        count += (len(slides) - 1) * len(transition_frames(transition_duration, fps, transition))
    return count
