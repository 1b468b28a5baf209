import logging

import pytest

from project_paths import export_paths, prepare_tmp_dir
from tv_capture import CaptureProgress, FrameCaptureDriver, capture_still
from tv_core_utils.slides import ClosingSlide, ContentSlide, SectionTitleSlide, TocSlide
from tv_core_utils.timeline import TRANSITION_CROSSFADE, TRANSITION_CUT, TRANSITION_FADE_BLACK, total_frames

from conftest import FakeCamera


@pytest.fixture
def paths(tmp_path):
    p = export_paths(tmp_path / "out" / "tutorial.mp4")
    prepare_tmp_dir(p)
    return p


def _deck():
    return [
        SectionTitleSlide(title="1. Intro", section_number="1", duration=1),
        ContentSlide(title="1.1 Uno", prose="Hola", duration=1),
        ClosingSlide(title="ACME", subtitle="Manual", duration=1),
    ]


def _frame_names(paths):
    return sorted(p.name for p in paths.frames_dir.iterdir())


@pytest.mark.parametrize("transition", [TRANSITION_CROSSFADE, TRANSITION_FADE_BLACK, TRANSITION_CUT])
def test_every_frame_written_without_gaps(paths, transition):
    slides = _deck()
    camera = FakeCamera((640, 360))
    driver = FrameCaptureDriver(camera, paths, "", 10, transition=transition, transition_duration=0.5)

    written = driver.run(slides)

    expected = total_frames(slides, 10, transition, 0.5)
    assert written == expected
    assert _frame_names(paths) == [f"frame-{i:06d}.png" for i in range(expected)]


def test_transition_frames_are_counted_in_log(paths, caplog):
    caplog.set_level(logging.INFO, logger="tv_capture")
    driver = FrameCaptureDriver(FakeCamera((640, 360)), paths, "", 10, transition=TRANSITION_FADE_BLACK, transition_duration=0.5)

    driver.run(_deck())

    assert "Captured 40 frames (10 in transitions)" in caplog.text


def test_hold_frames_are_copied_not_recaptured(paths):
    camera = FakeCamera((640, 360))
    driver = FrameCaptureDriver(camera, paths, "", 30, transition=TRANSITION_CUT)

    written = driver.run([TocSlide(title="Índice", items=("1. A",), duration=2)])

    assert written == 60
    # 12 entry frames + 1 hold + 6 dim
    assert len(camera.captured) == 19
    hold = [paths.frame_path(i).read_bytes() for i in range(12, 54)]
    assert len(set(hold)) == 1


def test_fade_black_captured_once(paths):
    camera = FakeCamera((640, 360))
    driver = FrameCaptureDriver(camera, paths, "", 10, transition=TRANSITION_FADE_BLACK, transition_duration=0.5)

    driver.run(_deck())

    black = [html for html in camera.captured if "background: #000" in html]
    assert len(black) == 1
    black_frames = {paths.frame_path(i).read_bytes() for i in list(range(10, 15)) + list(range(25, 30))}
    assert len(black_frames) == 1


def test_progress_reports_completion(paths):
    events = []
    driver = FrameCaptureDriver(
        FakeCamera((640, 360)), paths, "", 10,
        transition=TRANSITION_CROSSFADE, transition_duration=0.5,
        progress=events.append, progress_every=7,
    )

    written = driver.run(_deck())

    assert all(isinstance(e, CaptureProgress) for e in events)
    assert [e.frames_written for e in events] == sorted(e.frames_written for e in events)
    last = events[-1]
    assert last.percent == 100
    assert last.frames_written == written == last.total_frames
    assert last.slide_position == 2
    assert last.slide_count == 3
    assert last.slide_title == "ACME"


def test_stylesheet_and_lang_reach_the_page(paths):
    camera = FakeCamera((640, 360))
    FrameCaptureDriver(camera, paths, ".marker-css{}", 10, transition=TRANSITION_CUT, lang="en").run(
        [ClosingSlide(title="ACME", duration=0.1)]
    )

    assert ".marker-css{}" in camera.captured[0]
    assert '<html lang="en">' in camera.captured[0]
    assert "Thank you!" in camera.captured[0]


def test_capture_still_is_fully_revealed(tmp_path):
    camera = FakeCamera((640, 360))
    path = capture_still(camera, ClosingSlide(title="ACME"), tmp_path / "still.png", "")

    assert path.exists()
    assert "opacity:1.0000" in camera.captured[0]
