from pathlib import Path

import pytest
from playwright.sync_api import Error as PlaywrightError

from project_paths import export_paths, prepare_tmp_dir
from tv_common import RecordingError
from tv_recording import CURSOR_OVERLAY_SCRIPT, record_scene
from tv_scenes import ActionListRoutine, CallableRoutine, RecordingRoutine, RecordingScene


class FakeVideo:
    def __init__(self, path):
        self._path = path

    def path(self):
        return str(self._path)


class FakePage:
    def __init__(self, video_dir, goto_fails=False):
        self.video_dir = video_dir
        self.goto_fails = goto_fails
        self.visited = []
        self.video = FakeVideo(video_dir / "page@abc.webm")

    def goto(self, url, wait_until=None, timeout=None):
        self.visited.append(url)
        if self.goto_fails:
            raise PlaywrightError("net::ERR_CONNECTION_REFUSED")

    def wait_for_timeout(self, ms):
        pass


class FakeContext:
    def __init__(self, options, goto_fails=False):
        self.options = options
        self.init_scripts = []
        self.closed = False
        self.page = FakePage(Path(options["record_video_dir"]), goto_fails)

    def add_init_script(self, script):
        self.init_scripts.append(script)

    def new_page(self):
        return self.page

    def close(self):
        # Playwright writes the video file when the context closes.
        self.page.video_dir.mkdir(parents=True, exist_ok=True)
        (self.page.video_dir / "page@abc.webm").write_bytes(b"webm")
        self.closed = True


class FakeBrowser:
    def __init__(self, goto_fails=False):
        self.contexts = []
        self.goto_fails = goto_fails

    def new_context(self, **options):
        context = FakeContext(options, self.goto_fails)
        self.contexts.append(context)
        return context


@pytest.fixture
def paths(tmp_path):
    p = export_paths(tmp_path / "tutorial.mp4")
    prepare_tmp_dir(p)
    return p


def test_record_scene_returns_video(paths):
    browser = FakeBrowser()
    scene = RecordingScene(name="login", routine=ActionListRoutine([]))

    video = record_scene(browser, scene, paths, 3, (1280, 720), "http://localhost:5173")

    context = browser.contexts[0]
    assert context.options["record_video_dir"] == str(paths.recording_dir(3))
    assert context.options["record_video_size"] == {"width": 1280, "height": 720}
    assert context.options["viewport"] == {"width": 1280, "height": 720}
    assert context.init_scripts == [CURSOR_OVERLAY_SCRIPT]
    assert context.page.visited == ["http://localhost:5173"]
    assert context.closed
    assert video == paths.recording_dir(3) / "page@abc.webm"


def test_scene_url_and_no_cursor(paths):
    browser = FakeBrowser()
    scene = RecordingScene(name="x", routine=ActionListRoutine([]), url="http://app.local/invoices")

    record_scene(browser, scene, paths, 0, (640, 360), "http://localhost:5173", cursor=False)

    context = browser.contexts[0]
    assert context.init_scripts == []
    assert context.page.visited == ["http://app.local/invoices"]


def test_unreachable_app_still_runs_routine(paths):
    seen = []
    scene = RecordingScene(name="x", routine=CallableRoutine(seen.append))

    record_scene(FakeBrowser(goto_fails=True), scene, paths, 0, (640, 360), "http://localhost:5173")

    assert len(seen) == 1


def test_routine_failure_closes_context_and_raises(paths):
    browser = FakeBrowser()

    def broken(page):
        raise RuntimeError("selector not found")

    scene = RecordingScene(name="x", routine=CallableRoutine(broken))

    with pytest.raises(RecordingError):
        record_scene(browser, scene, paths, 0, (640, 360), "http://localhost:5173")
    assert browser.contexts[0].closed


def test_unexpected_routine_error_becomes_recording_error(paths):
    class Flaky(RecordingRoutine):
        def run(self, page):
            raise RuntimeError("modal never closed")

    browser = FakeBrowser()
    scene = RecordingScene(name="flaky", routine=Flaky())

    with pytest.raises(RecordingError) as exc:
        record_scene(browser, scene, paths, 0, (640, 360), "http://localhost:5173")
    assert "modal never closed" in str(exc.value)
    assert isinstance(exc.value.__cause__, RuntimeError)
    assert browser.contexts[0].closed
