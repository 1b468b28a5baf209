"""
Live screen recordings for hybrid videos.

Each recording scene gets its own browser context with Playwright video
recording enabled. Playwright does not capture the OS cursor, so an in-page
cursor + click ripple is injected on every new document.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

from playwright.sync_api import Error as PlaywrightError

from project_paths import ExportPaths
from tv_common import RecordingError

logger = logging.getLogger(__name__)

GOTO_TIMEOUT_MS = 15000
SETTLE_MS = 500


CURSOR_OVERLAY_SCRIPT = r"""
(() => {
  if (window.__tvCursorAdded) return;
  window.__tvCursorAdded = true;

  const style = document.createElement('style');
  style.textContent = `
    * { cursor: none !important; }
    #__tv_cursor {
      position: fixed;
      top: 0; left: 0;
      width: 20px; height: 20px;
      pointer-events: none;
      z-index: 2147483647;
      transform: translate(-2px, -2px);
      transition: top 0.08s ease-out, left 0.08s ease-out;
    }
    #__tv_cursor svg { filter: drop-shadow(1px 2px 2px rgba(0,0,0,0.35)); }
    .__tv_ripple {
      position: fixed;
      pointer-events: none;
      z-index: 2147483646;
      width: 40px; height: 40px;
      border-radius: 50%;
      background: rgba(59, 130, 246, 0.35);
      transform: translate(-50%, -50%) scale(0.3);
      animation: __tv_ripple 0.5s ease-out forwards;
    }
    @keyframes __tv_ripple {
      0%   { transform: translate(-50%, -50%) scale(0.3); opacity: 1; }
      100% { transform: translate(-50%, -50%) scale(2.5); opacity: 0; }
    }
  `;

  const cursor = document.createElement('div');
  cursor.id = '__tv_cursor';
  cursor.innerHTML = '<svg width="20" height="20" viewBox="0 0 24 24" fill="none"><path d="M5.5 3.21V20.8c0 .45.54.67.85.35l4.86-4.86a.5.5 0 0 1 .35-.15h6.87a.5.5 0 0 0 .35-.85L6.35 2.85a.5.5 0 0 0-.85.36Z" fill="#fff" stroke="#000" stroke-width="1.5"/></svg>';
  cursor.style.left = `${Math.round(window.innerWidth / 2)}px`;
  cursor.style.top = `${Math.round(window.innerHeight / 2)}px`;

  const mount = () => {
    if (!style.isConnected) (document.head || document.documentElement).appendChild(style);
    if (!cursor.isConnected) (document.body || document.documentElement).appendChild(cursor);
  };
  if (document.readyState === 'loading') {
    document.addEventListener('DOMContentLoaded', mount, { once: true });
  } else {
    mount();
  }

  document.addEventListener('mousemove', (e) => {
    cursor.style.left = `${e.clientX}px`;
    cursor.style.top = `${e.clientY}px`;
  }, { passive: true, capture: true });

  document.addEventListener('mousedown', (e) => {
    if (!document.body) return;
    const ripple = document.createElement('div');
    ripple.className = '__tv_ripple';
    ripple.style.left = `${e.clientX}px`;
    ripple.style.top = `${e.clientY}px`;
    document.body.appendChild(ripple);
    setTimeout(() => ripple.remove(), 600);
  }, true);
})();
"""


def _find_recording(video_dir: Path) -> Optional[Path]:
    candidates = sorted(video_dir.glob("*.webm"))
    return candidates[0] if candidates else None


def record_scene(
    browser,
    scene,
    paths: ExportPaths,
    index: int,
    resolution: Tuple[int, int],
    app_url: str,
    cursor: bool = True,
) -> Path:
    """
    Record one scene into ``paths.recording_dir(index)``.

    Returns the path of the WebM file Playwright wrote.

    Raises:
        RecordingError: the routine failed or no recording was produced
    """
    video_dir = paths.recording_dir(index)
    video_dir.mkdir(parents=True, exist_ok=True)
    size = {"width": resolution[0], "height": resolution[1]}

    context = browser.new_context(
        record_video_dir=str(video_dir),
        record_video_size=size,
        viewport=size,
    )
    video_path: Optional[Path] = None
    routine_error: Optional[RecordingError] = None
    try:
        if cursor:
            context.add_init_script(CURSOR_OVERLAY_SCRIPT)
        page = context.new_page()

        url = getattr(scene, "url", None) or app_url
        try:
            page.goto(url, wait_until="networkidle", timeout=GOTO_TIMEOUT_MS)
        except PlaywrightError as e:
            # The routine may navigate on its own; keep recording.
            logger.warning(f"⚠️  Could not open {url}: {e}")
        page.wait_for_timeout(SETTLE_MS)

        try:
            scene.routine.run(page)
        except RecordingError as e:
            routine_error = e
        except Exception as e:
            routine_error = RecordingError(f"Scene '{scene.label}' failed: {e}")
            routine_error.__cause__ = e

        if page.video:
            video_path = Path(page.video.path())
    finally:
        # Closing the context flushes the video file to disk.
        context.close()

    if routine_error is not None:
        raise routine_error

    if video_path is None or not video_path.exists():
        video_path = _find_recording(video_dir)
    if video_path is None:
        raise RecordingError(f"No recording produced for scene '{scene.label}'")
    return video_path
