"""
Shared utilities for tv CLI.

Error classification, structured responses, path handling and media probing.
"""

import re
import subprocess
from pathlib import Path
from typing import Optional


# Error classification
class TVError(Exception):
    code = "UNKNOWN"
    suggestion = "Check the error message for details."


class ValidationError(TVError):
    """Input validation errors."""
    code = "VALIDATION"
    suggestion = "Check the input parameters and file formats."


class ConfigError(TVError):
    """Configuration/setup errors."""
    code = "CONFIG"
    suggestion = "Check tutorial.config.json and the paths it references."


class EncoderNotFoundError(ConfigError):
    """No usable ffmpeg binary."""
    code = "ENCODER_NOT_FOUND"
    suggestion = "Install system ffmpeg or 'pip install imageio-ffmpeg'."


class EncoderError(TVError):
    """ffmpeg exited with a non-zero status."""
    code = "ENCODER"
    suggestion = "Inspect the ffmpeg output above; the temp directory was kept for diagnosis."

    def __init__(self, label: str, returncode: int, stderr_tail: str = ""):
        super().__init__(f"FFmpeg {label} failed (code {returncode}):\n{stderr_tail}")
        self.label = label
        self.returncode = returncode
        self.stderr_tail = stderr_tail


class RenderEngineError(TVError):
    """Headless browser could not be started or stopped responding."""
    code = "RENDER_ENGINE"
    suggestion = "Install the browser with: 'playwright install chromium'."


class RecordingError(TVError):
    """A recording routine failed while driving the live app."""
    code = "RECORDING"
    suggestion = "Check the scene actions and that the app URL is reachable."


def classify_error(e: Exception) -> str:
    """Classify error for structured output."""
    if isinstance(e, TVError):
        return e.code
    if isinstance(e, FileNotFoundError):
        return "FILE_NOT_FOUND"

    error_str = str(e).lower()
    if "timeout" in error_str or "connection" in error_str:
        return "TRANSIENT"
    elif "not found" in error_str or "missing" in error_str:
        return "FILE_NOT_FOUND"
    elif "invalid" in error_str or "format" in error_str:
        return "VALIDATION"
    else:
        return "UNKNOWN"


def get_suggestion(e: Exception) -> str:
    """Get actionable suggestion for error."""
    if isinstance(e, TVError):
        return e.suggestion

    suggestions = {
        "TRANSIENT": "This may be a temporary issue. Try again in a few seconds.",
        "FILE_NOT_FOUND": "Check that the input file path is correct and the file exists.",
        "VALIDATION": "Check the input parameters and file formats.",
        "UNKNOWN": "Check the error message for details."
    }
    return suggestions.get(classify_error(e), suggestions["UNKNOWN"])


def error_response(e: Exception, context: str = "") -> dict:
    """
    Create standardized error response dict from exception.

    Args:
        e: The exception that was raised
        context: Optional context about what operation failed

    Returns:
        Standardized error dict with success, error, code, suggestion
    """
    error_msg = f"{context}: {str(e)}" if context else str(e)
    return {
        "success": False,
        "error": error_msg,
        "code": classify_error(e),
        "suggestion": get_suggestion(e)
    }


def success_response(**kwargs) -> dict:
    """Create standardized success response dict."""
    return {"success": True, **kwargs}


# Path handling
def resolve_relative(base_dir: Path, value: Optional[str]) -> Optional[Path]:
    """Resolve a config-relative path; None stays None."""
    if not value:
        return None
    p = Path(value).expanduser()
    if not p.is_absolute():
        p = base_dir / p
    return p.resolve()


# Media utilities
_DURATION_RE = re.compile(r"Duration:\s*(\d+):(\d+):(\d+(?:\.\d+)?)")


def get_duration(ffmpeg: str, file_path: Path) -> float:
    """Get duration of a media file by parsing `ffmpeg -i` stderr.

    Returns 0.0 when the duration cannot be determined.
    """
    try:
        result = subprocess.run(
            [ffmpeg, "-i", str(file_path)],
            capture_output=True, text=True, timeout=10
        )
    except (OSError, subprocess.TimeoutExpired):
        return 0.0

    match = _DURATION_RE.search((result.stderr or "") + "\n" + (result.stdout or ""))
    if not match:
        return 0.0
    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def format_size_mb(size_bytes: int) -> str:
    return f"{size_bytes / (1024 * 1024):.1f} MB"
