"""
Shared fixtures for tutorial-video tests.

No test launches Chromium or ffmpeg:
- FakeCamera writes small PNG-like files instead of screenshots
- fake_ffmpeg replaces subprocess.run and creates each command's output file
"""

import subprocess
from pathlib import Path

import pytest

from tv_encoder import EncoderLocator

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"

# ============================================================
# BROWSER FAKES
# ============================================================


class FakeCamera:
    """Stands in for SlideCamera; records every HTML document it captures."""

    def __init__(self, resolution=(1920, 1080), headless=True, warmup_ms=0):
        self.resolution = resolution
        self.headless = headless
        self.captured = []
        self.browser = object()
        self.opened = False
        self.closed = False

    def __enter__(self):
        self.opened = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.closed = True

    def capture(self, html, path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(PNG_MAGIC + str(len(self.captured)).encode())
        self.captured.append(html)
        return path


@pytest.fixture
def camera_factory():
    """Factory with the SlideCamera signature; keeps the cameras it built."""
    cameras = []

    def factory(resolution, headless=True):
        camera = FakeCamera(resolution, headless)
        cameras.append(camera)
        return camera

    factory.cameras = cameras
    return factory


# ============================================================
# FFMPEG FAKE
# ============================================================


class FakeFFmpeg:
    """Records ffmpeg commands; fails any command whose label matches ``fail_on``."""

    def __init__(self):
        self.calls = []
        self.fail_on = None
        self.duration = "00:00:19.00"

    def __call__(self, cmd, **kwargs):
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)

        # Duration lookup: `ffmpeg -i file`
        if len(cmd) == 3 and cmd[1] == "-i":
            return subprocess.CompletedProcess(
                cmd, 1, "", f"  Duration: {self.duration}, start: 0.000000, bitrate: 1 kb/s\n"
            )

        if self.fail_on and self.fail_on in cmd:
            return subprocess.CompletedProcess(cmd, 1, "", "x" * 5000 + "Conversion failed!")

        output = Path(cmd[-1])
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(b"\x00\x00\x00\x18ftypmp42")
        return subprocess.CompletedProcess(cmd, 0, "", "")

    def commands_with(self, flag):
        return [c for c in self.calls if flag in c]


@pytest.fixture
def fake_ffmpeg(monkeypatch):
    fake = FakeFFmpeg()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def locator():
    return EncoderLocator(path="/opt/ffmpeg/bin/ffmpeg", source="system")


# ============================================================
# DOCUMENT FIXTURES
# ============================================================

SAMPLE_TUTORIAL = """# Manual de Usuario

## Guía completa del sistema

## 📑 Índice

- [1. Primeros pasos](#1)
- [2. Facturas](#2)

### Esto tampoco cuenta

## 1. Primeros pasos

Texto suelto sin subsección.

### 1.1 Iniciar sesión

**Versión:** 1.0

Abra el navegador y entre con su **usuario**.

1. Escriba el usuario
2. Pulse `Entrar`

---

### 1.2 Menú principal

- Facturas
- Clientes

## 2. Facturas

### 2.1 Nueva factura

![Formulario](form.png)
![Detalle](detail.png)
![Perdida](missing.png)

Complete el formulario.
"""


@pytest.fixture
def tutorial_dir(tmp_path):
    """A tutorial with an SS/ images folder holding two screenshots."""
    images = tmp_path / "SS"
    images.mkdir()
    (images / "form.png").write_bytes(PNG_MAGIC + b"form")
    (images / "detail.png").write_bytes(PNG_MAGIC + b"detail")
    (tmp_path / "tutorial.md").write_text(SAMPLE_TUTORIAL, encoding="utf-8")
    return tmp_path
