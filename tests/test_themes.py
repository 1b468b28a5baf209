import logging

import pytest

from tv_common import ConfigError
from tv_themes import (
    BUILTIN_THEMES,
    BuiltinThemeRegistry,
    FileStylesheetLoader,
    is_stylesheet_path,
    resolve_stylesheet,
)


def test_builtin_lookup_appends_video_suffix():
    registry = BuiltinThemeRegistry()

    css = registry.resolve("shadcn-dark")

    assert css == BUILTIN_THEMES["shadcn-dark-video"]
    assert registry.resolve("shadcn-dark-video") == css
    assert ".slide-cover" in css


def test_unknown_builtin_falls_back_with_warning(caplog):
    with caplog.at_level(logging.WARNING):
        css = BuiltinThemeRegistry().resolve("neon")

    assert css == BUILTIN_THEMES["shadcn-dark-video"]
    assert "neon-video" in caplog.text


def test_custom_registry():
    registry = BuiltinThemeRegistry({"paper-video": ".slide{}"})
    assert registry.names() == ["paper-video"]
    assert registry.resolve("paper") == ".slide{}"


def test_file_loader_relative_to_base(tmp_path):
    (tmp_path / "brand.css").write_text(".slide { color: teal; }", encoding="utf-8")

    assert FileStylesheetLoader(tmp_path).resolve("brand.css") == ".slide { color: teal; }"


def test_file_loader_missing(tmp_path):
    with pytest.raises(ConfigError):
        FileStylesheetLoader(tmp_path).resolve("missing.css")


def test_resolve_stylesheet_dispatch(tmp_path):
    (tmp_path / "brand.CSS").write_text("/* brand */", encoding="utf-8")

    assert resolve_stylesheet("brand.CSS", tmp_path) == "/* brand */"
    assert resolve_stylesheet(None) == BUILTIN_THEMES["shadcn-dark-video"]
    assert is_stylesheet_path("theme.css")
    assert not is_stylesheet_path("shadcn-dark")
    assert not is_stylesheet_path(None)
