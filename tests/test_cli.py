import json

import pytest

import tv
from tv_commands import utils, video


def test_slides_parse_prints_json(tutorial_dir, capsys):
    code = tv.main(["slides", "parse", "--input", str(tutorial_dir / "tutorial.md")])

    result = json.loads(capsys.readouterr().out)
    assert code == 0
    assert result["success"]
    assert result["count"] == len(result["slides"]) == 7
    assert result["slides"][0]["items"] == ["1. Primeros pasos", "2. Facturas"]


def test_slides_parse_missing_file(tmp_path, capsys):
    code = tv.main(["slides", "parse", "--input", str(tmp_path / "nope.md")])

    result = json.loads(capsys.readouterr().out)
    assert code == 1
    assert result["code"] == "FILE_NOT_FOUND"
    assert result["error"].startswith("slides parse:")


def test_video_plan_command(tutorial_dir, capsys):
    config = tutorial_dir / "tutorial.config.json"
    config.write_text(json.dumps({"input": "tutorial.md", "output": "tutorial.pdf"}), encoding="utf-8")

    code = tv.main(["video", "plan", "--config", str(config), "--mode", "slides-only"])

    result = json.loads(capsys.readouterr().out)
    assert code == 0
    assert result["mode"] == "slides-only"
    assert "frames" not in result


def test_video_export_reports_config_errors(tmp_path, capsys):
    code = tv.main(["video", "export", "--config", str(tmp_path / "missing.json")])

    result = json.loads(capsys.readouterr().out)
    assert code == 1
    assert result["code"] == "CONFIG"


def test_no_command_prints_help(capsys):
    assert tv.main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_commands_register_their_subparsers():
    parser = tv.build_parser()
    args = parser.parse_args(["video", "export", "--mode", "hybrid"])
    assert args.func is video.cmd_export
    assert args.mode == "hybrid"

    args = parser.parse_args(["status"])
    assert args.func is utils.cmd_status

    with pytest.raises(SystemExit):
        parser.parse_args(["video", "export", "--mode", "gif"])
