from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from pathbot.cli import app


def _write_course(tmp_path: Path) -> Path:
    path = tmp_path / "course.json"
    path.write_text(
        json.dumps({"length": 400.0, "speed": 5.0, "obstacles": [{"x": 100.0}, {"x": 300.0}]}),
        encoding="utf-8",
    )
    return path


def test_train_saves_learned_timeline(tmp_path: Path) -> None:
    course = _write_course(tmp_path)
    out = tmp_path / "learned.json"

    result = CliRunner().invoke(app, ["train", str(course), "--out", str(out), "--base-dir", str(tmp_path / "rt")])

    assert result.exit_code == 0, result.output
    assert "course cleared after 5 attempts" in result.output
    assert "Bot: OFF" in result.output
    saved = json.loads(out.read_text(encoding="utf-8"))
    assert saved["v"] == 1
    assert [action["x"] for action in saved["actions"]] == [75.0, 275.0]
    assert (tmp_path / "rt" / "notifications.log").is_file()


def test_train_reports_failure_exit_code(tmp_path: Path) -> None:
    course = tmp_path / "hard.json"
    course.write_text(
        json.dumps({"length": 300.0, "obstacles": [{"x": 200.0, "lead": 30.0, "window": 10.0}]}),
        encoding="utf-8",
    )

    result = CliRunner().invoke(app, ["train", str(course), "--attempts", "12", "--out", str(tmp_path / "s.json")])

    assert result.exit_code == 1
    assert "course not cleared after 12 attempts" in result.output


def test_play_replays_a_trained_save(tmp_path: Path) -> None:
    course = _write_course(tmp_path)
    out = tmp_path / "learned.json"
    runner = CliRunner()
    assert runner.invoke(app, ["train", str(course), "--out", str(out)]).exit_code == 0

    result = runner.invoke(app, ["play", str(course), str(out)])

    assert result.exit_code == 0, result.output
    assert "cleared in 81 ticks with 2 presses" in result.output


def test_play_with_missing_save_fails(tmp_path: Path) -> None:
    course = _write_course(tmp_path)

    result = CliRunner().invoke(app, ["play", str(course), str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    assert "No save file found" in result.output


def test_inspect_and_migrate_legacy(tmp_path: Path) -> None:
    src = tmp_path / "new.json"
    src.write_text('{"v":1,"best":120.0,"actions":[{"x":40.0,"t":1},{"x":64.5,"t":2}]}', encoding="utf-8")
    legacy = tmp_path / "old.json"
    runner = CliRunner()

    migrated = runner.invoke(app, ["migrate", str(src), str(legacy), "--legacy"])
    assert migrated.exit_code == 0, migrated.output
    assert legacy.read_text(encoding="utf-8") == (
        '{"best":120.000000,"actions":[{"x":40.000000,"t":1},{"x":64.500000,"t":2}]}'
    )

    result = runner.invoke(app, ["inspect", str(legacy)])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "format=legacy best=120.00 actions=2"
    assert lines[1].endswith("hold")
    assert lines[2].endswith("release")


def test_inspect_rejects_damaged_save(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text('{"best":1.0,"actions":[{"x":zz,"t":0}]}', encoding="utf-8")

    result = CliRunner().invoke(app, ["inspect", str(path)])

    assert result.exit_code == 1
    assert "malformed save data" in result.output


def test_config_dump_prints_effective_config(tmp_path: Path) -> None:
    cfg = tmp_path / "pathbot.json"
    cfg.write_text('{"tuning": {"removal_window": 120.0}}', encoding="utf-8")

    result = CliRunner().invoke(app, ["config-dump", "--config", str(cfg)])

    assert result.exit_code == 0, result.output
    dumped = json.loads(result.output)
    assert dumped["tuning"]["removal_window"] == 120.0
    assert dumped["toggle_key"] == "F8"


def test_config_dump_rejects_bad_config(tmp_path: Path) -> None:
    cfg = tmp_path / "pathbot.json"
    cfg.write_text('{"tuning": {"bogus": 1}}', encoding="utf-8")

    result = CliRunner().invoke(app, ["config-dump", "--config", str(cfg)])

    assert result.exit_code == 1
    assert "invalid config" in result.output
