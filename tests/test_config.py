from __future__ import annotations

from pathlib import Path

import msgspec
import pytest

from pathbot.config import (
    BotConfig,
    ConfigError,
    LearningTuning,
    decode_config,
    default_runtime_dir,
    dump_config,
    load_config,
    write_config,
)
from pathbot.timeline import ActionKind


def test_default_tuning_constants() -> None:
    tuning = LearningTuning()

    assert tuning.dedupe_distance == 5.0
    assert tuning.removal_window == 80.0
    assert tuning.section_reset_window == 200.0
    assert tuning.progress_epsilon == 2.0
    assert tuning.retry_offsets == (25.0, 50.0, 15.0, 70.0, 8.0)
    assert tuning.rewind_streak == 6
    assert tuning.ahead_streak == 7
    assert tuning.ahead_offset == 5.0
    assert tuning.idle_streak_max == 10
    assert tuning.candidate_kind == ActionKind.CLICK


def test_missing_config_file_yields_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path / "pathbot.json") == BotConfig()


def test_partial_config_overrides_tuning(tmp_path: Path) -> None:
    path = tmp_path / "pathbot.json"
    path.write_text('{"tuning": {"dedupe_distance": 12.5, "candidate_kind": 1}, "save_name": "lvl.json"}', encoding="utf-8")

    config = load_config(path)

    assert config.tuning.dedupe_distance == 12.5
    assert config.tuning.candidate_kind == ActionKind.HOLD_START
    assert config.tuning.removal_window == 80.0
    assert config.save_name == "lvl.json"


@pytest.mark.parametrize(
    "blob",
    [
        b"{not json",
        b'{"unknown": 1}',
        b'{"tuning": {"dedupe_distance": -1.0}}',
        b'{"tuning": {"retry_offsets": []}}',
        b'{"tuning": {"idle_streak_max": 3}}',
        b'{"trace_categories": ["net"]}',
    ],
)
def test_invalid_config_raises_config_error(blob: bytes) -> None:
    with pytest.raises(ConfigError, match="invalid config"):
        decode_config(blob)


def test_direct_construction_validates() -> None:
    with pytest.raises(ValueError, match="retry_offsets"):
        LearningTuning(retry_offsets=())


def test_idle_range_must_cover_the_ahead_probe() -> None:
    tuning = LearningTuning(retry_offsets=(30.0, 12.0), idle_streak_max=4)
    assert (tuning.rewind_streak, tuning.ahead_streak) == (3, 4)

    with pytest.raises(ValueError, match="idle_streak_max"):
        LearningTuning(retry_offsets=(30.0, 12.0), idle_streak_max=3)
    with pytest.raises(ValueError, match="idle_streak_max"):
        LearningTuning(idle_streak_max=6)


def test_config_round_trip(tmp_path: Path) -> None:
    config = BotConfig(tuning=LearningTuning(retry_offsets=(30.0, 12.0), idle_streak_max=6), trace=True)
    path = tmp_path / "cfg" / "pathbot.json"

    write_config(path, config)

    assert load_config(path) == config
    assert b'"retry_offsets"' in dump_config(config)


def test_runtime_dir_prefers_explicit_base_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PATHBOT_RUNTIME_DIR", str(tmp_path / "env"))

    assert default_runtime_dir() == tmp_path / "env"
    assert BotConfig().runtime_dir == tmp_path / "env"
    assert BotConfig(base_dir=str(tmp_path / "x")).save_path == tmp_path / "x" / "pathbot_save.json"

    monkeypatch.delenv("PATHBOT_RUNTIME_DIR")
    assert default_runtime_dir() == Path("artifacts") / "runtime"


def test_config_is_frozen() -> None:
    with pytest.raises(AttributeError):
        BotConfig().trace = True  # type: ignore[misc]
    assert msgspec.structs.replace(BotConfig(), trace=True).trace is True
