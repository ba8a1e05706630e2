from __future__ import annotations

import os
from pathlib import Path

import msgspec

from .timeline import DEFAULT_DEDUPE_DISTANCE, DEFAULT_REMOVAL_WINDOW, ActionKind
from .trace_log import TRACE_CATEGORIES, check_trace_categories

CONFIG_NAME = "pathbot.json"
DEFAULT_SAVE_NAME = "pathbot_save.json"
DEFAULT_BASE_DIR = Path("artifacts") / "runtime"
RUNTIME_DIR_ENV = "PATHBOT_RUNTIME_DIR"


class ConfigError(ValueError):
    pass


class LearningTuning(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    """Knobs for the death-driven heuristic.

    `retry_offsets` are subtracted from the death position for the first fail
    streaks. The next streak (`rewind_streak`) removes the nearest earlier
    action instead, the one after it (`ahead_streak`) probes `ahead_offset`
    past the death point, streaks up to `idle_streak_max` do nothing and
    anything beyond purges the section.
    """

    dedupe_distance: float = DEFAULT_DEDUPE_DISTANCE
    removal_window: float = DEFAULT_REMOVAL_WINDOW
    section_reset_window: float = 200.0
    progress_epsilon: float = 2.0
    retry_offsets: tuple[float, ...] = (25.0, 50.0, 15.0, 70.0, 8.0)
    ahead_offset: float = 5.0
    idle_streak_max: int = 10
    candidate_kind: ActionKind = ActionKind.CLICK

    def __post_init__(self) -> None:
        for name in ("dedupe_distance", "removal_window", "section_reset_window", "progress_epsilon"):
            if float(getattr(self, name)) < 0.0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)!r}")
        if not self.retry_offsets:
            raise ValueError("retry_offsets must not be empty")
        if int(self.idle_streak_max) < self.ahead_streak:
            raise ValueError("idle_streak_max must leave room for the ahead probe")

    @property
    def rewind_streak(self) -> int:
        return len(self.retry_offsets) + 1

    @property
    def ahead_streak(self) -> int:
        return len(self.retry_offsets) + 2


def default_runtime_dir() -> Path:
    override = os.environ.get(RUNTIME_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_BASE_DIR


class BotConfig(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    tuning: LearningTuning = msgspec.field(default_factory=LearningTuning)
    base_dir: str = ""
    save_name: str = DEFAULT_SAVE_NAME
    toggle_key: str = "F8"
    trace: bool = False
    trace_categories: tuple[str, ...] = TRACE_CATEGORIES

    def __post_init__(self) -> None:
        check_trace_categories(self.trace_categories)

    @property
    def runtime_dir(self) -> Path:
        if self.base_dir:
            return Path(self.base_dir)
        return default_runtime_dir()

    @property
    def save_path(self) -> Path:
        return self.runtime_dir / self.save_name


_CONFIG_DECODER = msgspec.json.Decoder(type=BotConfig)


def decode_config(data: bytes) -> BotConfig:
    try:
        return _CONFIG_DECODER.decode(data)
    except (msgspec.DecodeError, ValueError) as exc:
        raise ConfigError(f"invalid config: {exc}") from exc


def load_config(path: Path | None = None) -> BotConfig:
    """Load a config file; a missing file yields the defaults."""
    if path is None:
        path = default_runtime_dir() / CONFIG_NAME
    path = Path(path)
    if not path.is_file():
        return BotConfig()
    return decode_config(path.read_bytes())


def dump_config(config: BotConfig) -> bytes:
    return msgspec.json.format(msgspec.json.encode(config), indent=2)


def write_config(path: Path, config: BotConfig) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dump_config(config) + b"\n")


__all__ = [
    "BotConfig",
    "CONFIG_NAME",
    "ConfigError",
    "DEFAULT_SAVE_NAME",
    "LearningTuning",
    "RUNTIME_DIR_ENV",
    "decode_config",
    "default_runtime_dir",
    "dump_config",
    "load_config",
    "write_config",
]
