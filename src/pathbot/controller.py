from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path

from .config import BotConfig
from .learning import DeathOutcome, LearningController
from .playback import InputCapability, ReplayEngine
from .save import (
    SaveData,
    dump_save_file,
    load_save_file,
    save_data_from_timeline,
    timeline_from_save_data,
    warn_on_legacy_save,
)
from .timeline import Action, ActionTimeline
from .trace_log import trace


class EmptyTimelineError(RuntimeError):
    pass


class BotMode(str, enum.Enum):
    OFF = "off"
    PATHFINDING = "pathfinding"
    REPLAYING = "replaying"


@dataclass(frozen=True, slots=True)
class BotStatus:
    mode: BotMode
    best_progress: float
    attempt_count: int
    action_count: int
    fail_streak: int = 0
    holding: bool = False
    last_position: float = 0.0

    @property
    def enabled(self) -> bool:
        return self.mode is not BotMode.OFF


class BotController:
    """Mode state machine tying the timeline, the heuristic and playback together.

    The host drives it from a single thread: `on_tick` once per simulation
    step, `on_attempt_end` when the player dies and `begin_attempt` at every
    attempt boundary (after a death or a level restart).
    """

    def __init__(self, input_: InputCapability, *, config: BotConfig | None = None) -> None:
        self._config = config if config is not None else BotConfig()
        tuning = self._config.tuning
        self._timeline = ActionTimeline(dedupe_distance=float(tuning.dedupe_distance))
        self._learning = LearningController(self._timeline, tuning=tuning)
        self._engine = ReplayEngine(self._timeline, input_)
        self._mode = BotMode.OFF
        self._resume_mode: BotMode | None = None
        self._last_position = 0.0

    @property
    def config(self) -> BotConfig:
        return self._config

    @property
    def mode(self) -> BotMode:
        return self._mode

    @property
    def enabled(self) -> bool:
        return self._mode is not BotMode.OFF

    @property
    def timeline(self) -> ActionTimeline:
        return self._timeline

    @property
    def learning(self) -> LearningController:
        return self._learning

    @property
    def engine(self) -> ReplayEngine:
        return self._engine

    def _set_mode(self, mode: BotMode) -> None:
        if mode is not self._mode:
            trace("mode", previous=self._mode.value, mode=mode.value, actions=len(self._timeline))
        self._mode = mode
        if mode is not BotMode.OFF:
            self._resume_mode = mode

    def begin_attempt(self) -> None:
        """Attempt boundary: release any held input and rewind the cursor."""
        self._engine.force_release()
        self._engine.reset_cursor()

    def start_pathfind(self) -> None:
        self._timeline.clear()
        self._learning.reset()
        self.begin_attempt()
        self._set_mode(BotMode.PATHFINDING)

    def start_replay(self) -> None:
        if not self._timeline:
            raise EmptyTimelineError("no recorded actions to replay")
        self.begin_attempt()
        self._set_mode(BotMode.REPLAYING)

    def stop(self) -> None:
        self._engine.force_release()
        self._set_mode(BotMode.OFF)

    def toggle(self) -> BotMode:
        """Hotkey toggle: stop if running, otherwise resume the last mode with its state intact."""
        if self.enabled:
            self.stop()
            return self._mode
        resume = self._resume_mode
        if resume is None:
            self.start_pathfind()
        elif resume is BotMode.REPLAYING:
            self.start_replay()
        else:
            self.begin_attempt()
            self._set_mode(resume)
        return self._mode

    def on_attempt_end(self, death_position: float) -> DeathOutcome | None:
        """Feed a death to the heuristic. The caller resets the attempt afterwards."""
        if self._mode is not BotMode.PATHFINDING:
            return None
        return self._learning.on_death(death_position)

    def on_tick(self, position: float) -> list[Action]:
        self._last_position = float(position)
        if not self.enabled:
            return []
        return self._engine.advance(position)

    def status(self) -> BotStatus:
        stats = self._learning.stats
        return BotStatus(
            mode=self._mode,
            best_progress=float(stats.best_progress),
            attempt_count=int(stats.attempt_count),
            action_count=len(self._timeline),
            fail_streak=int(stats.fail_streak),
            holding=self._engine.holding,
            last_position=float(self._last_position),
        )

    def snapshot(self) -> SaveData:
        return save_data_from_timeline(self._timeline, best=self._learning.stats.best_progress)

    def save(self, path: Path | None = None, *, legacy: bool = False) -> Path:
        if path is None:
            path = self._config.save_path
        path = Path(path)
        data = self.snapshot()
        dump_save_file(path, data, legacy=legacy)
        trace("save", path=path, actions=len(data.actions), best=data.best)
        return path

    def load(self, path: Path | None = None) -> SaveData:
        """Replace the timeline and best progress from a save file.

        Raises `MissingSaveFileError` or `SaveCodecError` with in-memory state untouched.
        """
        if path is None:
            path = self._config.save_path
        path = Path(path)
        data = load_save_file(path)
        warn_on_legacy_save(data, source=str(path))
        timeline, rejected = timeline_from_save_data(data, dedupe_distance=self._timeline.dedupe_distance)

        self._timeline.replace(timeline)
        self._learning.restore_best(data.best)
        self.begin_attempt()
        trace("load", path=path, actions=len(self._timeline), rejected=rejected, best=data.best)
        return data


__all__ = [
    "BotController",
    "BotMode",
    "BotStatus",
    "EmptyTimelineError",
]
