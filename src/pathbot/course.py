from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path

import msgspec

from .host import HostBridge


class CourseError(ValueError):
    pass


class Obstacle(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    x: float
    lead: float = 10.0
    window: float = 30.0

    @property
    def press_range(self) -> tuple[float, float]:
        hi = float(self.x) - float(self.lead)
        return hi - float(self.window), hi


class Course(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    length: float
    speed: float = 5.0
    obstacles: tuple[Obstacle, ...] = ()

    def __post_init__(self) -> None:
        if not float(self.speed) > 0.0:
            raise ValueError(f"speed must be positive, got {self.speed!r}")
        if not float(self.length) > 0.0:
            raise ValueError(f"length must be positive, got {self.length!r}")


def load_course(path: Path) -> Course:
    path = Path(path)
    if not path.is_file():
        raise CourseError(f"course file not found: {path}")
    try:
        return msgspec.json.decode(path.read_bytes(), type=Course)
    except (msgspec.DecodeError, ValueError) as exc:
        raise CourseError(f"invalid course {path}: {exc}") from exc


@dataclass(frozen=True, slots=True)
class AttemptResult:
    completed: bool
    death_position: float | None
    ticks: int
    presses: tuple[float, ...]


@dataclass(frozen=True, slots=True)
class RunSummary:
    completed: bool
    attempts: int
    best_progress: float
    last: AttemptResult | None


class ScriptedCourse:
    """Deterministic stand-in for a game host.

    The player moves `speed` units per tick. An obstacle kills the player when
    reached unless a press landed inside its press range during the attempt.
    The course doubles as the input capability the bot presses.
    """

    def __init__(self, course: Course) -> None:
        self._course = course
        self._obstacles = tuple(sorted(course.obstacles, key=lambda obs: obs.x))
        self._position = 0.0
        self._presses: list[float] = []
        self._down = False

    @property
    def course(self) -> Course:
        return self._course

    @property
    def down(self) -> bool:
        return bool(self._down)

    def press(self) -> None:
        self._presses.append(float(self._position))
        self._down = True

    def release(self) -> None:
        self._down = False

    def _cleared(self, obstacle: Obstacle) -> bool:
        lo, hi = obstacle.press_range
        return any(lo <= p <= hi for p in self._presses)

    def run_attempt(self, bridge: HostBridge) -> AttemptResult:
        course = self._course
        speed = float(course.speed)
        length = float(course.length)
        max_ticks = int(math.ceil(length / speed)) + 1
        self._position = 0.0
        self._presses = []
        next_obstacle = 0

        for tick in range(max_ticks + 1):
            self._position = min(tick * speed, length)
            bridge.on_tick(self._position)
            while next_obstacle < len(self._obstacles) and self._position >= self._obstacles[next_obstacle].x:
                obstacle = self._obstacles[next_obstacle]
                if not self._cleared(obstacle):
                    bridge.on_death(float(obstacle.x))
                    return AttemptResult(
                        completed=False,
                        death_position=float(obstacle.x),
                        ticks=tick + 1,
                        presses=tuple(self._presses),
                    )
                next_obstacle += 1
            if self._position >= length:
                bridge.on_attempt_reset()
                return AttemptResult(completed=True, death_position=None, ticks=tick + 1, presses=tuple(self._presses))

        raise AssertionError("unreachable: the attempt always ends at the course length")


def train_course(course: ScriptedCourse, bridge: HostBridge, *, max_attempts: int) -> RunSummary:
    """Pathfind from scratch until the course is cleared or attempts run out."""
    bridge.start_pathfind()
    last: AttemptResult | None = None
    attempts = 0
    for attempts in range(1, int(max_attempts) + 1):
        last = course.run_attempt(bridge)
        if last.completed:
            break
    status = bridge.status()
    return RunSummary(
        completed=bool(last is not None and last.completed),
        attempts=attempts,
        best_progress=status.best_progress,
        last=last,
    )


def play_course(course: ScriptedCourse, bridge: HostBridge) -> RunSummary:
    """Replay the loaded timeline once without learning."""
    if not bridge.start_replay():
        return RunSummary(completed=False, attempts=0, best_progress=bridge.status().best_progress, last=None)
    result = course.run_attempt(bridge)
    bridge.stop()
    return RunSummary(
        completed=result.completed,
        attempts=1,
        best_progress=bridge.status().best_progress,
        last=result,
    )


__all__ = [
    "AttemptResult",
    "Course",
    "CourseError",
    "Obstacle",
    "RunSummary",
    "ScriptedCourse",
    "load_course",
    "play_course",
    "train_course",
]
