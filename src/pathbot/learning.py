from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias

from .config import LearningTuning
from .timeline import ActionTimeline
from .trace_log import trace

FailStepKind: TypeAlias = Literal["insert", "rewind", "idle", "purge"]


@dataclass(slots=True)
class LearningStats:
    best_progress: float = 0.0
    fail_streak: int = 0
    attempt_count: int = 0

    def reset(self) -> None:
        self.best_progress = 0.0
        self.fail_streak = 0
        self.attempt_count = 0


@dataclass(frozen=True, slots=True)
class FailStep:
    kind: FailStepKind
    offset: float = 0.0


@dataclass(frozen=True, slots=True)
class DeathOutcome:
    death_position: float
    progressed: bool
    fail_streak: int
    step: FailStep | None = None
    candidate: float | None = None
    inserted: bool = False
    removed: float | None = None
    purged: int = 0


def fail_step(tuning: LearningTuning, streak: int) -> FailStep:
    """Map a (post-increment) fail streak to the timeline mutation it triggers.

    With the default tuning:

        1..5  insert at death - (25, 50, 15, 70, 8)
        6     remove the nearest earlier action, streak drops back to 1
        7     insert at death + 5
        8..10 nothing
        11+   purge everything past death - 200, streak resets to 0

    The idle gap and the probe ahead of the death point match the shipped
    heuristic and are not corrected here.
    """
    streak = int(streak)
    if streak < 1:
        raise ValueError(f"fail streak must be positive, got {streak}")
    offsets = tuning.retry_offsets
    if streak <= len(offsets):
        return FailStep("insert", -float(offsets[streak - 1]))
    if streak == tuning.rewind_streak:
        return FailStep("rewind")
    if streak == tuning.ahead_streak:
        return FailStep("insert", float(tuning.ahead_offset))
    if streak <= int(tuning.idle_streak_max):
        return FailStep("idle")
    return FailStep("purge")


class LearningController:
    def __init__(self, timeline: ActionTimeline, *, tuning: LearningTuning | None = None) -> None:
        self._timeline = timeline
        self._tuning = tuning if tuning is not None else LearningTuning()
        self._stats = LearningStats()

    @property
    def stats(self) -> LearningStats:
        return self._stats

    @property
    def tuning(self) -> LearningTuning:
        return self._tuning

    def reset(self) -> None:
        self._stats.reset()

    def restore_best(self, best_progress: float) -> None:
        self._stats.best_progress = float(best_progress)

    def on_death(self, position: float) -> DeathOutcome:
        x = float(position)
        stats = self._stats
        tuning = self._tuning
        stats.attempt_count += 1
        trace("death", x=x, attempt=stats.attempt_count, best=stats.best_progress)

        if x > stats.best_progress + float(tuning.progress_epsilon):
            stats.best_progress = x
            stats.fail_streak = 0
            trace("progress", best=x)
            return DeathOutcome(death_position=x, progressed=True, fail_streak=0)

        stats.fail_streak += 1
        step = fail_step(tuning, stats.fail_streak)
        streak = stats.fail_streak

        if step.kind == "insert":
            candidate = x + step.offset
            inserted = False
            if candidate > 0.0:
                inserted = self._timeline.insert(candidate, tuning.candidate_kind)
                trace("insert" if inserted else "insert_rejected", x=candidate, streak=streak)
            return DeathOutcome(
                death_position=x,
                progressed=False,
                fail_streak=streak,
                step=step,
                candidate=candidate,
                inserted=inserted,
            )

        if step.kind == "rewind":
            removed = self._timeline.remove_nearest_before(x, float(tuning.removal_window))
            stats.fail_streak = 1
            trace("remove", x=x, removed=removed, streak=streak)
            return DeathOutcome(
                death_position=x,
                progressed=False,
                fail_streak=stats.fail_streak,
                step=step,
                removed=removed,
            )

        if step.kind == "purge":
            threshold = x - float(tuning.section_reset_window)
            purged = self._timeline.purge_after(threshold)
            stats.fail_streak = 0
            trace("purge", threshold=threshold, purged=purged, streak=streak)
            return DeathOutcome(
                death_position=x,
                progressed=False,
                fail_streak=0,
                step=step,
                purged=purged,
            )

        return DeathOutcome(death_position=x, progressed=False, fail_streak=streak, step=step)


__all__ = [
    "DeathOutcome",
    "FailStep",
    "FailStepKind",
    "LearningController",
    "LearningStats",
    "fail_step",
]
