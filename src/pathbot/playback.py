from __future__ import annotations

from typing import Protocol

from .timeline import Action, ActionKind, ActionTimeline
from .trace_log import trace


class InputCapability(Protocol):
    """Binary digital control exposed by the host (jump button, mouse button, ...)."""

    def press(self) -> None: ...

    def release(self) -> None: ...


class ReplayEngine:
    """Fire timeline actions as the player crosses their positions.

    The cursor only moves forward between resets, so every action at or
    behind the current position fires exactly once per attempt, in order.
    """

    def __init__(self, timeline: ActionTimeline, input_: InputCapability) -> None:
        self._timeline = timeline
        self._input = input_
        self._cursor = 0
        self._holding = False

    @property
    def cursor(self) -> int:
        return int(self._cursor)

    @property
    def holding(self) -> bool:
        return bool(self._holding)

    def advance(self, position: float) -> list[Action]:
        """Dispatch every pending action at or before `position`; returns them in firing order."""
        x = float(position)
        fired: list[Action] = []
        timeline = self._timeline
        while self._cursor < len(timeline) and x >= timeline[self._cursor].position:
            action = timeline[self._cursor]
            self._dispatch(action)
            fired.append(action)
            self._cursor += 1
        return fired

    def _dispatch(self, action: Action) -> None:
        trace("dispatch", x=action.position, kind=action.kind.name.lower(), cursor=self._cursor)
        if action.kind == ActionKind.CLICK:
            self._input.press()
            self._input.release()
        elif action.kind == ActionKind.HOLD_START:
            self._input.press()
            self._holding = True
        elif action.kind == ActionKind.HOLD_END:
            self._input.release()
            self._holding = False
        else:  # pragma: no cover
            raise ValueError(f"unsupported action kind: {action.kind!r}")

    def force_release(self) -> bool:
        """Release a held input; returns True if something was released."""
        if not self._holding:
            return False
        self._input.release()
        self._holding = False
        return True

    def reset_cursor(self) -> None:
        self._cursor = 0


__all__ = [
    "InputCapability",
    "ReplayEngine",
]
