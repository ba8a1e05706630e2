from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum

DEFAULT_DEDUPE_DISTANCE = 5.0
DEFAULT_REMOVAL_WINDOW = 80.0


class ActionKind(IntEnum):
    CLICK = 0
    HOLD_START = 1
    HOLD_END = 2


@dataclass(frozen=True, slots=True)
class Action:
    position: float
    kind: ActionKind = ActionKind.CLICK


class ActionTimeline:
    """Position-ordered store of scheduled input actions.

    Entries stay sorted ascending by position and no two entries lie within
    `dedupe_distance` of each other. Inserts that would break the spacing are
    rejected rather than merged.
    """

    def __init__(self, *, dedupe_distance: float = DEFAULT_DEDUPE_DISTANCE) -> None:
        self._dedupe_distance = float(dedupe_distance)
        self._entries: list[Action] = []

    @property
    def dedupe_distance(self) -> float:
        return float(self._dedupe_distance)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __getitem__(self, index: int) -> Action:
        return self._entries[index]

    def __iter__(self) -> Iterator[Action]:
        # Iterate a snapshot so a consumer can't observe a half-applied mutation.
        return iter(tuple(self._entries))

    def entries(self) -> tuple[Action, ...]:
        return tuple(self._entries)

    def positions(self) -> list[float]:
        return [float(entry.position) for entry in self._entries]

    def conflicts(self, position: float) -> bool:
        x = float(position)
        lo = x - self._dedupe_distance
        hi = x + self._dedupe_distance
        return any(lo <= entry.position <= hi for entry in self._entries)

    def insert(self, position: float, kind: ActionKind = ActionKind.CLICK) -> bool:
        """Insert an action; returns False (and leaves the timeline alone) on a dedupe conflict."""
        x = float(position)
        if self.conflicts(x):
            return False
        self._entries.append(Action(position=x, kind=ActionKind(kind)))
        self._entries.sort(key=lambda entry: entry.position)
        return True

    def remove_nearest_before(self, position: float, window: float = DEFAULT_REMOVAL_WINDOW) -> float | None:
        """Remove the highest entry strictly inside `(position - window, position)`.

        Returns the removed position, or None if nothing matched.
        """
        x = float(position)
        lo = x - float(window)
        for idx in range(len(self._entries) - 1, -1, -1):
            entry_x = self._entries[idx].position
            if lo < entry_x < x:
                del self._entries[idx]
                return float(entry_x)
        return None

    def purge_after(self, threshold: float) -> int:
        """Drop every entry past `threshold`; returns how many were removed."""
        limit = float(threshold)
        kept = [entry for entry in self._entries if entry.position <= limit]
        removed = len(self._entries) - len(kept)
        self._entries = kept
        return removed

    def clear(self) -> None:
        self._entries.clear()

    def replace(self, other: ActionTimeline) -> None:
        """Adopt `other`'s entries in place, keeping references to this timeline valid."""
        self._entries = list(other.entries())


__all__ = [
    "Action",
    "ActionKind",
    "ActionTimeline",
    "DEFAULT_DEDUPE_DISTANCE",
    "DEFAULT_REMOVAL_WINDOW",
]
