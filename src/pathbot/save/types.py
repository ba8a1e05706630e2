from __future__ import annotations

import msgspec

from ..timeline import ActionKind, ActionTimeline

SAVE_FORMAT_VERSION = 1
# Documents written before the schema carried a version field decode as v=0.
LEGACY_FORMAT_VERSION = 0


class SaveCodecError(ValueError):
    pass


class MissingSaveFileError(FileNotFoundError):
    pass


class SavedAction(msgspec.Struct, forbid_unknown_fields=True):
    x: float
    t: ActionKind = ActionKind.CLICK


class SaveData(msgspec.Struct, forbid_unknown_fields=True):
    best: float = 0.0
    actions: list[SavedAction] = msgspec.field(default_factory=list)
    v: int = LEGACY_FORMAT_VERSION

    @property
    def is_legacy(self) -> bool:
        return int(self.v) == LEGACY_FORMAT_VERSION


def save_data_from_timeline(timeline: ActionTimeline, *, best: float) -> SaveData:
    return SaveData(
        v=SAVE_FORMAT_VERSION,
        best=float(best),
        actions=[SavedAction(x=float(action.position), t=action.kind) for action in timeline],
    )


def timeline_from_save_data(data: SaveData, *, dedupe_distance: float) -> tuple[ActionTimeline, int]:
    """Rebuild a timeline through the normal insert path.

    Returns `(timeline, rejected)` where `rejected` counts entries dropped by
    the dedupe rule (hand-edited or legacy files may carry near-duplicates).
    """
    timeline = ActionTimeline(dedupe_distance=dedupe_distance)
    rejected = 0
    for action in data.actions:
        if not timeline.insert(float(action.x), ActionKind(action.t)):
            rejected += 1
    return timeline, rejected
