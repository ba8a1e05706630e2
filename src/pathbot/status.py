from __future__ import annotations

from .controller import BotMode, BotStatus
from .timeline import Action, ActionKind

_MODE_LABELS = {
    BotMode.OFF: "Off",
    BotMode.PATHFINDING: "Pathfinding",
    BotMode.REPLAYING: "Replaying",
}

_KIND_LABELS = {
    ActionKind.CLICK: "click",
    ActionKind.HOLD_START: "hold",
    ActionKind.HOLD_END: "release",
}


def format_mode(mode: BotMode) -> str:
    return _MODE_LABELS[mode]


def format_status(status: BotStatus) -> list[str]:
    headline = "Bot: ON" if status.enabled else "Bot: OFF"
    detail = (
        f"{format_mode(status.mode)}  best={status.best_progress:.0f}  "
        f"attempts={status.attempt_count}  actions={status.action_count}"
    )
    lines = [headline, detail]
    if status.mode is BotMode.PATHFINDING and status.fail_streak:
        lines.append(f"fail streak {status.fail_streak}")
    return lines


def format_action(index: int, action: Action) -> str:
    return f"{int(index):03d}  x={float(action.position):9.2f}  {_KIND_LABELS[ActionKind(action.kind)]}"
