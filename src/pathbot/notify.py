from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

NOTIFICATIONS_LOG_NAME = "notifications.log"
MAX_NOTIFICATIONS = 0x100


@dataclass(slots=True)
class NotificationLog:
    """One-shot user messages: the UI drains them, `flush` appends them to disk."""

    base_dir: Path | None = None
    pending: list[str] = field(default_factory=list)
    history: list[str] = field(default_factory=list)
    flushed_index: int = 0

    def post(self, message: str) -> None:
        text = str(message).strip()
        if not text:
            return
        self.pending.append(text)
        self.history.append(text)
        if len(self.pending) > MAX_NOTIFICATIONS:
            del self.pending[: len(self.pending) - MAX_NOTIFICATIONS]
        if len(self.history) > MAX_NOTIFICATIONS:
            overflow = len(self.history) - MAX_NOTIFICATIONS
            del self.history[:overflow]
            self.flushed_index = max(0, self.flushed_index - overflow)

    def drain(self) -> list[str]:
        out = list(self.pending)
        self.pending.clear()
        return out

    def flush(self) -> None:
        if self.base_dir is None or self.flushed_index >= len(self.history):
            return
        path = Path(self.base_dir) / NOTIFICATIONS_LOG_NAME
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            for line in self.history[self.flushed_index :]:
                handle.write(line.rstrip() + "\n")
        self.flushed_index = len(self.history)


__all__ = [
    "MAX_NOTIFICATIONS",
    "NOTIFICATIONS_LOG_NAME",
    "NotificationLog",
]
