from __future__ import annotations

import datetime as dt
import os
from collections.abc import Iterable
from pathlib import Path
from threading import Lock

TRACE_CATEGORIES = ("session", "learning", "playback")

# Every event the bot emits, mapped to the category that gates it.
TRACE_EVENTS: dict[str, str] = {
    "init": "session",
    "mode": "session",
    "save": "session",
    "load": "session",
    "death": "learning",
    "progress": "learning",
    "insert": "learning",
    "insert_rejected": "learning",
    "remove": "learning",
    "purge": "learning",
    "dispatch": "playback",
}

_TRACE_LOCK = Lock()
_TRACE_PATH: Path | None = None
_TRACE_ENABLED: frozenset[str] = frozenset()


def check_trace_categories(categories: Iterable[str]) -> frozenset[str]:
    """Normalize a category selection; `session` is always on."""
    selected = {str(name).strip().lower() for name in categories}
    unknown = sorted(selected.difference(TRACE_CATEGORIES))
    if unknown:
        raise ValueError(f"unknown trace categories: {', '.join(unknown)}")
    selected.add("session")
    return frozenset(selected)


def _format_value(value: object) -> str:
    if isinstance(value, float):
        text = f"{value:.3f}"
    else:
        text = str(value)
    return text.replace("\n", "\\n")


def _format_fields(fields: dict[str, object]) -> str:
    return " ".join(f"{key}={_format_value(fields[key])}" for key in sorted(fields))


def trace_log_path() -> Path | None:
    with _TRACE_LOCK:
        return _TRACE_PATH


def init_trace_log(
    *,
    base_dir: Path,
    categories: Iterable[str] = TRACE_CATEGORIES,
    **fields: object,
) -> Path:
    enabled = check_trace_categories(categories)
    timestamp = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%dT%H%M%S.%fZ")
    path = Path(base_dir) / "logs" / f"pathbot-pid{os.getpid()}-{timestamp}.log"
    path.parent.mkdir(parents=True, exist_ok=True)

    with _TRACE_LOCK:
        global _TRACE_PATH, _TRACE_ENABLED
        _TRACE_PATH = path
        _TRACE_ENABLED = enabled

    trace("init", pid=int(os.getpid()), categories=",".join(sorted(enabled)), **fields)
    return path


def trace(event: str, **fields: object) -> None:
    """Append one `key=value` line for a registered event.

    Unregistered event names raise `ValueError` even while tracing is off.
    """
    category = TRACE_EVENTS.get(event)
    if category is None:
        raise ValueError(f"unknown trace event: {event!r}")
    with _TRACE_LOCK:
        path = _TRACE_PATH
        if path is None or category not in _TRACE_ENABLED:
            return
        timestamp = dt.datetime.now(dt.timezone.utc).isoformat(timespec="milliseconds")
        line = f"{timestamp} [{category}] event={event}"
        payload = _format_fields(fields)
        if payload:
            line += f" {payload}"
        with path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")


def close_trace_log() -> None:
    with _TRACE_LOCK:
        global _TRACE_PATH, _TRACE_ENABLED
        _TRACE_PATH = None
        _TRACE_ENABLED = frozenset()


__all__ = [
    "TRACE_CATEGORIES",
    "TRACE_EVENTS",
    "check_trace_categories",
    "close_trace_log",
    "init_trace_log",
    "trace",
    "trace_log_path",
]
