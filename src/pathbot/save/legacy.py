from __future__ import annotations

import re

from ..timeline import ActionKind
from .types import SaveCodecError, SaveData, SavedAction

# Older builds wrote saves by hand and read them back by searching for these
# literal markers rather than parsing the document.
BEST_MARKER = '"best":'
ACTIONS_MARKER = '"actions":'
X_MARKER = '"x":'
T_MARKER = '"t":'

_FLOAT_RE = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")
_INT_RE = re.compile(r"\s*([-+]?\d+)")


def _value_after(text: str, marker: str, start: int, pattern: re.Pattern[str]) -> tuple[str, int]:
    value_at = start + len(marker)
    match = pattern.match(text, value_at)
    if match is None:
        snippet = text[value_at : value_at + 16].strip()
        raise SaveCodecError(f"malformed save data: {marker} at offset {start} is followed by {snippet!r}")
    return match.group(1), match.end()


def encode_legacy(data: SaveData) -> bytes:
    """Write the unversioned marker layout, byte-compatible with older readers."""
    parts = [f'{{"x":{float(action.x):f},"t":{int(action.t)}}}' for action in data.actions]
    text = f'{{"best":{float(data.best):f},"actions":[{",".join(parts)}]}}'
    return text.encode("utf-8")


def scan_markers(text: str) -> SaveData:
    """Recover a save by locating field markers, tolerating a damaged document.

    A marker followed by something that is not a number raises `SaveCodecError`.
    """
    best_at = text.find(BEST_MARKER)
    actions_at = text.find(ACTIONS_MARKER)
    if best_at < 0 and actions_at < 0:
        raise SaveCodecError("not a save document: no best/actions markers")

    best = 0.0
    if best_at >= 0:
        raw, _ = _value_after(text, BEST_MARKER, best_at, _FLOAT_RE)
        best = float(raw)

    actions: list[SavedAction] = []
    if actions_at >= 0:
        pos = actions_at + len(ACTIONS_MARKER)
        while True:
            x_at = text.find(X_MARKER, pos)
            if x_at < 0:
                break
            raw_x, pos = _value_after(text, X_MARKER, x_at, _FLOAT_RE)
            t_at = text.find(T_MARKER, pos)
            if t_at < 0:
                raise SaveCodecError(f"malformed save data: action at offset {x_at} has no {T_MARKER} field")
            raw_t, pos = _value_after(text, T_MARKER, t_at, _INT_RE)
            try:
                kind = ActionKind(int(raw_t))
            except ValueError as exc:
                raise SaveCodecError(f"unknown action type {raw_t} at offset {t_at}") from exc
            actions.append(SavedAction(x=float(raw_x), t=kind))

    return SaveData(best=best, actions=actions)


__all__ = [
    "encode_legacy",
    "scan_markers",
]
