from __future__ import annotations

import math
import os
from pathlib import Path

import msgspec

from .legacy import encode_legacy, scan_markers
from .types import (
    LEGACY_FORMAT_VERSION,
    SAVE_FORMAT_VERSION,
    MissingSaveFileError,
    SaveCodecError,
    SaveData,
)

_SAVE_DECODER = msgspec.json.Decoder(type=SaveData)
_SUPPORTED_VERSIONS = (LEGACY_FORMAT_VERSION, SAVE_FORMAT_VERSION)


def _check_finite(data: SaveData) -> None:
    if not math.isfinite(float(data.best)):
        raise SaveCodecError(f"non-finite best progress: {data.best!r}")
    for idx, action in enumerate(data.actions):
        if not math.isfinite(float(action.x)):
            raise SaveCodecError(f"non-finite position in action {idx}: {action.x!r}")


def dump_save(data: SaveData, *, legacy: bool = False) -> bytes:
    """Serialize a save as compact JSON.

    `legacy=True` writes the unversioned marker layout instead.
    Non-finite values raise `SaveCodecError`.
    """
    _check_finite(data)
    if legacy:
        return encode_legacy(data)
    current = SaveData(v=SAVE_FORMAT_VERSION, best=float(data.best), actions=list(data.actions))
    return msgspec.json.encode(current)


def load_save(data: bytes) -> SaveData:
    try:
        save = _SAVE_DECODER.decode(data)
    except msgspec.ValidationError as exc:
        raise SaveCodecError(f"invalid save data: {exc}") from exc
    except msgspec.DecodeError:
        # Not valid JSON: fall back to the marker scan older builds relied on.
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SaveCodecError("save data is not utf-8 text") from exc
        save = scan_markers(text)

    version = int(save.v)
    if version not in _SUPPORTED_VERSIONS:
        raise SaveCodecError(f"unsupported save version: {version}")
    return save


def dump_save_file(path: Path, data: SaveData, *, legacy: bool = False) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    blob = dump_save(data, legacy=legacy)
    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_bytes(blob)
    os.replace(tmp_path, path)


def load_save_file(path: Path) -> SaveData:
    path = Path(path)
    if not path.is_file():
        raise MissingSaveFileError(f"save file not found: {path}")
    return load_save(path.read_bytes())


__all__ = [
    "MissingSaveFileError",
    "SaveCodecError",
    "dump_save",
    "dump_save_file",
    "load_save",
    "load_save_file",
]
