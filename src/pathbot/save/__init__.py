from __future__ import annotations

from .codec import dump_save, dump_save_file, load_save, load_save_file
from .legacy import encode_legacy, scan_markers
from .types import (
    LEGACY_FORMAT_VERSION,
    SAVE_FORMAT_VERSION,
    MissingSaveFileError,
    SaveCodecError,
    SaveData,
    SavedAction,
    save_data_from_timeline,
    timeline_from_save_data,
)
from .versioning import LegacySaveFormatWarning, warn_on_legacy_save

__all__ = [
    "LEGACY_FORMAT_VERSION",
    "LegacySaveFormatWarning",
    "MissingSaveFileError",
    "SAVE_FORMAT_VERSION",
    "SaveCodecError",
    "SaveData",
    "SavedAction",
    "dump_save",
    "dump_save_file",
    "encode_legacy",
    "load_save",
    "load_save_file",
    "save_data_from_timeline",
    "scan_markers",
    "timeline_from_save_data",
    "warn_on_legacy_save",
]
