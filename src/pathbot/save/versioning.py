from __future__ import annotations

import warnings

from .types import SAVE_FORMAT_VERSION, SaveData


class LegacySaveFormatWarning(UserWarning):
    """Warnings related to saves written without a format version."""


def warn_on_legacy_save(data: SaveData, *, action: str = "load", source: str = "") -> bool:
    """Warn if `data` came from an unversioned (legacy) save.

    Returns True if a warning was emitted. Saving again upgrades the file to
    the current format.
    """
    if not data.is_legacy:
        return False
    where = f" ({source})" if source else ""
    warnings.warn(
        f"Save{where} has no format version; {action} used the legacy layout "
        f"(current v={SAVE_FORMAT_VERSION}).",
        category=LegacySaveFormatWarning,
        stacklevel=2,
    )
    return True
