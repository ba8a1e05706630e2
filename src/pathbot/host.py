from __future__ import annotations

import threading
import warnings
from pathlib import Path

from .config import BotConfig
from .controller import BotController, BotMode, BotStatus, EmptyTimelineError
from .learning import DeathOutcome
from .notify import NotificationLog
from .playback import InputCapability
from .save import LegacySaveFormatWarning, MissingSaveFileError, SaveCodecError
from .timeline import Action
from .trace_log import init_trace_log


class HostBridge:
    """Callback surface handed to the game integration and the UI.

    Every entry point takes the same lock, so hosts that deliver ticks and
    lifecycle events on different threads never interleave a cursor pass with
    a timeline mutation. Failures become notifications instead of exceptions.
    """

    def __init__(
        self,
        controller: BotController,
        *,
        notifications: NotificationLog | None = None,
    ) -> None:
        self._controller = controller
        self._notifications = notifications if notifications is not None else NotificationLog()
        self._lock = threading.RLock()

    @property
    def controller(self) -> BotController:
        return self._controller

    @property
    def notifications(self) -> NotificationLog:
        return self._notifications

    # Host engine hooks.

    def on_tick(self, position: float) -> list[Action]:
        with self._lock:
            return self._controller.on_tick(position)

    def on_death(self, position: float) -> DeathOutcome | None:
        with self._lock:
            outcome = self._controller.on_attempt_end(position)
            self._controller.begin_attempt()
            return outcome

    def on_attempt_reset(self) -> None:
        with self._lock:
            self._controller.begin_attempt()

    def on_hotkey(self, key: str, *, down: bool = True, repeat: bool = False) -> bool:
        """Handle a key event; returns True when the key was consumed."""
        if not down or repeat:
            return False
        if str(key).strip().upper() != self._controller.config.toggle_key.upper():
            return False
        with self._lock:
            try:
                mode = self._controller.toggle()
            except EmptyTimelineError as exc:
                self._notifications.post(f"Cannot resume replay: {exc}")
                return True
            self._notifications.post("Bot: ON" if mode is not BotMode.OFF else "Bot: OFF")
        return True

    # UI control surface.

    def start_pathfind(self) -> None:
        with self._lock:
            self._controller.start_pathfind()
            self._notifications.post("Pathfinding started")

    def start_replay(self) -> bool:
        with self._lock:
            try:
                self._controller.start_replay()
            except EmptyTimelineError as exc:
                self._notifications.post(f"Cannot replay: {exc}")
                return False
            self._notifications.post("Replay started")
        return True

    def stop(self) -> None:
        with self._lock:
            self._controller.stop()
            self._notifications.post("Bot stopped")

    def save(self, path: Path | None = None) -> bool:
        with self._lock:
            try:
                saved = self._controller.save(path)
            except (OSError, SaveCodecError) as exc:
                self._notifications.post(f"Save failed: {exc}")
                return False
            self._notifications.post(f"Saved {len(self._controller.timeline)} actions to {saved.name}")
        return True

    def load(self, path: Path | None = None) -> bool:
        with self._lock, warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", LegacySaveFormatWarning)
            try:
                data = self._controller.load(path)
            except MissingSaveFileError:
                self._notifications.post("No save file found")
                return False
            except SaveCodecError as exc:
                self._notifications.post(f"Save file is damaged: {exc}")
                return False
            except OSError as exc:
                self._notifications.post(f"Load failed: {exc}")
                return False
            for warning in caught:
                if issubclass(warning.category, LegacySaveFormatWarning):
                    self._notifications.post("Loaded a legacy save; saving will upgrade it")
            self._notifications.post(f"Loaded {len(data.actions)} actions (best {data.best:.0f})")
        for warning in caught:
            if not issubclass(warning.category, LegacySaveFormatWarning):
                warnings.warn(warning.message, warning.category, stacklevel=2)
        return True

    def status(self) -> BotStatus:
        with self._lock:
            return self._controller.status()


def create_host_bridge(input_: InputCapability, *, config: BotConfig | None = None) -> HostBridge:
    config = config if config is not None else BotConfig()
    if config.trace:
        init_trace_log(base_dir=config.runtime_dir, categories=config.trace_categories, save=config.save_name)
    controller = BotController(input_, config=config)
    return HostBridge(controller, notifications=NotificationLog(base_dir=config.runtime_dir))


__all__ = [
    "HostBridge",
    "create_host_bridge",
]
