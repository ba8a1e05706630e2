from __future__ import annotations

from pathlib import Path

from pathbot.notify import MAX_NOTIFICATIONS, NotificationLog


def test_drain_is_one_shot() -> None:
    log = NotificationLog()
    log.post("Saved")
    log.post("   ")
    log.post("Loaded")

    assert log.drain() == ["Saved", "Loaded"]
    assert log.drain() == []


def test_flush_appends_only_new_lines(tmp_path: Path) -> None:
    log = NotificationLog(base_dir=tmp_path)
    log.post("one")
    log.flush()
    log.post("two")
    log.flush()
    log.flush()

    assert (tmp_path / "notifications.log").read_text(encoding="utf-8") == "one\ntwo\n"


def test_flush_without_base_dir_is_noop() -> None:
    log = NotificationLog()
    log.post("x")
    log.flush()
    assert log.flushed_index == 0


def test_history_is_bounded() -> None:
    log = NotificationLog()
    for idx in range(MAX_NOTIFICATIONS + 10):
        log.post(f"m{idx}")

    assert len(log.history) == MAX_NOTIFICATIONS
    assert log.history[0] == "m10"
    assert len(log.drain()) == MAX_NOTIFICATIONS
