from __future__ import annotations

from pathlib import Path

import pytest

from pathbot.trace_log import (
    TRACE_CATEGORIES,
    TRACE_EVENTS,
    check_trace_categories,
    close_trace_log,
    init_trace_log,
    trace,
    trace_log_path,
)


def test_trace_is_noop_until_initialised(tmp_path: Path) -> None:
    close_trace_log()
    trace("insert", x=1.0)
    assert trace_log_path() is None


def test_trace_writes_sorted_key_value_lines(tmp_path: Path) -> None:
    try:
        path = init_trace_log(base_dir=tmp_path, session="t")
        trace("insert", x=75.0, streak=1)
        trace("save", path="two\nlines")
    finally:
        close_trace_log()
    trace("death", x=1.0)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert path.parent == tmp_path / "logs"
    assert path.name.startswith("pathbot-pid")
    assert len(lines) == 3
    assert " [session] event=init " in lines[0]
    assert "categories=learning,playback,session" in lines[0]
    assert "session=t" in lines[0]
    assert lines[1].endswith("[learning] event=insert streak=1 x=75.000")
    assert lines[2].endswith("[session] event=save path=two\\nlines")


def test_unregistered_events_are_rejected() -> None:
    close_trace_log()
    with pytest.raises(ValueError, match="unknown trace event"):
        trace("heartbeat")


def test_categories_gate_events(tmp_path: Path) -> None:
    try:
        path = init_trace_log(base_dir=tmp_path, categories=["learning"])
        trace("dispatch", x=75.0, kind="click", cursor=0)
        trace("death", x=100.0, attempt=1, best=0.0)
        trace("mode", previous="off", mode="pathfinding", actions=0)
    finally:
        close_trace_log()

    text = path.read_text(encoding="utf-8")
    assert "event=dispatch" not in text
    assert "event=death" in text
    assert "event=mode" in text


def test_check_trace_categories() -> None:
    assert check_trace_categories([]) == frozenset({"session"})
    assert check_trace_categories([" Playback "]) == frozenset({"session", "playback"})
    with pytest.raises(ValueError, match="unknown trace categories: net"):
        check_trace_categories(["net", "learning"])


def test_every_event_belongs_to_a_known_category() -> None:
    assert set(TRACE_EVENTS.values()) <= set(TRACE_CATEGORIES)
