from __future__ import annotations

import json
import threading

from journeybot.data.session import STATE_FILE_NAME, SessionState, SessionTracker


def test_initial_state_uninitialized() -> None:
    tracker = SessionTracker()

    assert tracker.state is SessionState.UNINITIALIZED
    assert not tracker.is_ready()


def test_pairing_then_ready() -> None:
    tracker = SessionTracker()

    tracker.on_pairing_code()
    assert tracker.state is SessionState.AWAITING_PAIRING
    assert not tracker.is_ready()

    tracker.on_ready()
    assert tracker.state is SessionState.READY
    assert tracker.is_ready()


def test_disconnect_clears_readiness() -> None:
    tracker = SessionTracker()
    tracker.on_ready()

    tracker.on_disconnected("phone offline")

    assert tracker.state is SessionState.DISCONNECTED
    assert tracker.detail == "phone offline"
    assert not tracker.is_ready()


def test_auth_failure_disconnects() -> None:
    tracker = SessionTracker()
    tracker.on_pairing_code()

    tracker.on_auth_failure("bad credentials")

    assert tracker.state is SessionState.DISCONNECTED


def test_wait_until_ready_times_out() -> None:
    tracker = SessionTracker()

    assert tracker.wait_until_ready(timeout=0.05) is False


def test_wait_until_ready_wakes_on_ready() -> None:
    tracker = SessionTracker()
    timer = threading.Timer(0.05, tracker.on_ready)
    timer.start()
    try:
        assert tracker.wait_until_ready(timeout=2) is True
    finally:
        timer.cancel()


def test_transitions_persist_to_session_path(tmp_path) -> None:
    session_dir = tmp_path / "session"
    tracker = SessionTracker(session_dir)

    tracker.on_ready()

    record = json.loads((session_dir / STATE_FILE_NAME).read_text())
    assert record["state"] == "ready"
    assert record["updated_at"]


def test_repeated_auth_failure_logs_once(caplog) -> None:
    tracker = SessionTracker()

    tracker.on_auth_failure("gateway status FAILED")
    tracker.on_auth_failure("gateway status FAILED")

    assert caplog.text.count("Authentication failed") == 1
    assert tracker.state is SessionState.DISCONNECTED
