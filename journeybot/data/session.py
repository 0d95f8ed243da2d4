"""Messaging session state tracking."""

from __future__ import annotations

from datetime import datetime, timezone
import enum
import json
import logging
from pathlib import Path
import threading

logger = logging.getLogger(__name__)

STATE_FILE_NAME = "state.json"


class SessionState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    AWAITING_PAIRING = "awaiting_pairing"
    READY = "ready"
    DISCONNECTED = "disconnected"


class SessionTracker:
    """Hold the current session state; transitions come from gateway callbacks."""

    def __init__(self, session_path: str | Path | None = None) -> None:
        self._session_path = Path(session_path) if session_path else None
        self._state = SessionState.UNINITIALIZED
        self._detail: str | None = None
        self._lock = threading.Lock()
        self._ready_event = threading.Event()

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def detail(self) -> str | None:
        with self._lock:
            return self._detail

    def is_ready(self) -> bool:
        return self._ready_event.is_set()

    def wait_until_ready(self, timeout: float) -> bool:
        """Block until READY or the timeout elapses; returns readiness."""
        return self._ready_event.wait(timeout=timeout)

    def on_pairing_code(self) -> None:
        self._transition(SessionState.AWAITING_PAIRING)

    def on_ready(self) -> None:
        self._transition(SessionState.READY)

    def on_disconnected(self, reason: str | None = None) -> None:
        self._transition(SessionState.DISCONNECTED, reason)

    def on_auth_failure(self, message: str | None = None) -> None:
        if self.state is not SessionState.DISCONNECTED:
            logger.error("Authentication failed: %s", message or "unknown reason")
        self._transition(SessionState.DISCONNECTED, message)

    def on_reset(self) -> None:
        self._transition(SessionState.UNINITIALIZED)

    def _transition(self, new_state: SessionState, detail: str | None = None) -> None:
        with self._lock:
            previous = self._state
            self._state = new_state
            self._detail = detail
            if new_state is SessionState.READY:
                self._ready_event.set()
            else:
                self._ready_event.clear()
        if previous is new_state:
            return
        if detail:
            logger.info("Session %s -> %s (%s)", previous.value, new_state.value, detail)
        else:
            logger.info("Session %s -> %s", previous.value, new_state.value)
        self._persist(new_state, detail)

    def _persist(self, state: SessionState, detail: str | None) -> None:
        if self._session_path is None:
            return
        record = {
            "state": state.value,
            "detail": detail,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self._session_path.mkdir(parents=True, exist_ok=True)
            (self._session_path / STATE_FILE_NAME).write_text(json.dumps(record), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not persist session state to %s: %s", self._session_path, exc)


__all__ = ["SessionState", "SessionTracker", "STATE_FILE_NAME"]
