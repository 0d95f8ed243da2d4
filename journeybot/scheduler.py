"""Periodic progress updates: compute, render, deliver."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import threading
from typing import Any, Callable

from journeybot.config import AppConfig
from journeybot.delivery.dispatcher import BatchReport, build_caption, dispatch_image
from journeybot.logic.progress import compute_progress
from journeybot.rendering.composer import render_png

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProgressBot:
    """Send a progress card at startup and then on a fixed interval."""

    def __init__(
        self,
        config: AppConfig,
        client: Any,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._config = config
        self._client = client
        self._clock = clock
        self._interval_seconds = config.schedule.interval_minutes * 60
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._destroyed = False

    def start(self) -> None:
        """Connect the client, send the first update and start the timer thread."""
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._client.initialize()

        timeout = self._config.delivery.ready_timeout_seconds
        if not self._client.wait_until_ready(timeout):
            logger.warning("WhatsApp session not ready after %.0fs; continuing on schedule", timeout)

        logger.info("Sending initial progress update")
        self.send_progress_update()

        # stop() may have run during the first update
        if self._stop_event.is_set():
            return
        self._thread = threading.Thread(target=self._run_loop, name="progress-schedule", daemon=True)
        self._thread.start()
        logger.info("Scheduled updates every %g minutes", self._config.schedule.interval_minutes)

    def stop(self) -> None:
        """Stop the timer thread and release the client once."""
        self._stop_event.set()
        if self._thread and self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join()
        if not self._destroyed:
            self._destroyed = True
            self._client.destroy()

    def run_forever(self) -> None:
        """Start and block until interrupted."""
        try:
            self.start()
            while not self._stop_event.wait(timeout=1.0):
                pass
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
        finally:
            self.stop()

    def send_progress_update(self) -> BatchReport | None:
        """Run one tick; failures are logged and never escape."""
        if not self._client.is_ready():
            logger.info("WhatsApp session not ready, skipping this update")
            return None

        try:
            record = compute_progress(self._clock(), self._config.journey.interval)
            logger.info(
                "Progress %.1f%% (elapsed %s, remaining %s)",
                record.percent,
                record.elapsed,
                record.remaining,
            )
            image = render_png(record)
            return dispatch_image(
                self._client,
                self._config.journey.recipients,
                image,
                build_caption(record),
                pacing_ms=self._config.delivery.pacing_ms,
                cancel=self._stop_event,
            )
        except Exception:
            logger.exception("Progress update failed")
            return None

    def _run_loop(self) -> None:
        while not self._stop_event.wait(timeout=self._interval_seconds):
            logger.info("Running scheduled update")
            self.send_progress_update()


__all__ = ["ProgressBot"]
