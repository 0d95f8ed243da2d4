"""Paced fan-out of a rendered image to every recipient."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
import threading
import time
from typing import Any, Callable, Sequence

from journeybot.rendering.frame_data import ProgressRecord

logger = logging.getLogger(__name__)

DEFAULT_PACING_MS = 2000
IMAGE_FILENAME = "journey-status.png"


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one recipient's send."""

    recipient: str
    delay_ms: int
    success: bool
    error: str | None = None


@dataclass(frozen=True)
class BatchReport:
    """All recipient outcomes for one tick, in recipient order."""

    results: tuple[DeliveryResult, ...]

    @property
    def successes(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failures(self) -> int:
        return sum(1 for result in self.results if not result.success)


def pacing_delay_ms(index: int, pacing_ms: int = DEFAULT_PACING_MS) -> int:
    """Start offset for the zero-indexed recipient."""
    return index * pacing_ms


def build_caption(record: ProgressRecord) -> str:
    return (
        "Journey Status\n\n"
        f"Elapsed: {record.elapsed}\n"
        f"Remaining: {record.remaining}\n"
        f"Progress: {record.percent:.1f}%"
    )


def _send_one(
    client: Any,
    recipient: str,
    delay_ms: int,
    image: bytes,
    filename: str,
    caption: str,
    sleep: Callable[[float], None],
    cancel: threading.Event | None,
) -> DeliveryResult:
    if delay_ms > 0:
        if cancel is not None:
            cancel.wait(timeout=delay_ms / 1000)
        else:
            sleep(delay_ms / 1000)
    if cancel is not None and cancel.is_set():
        return DeliveryResult(recipient=recipient, delay_ms=delay_ms, success=False, error="delivery cancelled")
    try:
        client.send_image(recipient, image, filename, caption)
    except Exception as exc:
        logger.error("Sending to %s failed: %s", recipient, exc)
        return DeliveryResult(recipient=recipient, delay_ms=delay_ms, success=False, error=str(exc))
    return DeliveryResult(recipient=recipient, delay_ms=delay_ms, success=True)


def dispatch_image(
    client: Any,
    recipients: Sequence[str],
    image: bytes,
    caption: str,
    filename: str = IMAGE_FILENAME,
    pacing_ms: int = DEFAULT_PACING_MS,
    sleep: Callable[[float], None] = time.sleep,
    cancel: threading.Event | None = None,
) -> BatchReport:
    """Send the image to every recipient, staggering starts by pacing_ms.

    A failed send is recorded in its own result and never stops the others.
    Setting `cancel` ends pending pacing waits; unsent recipients are reported as cancelled.
    """
    if not recipients:
        return BatchReport(results=())

    logger.info("Sending image to %d recipient(s)", len(recipients))
    with ThreadPoolExecutor(max_workers=len(recipients), thread_name_prefix="dispatch") as executor:
        futures = [
            executor.submit(
                _send_one,
                client,
                recipient,
                pacing_delay_ms(index, pacing_ms),
                image,
                filename,
                caption,
                sleep,
                cancel,
            )
            for index, recipient in enumerate(recipients)
        ]
        report = BatchReport(results=tuple(future.result() for future in futures))

    logger.info("Delivery result: %d succeeded, %d failed", report.successes, report.failures)
    for result in report.results:
        if not result.success:
            logger.error("Recipient %s failed: %s", result.recipient, result.error)
    return report


__all__ = [
    "BatchReport",
    "DeliveryResult",
    "IMAGE_FILENAME",
    "build_caption",
    "dispatch_image",
    "pacing_delay_ms",
]
