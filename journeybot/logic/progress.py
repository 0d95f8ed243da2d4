"""Journey progress calculation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from journeybot.rendering.frame_data import ProgressRecord

ZERO_DURATION = "00:00"


@dataclass(frozen=True)
class Interval:
    """Fixed journey window; start must precede end."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(
                f"Journey start ({self.start.isoformat()}) must be before end ({self.end.isoformat()})."
            )

    @property
    def total(self) -> timedelta:
        return self.end - self.start


def format_duration(duration: timedelta) -> str:
    """Format a duration as zero-padded HH:MM; hours do not roll over into days."""
    total_minutes = max(int(duration.total_seconds()) // 60, 0)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


def format_clock(dt: datetime) -> str:
    """Local wall-clock HH:MM for a boundary timestamp."""
    return dt.astimezone().strftime("%H:%M")


def compute_progress(now: datetime, interval: Interval) -> ProgressRecord:
    """Map the current time onto the journey interval."""
    start_time = format_clock(interval.start)
    end_time = format_clock(interval.end)

    if now < interval.start:
        return ProgressRecord(
            percent=0.0,
            elapsed=ZERO_DURATION,
            remaining=format_duration(interval.total),
            start_time=start_time,
            end_time=end_time,
        )

    if now > interval.end:
        return ProgressRecord(
            percent=100.0,
            elapsed=format_duration(interval.total),
            remaining=ZERO_DURATION,
            start_time=start_time,
            end_time=end_time,
        )

    elapsed = now - interval.start
    remaining = interval.end - now
    percent = elapsed / interval.total * 100
    return ProgressRecord(
        percent=min(max(percent, 0.0), 100.0),
        elapsed=format_duration(elapsed),
        remaining=format_duration(remaining),
        start_time=start_time,
        end_time=end_time,
    )


__all__ = ["Interval", "compute_progress", "format_clock", "format_duration"]
