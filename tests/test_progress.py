from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from journeybot.logic.progress import Interval, compute_progress, format_clock, format_duration
from journeybot.rendering.frame_data import ProgressRecord

START = datetime(2024, 1, 1, 10, 0)
END = datetime(2024, 1, 1, 12, 0)


@pytest.fixture()
def interval() -> Interval:
    return Interval(start=START, end=END)


def test_midpoint_scenario(interval: Interval) -> None:
    record = compute_progress(datetime(2024, 1, 1, 11, 0), interval)

    assert record == ProgressRecord(
        percent=50.0,
        elapsed="01:00",
        remaining="01:00",
        start_time="10:00",
        end_time="12:00",
    )


def test_before_start_is_zero(interval: Interval) -> None:
    record = compute_progress(START - timedelta(hours=3), interval)

    assert record.percent == 0
    assert record.elapsed == "00:00"
    assert record.remaining == "02:00"
    assert record.start_time == "10:00"
    assert record.end_time == "12:00"


def test_after_end_is_complete(interval: Interval) -> None:
    record = compute_progress(END + timedelta(minutes=1), interval)

    assert record.percent == 100
    assert record.elapsed == "02:00"
    assert record.remaining == "00:00"


def test_exact_boundaries(interval: Interval) -> None:
    assert compute_progress(START, interval).percent == 0
    assert compute_progress(END, interval).percent == 100
    assert compute_progress(END, interval).remaining == "00:00"


def test_percent_is_monotonic_and_bounded(interval: Interval) -> None:
    previous = -1.0
    now = START
    while now <= END:
        percent = compute_progress(now, interval).percent
        assert 0 <= percent <= 100
        assert percent >= previous
        previous = percent
        now += timedelta(minutes=7, seconds=13)


def test_percent_is_not_rounded(interval: Interval) -> None:
    record = compute_progress(START + timedelta(minutes=1), interval)

    assert record.percent == pytest.approx(100 / 120)


def test_compute_is_repeatable(interval: Interval) -> None:
    now = START + timedelta(minutes=42, seconds=5)

    assert compute_progress(now, interval) == compute_progress(now, interval)


def test_labels_drop_partial_minutes(interval: Interval) -> None:
    record = compute_progress(START + timedelta(minutes=30, seconds=59), interval)

    assert record.elapsed == "00:30"
    assert record.remaining == "01:29"


@pytest.mark.parametrize(
    ("duration", "expected"),
    [
        (timedelta(minutes=90), "01:30"),
        (timedelta(0), "00:00"),
        (timedelta(hours=26, minutes=5), "26:05"),
        (timedelta(minutes=-5), "00:00"),
    ],
)
def test_format_duration(duration: timedelta, expected: str) -> None:
    assert format_duration(duration) == expected


def test_format_clock_uses_wall_clock() -> None:
    assert format_clock(datetime(2024, 1, 1, 7, 5)) == "07:05"


def test_interval_rejects_empty_or_reversed() -> None:
    with pytest.raises(ValueError):
        Interval(start=START, end=START)
    with pytest.raises(ValueError):
        Interval(start=END, end=START)
