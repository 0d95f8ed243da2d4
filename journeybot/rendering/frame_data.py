"""Data structures for rendering frames."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProgressRecord:
    """Journey progress snapshot for the renderer."""

    percent: float  # 0..100, share of the interval elapsed
    elapsed: str
    remaining: str
    start_time: str
    end_time: str


__all__ = ["ProgressRecord"]
