"""Rendering utilities for the journey progress card."""

from journeybot.rendering.composer import compose_frame, render_png
from journeybot.rendering.frame_data import ProgressRecord
from journeybot.rendering.preview import write_preview

__all__ = ["ProgressRecord", "compose_frame", "render_png", "write_preview"]
