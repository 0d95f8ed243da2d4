"""Write journey cards to disk so the layout can be checked without sending."""

from __future__ import annotations

from pathlib import Path

from journeybot.rendering.composer import render_png
from journeybot.rendering.frame_data import ProgressRecord

PREVIEW_PATH = "preview_output/journey-status.png"


def write_preview(record: ProgressRecord, path: str | Path = PREVIEW_PATH) -> Path:
    """Render the card exactly as it would be sent and store the PNG at path."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(render_png(record))
    return output_path


__all__ = ["PREVIEW_PATH", "write_preview"]
