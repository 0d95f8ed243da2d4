from __future__ import annotations

from journeybot.rendering.composer import render_png
from journeybot.rendering.frame_data import ProgressRecord
from journeybot.rendering.preview import write_preview

RECORD = ProgressRecord(
    percent=50.0,
    elapsed="01:00",
    remaining="01:00",
    start_time="10:00",
    end_time="12:00",
)


def test_write_preview_stores_sent_png(tmp_path) -> None:
    target = tmp_path / "nested" / "out" / "card.png"

    path = write_preview(RECORD, target)

    assert path == target
    assert target.read_bytes() == render_png(RECORD)


def test_write_preview_accepts_string_path(tmp_path) -> None:
    path = write_preview(RECORD, str(tmp_path / "card.png"))

    assert path.read_bytes().startswith(b"\x89PNG")
