"""Frame composer for the journey progress card."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from journeybot.rendering.frame_data import ProgressRecord

DISPLAY_WIDTH = 750
DISPLAY_HEIGHT = 225

BORDER_INSET = 1
BORDER_WIDTH = 2

BAR_MARGIN_X = 20
BAR_WIDTH = DISPLAY_WIDTH - 2 * BAR_MARGIN_X
BAR_HEIGHT = 20
BAR_X = BAR_MARGIN_X
BAR_Y = DISPLAY_HEIGHT - 50

TITLE_Y = 30
HEADLINE_Y = 60
TIME_ROW_Y = 90
TIME_ROW_GAP = 15
PERCENT_LABEL_Y = DISPLAY_HEIGHT - 35
TEXT_LEFT_X = BAR_MARGIN_X
TEXT_RIGHT_X = DISPLAY_WIDTH - BAR_MARGIN_X

COLOR_BACKGROUND = (44, 62, 80)
COLOR_BORDER = (52, 73, 94)
COLOR_TRACK = (52, 73, 94)
COLOR_TRACK_OUTLINE = (93, 109, 126)
COLOR_TEXT = (236, 240, 241)
COLOR_HEADLINE = (231, 76, 60)
COLOR_DETAIL = (189, 195, 199)

# Stops at 0%, 50% and 100% of the filled width.
GRADIENT_STOPS = (
    (0.0, (39, 174, 96)),
    (0.5, (46, 204, 113)),
    (1.0, (88, 214, 141)),
)

TITLE_TEXT = "Journey Status"

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ASSET_FONT_DIR = PROJECT_ROOT / "assets" / "fonts"
REGULAR_FONT_CANDIDATES = (
    ASSET_FONT_DIR / "DejaVuSans.ttf",
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
    Path("/usr/share/fonts/TTF/DejaVuSans.ttf"),
    Path("/usr/share/fonts/dejavu/DejaVuSans.ttf"),
)
BOLD_FONT_CANDIDATES = (
    ASSET_FONT_DIR / "DejaVuSans-Bold.ttf",
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"),
    Path("/usr/share/fonts/TTF/DejaVuSans-Bold.ttf"),
    Path("/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf"),
)


def _load_font(size: int, candidates: tuple[Path, ...]) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    for path in candidates:
        if path.exists():
            return ImageFont.truetype(str(path), size=size)
    # Pillow's bundled scalable font; only a bitmap font without FreeType.
    return ImageFont.load_default(size=size)


FONT_TITLE = _load_font(18, BOLD_FONT_CANDIDATES)
FONT_HEADLINE = _load_font(24, BOLD_FONT_CANDIDATES)
FONT_DETAIL = _load_font(12, REGULAR_FONT_CANDIDATES)
FONT_PERCENT = _load_font(12, BOLD_FONT_CANDIDATES)


def fill_width(percent: float, track_width: int = BAR_WIDTH) -> int:
    """Pixel width of the filled part of the bar, clamped to the track."""
    width = int(track_width * percent / 100)
    return min(max(width, 0), track_width)


def gradient_color(position: float) -> tuple[int, int, int]:
    """Interpolate the bar gradient at a position in [0, 1] of the filled width."""
    position = min(max(position, 0.0), 1.0)
    for (left_pos, left_color), (right_pos, right_color) in zip(GRADIENT_STOPS, GRADIENT_STOPS[1:]):
        if position <= right_pos:
            span = right_pos - left_pos
            t = (position - left_pos) / span if span else 0.0
            return tuple(
                int(round(lo + (hi - lo) * t)) for lo, hi in zip(left_color, right_color)
            )
    return GRADIENT_STOPS[-1][1]


def _draw_background(draw: ImageDraw.ImageDraw, width: int, height: int) -> None:
    draw.rectangle((0, 0, width - 1, height - 1), fill=COLOR_BACKGROUND)
    draw.rectangle(
        (BORDER_INSET, BORDER_INSET, width - 1 - BORDER_INSET, height - 1 - BORDER_INSET),
        outline=COLOR_BORDER,
        width=BORDER_WIDTH,
    )


def _draw_progress_bar(draw: ImageDraw.ImageDraw, percent: float) -> None:
    bar_right = BAR_X + BAR_WIDTH - 1
    bar_bottom = BAR_Y + BAR_HEIGHT - 1
    draw.rectangle(
        (BAR_X, BAR_Y, bar_right, bar_bottom),
        fill=COLOR_TRACK,
        outline=COLOR_TRACK_OUTLINE,
        width=1,
    )

    filled = fill_width(percent)
    if filled <= 0:
        return
    last_column = max(filled - 1, 1)
    for offset in range(filled):
        color = gradient_color(offset / last_column)
        x = BAR_X + offset
        draw.line((x, BAR_Y, x, bar_bottom), fill=color)


def _draw_texts(draw: ImageDraw.ImageDraw, record: ProgressRecord, width: int) -> None:
    center_x = width // 2

    draw.text((center_x, TITLE_Y), TITLE_TEXT, font=FONT_TITLE, fill=COLOR_TEXT, anchor="ms")
    draw.text(
        (center_x, HEADLINE_Y),
        f"Remaining: {100 - record.percent:.1f}%",
        font=FONT_HEADLINE,
        fill=COLOR_HEADLINE,
        anchor="ms",
    )

    second_row_y = TIME_ROW_Y + TIME_ROW_GAP
    draw.text((TEXT_LEFT_X, TIME_ROW_Y), f"Elapsed: {record.elapsed}", font=FONT_DETAIL, fill=COLOR_DETAIL, anchor="ls")
    draw.text((TEXT_LEFT_X, second_row_y), f"Remaining: {record.remaining}", font=FONT_DETAIL, fill=COLOR_DETAIL, anchor="ls")
    draw.text((TEXT_RIGHT_X, TIME_ROW_Y), f"Start: {record.start_time}", font=FONT_DETAIL, fill=COLOR_DETAIL, anchor="rs")
    draw.text((TEXT_RIGHT_X, second_row_y), f"End: {record.end_time}", font=FONT_DETAIL, fill=COLOR_DETAIL, anchor="rs")

    draw.text(
        (center_x, PERCENT_LABEL_Y),
        f"{record.percent:.1f}%",
        font=FONT_PERCENT,
        fill=COLOR_TEXT,
        anchor="ms",
    )


def compose_frame(record: ProgressRecord) -> Image.Image:
    """Compose the RGB progress card for a ProgressRecord."""
    image = Image.new("RGB", (DISPLAY_WIDTH, DISPLAY_HEIGHT), COLOR_BACKGROUND)
    draw = ImageDraw.Draw(image)

    _draw_background(draw, DISPLAY_WIDTH, DISPLAY_HEIGHT)
    _draw_progress_bar(draw, record.percent)
    _draw_texts(draw, record, DISPLAY_WIDTH)

    return image


def render_png(record: ProgressRecord) -> bytes:
    """Render a ProgressRecord and encode it as PNG bytes."""
    buffer = BytesIO()
    compose_frame(record).save(buffer, format="PNG")
    return buffer.getvalue()


__all__ = ["compose_frame", "fill_width", "gradient_color", "render_png"]
