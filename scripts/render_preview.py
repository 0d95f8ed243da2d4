"""Render a preview progress card to disk."""

from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from journeybot.config import parse_timestamp
from journeybot.delivery.dispatcher import build_caption
from journeybot.logic.progress import Interval, compute_progress
from journeybot.rendering import write_preview
from journeybot.rendering.preview import PREVIEW_PATH


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--start", required=True)
    parser.add_argument("--end", required=True)
    parser.add_argument("--now", default=None, help="defaults to the current time")
    parser.add_argument("--output", default=PREVIEW_PATH)
    args = parser.parse_args()

    try:
        interval = Interval(
            start=parse_timestamp(args.start, "--start"),
            end=parse_timestamp(args.end, "--end"),
        )
        now = parse_timestamp(args.now, "--now") if args.now else datetime.now().astimezone()
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    record = compute_progress(now, interval)
    path = write_preview(record, args.output)
    print("preview_written", str(path), flush=True)
    print(build_caption(record), flush=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
