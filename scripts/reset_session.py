"""Remove the stored WhatsApp session and pairing QR files."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from dotenv import load_dotenv

from journeybot.config import DEFAULT_SESSION_PATH
from journeybot.log_config import LOG_FORMAT
from journeybot.maintenance import FAILED, reset_session

logger = logging.getLogger("journeybot.reset")


def main() -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--session-path", default=os.environ.get("SESSION_PATH") or DEFAULT_SESSION_PATH)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    results = reset_session(args.session_path)

    failed = [result for result in results if result.status == FAILED]
    if failed:
        logger.warning("Cleanup finished with %d error(s)", len(failed))
    else:
        logger.info("Cleanup finished")
    logger.info("Restart the bot and scan the new QR code to pair again")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
