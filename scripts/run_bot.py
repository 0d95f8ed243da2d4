"""Run the journey progress bot."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from journeybot.config import load_config
from journeybot.data.session import SessionTracker
from journeybot.data.whatsapp_client import WhatsAppClient, WhatsAppClientError
from journeybot.log_config import LOG_FORMAT, configure_logging
from journeybot.scheduler import ProgressBot

logger = logging.getLogger("journeybot.run")


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", default="config/config.yaml")
    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except ValueError as exc:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error("Invalid configuration: %s", exc)
        logger.error("Check your .env file, e.g. PHONE_NUMBERS=+905551234567,+905559876543")
        return 1

    configure_logging(config.log)
    interval = config.journey.interval
    logger.info("Start: %s", interval.start.strftime("%d/%m/%Y %H:%M"))
    logger.info("End: %s", interval.end.strftime("%d/%m/%Y %H:%M"))
    logger.info("Recipients (%d): %s", len(config.journey.recipients), ", ".join(config.journey.recipients))

    client = WhatsAppClient(
        api_url=config.whatsapp.api_url,
        session_name=config.whatsapp.session_name,
        api_key=config.whatsapp.api_key,
        tracker=SessionTracker(config.whatsapp.session_path),
        status_poll_seconds=config.delivery.status_poll_seconds,
    )
    bot = ProgressBot(config, client)
    try:
        bot.run_forever()
    except WhatsAppClientError as exc:
        logger.error("Could not start WhatsApp client: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
