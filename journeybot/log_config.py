"""Logging setup for the journey progress bot."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path

from journeybot.config import LoggingConfig

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
LOG_FILE_NAME = "journeybot.log"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3

NOISY_LOGGERS = ("urllib3", "urllib3.connectionpool", "PIL")


def resolve_level(configured: str) -> int:
    """Pick the root level; JOURNEYBOT_LOG_LEVEL overrides the configured one."""
    override = os.getenv("JOURNEYBOT_LOG_LEVEL", "").strip().upper()
    name = override or str(configured).strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def configure_logging(config: LoggingConfig) -> Path | None:
    """Install console and rotating file handlers on the root logger.

    Returns the log file path, or None when the log directory is not writable.
    """
    level = resolve_level(config.level)
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    log_path: Path | None = Path(config.log_dir) / LOG_FILE_NAME
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        )
    except OSError as exc:
        root_logger.warning("File logging disabled, cannot open %s: %s", log_path, exc)
        log_path = None
    else:
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_path


__all__ = ["configure_logging", "resolve_level"]
