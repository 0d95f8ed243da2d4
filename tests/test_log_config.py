from __future__ import annotations

import logging

import pytest

from journeybot.config import LoggingConfig
from journeybot.log_config import LOG_FILE_NAME, configure_logging, resolve_level


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_configure_logging_writes_file(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("JOURNEYBOT_LOG_LEVEL", raising=False)
    log_path = configure_logging(LoggingConfig(level="INFO", log_dir=str(tmp_path / "logs")))

    logging.getLogger("journeybot.test").info("hello from the bot")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_path == tmp_path / "logs" / LOG_FILE_NAME
    assert "hello from the bot" in log_path.read_text(encoding="utf-8")


def test_env_override_wins(monkeypatch) -> None:
    monkeypatch.setenv("JOURNEYBOT_LOG_LEVEL", "debug")

    assert resolve_level("WARNING") == logging.DEBUG


def test_unknown_level_rejected(monkeypatch) -> None:
    monkeypatch.delenv("JOURNEYBOT_LOG_LEVEL", raising=False)

    with pytest.raises(ValueError):
        resolve_level("LOUD")
