"""Configuration loader for the journey progress bot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import os
from typing import Any

from dotenv import load_dotenv
import yaml

from journeybot.logic.progress import Interval

DEFAULT_SESSION_PATH = "./session"
DEFAULT_WHATSAPP_API_URL = "http://localhost:3000"
DEFAULT_WHATSAPP_SESSION = "default"


@dataclass(frozen=True)
class JourneyConfig:
    """Journey window and the people who get updates."""

    interval: Interval
    recipients: tuple[str, ...]


@dataclass(frozen=True)
class WhatsAppConfig:
    """WhatsApp HTTP gateway connection settings."""

    api_url: str
    api_key: str
    session_name: str
    session_path: str


@dataclass(frozen=True)
class ScheduleConfig:
    """Update cadence."""

    interval_minutes: float


@dataclass(frozen=True)
class DeliveryConfig:
    """Fan-out pacing and readiness settings."""

    pacing_ms: int
    ready_timeout_seconds: float
    status_poll_seconds: float


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    log_dir: str


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    journey: JourneyConfig
    whatsapp: WhatsAppConfig
    schedule: ScheduleConfig
    delivery: DeliveryConfig
    log: LoggingConfig


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _require_env(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise ValueError(f"Missing required environment variable {name}")
    return value


def _positive_number(value: Any, key: str, context: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{key}' in {context} config must be a number")
    if value <= 0:
        raise ValueError(f"'{key}' in {context} config must be positive")
    return value


def parse_timestamp(value: str, name: str = "timestamp") -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as local time."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"{name} is not a valid ISO-8601 timestamp: {value!r}") from exc
    return parsed.astimezone()


def parse_recipients(value: str) -> tuple[str, ...]:
    """Split a comma-separated recipient list, dropping blank entries."""
    return tuple(part.strip() for part in value.split(",") if part.strip())


def load_journey() -> JourneyConfig:
    """Build the journey interval and recipient list from the environment."""
    start = parse_timestamp(_require_env("START_TIME"), "START_TIME")
    end = parse_timestamp(_require_env("END_TIME"), "END_TIME")
    interval = Interval(start=start, end=end)

    raw_recipients = os.environ.get("PHONE_NUMBERS") or os.environ.get("PHONE_NUMBER") or ""
    if not raw_recipients.strip():
        raise ValueError("Missing required environment variable PHONE_NUMBERS or PHONE_NUMBER")
    recipients = parse_recipients(raw_recipients)
    if not recipients:
        raise ValueError("No valid phone numbers found in PHONE_NUMBERS or PHONE_NUMBER")

    return JourneyConfig(interval=interval, recipients=recipients)


def load_whatsapp() -> WhatsAppConfig:
    """Read gateway settings from the environment; all of them have defaults."""
    return WhatsAppConfig(
        api_url=os.environ.get("WHATSAPP_API_URL", "").strip() or DEFAULT_WHATSAPP_API_URL,
        api_key=os.environ.get("WHATSAPP_API_KEY", "").strip(),
        session_name=os.environ.get("WHATSAPP_SESSION", "").strip() or DEFAULT_WHATSAPP_SESSION,
        session_path=os.environ.get("SESSION_PATH", "").strip() or DEFAULT_SESSION_PATH,
    )


def load_config(path: str = "config/config.yaml") -> AppConfig:
    """Load application configuration from the environment and a YAML file."""
    load_dotenv()
    journey = load_journey()
    whatsapp = load_whatsapp()

    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    schedule_section = _require_key(data, "schedule", "schedule")
    delivery_section = _require_key(data, "delivery", "delivery")
    logging_section = _require_key(data, "logging", "logging")

    if not isinstance(schedule_section, dict):
        raise ValueError("'schedule' config must be a mapping")
    if not isinstance(delivery_section, dict):
        raise ValueError("'delivery' config must be a mapping")
    if not isinstance(logging_section, dict):
        raise ValueError("'logging' config must be a mapping")

    schedule = ScheduleConfig(
        interval_minutes=_positive_number(
            _require_key(schedule_section, "interval_minutes", "schedule"), "interval_minutes", "schedule"
        ),
    )

    pacing_ms = _require_key(delivery_section, "pacing_ms", "delivery")
    if isinstance(pacing_ms, bool) or not isinstance(pacing_ms, int) or pacing_ms < 0:
        raise ValueError("'pacing_ms' in delivery config must be a non-negative integer")

    delivery = DeliveryConfig(
        pacing_ms=pacing_ms,
        ready_timeout_seconds=_positive_number(
            _require_key(delivery_section, "ready_timeout_seconds", "delivery"),
            "ready_timeout_seconds",
            "delivery",
        ),
        status_poll_seconds=_positive_number(
            _require_key(delivery_section, "status_poll_seconds", "delivery"),
            "status_poll_seconds",
            "delivery",
        ),
    )

    logging = LoggingConfig(
        level=_require_key(logging_section, "level", "logging"),
        log_dir=_require_key(logging_section, "log_dir", "logging"),
    )

    return AppConfig(
        journey=journey,
        whatsapp=whatsapp,
        schedule=schedule,
        delivery=delivery,
        log=logging,
    )
