"""Configuration helpers for the Event Agenda service and CLI."""
from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv


DEFAULT_TIMEZONE = "America/Grand_Turk"
DEFAULT_REGION = "Turks and Caicos"
DEFAULT_EXPORT_NAME = "agenda-events.json"


class ConfigError(RuntimeError):
    """Raised when configuration values are missing or invalid."""


@dataclass(slots=True)
class Settings:
    """Runtime configuration for the agenda session."""

    timezone: str = DEFAULT_TIMEZONE
    export_dir: Path = Path("agenda_exports")
    poll_enabled: bool = False
    poll_interval_minutes: float = 0
    discovery_region: str = DEFAULT_REGION
    anthropic_api_key: Optional[str] = None
    anthropic_model: Optional[str] = None
    log_level: str = "INFO"
    environment: str = "local"

    @property
    def tz(self) -> ZoneInfo:
        """Zone used to interpret event dates (local midnight)."""
        return ZoneInfo(self.timezone)


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_settings(*, use_dotenv: bool = True) -> Settings:
    """Load settings from environment variables (and a .env file if present).

    Returns:
        Settings with values resolved from AGENDA_* and ANTHROPIC_* variables.

    Raises:
        ConfigError: if the time zone is unknown or the poll interval is not a number.
    """

    if use_dotenv:
        load_dotenv()

    timezone_name = os.getenv("AGENDA_TIMEZONE", DEFAULT_TIMEZONE).strip() or DEFAULT_TIMEZONE
    try:
        ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown time zone in AGENDA_TIMEZONE: {timezone_name!r}") from exc

    raw_interval = os.getenv("AGENDA_POLL_INTERVAL_MINUTES", "0").strip() or "0"
    try:
        interval = float(raw_interval)
    except ValueError as exc:
        raise ConfigError(
            f"AGENDA_POLL_INTERVAL_MINUTES must be a number of minutes, got {raw_interval!r}"
        ) from exc

    api_key = os.getenv("ANTHROPIC_API_KEY")

    return Settings(
        timezone=timezone_name,
        export_dir=Path(os.getenv("AGENDA_EXPORT_DIR", "agenda_exports")),
        poll_enabled=_env_flag("AGENDA_POLL_ENABLED"),
        poll_interval_minutes=interval,
        discovery_region=os.getenv("AGENDA_DISCOVERY_REGION", DEFAULT_REGION).strip() or DEFAULT_REGION,
        anthropic_api_key=api_key.strip() if api_key else None,
        anthropic_model=os.getenv("ANTHROPIC_MODEL") or None,
        log_level=os.getenv("AGENDA_LOG_LEVEL", "INFO").upper(),
        environment=os.getenv("AGENDA_ENV", "local"),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the CLI and API entry points."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
