"""Tests for environment configuration."""
from __future__ import annotations

from pathlib import Path

import pytest

from event_agenda.config import ConfigError, load_settings

ENV_VARS = (
    "AGENDA_ENV",
    "AGENDA_TIMEZONE",
    "AGENDA_EXPORT_DIR",
    "AGENDA_POLL_ENABLED",
    "AGENDA_POLL_INTERVAL_MINUTES",
    "AGENDA_DISCOVERY_REGION",
    "AGENDA_LOG_LEVEL",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_MODEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings(use_dotenv=False)

        assert settings.timezone == "America/Grand_Turk"
        assert settings.poll_enabled is False
        assert settings.poll_interval_minutes == 0
        assert settings.discovery_region == "Turks and Caicos"
        assert settings.anthropic_api_key is None
        assert settings.environment == "local"

    def test_values_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("AGENDA_TIMEZONE", "America/New_York")
        monkeypatch.setenv("AGENDA_EXPORT_DIR", str(tmp_path))
        monkeypatch.setenv("AGENDA_POLL_ENABLED", "true")
        monkeypatch.setenv("AGENDA_POLL_INTERVAL_MINUTES", "30")
        monkeypatch.setenv("AGENDA_LOG_LEVEL", "debug")
        monkeypatch.setenv("ANTHROPIC_API_KEY", " sk-test ")

        settings = load_settings(use_dotenv=False)

        assert settings.tz.key == "America/New_York"
        assert settings.export_dir == Path(tmp_path)
        assert settings.poll_enabled is True
        assert settings.poll_interval_minutes == 30
        assert settings.log_level == "DEBUG"
        assert settings.anthropic_api_key == "sk-test"

    def test_unknown_timezone(self, monkeypatch):
        monkeypatch.setenv("AGENDA_TIMEZONE", "Mars/Olympus_Mons")
        with pytest.raises(ConfigError):
            load_settings(use_dotenv=False)

    def test_bad_interval(self, monkeypatch):
        monkeypatch.setenv("AGENDA_POLL_INTERVAL_MINUTES", "often")
        with pytest.raises(ConfigError):
            load_settings(use_dotenv=False)
