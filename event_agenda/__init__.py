"""Event Agenda: a personal event-tracking assistant.

Discovered events can be saved to a personal agenda, annotated, reminded
about and finally moved to an attended history.
"""
from __future__ import annotations

from .config import ConfigError, Settings, load_settings
from .session import AgendaSession

__all__ = [
    "AgendaSession",
    "ConfigError",
    "Settings",
    "load_settings",
]
