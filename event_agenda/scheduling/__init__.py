"""Timers: per-event reminders and periodic discovery polling."""
from __future__ import annotations

from .reminders import (
    ArmedReminder,
    ReminderScheduler,
    compute_fire_time,
    format_reminder,
    log_notifier,
)

from .poller import PollScheduler


__all__ = [
    "ArmedReminder",
    "ReminderScheduler",
    "compute_fire_time",
    "format_reminder",
    "log_notifier",
    "PollScheduler",
]
