"""Reminder scheduler: one asyncio timer per saved event with a future reminder.

Policy is recompute-on-mutation. Every store change cancels all armed timers
and arms them again from the current saved events:

    fire_at = parse_event_date(event.date_text) - event.reminder_lead_time

A timer is armed only when the date parses and ``fire_at`` is strictly in the
future. Past-due reminders are skipped (no catch-up firing).

Armed reminders are indexed by title. A firing timer looks its event up again
and does nothing if the event was removed or its reminder cleared in the
meantime.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from zoneinfo import ZoneInfo

from ..agenda.store import AgendaStore
from ..events.dates import DEFAULT_TZ, parse_event_date
from ..events.identity import index_by_identity
from ..events.types import SavedEvent

logger = logging.getLogger(__name__)


Notifier = Callable[[str], None]
Clock = Callable[[], datetime]


def format_reminder(title: str, date_text: str) -> str:
    return f'Reminder: the event "{title}" is on {date_text}'


def log_notifier(message: str) -> None:
    """Default notification collaborator: a log line."""
    logger.info(message)


def compute_fire_time(event: SavedEvent, tz: Optional[ZoneInfo] = None) -> Optional[datetime]:
    """Return when the event's reminder should fire, or None if it never should."""
    if event.reminder_lead_time is None:
        return None
    event_date = parse_event_date(event.date_text, tz)
    if event_date is None:
        return None
    try:
        return event_date - event.reminder_lead_time
    except OverflowError:
        # Before datetime.min; such a reminder can never fire
        return None


@dataclass(slots=True)
class ArmedReminder:
    """A pending reminder timer."""

    title: str
    date_text: str
    fire_at: datetime
    handle: asyncio.TimerHandle

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "dateText": self.date_text,
            "fireAt": self.fire_at.isoformat(),
        }


class ReminderScheduler:
    """Keeps reminder timers in step with an AgendaStore."""

    def __init__(
        self,
        store: AgendaStore,
        notify: Optional[Notifier] = None,
        *,
        tz: Optional[ZoneInfo] = None,
        clock: Optional[Clock] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            store: Agenda store whose saved events drive the timers.
            notify: Called with the reminder message when a timer fires.
            tz: Zone for interpreting event dates.
            clock: Returns the current aware datetime (injectable for tests).
            loop: Event loop for timers; defaults to the running loop.
        """
        self._store = store
        self._notify = notify or log_notifier
        self._tz = tz or DEFAULT_TZ
        self._clock = clock or (lambda: datetime.now(self._tz))
        self._loop = loop
        self._armed: Dict[str, List[ArmedReminder]] = {}
        self._attached = False
        self._closed = False

    @property
    def armed(self) -> List[ArmedReminder]:
        """Pending reminders, in arming order."""
        return [reminder for group in self._armed.values() for reminder in group]

    @property
    def armed_titles(self) -> List[str]:
        return [reminder.title for reminder in self.armed]

    def attach(self) -> None:
        """Subscribe to store changes and arm timers for the current state."""
        if self._attached or self._closed:
            return
        self._store.subscribe(self.recompute)
        self._attached = True
        self.recompute()

    def detach(self) -> None:
        if self._attached:
            self._store.unsubscribe(self.recompute)
            self._attached = False

    def close(self) -> None:
        """Detach from the store and cancel every timer. Safe to call twice."""
        self.detach()
        self.cancel_all()
        self._closed = True

    def cancel_all(self) -> None:
        """Cancel every armed timer. Idempotent."""
        for reminder in self.armed:
            reminder.handle.cancel()
        self._armed.clear()

    def _resolve_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def recompute(self) -> None:
        """Cancel all timers, then arm one per eligible saved event."""
        self.cancel_all()
        if self._closed:
            return

        loop = self._resolve_loop()
        if loop is None:
            logger.warning("No event loop available; reminders not armed")
            return

        now = self._clock()
        for title, events in index_by_identity(self._store.saved).items():
            armed: List[ArmedReminder] = []
            for event in events:
                fire_at = compute_fire_time(event, self._tz)
                if fire_at is None:
                    continue
                delay = (fire_at - now).total_seconds()
                if delay <= 0:
                    logger.debug(f"Reminder for {title!r} is past due, not armed")
                    continue

                handle = loop.call_later(delay, self._fire, title, fire_at)
                armed.append(
                    ArmedReminder(title=title, date_text=event.date_text, fire_at=fire_at, handle=handle)
                )
            if armed:
                self._armed[title] = armed

        if self._armed:
            logger.debug(f"Armed {len(self.armed)} reminder(s)")

    def _fire(self, title: str, fire_at: datetime) -> None:
        remaining = [r for r in self._armed.get(title, []) if r.fire_at != fire_at]
        if remaining:
            self._armed[title] = remaining
        else:
            self._armed.pop(title, None)

        event = self._store.find(title)
        if event is None or event.reminder_lead_time is None:
            logger.debug(f"Stale reminder for {title!r} ignored")
            return

        try:
            self._notify(format_reminder(event.title, event.date_text))
        except Exception:
            logger.exception(f"Reminder notification failed for {title!r}")
