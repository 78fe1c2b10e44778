"""Agenda session: wires the store, timers and collaborators together.

A session owns one in-memory agenda for its lifetime. ``start()`` attaches
the reminder scheduler and installs the configured polling schedule;
``aclose()`` cancels every reminder and poll timer. Use it as an async
context manager so teardown is never skipped:

    async with AgendaSession(settings) as session:
        await session.search("music")
        session.save_candidate("Jazz Night")
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Union

from .agenda.calendar import CalendarDay, calendar_view
from .agenda.categories import ALL_CATEGORY_ID
from .agenda.store import AgendaStore
from .config import DEFAULT_EXPORT_NAME, Settings
from .discovery.client import EventDiscovery, error_event
from .events.types import CandidateEvent, SavedEvent
from .scheduling.poller import PollScheduler
from .scheduling.reminders import Clock, Notifier, ReminderScheduler
from .transfer.delivery import DeliveryError, FileDelivery
from .transfer.snapshot import IMPORT_ERROR_MESSAGE, export_snapshot, import_into

logger = logging.getLogger(__name__)


Discoverer = Callable[[Optional[str]], Awaitable[List[CandidateEvent]]]


class AgendaSession:
    """One user's agenda plus its reminder and polling timers."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        discover: Optional[Discoverer] = None,
        notify: Optional[Notifier] = None,
        delivery: Optional[FileDelivery] = None,
        clock: Optional[Clock] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.store = AgendaStore()
        self.reminders = ReminderScheduler(
            self.store, notify, tz=self.settings.tz, clock=clock, loop=loop
        )
        self.poller = PollScheduler(self.poll_tick, loop=loop)
        self.delivery = delivery or FileDelivery(self.settings.export_dir)
        self._discover: Discoverer = discover or EventDiscovery(self.settings)

        self.candidates: List[CandidateEvent] = []
        self.search_category: str = ALL_CATEGORY_ID
        self.searching = False
        self._started = False
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        if self._started:
            return
        self._started = True
        self.reminders.attach()
        if self.settings.poll_enabled:
            self.poller.configure(True, self.settings.poll_interval_minutes)
        logger.info(f"Agenda session started (environment={self.settings.environment})")

    async def aclose(self) -> None:
        """Cancel all timers. Idempotent."""
        if self._closed:
            return
        self._closed = True
        await self.poller.stop()
        self.reminders.close()
        self.store.close()
        logger.info("Agenda session closed")

    async def __aenter__(self) -> "AgendaSession":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    async def search(self, category: Optional[str] = None) -> Optional[List[CandidateEvent]]:
        """Run one discovery round and replace the candidate list.

        Returns:
            The new candidates, or None when a discovery is already in flight
            (the call is skipped, not queued).
        """
        if category is not None:
            self.search_category = category
        if self.searching:
            logger.info("Discovery already in progress; request skipped")
            return None

        self.searching = True
        try:
            events = await self._discover(self.search_category)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Discovery collaborator raised")
            events = [error_event()]
        finally:
            self.searching = False

        self.candidates = list(events)
        return self.candidates

    async def poll_tick(self) -> None:
        await self.search()

    def configure_polling(self, enabled: bool, interval_minutes: float) -> None:
        self.settings.poll_enabled = enabled
        self.settings.poll_interval_minutes = interval_minutes
        self.poller.configure(enabled, interval_minutes)

    # ------------------------------------------------------------------
    # Agenda
    # ------------------------------------------------------------------

    def find_candidate(self, title: str) -> Optional[CandidateEvent]:
        return next(
            (c for c in self.candidates if c.title == title and not c.is_error),
            None,
        )

    def save_candidate(self, title: str) -> Optional[SavedEvent]:
        """Save the current candidate with this title (None if absent or already saved)."""
        candidate = self.find_candidate(title)
        if candidate is None:
            logger.debug(f"No candidate titled {title!r}")
            return None
        return self.store.save(candidate)

    def calendar(self) -> List[CalendarDay]:
        return calendar_view(self.store.saved, self.settings.tz)

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def export_text(self) -> str:
        return export_snapshot(self.store)

    def export_agenda(self, suggested_name: str = DEFAULT_EXPORT_NAME) -> Path:
        return self.delivery.export_data(self.export_text(), suggested_name)

    def import_text(self, text: str) -> Optional[str]:
        """Merge snapshot text; returns the advisory message on failure."""
        return import_into(self.store, text)

    def import_file(self, source: Union[str, Path]) -> Optional[str]:
        try:
            text = self.delivery.import_data(source)
        except DeliveryError as exc:
            logger.warning(f"Agenda import failed: {exc}")
            return IMPORT_ERROR_MESSAGE
        return self.import_text(text)
