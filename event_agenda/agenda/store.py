"""In-memory agenda store.

Owns the saved and history collections and the category registry, and is
the only place they are mutated. Every mutation that changes state notifies
subscribed listeners once, after the change is applied; the reminder
scheduler subscribes to recompute its timers.

Lookup misses (update/remove/promote of an unknown title) are silently
ignored and do not notify.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import Any, Callable, Dict, List, Optional

from ..events.identity import contains_identity, identity_of
from ..events.types import (
    CandidateEvent,
    EventStatus,
    HistoryEvent,
    SavedEvent,
    lead_time_from_ms,
)
from .categories import Category, CategoryRegistry

logger = logging.getLogger(__name__)


Listener = Callable[[], None]

UPDATABLE_FIELDS = ("notes", "status", "contacts", "reminder_lead_time", "category")


@dataclass(slots=True)
class AgendaSnapshot:
    """Saved and history collections, as exported or imported."""

    saved: List[SavedEvent] = field(default_factory=list)
    history: List[HistoryEvent] = field(default_factory=list)


def _copy_saved(event: SavedEvent) -> SavedEvent:
    return replace(event, contacts=list(event.contacts))


def _coerce_field(field_name: str, value: Any) -> Any:
    if field_name == "status":
        return EventStatus.coerce(value)
    if field_name == "reminder_lead_time":
        return lead_time_from_ms(value)
    if field_name == "contacts":
        return [str(item) for item in (value or [])]
    return "" if value is None else str(value)


class AgendaStore:
    """Saved events, attended history and the category registry."""

    def __init__(self, categories: Optional[CategoryRegistry] = None) -> None:
        self._saved: List[SavedEvent] = []
        self._history: List[HistoryEvent] = []
        self.categories = categories or CategoryRegistry()
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def saved(self) -> List[SavedEvent]:
        """Saved events in insertion order (a copy of the list)."""
        return list(self._saved)

    @property
    def history(self) -> List[HistoryEvent]:
        return list(self._history)

    def find(self, title: str) -> Optional[SavedEvent]:
        """Return the first saved event with this title, or None."""
        return next((e for e in self._saved if identity_of(e) == title), None)

    def snapshot(self) -> AgendaSnapshot:
        return AgendaSnapshot(
            saved=[_copy_saved(e) for e in self._saved],
            history=list(self._history),
        )

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _changed(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Agenda listener failed")

    def close(self) -> None:
        """Drop all listeners. The collections stay readable."""
        self._listeners.clear()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def save(self, candidate: CandidateEvent) -> Optional[SavedEvent]:
        """Add a candidate to the agenda with blank annotations.

        Returns:
            The new SavedEvent, or None if the title is already saved.
        """
        if contains_identity(self._saved, identity_of(candidate)):
            logger.debug(f"Event {candidate.title!r} already saved")
            return None

        event = SavedEvent.from_candidate(candidate)
        self._saved.append(event)
        logger.info(f"Saved event {event.title!r}")
        self._changed()
        return event

    def update(self, title: str, field_name: str, value: Any) -> None:
        """Set one annotation field on the saved event(s) with this title.

        Args:
            title: Identity of the saved event.
            field_name: One of notes, status, contacts, reminder_lead_time, category.
            value: New value. Status accepts EventStatus or its string value;
                reminder_lead_time accepts timedelta, milliseconds or None.

        Raises:
            ValueError: for an unknown field or an invalid value.
        """
        self.update_many(title, {field_name: value})

    def update_many(self, title: str, changes: Dict[str, Any]) -> None:
        """Set several annotation fields at once, all or nothing.

        Every value is validated before any is applied, and listeners are
        notified once.

        Raises:
            ValueError: for an unknown field or an invalid value; nothing is changed.
        """
        coerced: Dict[str, Any] = {}
        for field_name, value in changes.items():
            if field_name not in UPDATABLE_FIELDS:
                raise ValueError(f"Field {field_name!r} cannot be updated")
            coerced[field_name] = _coerce_field(field_name, value)

        if not coerced:
            return
        matches = [e for e in self._saved if identity_of(e) == title]
        if not matches:
            logger.debug(f"Update of unknown event {title!r} ignored")
            return

        for event in matches:
            for field_name, value in coerced.items():
                setattr(event, field_name, list(value) if field_name == "contacts" else value)
        self._changed()

    def set_reminder(self, title: str, lead_time: Optional[timedelta]) -> None:
        self.update(title, "reminder_lead_time", lead_time)

    def add_contact(self, title: str, name: str) -> None:
        """Append a contact to the saved event; blank names are ignored."""
        name = (name or "").strip()
        event = self.find(title)
        if event is None or not name:
            return
        self.update(title, "contacts", [*event.contacts, name])

    def remove_contact(self, title: str, index: int) -> None:
        """Filter out the contact at ``index``; out-of-range is a no-op."""
        event = self.find(title)
        if event is None or not 0 <= index < len(event.contacts):
            return
        self.update(title, "contacts", [c for i, c in enumerate(event.contacts) if i != index])

    def remove(self, title: str) -> None:
        """Delete every saved event with this title."""
        kept = [e for e in self._saved if identity_of(e) != title]
        if len(kept) == len(self._saved):
            logger.debug(f"Remove of unknown event {title!r} ignored")
            return
        self._saved = kept
        logger.info(f"Removed event {title!r}")
        self._changed()

    def promote_to_history(self, title: str) -> Optional[HistoryEvent]:
        """Move the saved event to history with status attended.

        Returns:
            The HistoryEvent, or None if no saved event has this title.
        """
        event = self.find(title)
        if event is None:
            logger.debug(f"Promote of unknown event {title!r} ignored")
            return None

        self._saved = [e for e in self._saved if identity_of(e) != title]
        entry = HistoryEvent.from_saved(event)
        self._history.append(entry)
        logger.info(f"Moved event {title!r} to history")
        self._changed()
        return entry

    def register_category(self, label: str) -> Optional[Category]:
        return self.categories.register(label)

    def merge_snapshot(self, snapshot: AgendaSnapshot) -> None:
        """Append snapshot entries to the collections. No deduplication."""
        if not snapshot.saved and not snapshot.history:
            return
        self._saved.extend(_copy_saved(e) for e in snapshot.saved)
        self._history.extend(snapshot.history)
        logger.info(
            f"Merged snapshot: {len(snapshot.saved)} saved, {len(snapshot.history)} history"
        )
        self._changed()
