"""Event data types for the three lifecycle stages.

CandidateEvent -> SavedEvent -> HistoryEvent.

Each type serializes to a snapshot dict (snake_case keys, used by
import/export) and to an API dict (camelCase keys, used by the HTTP API).
Snapshot parsing is lenient: it also understands the field names and status
values written by legacy Spanish-language agenda exports.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


ERROR_CATEGORY = "error"


class EventStatus(str, Enum):
    """Personal status of a saved event."""

    UNSET = "unset"
    CONFIRMED = "confirmed"
    MAYBE = "maybe"
    ATTENDED = "attended"
    CANCELLED = "cancelled"

    @classmethod
    def coerce(cls, value: Any) -> "EventStatus":
        """Return the status for an enum member, its value, or a legacy label.

        Raises:
            ValueError: if the value is not a known status.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.UNSET
        text = str(value).strip().lower()
        if text in LEGACY_STATUS_MAP:
            return LEGACY_STATUS_MAP[text]
        return cls(text)


# Status labels used by legacy agenda exports
LEGACY_STATUS_MAP: Dict[str, EventStatus] = {
    "": EventStatus.UNSET,
    "confirmado": EventStatus.CONFIRMED,
    "tal vez": EventStatus.MAYBE,
    "asistido": EventStatus.ATTENDED,
    "cancelado": EventStatus.CANCELLED,
}

# Snapshot key -> legacy keys accepted on import
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "title": ("titulo",),
    "date_text": ("fecha", "dateText"),
    "location": ("ubicacion",),
    "category": ("tipo",),
    "description": ("descripcion",),
    "source_text": ("fuente", "sourceText"),
    "notes": ("notas",),
    "status": ("estado",),
    "contacts": ("contactos",),
    "reminder_ms": ("reminder", "reminderMs"),
}


def _pick(data: Dict[str, Any], key: str, default: Any = None) -> Any:
    if key in data:
        return data[key]
    for alias in FIELD_ALIASES.get(key, ()):
        if alias in data:
            return data[alias]
    return default


def _text(data: Dict[str, Any], key: str) -> str:
    value = _pick(data, key)
    if value is None:
        return ""
    return str(value)


def lead_time_to_ms(lead_time: Optional[timedelta]) -> Optional[int]:
    """Convert a reminder lead time to whole milliseconds (None stays None)."""
    if lead_time is None:
        return None
    return int(lead_time.total_seconds() * 1000)


def lead_time_from_ms(value: Any) -> Optional[timedelta]:
    """Convert a millisecond count to a lead time.

    Raises:
        ValueError: if the value is not a non-negative number.
    """
    if value is None or value == "":
        return None
    if isinstance(value, timedelta):
        lead_time = value
    elif isinstance(value, bool):
        raise ValueError(f"Reminder lead time must be milliseconds, got {value!r}")
    else:
        try:
            millis = float(value)
        except (TypeError, ValueError, OverflowError) as exc:
            raise ValueError(f"Reminder lead time must be milliseconds, got {value!r}") from exc
        if not math.isfinite(millis):
            raise ValueError(f"Reminder lead time must be finite, got {value!r}")
        try:
            lead_time = timedelta(milliseconds=millis)
        except OverflowError as exc:
            raise ValueError(f"Reminder lead time is out of range, got {value!r}") from exc
    if lead_time < timedelta(0):
        raise ValueError(f"Reminder lead time must not be negative, got {value!r}")
    return lead_time


def _lenient_lead_time(data: Dict[str, Any], title: str) -> Optional[timedelta]:
    raw = _pick(data, "reminder_ms")
    try:
        return lead_time_from_ms(raw)
    except ValueError:
        logger.warning(f"Dropping invalid reminder {raw!r} for imported event {title!r}")
        return None


def _lenient_status(data: Dict[str, Any], title: str) -> EventStatus:
    raw = _pick(data, "status")
    try:
        return EventStatus.coerce(raw)
    except ValueError:
        logger.warning(f"Unknown status {raw!r} for imported event {title!r}, using unset")
        return EventStatus.UNSET


def _lenient_contacts(data: Dict[str, Any]) -> List[str]:
    raw = _pick(data, "contacts")
    if not raw:
        return []
    if isinstance(raw, (list, tuple)):
        return [str(item) for item in raw]
    return [str(raw)]


@dataclass(slots=True)
class CandidateEvent:
    """A discovered event, not yet part of the agenda."""

    title: str
    date_text: str = ""
    location: str = ""
    category: str = ""
    description: str = ""
    source_text: str = ""

    @property
    def is_error(self) -> bool:
        """True for the sentinel produced when discovery fails."""
        return self.category == ERROR_CATEGORY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "date_text": self.date_text,
            "location": self.location,
            "category": self.category,
            "description": self.description,
            "source_text": self.source_text,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CandidateEvent":
        return cls(
            title=_text(data, "title"),
            date_text=_text(data, "date_text"),
            location=_text(data, "location"),
            category=_text(data, "category"),
            description=_text(data, "description"),
            source_text=_text(data, "source_text"),
        )

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "dateText": self.date_text,
            "location": self.location,
            "category": self.category,
            "description": self.description,
            "sourceText": self.source_text,
            "isError": self.is_error,
        }


@dataclass(slots=True)
class SavedEvent:
    """A candidate promoted into the personal agenda, with annotations."""

    title: str
    date_text: str = ""
    location: str = ""
    category: str = ""
    description: str = ""
    source_text: str = ""

    # Personal organizer fields
    notes: str = ""
    status: EventStatus = EventStatus.UNSET
    contacts: List[str] = field(default_factory=list)
    reminder_lead_time: Optional[timedelta] = None

    @classmethod
    def from_candidate(cls, candidate: CandidateEvent) -> "SavedEvent":
        """Create a saved event with blank annotations."""
        return cls(
            title=candidate.title,
            date_text=candidate.date_text,
            location=candidate.location,
            category=candidate.category or "",
            description=candidate.description,
            source_text=candidate.source_text,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the snapshot form used by import/export."""
        return {
            "title": self.title,
            "date_text": self.date_text,
            "location": self.location,
            "category": self.category,
            "description": self.description,
            "source_text": self.source_text,
            "notes": self.notes,
            "status": self.status.value,
            "contacts": list(self.contacts),
            "reminder_ms": lead_time_to_ms(self.reminder_lead_time),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedEvent":
        """Create from a snapshot dict; tolerant of missing or legacy fields."""
        title = _text(data, "title")
        return cls(
            title=title,
            date_text=_text(data, "date_text"),
            location=_text(data, "location"),
            category=_text(data, "category"),
            description=_text(data, "description"),
            source_text=_text(data, "source_text"),
            notes=_text(data, "notes"),
            status=_lenient_status(data, title),
            contacts=_lenient_contacts(data),
            reminder_lead_time=_lenient_lead_time(data, title),
        )

    def to_api_dict(self) -> Dict[str, Any]:
        """Convert to API response format (camelCase)."""
        return {
            "title": self.title,
            "dateText": self.date_text,
            "location": self.location,
            "category": self.category,
            "description": self.description,
            "sourceText": self.source_text,
            "notes": self.notes,
            "status": self.status.value,
            "contacts": list(self.contacts),
            "reminderMs": lead_time_to_ms(self.reminder_lead_time),
        }


@dataclass(frozen=True, slots=True)
class HistoryEvent:
    """A saved event marked as attended. Never mutated after creation."""

    title: str
    date_text: str = ""
    location: str = ""
    category: str = ""
    description: str = ""
    source_text: str = ""
    notes: str = ""
    contacts: Tuple[str, ...] = ()
    reminder_lead_time: Optional[timedelta] = None

    @property
    def status(self) -> EventStatus:
        return EventStatus.ATTENDED

    @classmethod
    def from_saved(cls, event: SavedEvent) -> "HistoryEvent":
        return cls(
            title=event.title,
            date_text=event.date_text,
            location=event.location,
            category=event.category,
            description=event.description,
            source_text=event.source_text,
            notes=event.notes,
            contacts=tuple(event.contacts),
            reminder_lead_time=event.reminder_lead_time,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "date_text": self.date_text,
            "location": self.location,
            "category": self.category,
            "description": self.description,
            "source_text": self.source_text,
            "notes": self.notes,
            "status": self.status.value,
            "contacts": list(self.contacts),
            "reminder_ms": lead_time_to_ms(self.reminder_lead_time),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEvent":
        """Create from a snapshot dict. Status is always attended."""
        title = _text(data, "title")
        return cls(
            title=title,
            date_text=_text(data, "date_text"),
            location=_text(data, "location"),
            category=_text(data, "category"),
            description=_text(data, "description"),
            source_text=_text(data, "source_text"),
            notes=_text(data, "notes"),
            contacts=tuple(_lenient_contacts(data)),
            reminder_lead_time=_lenient_lead_time(data, title),
        )

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "dateText": self.date_text,
            "location": self.location,
            "category": self.category,
            "description": self.description,
            "sourceText": self.source_text,
            "notes": self.notes,
            "status": self.status.value,
            "contacts": list(self.contacts),
            "reminderMs": lead_time_to_ms(self.reminder_lead_time),
        }
