"""Event model: types, identity and date parsing."""
from __future__ import annotations

from .types import (
    ERROR_CATEGORY,
    CandidateEvent,
    EventStatus,
    HistoryEvent,
    SavedEvent,
    lead_time_from_ms,
    lead_time_to_ms,
)

from .identity import (
    contains_identity,
    identity_of,
    index_by_identity,
)

from .dates import (
    date_sort_key,
    first_date_text,
    iso_date_text,
    parse_event_date,
)


__all__ = [
    # Types
    "ERROR_CATEGORY",
    "CandidateEvent",
    "EventStatus",
    "HistoryEvent",
    "SavedEvent",
    "lead_time_from_ms",
    "lead_time_to_ms",
    # Identity
    "contains_identity",
    "identity_of",
    "index_by_identity",
    # Dates
    "date_sort_key",
    "first_date_text",
    "iso_date_text",
    "parse_event_date",
]
