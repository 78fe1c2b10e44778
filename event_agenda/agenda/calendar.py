"""Calendar view: saved events grouped by the first date of their date text."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, TypeVar
from zoneinfo import ZoneInfo

from ..events.dates import date_sort_key, first_date_text, parse_event_date

E = TypeVar("E")


@dataclass(slots=True)
class CalendarDay:
    """One bucket of the calendar view."""

    date_key: str
    date: Optional[datetime]
    events: List[Any] = field(default_factory=list)

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "dateKey": self.date_key,
            "date": self.date.date().isoformat() if self.date else None,
            "events": [e.to_api_dict() for e in self.events],
        }


def group_by_date(events: Iterable[E], tz: Optional[ZoneInfo] = None) -> Dict[str, List[E]]:
    """Group events by first-date key, ordered for display.

    Keys are the raw first-date text with whitespace around the range
    separator normalized. Parsable keys come first in calendar order;
    unparsable keys follow in encounter order.
    """
    grouped: Dict[str, List[E]] = {}
    for event in events:
        key = first_date_text(getattr(event, "date_text", ""))
        grouped.setdefault(key, []).append(event)

    # sorted() is stable, so unparsable keys keep encounter order
    ordered = sorted(grouped, key=lambda key: date_sort_key(key, tz))
    return {key: grouped[key] for key in ordered}


def calendar_view(events: Iterable[Any], tz: Optional[ZoneInfo] = None) -> List[CalendarDay]:
    return [
        CalendarDay(date_key=key, date=parse_event_date(key, tz), events=bucket)
        for key, bucket in group_by_date(events, tz).items()
    ]
