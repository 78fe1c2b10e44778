"""Date parsing for free-form event date text.

Event dates arrive as ``DD/MM/YYYY`` or as a range ``DD/MM/YYYY - DD/MM/YYYY``.
Only the first date of a range matters. Anything else is "unparsable", which
is a value (``None``), never an error: unparsable dates sort last and never
arm a reminder.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..config import DEFAULT_TIMEZONE

# Hyphen with optional surrounding whitespace separates a range
RANGE_SEPARATOR = re.compile(r"\s*-\s*")

_DIGITS = re.compile(r"^[0-9]+$")

DEFAULT_TZ = ZoneInfo(DEFAULT_TIMEZONE)


def first_date_text(date_text: Optional[str]) -> str:
    """Return the first date of a date-or-range string, whitespace-normalized.

    ``"12/07/2025 -  14/07/2025"`` and ``" 12/07/2025-14/07/2025"`` both
    yield ``"12/07/2025"``.
    """
    if not date_text:
        return ""
    return RANGE_SEPARATOR.split(date_text.strip(), maxsplit=1)[0].strip()


def iso_date_text(date_text: Optional[str]) -> Optional[str]:
    """Reassemble the first date as ``YYYY-MM-DD``, or None if unparsable."""
    part = first_date_text(date_text)
    if not part:
        return None

    pieces = [piece.strip() for piece in part.split("/")]
    if len(pieces) != 3:
        return None
    day, month, year = pieces
    if not (day and month and year):
        return None
    if not all(_DIGITS.match(piece) for piece in pieces):
        return None
    if len(day) > 2 or len(month) > 2 or len(year) != 4:
        return None

    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def parse_event_date(date_text: Optional[str], tz: Optional[ZoneInfo] = None) -> Optional[datetime]:
    """Parse event date text into local midnight of its first date.

    Args:
        date_text: ``DD/MM/YYYY`` or ``DD/MM/YYYY - DD/MM/YYYY``.
        tz: Zone whose midnight the date refers to (defaults to DEFAULT_TZ).

    Returns:
        Timezone-aware datetime, or None if the text is not a valid date.
    """
    iso = iso_date_text(date_text)
    if iso is None:
        return None
    try:
        day = date.fromisoformat(iso)
    except ValueError:
        # Well-formed but not a calendar date, e.g. 31/02/2025
        return None
    return datetime(day.year, day.month, day.day, tzinfo=tz or DEFAULT_TZ)


def date_sort_key(date_text: Optional[str], tz: Optional[ZoneInfo] = None) -> tuple:
    """Sort key placing parsable dates in calendar order and unparsable ones last."""
    parsed = parse_event_date(date_text, tz)
    if parsed is None:
        return (1, datetime.max.replace(tzinfo=tz or DEFAULT_TZ))
    return (0, parsed)
