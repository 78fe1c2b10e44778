"""Agenda state: saved events, history, categories and the calendar view."""
from __future__ import annotations

from .categories import (
    ALL_CATEGORY_ID,
    DEFAULT_CATEGORIES,
    Category,
    CategoryRegistry,
    slugify,
)

from .store import (
    UPDATABLE_FIELDS,
    AgendaSnapshot,
    AgendaStore,
)

from .calendar import (
    CalendarDay,
    calendar_view,
    group_by_date,
)


__all__ = [
    # Categories
    "ALL_CATEGORY_ID",
    "DEFAULT_CATEGORIES",
    "Category",
    "CategoryRegistry",
    "slugify",
    # Store
    "UPDATABLE_FIELDS",
    "AgendaSnapshot",
    "AgendaStore",
    # Calendar
    "CalendarDay",
    "calendar_view",
    "group_by_date",
]
