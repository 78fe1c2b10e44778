"""Agenda Router - saved events, history, categories, calendar and transfer.

Handles:
- Saving, annotating, removing and attending events
- Custom categories
- Calendar grouping and armed reminders
- Agenda export/import

Unknown titles are tolerated: mutations on them succeed with ``event: null``.
Endpoints are ``async def`` so store mutations (and the reminder recompute
they trigger) run on the event loop that owns the timers.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from api.dependencies import get_session, serialize_agenda
from api.models import (
    CategoryRequest,
    ContactRequest,
    ImportRequest,
    SaveEventRequest,
    UpdateSavedEventRequest,
)
from event_agenda.config import DEFAULT_EXPORT_NAME
from event_agenda.events.types import CandidateEvent
from event_agenda.session import AgendaSession

logger = logging.getLogger(__name__)

router = APIRouter()

# Request field -> store field
_UPDATE_FIELDS = {
    "notes": "notes",
    "status": "status",
    "contacts": "contacts",
    "reminder_ms": "reminder_lead_time",
    "category": "category",
}


def _event_payload(session: AgendaSession, title: str) -> Dict[str, Any]:
    event = session.store.find(title)
    return {"event": event.to_api_dict() if event else None}


# =============================================================================
# Saved Events
# =============================================================================

@router.get("")
async def get_agenda(session: AgendaSession = Depends(get_session)) -> dict:
    return serialize_agenda(session)


@router.get("/saved")
async def list_saved(session: AgendaSession = Depends(get_session)) -> dict:
    return {"events": [e.to_api_dict() for e in session.store.saved]}


@router.post("/saved")
async def save_event(
    request: SaveEventRequest,
    session: AgendaSession = Depends(get_session),
) -> dict:
    """Save an event. Saving an already-saved title is a no-op."""
    candidate = CandidateEvent(
        title=request.title,
        date_text=request.date_text,
        location=request.location,
        category=request.category,
        description=request.description,
        source_text=request.source_text,
    )
    created = session.store.save(candidate)
    return {"created": created is not None, **_event_payload(session, request.title)}


@router.patch("/saved/{title}")
async def update_saved_event(
    title: str,
    request: UpdateSavedEventRequest,
    session: AgendaSession = Depends(get_session),
) -> dict:
    """Apply the annotation fields present in the request body, all or nothing."""
    changes = {
        _UPDATE_FIELDS[request_field]: getattr(request, request_field)
        for request_field in request.model_fields_set
    }
    try:
        session.store.update_many(title, changes)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _event_payload(session, title)


@router.delete("/saved/{title}")
async def remove_saved_event(
    title: str,
    session: AgendaSession = Depends(get_session),
) -> dict:
    session.store.remove(title)
    return {"removed": title}


@router.post("/saved/{title}/contacts")
async def add_contact(
    title: str,
    request: ContactRequest,
    session: AgendaSession = Depends(get_session),
) -> dict:
    session.store.add_contact(title, request.name)
    return _event_payload(session, title)


@router.delete("/saved/{title}/contacts/{index}")
async def remove_contact(
    title: str,
    index: int,
    session: AgendaSession = Depends(get_session),
) -> dict:
    session.store.remove_contact(title, index)
    return _event_payload(session, title)


@router.post("/saved/{title}/attended")
async def mark_attended(
    title: str,
    session: AgendaSession = Depends(get_session),
) -> dict:
    """Move a saved event to history."""
    entry = session.store.promote_to_history(title)
    return {"event": entry.to_api_dict() if entry else None}


@router.get("/history")
async def list_history(session: AgendaSession = Depends(get_session)) -> dict:
    return {"events": [e.to_api_dict() for e in session.store.history]}


# =============================================================================
# Categories
# =============================================================================

@router.get("/categories")
async def list_categories(session: AgendaSession = Depends(get_session)) -> dict:
    return {"categories": [c.to_api_dict() for c in session.store.categories]}


@router.post("/categories")
async def register_category(
    request: CategoryRequest,
    session: AgendaSession = Depends(get_session),
) -> dict:
    category = session.store.register_category(request.label)
    return {
        "created": category is not None,
        "categories": [c.to_api_dict() for c in session.store.categories],
    }


# =============================================================================
# Calendar & Reminders
# =============================================================================

@router.get("/calendar")
async def get_calendar(session: AgendaSession = Depends(get_session)) -> dict:
    return {"days": [day.to_api_dict() for day in session.calendar()]}


@router.get("/reminders")
async def list_reminders(session: AgendaSession = Depends(get_session)) -> dict:
    return {"reminders": [r.to_api_dict() for r in session.reminders.armed]}


# =============================================================================
# Export / Import
# =============================================================================

@router.get("/export")
async def export_agenda(session: AgendaSession = Depends(get_session)) -> Response:
    """Download the agenda as a JSON file."""
    return Response(
        content=session.export_text(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{DEFAULT_EXPORT_NAME}"'},
    )


@router.post("/import")
async def import_agenda(
    request: ImportRequest,
    session: AgendaSession = Depends(get_session),
) -> dict:
    """Append an exported agenda to the current one (no deduplication)."""
    error = session.import_text(request.text)
    if error:
        raise HTTPException(status_code=400, detail=error)
    return serialize_agenda(session)
