"""Discovery Router - search rounds, current candidates and polling."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_session, serialize_polling
from api.models import PollingRequest, SearchRequest
from event_agenda.session import AgendaSession

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/search")
async def search_events(
    request: SearchRequest,
    session: AgendaSession = Depends(get_session),
) -> dict:
    """Run a discovery round. Returns 409 if one is already running."""
    events = await session.search(request.category)
    if events is None:
        raise HTTPException(status_code=409, detail="A search is already in progress.")
    return {
        "category": session.search_category,
        "events": [e.to_api_dict() for e in events],
    }


@router.get("/candidates")
async def list_candidates(session: AgendaSession = Depends(get_session)) -> dict:
    return {
        "category": session.search_category,
        "searching": session.searching,
        "events": [e.to_api_dict() for e in session.candidates],
    }


@router.post("/candidates/{title}/save")
async def save_candidate(
    title: str,
    session: AgendaSession = Depends(get_session),
) -> dict:
    """Save one of the current candidates to the agenda."""
    if session.find_candidate(title) is None:
        raise HTTPException(status_code=404, detail="Candidate not found.")
    created = session.save_candidate(title)
    event = session.store.find(title)
    return {"created": created is not None, "event": event.to_api_dict() if event else None}


@router.get("/polling")
async def get_polling(session: AgendaSession = Depends(get_session)) -> dict:
    return serialize_polling(session)


@router.put("/polling")
async def configure_polling(
    request: PollingRequest,
    session: AgendaSession = Depends(get_session),
) -> dict:
    """Replace the automatic search schedule."""
    session.configure_polling(request.enabled, request.interval_minutes)
    return serialize_polling(session)
