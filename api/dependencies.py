"""Shared dependencies and helper functions for API routers.

Usage in routers:
    from api.dependencies import get_session, serialize_agenda
"""
from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from fastapi import HTTPException, Request

from event_agenda.config import Settings, load_settings
from event_agenda.session import AgendaSession


# =============================================================================
# Configuration Constants
# =============================================================================

ALLOWED_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    os.getenv("AGENDA_ALLOWED_FRONTEND", "").strip(),
]


# =============================================================================
# Cached Functions
# =============================================================================

@lru_cache
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return load_settings()


# =============================================================================
# Session Access
# =============================================================================

def get_session(request: Request) -> AgendaSession:
    """Return the agenda session created by the app lifespan."""
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Agenda session is not running.")
    return session


# =============================================================================
# Serialization Helpers
# =============================================================================

def serialize_agenda(session: AgendaSession) -> Dict[str, Any]:
    """Serialize saved and history collections to API response format."""
    return {
        "saved": [e.to_api_dict() for e in session.store.saved],
        "history": [e.to_api_dict() for e in session.store.history],
    }


def serialize_polling(session: AgendaSession) -> Dict[str, Any]:
    return {
        "enabled": session.poller.enabled,
        "intervalMinutes": session.poller.interval_minutes,
        "running": session.poller.is_running,
    }
