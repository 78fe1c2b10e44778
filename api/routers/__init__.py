"""API Routers Package.

Routers:
- agenda.py: saved events, history, categories, calendar, reminders, export/import
- discovery.py: search rounds, candidates, polling schedule

Usage in main.py:
    from api.routers import agenda_router, discovery_router

    app.include_router(agenda_router, prefix="/agenda", tags=["agenda"])
    app.include_router(discovery_router, prefix="/discovery", tags=["discovery"])
"""

from .agenda import router as agenda_router
from .discovery import router as discovery_router

__all__ = [
    "agenda_router",
    "discovery_router",
]
