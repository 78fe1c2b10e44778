"""FastAPI service for the Event Agenda."""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import ALLOWED_ORIGINS, get_settings
from api.routers import agenda_router, discovery_router
from event_agenda.config import configure_logging
from event_agenda.session import AgendaSession

logger = logging.getLogger(__name__)


def create_app(session: Optional[AgendaSession] = None) -> FastAPI:
    """Build the application.

    When ``session`` is given it is started and closed by the app lifespan
    instead of a session built from the environment settings.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        active = session
        if active is None:
            settings = get_settings()
            configure_logging(settings.log_level)
            active = AgendaSession(settings)
        await active.start()
        app.state.session = active
        try:
            yield
        finally:
            await active.aclose()
            app.state.session = None

    app = FastAPI(
        title="Event Agenda API",
        version="0.1.0",
        description="Event discovery and personal agenda service.",
        lifespan=lifespan,
    )

    origins = [origin for origin in ALLOWED_ORIGINS if origin]
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint with service configuration status."""
        active = getattr(app.state, "session", None)
        settings = active.settings if active else get_settings()
        return {
            "status": "ok",
            "time": datetime.now(timezone.utc).isoformat(),
            "environment": settings.environment,
            "timezone": settings.timezone,
            "services": {
                "anthropic": "configured"
                if settings.anthropic_api_key or os.getenv("ANTHROPIC_API_KEY")
                else "not_configured",
            },
        }

    app.include_router(agenda_router, prefix="/agenda", tags=["agenda"])
    app.include_router(discovery_router, prefix="/discovery", tags=["discovery"])
    return app


app = create_app()
