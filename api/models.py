"""Shared Pydantic models for API routers.

Usage in routers:
    from api.models import SaveEventRequest, UpdateSavedEventRequest
"""
from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Discovery Models
# =============================================================================

class SearchRequest(BaseModel):
    """Request model for a discovery round."""
    category: Optional[str] = Field(
        None, description="Category id to search; defaults to the last one used."
    )


class PollingRequest(BaseModel):
    """Request model for configuring automatic discovery."""
    enabled: bool
    interval_minutes: float = Field(0, alias="intervalMinutes", description="Minutes between searches.")

    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# Agenda Models
# =============================================================================

class SaveEventRequest(BaseModel):
    """Request model for saving an event to the agenda."""
    title: str
    date_text: str = Field("", alias="dateText")
    location: str = ""
    category: str = ""
    description: str = ""
    source_text: str = Field("", alias="sourceText")

    model_config = ConfigDict(populate_by_name=True)


class UpdateSavedEventRequest(BaseModel):
    """Request model for annotating a saved event.

    Only the fields present in the request body are applied; an explicit
    ``"reminderMs": null`` clears the reminder.
    """
    notes: Optional[str] = None
    status: Optional[str] = None
    contacts: Optional[List[str]] = None
    reminder_ms: Optional[int] = Field(None, alias="reminderMs", ge=0)
    category: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class ContactRequest(BaseModel):
    """Request model for adding a contact to a saved event."""
    name: str


class CategoryRequest(BaseModel):
    """Request model for registering a custom category."""
    label: str


class ImportRequest(BaseModel):
    """Request model for importing an exported agenda."""
    text: str = Field(..., description="Contents of an agenda JSON export.")
