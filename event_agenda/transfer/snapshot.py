"""Agenda import/export.

Export writes ``{"saved": [...], "history": [...]}`` as indented JSON.
Import parses the same structure and appends it to the live collections
without deduplication. Legacy exports
(``savedEvents``/``historyEvents`` with Spanish field names) are accepted too.

Malformed input raises SnapshotImportError before anything is merged.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Union

from ..agenda.store import AgendaSnapshot, AgendaStore
from ..events.types import HistoryEvent, SavedEvent

logger = logging.getLogger(__name__)


IMPORT_ERROR_MESSAGE = (
    "Could not import the file. Make sure you selected a valid agenda JSON export."
)

SAVED_KEYS = ("saved", "savedEvents")
HISTORY_KEYS = ("history", "historyEvents")


class SnapshotImportError(Exception):
    """Raised when snapshot text cannot be imported. ``str(exc)`` is user-facing."""

    def __init__(self, message: str = IMPORT_ERROR_MESSAGE, *, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.detail = detail


def export_snapshot(source: Union[AgendaStore, AgendaSnapshot]) -> str:
    """Serialize saved and history events to JSON text."""
    snapshot = source.snapshot() if isinstance(source, AgendaStore) else source
    payload = {
        "saved": [event.to_dict() for event in snapshot.saved],
        "history": [event.to_dict() for event in snapshot.history],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _entries(data: Dict[str, Any], keys: tuple) -> List[Dict[str, Any]]:
    key = next((k for k in keys if k in data), None)
    if key is None or data[key] is None:
        return []
    entries = data[key]
    if not isinstance(entries, list):
        raise SnapshotImportError(detail=f"'{key}' must be a list")
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise SnapshotImportError(detail=f"'{key}[{position}]' must be an object")
    return entries


def parse_snapshot(text: str) -> AgendaSnapshot:
    """Parse snapshot text.

    Raises:
        SnapshotImportError: if the text is not JSON or not the expected shape.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise SnapshotImportError(detail=f"Invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise SnapshotImportError(detail="Top level must be an object")

    return AgendaSnapshot(
        saved=[SavedEvent.from_dict(entry) for entry in _entries(data, SAVED_KEYS)],
        history=[HistoryEvent.from_dict(entry) for entry in _entries(data, HISTORY_KEYS)],
    )


def import_into(store: AgendaStore, text: str) -> Optional[str]:
    """Parse and merge snapshot text into the store.

    Returns:
        None on success, or the user-facing error message. On failure the
        store is left untouched.
    """
    try:
        snapshot = parse_snapshot(text)
    except SnapshotImportError as exc:
        logger.warning(f"Agenda import rejected: {exc.detail or exc}")
        return str(exc)

    store.merge_snapshot(snapshot)
    return None
