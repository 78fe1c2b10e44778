"""Agenda import/export and the file delivery collaborator."""
from __future__ import annotations

from .snapshot import (
    IMPORT_ERROR_MESSAGE,
    SnapshotImportError,
    export_snapshot,
    import_into,
    parse_snapshot,
)

from .delivery import DeliveryError, FileDelivery


__all__ = [
    "IMPORT_ERROR_MESSAGE",
    "SnapshotImportError",
    "export_snapshot",
    "import_into",
    "parse_snapshot",
    "DeliveryError",
    "FileDelivery",
]
