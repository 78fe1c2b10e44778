"""File delivery collaborator: where exported agendas are written and read from.

Environment Variables:
    AGENDA_EXPORT_DIR: Directory for exported agenda files (see config.Settings)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class DeliveryError(RuntimeError):
    """Raised when an agenda file cannot be written or read."""


class FileDelivery:
    """Save/open agenda files under a single directory."""

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    def export_data(self, text: str, suggested_name: str) -> Path:
        """Write ``text`` to ``suggested_name`` inside the export directory.

        Only the final path component of ``suggested_name`` is used.

        Returns:
            Path of the written file.
        """
        name = Path(suggested_name).name
        if not name:
            raise DeliveryError(f"Invalid export file name: {suggested_name!r}")

        target = self.directory / name
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise DeliveryError(f"Could not write {target}: {exc}") from exc

        logger.info(f"Exported agenda to {target}")
        return target

    def import_data(self, source: Union[str, Path]) -> str:
        """Read agenda text from ``source``.

        Relative paths that do not exist as given are looked up in the
        export directory.
        """
        path = Path(source)
        if not path.is_absolute() and not path.exists():
            path = self.directory / path

        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DeliveryError(f"Could not read {path}: {exc}") from exc
