"""Whole-library export and all-or-nothing import."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from .models import PatternLibrary
from .persistence import LibraryFormatError, LibrarySerializer
from .store import PatternStore

logger = logging.getLogger(__name__)


def export_library(library: PatternLibrary) -> str:
    """Serialize the full library to indented JSON text."""

    return LibrarySerializer.to_json(library)


def default_export_filename(today: date | None = None) -> str:
    stamp = (today or date.today()).isoformat()
    return f"workout_patterns_{stamp}.json"


@dataclass(frozen=True)
class LibraryImportResult:
    """Outcome of an import attempt; truthy only when the library was replaced."""

    accepted: bool
    song_count: int = 0
    error: str | None = None

    def __bool__(self) -> bool:
        return self.accepted


class LibraryTransfer:
    """Move the store's library to and from external JSON documents."""

    def __init__(self, store: PatternStore) -> None:
        self._store = store

    def export_text(self) -> str:
        return export_library(self._store.library)

    def export_file(self, directory: Path, filename: str | None = None) -> Path:
        """Write the library into ``directory`` and return the written path."""

        destination = Path(directory) / (filename or default_export_filename())
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(self.export_text(), encoding="utf-8")
        logger.info("Exported %d patterns to %s", self._store.library.song_count, destination)
        return destination

    def import_text(self, json_text: str) -> LibraryImportResult:
        """Replace the store's library with ``json_text`` if it is a valid document.

        Malformed JSON and documents without ``version``/``songs`` are rejected
        identically and leave the current library untouched.
        """

        try:
            library = LibrarySerializer.from_json(json_text)
        except LibraryFormatError as exc:
            logger.warning("Rejected pattern library import: %s", exc)
            return LibraryImportResult(accepted=False, error=str(exc))
        self._store.replace(library)
        return LibraryImportResult(accepted=True, song_count=library.song_count)

    def import_file(self, path: Path) -> LibraryImportResult:
        source = Path(path)
        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read library file %s: %s", source, exc)
            return LibraryImportResult(accepted=False, error=f"Could not read {source}: {exc}")
        return self.import_text(text)


__all__ = [
    "LibraryImportResult",
    "LibraryTransfer",
    "default_export_filename",
    "export_library",
]
