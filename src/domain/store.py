"""Owned, persisted pattern library shared by the recorder and scheduler.

:class:`PatternStore` is the only writer of the :class:`PatternLibrary`.
Every mutation updates the in-memory library first and then writes the
whole document through the configured :class:`LibraryPort`. Write failures
are logged and swallowed: the in-memory copy stays authoritative for the
running session.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Literal, Optional

from .models import PatternEvent, PatternLibrary, SongPattern
from .persistence import (
    LibraryFormatError,
    LibraryPersistenceError,
    LibraryPort,
    LibrarySerializer,
)

logger = logging.getLogger(__name__)

ChangeKind = Literal["upserted", "deleted", "replaced"]


@dataclass(frozen=True)
class LibraryChange:
    """Notification sent to listeners after a mutation has been applied."""

    kind: ChangeKind
    track_id: Optional[str] = None


@dataclass(frozen=True)
class SongSummary:
    """Lightweight descriptor for enumerating stored patterns."""

    track_id: str
    track_name: str
    artist_name: str
    event_count: int
    recorded_at: int
    play_count: int


class PatternStore:
    """Load/save lifecycle around the process-wide pattern library."""

    def __init__(self, port: LibraryPort) -> None:
        self._port = port
        self._library: Optional[PatternLibrary] = None
        self._listeners: List[Callable[[LibraryChange], None]] = []

    @property
    def port(self) -> LibraryPort:
        return self._port

    @property
    def library(self) -> PatternLibrary:
        """Return the live library, loading it from the port on first access."""

        if self._library is None:
            return self.load()
        return self._library

    def add_listener(self, callback: Callable[[LibraryChange], None]) -> None:
        """Register a function invoked after every mutation."""

        self._listeners.append(callback)

    def load(self) -> PatternLibrary:
        """Read the persisted library, falling back to the built-in default."""

        library: PatternLibrary | None = None
        try:
            text = self._port.read()
            if text is not None:
                library = LibrarySerializer.from_json(text)
        except LibraryPersistenceError:
            logger.exception("Failed to load pattern library; using defaults")
        except LibraryFormatError as exc:
            logger.warning("Persisted pattern library is corrupt (%s); using defaults", exc)
        if library is None:
            library = PatternLibrary.default()
        self._library = library
        return library

    def save(self, library: PatternLibrary | None = None) -> bool:
        """Persist ``library`` (or the current library) and report success.

        Passing a library makes it the current one before it is written.
        """

        if library is not None:
            self._library = library
        try:
            self._port.write(LibrarySerializer.to_json(self.library))
        except LibraryPersistenceError:
            logger.exception("Failed to save pattern library")
            return False
        return True

    def get_pattern(self, track_id: str) -> SongPattern | None:
        """Return a copy of the stored pattern for ``track_id`` or ``None``."""

        pattern = self.library.songs.get(track_id)
        if pattern is None:
            return None
        return pattern.model_copy(deep=True)

    def default_pattern(self) -> List[PatternEvent]:
        return [event.model_copy(deep=True) for event in self.library.default_pattern]

    def upsert_song(self, pattern: SongPattern) -> None:
        """Insert or replace the pattern keyed by its track id and persist."""

        if not pattern.events:
            raise ValueError(f"Refusing to store empty pattern for track {pattern.track_id!r}")
        self.library.add_song(pattern.model_copy(deep=True))
        logger.info(
            "Saved pattern for: %s (%d events)", pattern.track_name, pattern.event_count
        )
        self.save()
        self._notify(LibraryChange("upserted", pattern.track_id))

    def delete_song(self, track_id: str) -> bool:
        """Remove a stored pattern; unknown ids are ignored and return ``False``."""

        if not self.library.remove_song(track_id):
            return False
        logger.info("Deleted pattern for track %s", track_id)
        self.save()
        self._notify(LibraryChange("deleted", track_id))
        return True

    def replace(self, library: PatternLibrary) -> None:
        """Swap in an entirely new library (no merge) and persist it."""

        self._library = library.model_copy(deep=True)
        logger.info("Replaced pattern library (%d songs)", self._library.song_count)
        self.save()
        self._notify(LibraryChange("replaced"))

    def song_summaries(self) -> List[SongSummary]:
        return [
            SongSummary(
                track_id=pattern.track_id,
                track_name=pattern.track_name,
                artist_name=pattern.artist_name,
                event_count=pattern.event_count,
                recorded_at=pattern.recorded_at,
                play_count=pattern.play_count,
            )
            for pattern in self.library.songs.values()
        ]

    def snapshot(self) -> Dict[str, object]:
        """Return the library as plain JSON-ready data."""

        return LibrarySerializer.to_dict(self.library)

    def _notify(self, change: LibraryChange) -> None:
        for callback in self._listeners:
            callback(change)


__all__ = ["LibraryChange", "PatternStore", "SongSummary"]
