"""Pydantic-powered domain models for recorded workout patterns.

A :class:`PatternLibrary` holds one :class:`SongPattern` per track plus a
default sequence replayed for tracks that were never recorded. Field names
are snake_case in Python while the JSON representation keeps the camelCase
keys used by exported library files (``trackId``, ``recordedAt`` and so on).
"""
from __future__ import annotations

from typing import Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

LIBRARY_VERSION = "1.0"

EventKind = Literal["intensity", "message"]


class IntensityPayload(BaseModel):
    """Workout intensity level triggered by a number key."""

    level: int = Field(..., ge=1, le=10, strict=True, description="Intensity from 1 (easy) to 10 (max)")


class MessagePayload(BaseModel):
    """Motivational message plus the key that produced it."""

    text: str = Field(..., strict=True)
    key: str = Field("", strict=True)


class PatternEvent(BaseModel):
    """Single manual trigger positioned relative to the start of a track."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: int = Field(..., ge=0, strict=True, description="Milliseconds from track start")
    kind: EventKind = Field(..., alias="type")
    data: Union[IntensityPayload, MessagePayload]

    @model_validator(mode="after")
    def validate_payload_kind(self) -> PatternEvent:  # type: ignore[override]
        expected = IntensityPayload if self.kind == "intensity" else MessagePayload
        if not isinstance(self.data, expected):
            raise ValueError(f"{self.kind!r} events require a {expected.__name__} payload")
        return self

    @classmethod
    def intensity(cls, timestamp: int, level: int) -> PatternEvent:
        return cls(timestamp=timestamp, kind="intensity", data=IntensityPayload(level=level))

    @classmethod
    def message(cls, timestamp: int, text: str, key: str = "") -> PatternEvent:
        return cls(timestamp=timestamp, kind="message", data=MessagePayload(text=text, key=key))


def default_pattern_events() -> List[PatternEvent]:
    """Return the built-in fallback sequence used for unrecorded tracks."""

    return [
        PatternEvent.intensity(0, 5),
        PatternEvent.intensity(60_000, 7),
        PatternEvent.intensity(120_000, 3),
    ]


class SongPattern(BaseModel):
    """Events captured for one track alongside the track's metadata."""

    model_config = ConfigDict(populate_by_name=True)

    track_id: str = Field(..., alias="trackId", strict=True)
    track_name: str = Field("", alias="trackName", strict=True)
    artist_name: str = Field("", alias="artistName", strict=True)
    duration_ms: int = Field(0, ge=0, alias="duration", strict=True)
    events: List[PatternEvent] = Field(
        default_factory=list, description="Events in capture order"
    )
    recorded_at: int = Field(0, alias="recordedAt", strict=True, description="Epoch milliseconds")
    play_count: int = Field(0, ge=0, alias="playCount", strict=True)

    @property
    def event_count(self) -> int:
        return len(self.events)

    def append_event(self, event: PatternEvent) -> None:
        """Append without re-sorting; capture order is preserved."""

        self.events.append(event)


class PatternLibrary(BaseModel):
    """Durable collection of song patterns plus the default fallback sequence."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = Field(..., strict=True)
    songs: Dict[str, SongPattern]
    default_pattern: List[PatternEvent] = Field(
        default_factory=default_pattern_events, alias="defaultPattern"
    )

    @classmethod
    def default(cls) -> PatternLibrary:
        """Return a fresh built-in library with no recorded songs."""

        return cls(version=LIBRARY_VERSION, songs={})

    @property
    def song_count(self) -> int:
        return len(self.songs)

    def add_song(self, pattern: SongPattern) -> None:
        """Insert or replace the pattern stored under its track id."""

        self.songs[pattern.track_id] = pattern

    def remove_song(self, track_id: str) -> bool:
        """Drop a stored pattern, returning ``False`` when it was absent."""

        return self.songs.pop(track_id, None) is not None
