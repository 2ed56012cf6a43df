"""Two-state recorder capturing manual triggers against playback position."""
from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable

from domain.models import PatternEvent, SongPattern
from domain.store import PatternStore

logger = logging.getLogger(__name__)


class RecorderStateError(RuntimeError):
    """Raised when a recorder command is issued from the wrong state."""


class RecorderState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class Recorder:
    """Capture events for the active track and hand finished patterns to the store.

    The in-progress :class:`SongPattern` is private to the recorder until
    :meth:`stop` or :meth:`rotate` finalizes it. Patterns without events are
    dropped rather than stored.
    """

    def __init__(self, store: PatternStore, *, clock: Callable[[], int] | None = None) -> None:
        self._store = store
        self._clock = clock or _epoch_millis
        self._state = RecorderState.IDLE
        self._pattern: SongPattern | None = None

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def is_recording(self) -> bool:
        return self._state is RecorderState.RECORDING

    @property
    def current_pattern(self) -> SongPattern | None:
        """Return a copy of the in-progress pattern, if any."""

        if self._pattern is None:
            return None
        return self._pattern.model_copy(deep=True)

    @property
    def event_count(self) -> int:
        return self._pattern.event_count if self._pattern is not None else 0

    def start(self, track_id: str, track_name: str, artist_name: str, duration_ms: int) -> None:
        if self.is_recording:
            raise RecorderStateError("Recorder is already recording; stop or rotate first")
        self._begin(track_id, track_name, artist_name, duration_ms)
        self._state = RecorderState.RECORDING
        logger.info("Started recording: %s", track_name)

    def record(self, event: PatternEvent) -> bool:
        """Append ``event`` while recording; returns ``False`` (no-op) when idle."""

        if not self.is_recording or self._pattern is None:
            return False
        self._pattern.append_event(event)
        return True

    def stop(self) -> SongPattern | None:
        """Finish the recording and return the stored pattern, if one was saved."""

        pattern = self._pattern
        self._pattern = None
        self._state = RecorderState.IDLE
        return self._finalize(pattern)

    def rotate(
        self,
        new_track_id: str,
        new_track_name: str,
        new_artist_name: str,
        new_duration_ms: int,
    ) -> SongPattern | None:
        """Finalize the current track and keep recording on the new one."""

        if not self.is_recording:
            raise RecorderStateError("Cannot rotate while idle")
        outgoing = self._pattern
        self._begin(new_track_id, new_track_name, new_artist_name, new_duration_ms)
        saved = self._finalize(outgoing)
        logger.info("Started recording new track: %s", new_track_name)
        return saved

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _begin(self, track_id: str, track_name: str, artist_name: str, duration_ms: int) -> None:
        self._pattern = SongPattern(
            track_id=track_id,
            track_name=track_name,
            artist_name=artist_name,
            duration_ms=max(0, int(duration_ms)),
            events=[],
            recorded_at=self._clock(),
            play_count=0,
        )

    def _finalize(self, pattern: SongPattern | None) -> SongPattern | None:
        if pattern is None:
            return None
        if not pattern.events:
            logger.info("Discarded empty recording for: %s", pattern.track_name)
            return None
        self._store.upsert_song(pattern)
        return pattern


__all__ = ["Recorder", "RecorderState", "RecorderStateError"]
