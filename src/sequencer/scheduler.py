"""Replay a stored pattern in step with the live playback position."""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import List, Set, Tuple

from domain.models import IntensityPayload, MessagePayload, PatternEvent
from domain.store import PatternStore

logger = logging.getLogger(__name__)

# The position feed updates roughly once per second, so an event stays due
# for one full polling interval after its timestamp.
EVENT_DUE_WINDOW_MS = 1000


@dataclass(frozen=True)
class LoadedPattern:
    """Events selected for the active track."""

    track_id: str
    events: Tuple[PatternEvent, ...]
    from_default: bool


class Scheduler:
    """Fire each loaded event at most once while its due window is open.

    Events whose window is jumped over entirely (a seek, a stalled feed) are
    never applied retroactively; only :meth:`load_for_track` or
    :meth:`reset_applied` make already-applied events eligible again.
    """

    def __init__(
        self,
        store: PatternStore,
        *,
        on_intensity: Callable[[int], None] | None = None,
        on_message: Callable[[str], None] | None = None,
    ) -> None:
        self._store = store
        self._intensity_callbacks: List[Callable[[int], None]] = []
        self._message_callbacks: List[Callable[[str], None]] = []
        if on_intensity is not None:
            self._intensity_callbacks.append(on_intensity)
        if on_message is not None:
            self._message_callbacks.append(on_message)
        self._loaded: LoadedPattern | None = None
        self._applied: Set[int] = set()

    @property
    def loaded(self) -> LoadedPattern | None:
        return self._loaded

    @property
    def applied_indices(self) -> Set[int]:
        return set(self._applied)

    def add_intensity_callback(self, callback: Callable[[int], None]) -> None:
        self._intensity_callbacks.append(callback)

    def add_message_callback(self, callback: Callable[[str], None]) -> None:
        self._message_callbacks.append(callback)

    def load_for_track(self, track_id: str) -> LoadedPattern:
        """Select the stored pattern for ``track_id`` or the default sequence."""

        pattern = self._store.get_pattern(track_id)
        if pattern is not None:
            logger.info("Loaded pattern for: %s (%d events)", pattern.track_name, pattern.event_count)
            loaded = LoadedPattern(track_id, tuple(pattern.events), from_default=False)
        else:
            logger.info("Using default pattern for track %s", track_id)
            loaded = LoadedPattern(track_id, tuple(self._store.default_pattern()), from_default=True)
        self._loaded = loaded
        self._applied.clear()
        return loaded

    def unload(self) -> None:
        self._loaded = None
        self._applied.clear()

    def reset_applied(self) -> None:
        self._applied.clear()

    def tick(self, position_ms: int, is_playing: bool) -> List[int]:
        """Apply every not-yet-applied event whose due window contains ``position_ms``.

        Returns the indices applied during this call, in index order.
        """

        if not is_playing or self._loaded is None:
            return []
        applied_now: List[int] = []
        for index, event in enumerate(self._loaded.events):
            if index in self._applied:
                continue
            if event.timestamp <= position_ms < event.timestamp + EVENT_DUE_WINDOW_MS:
                self._applied.add(index)
                applied_now.append(index)
                self.emit(event)
        return applied_now

    def emit(self, event: PatternEvent) -> None:
        """Invoke the callbacks matching ``event`` once."""

        data = event.data
        if isinstance(data, IntensityPayload):
            for callback in self._intensity_callbacks:
                callback(data.level)
        elif isinstance(data, MessagePayload):
            for callback in self._message_callbacks:
                callback(data.text)


__all__ = ["EVENT_DUE_WINDOW_MS", "LoadedPattern", "Scheduler"]
