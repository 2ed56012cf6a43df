"""Playback feed types, transport port, and the polling loop.

The playback subsystem (a streaming SDK, a desktop player) is an external
collaborator. It is represented here by a :class:`PlaybackFeed` that
returns :class:`PlaybackSnapshot` objects and an optional
:class:`PlaybackTransport` receiving play/pause/skip requests.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Protocol, Tuple, Union

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .coordinator import TrackChangeCoordinator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackDescriptor:
    """Identity and metadata of the track currently loaded in the player."""

    id: str
    name: str = ""
    artists: Tuple[str, ...] = field(default_factory=tuple)
    duration_ms: int = 0

    @property
    def artist_name(self) -> str:
        return ", ".join(self.artists)


@dataclass(frozen=True)
class PlaybackSnapshot:
    """One reading of the playback feed."""

    track: TrackDescriptor | None = None
    position_ms: int = 0
    is_playing: bool = False


class PlaybackFeed(Protocol):
    """Source of playback snapshots; may return an awaitable."""

    def snapshot(self) -> Union[PlaybackSnapshot, Awaitable[PlaybackSnapshot]]:
        """Return the player's current state."""


class PlaybackTransport(Protocol):
    """Commands forwarded to the player."""

    def toggle_play(self) -> None:
        """Pause when playing, resume when paused."""

    def next_track(self) -> None:
        """Skip to the next track."""

    def previous_track(self) -> None:
        """Return to the previous track."""

    def play_playlist(self, uri: str) -> None:
        """Start playback of the playlist identified by ``uri``."""


class PlaybackPoller:
    """Poll a feed at a fixed interval and hand snapshots to the coordinator.

    Snapshots are delivered on the event loop thread, so each one is fully
    processed before the next poll starts.
    """

    def __init__(
        self,
        feed: PlaybackFeed,
        coordinator: "TrackChangeCoordinator",
        *,
        interval_seconds: float = 1.0,
    ) -> None:
        if interval_seconds < 0:
            raise ValueError("interval_seconds must be non-negative")
        self._feed = feed
        self._coordinator = coordinator
        self._interval = interval_seconds
        self._poll_count = 0

    @property
    def poll_count(self) -> int:
        return self._poll_count

    async def poll_once(self) -> PlaybackSnapshot:
        result = self._feed.snapshot()
        snapshot = await result if inspect.isawaitable(result) else result
        self._coordinator.on_playback(snapshot)
        self._poll_count += 1
        return snapshot

    async def run(
        self,
        *,
        stop: asyncio.Event | None = None,
        max_polls: int | None = None,
    ) -> int:
        """Poll until ``stop`` is set or ``max_polls`` snapshots were handled."""

        polls = 0
        while not (stop is not None and stop.is_set()):
            if max_polls is not None and polls >= max_polls:
                break
            await self.poll_once()
            polls += 1
            await asyncio.sleep(self._interval)
        logger.debug("Playback poller stopped after %d polls", polls)
        return polls


__all__ = [
    "PlaybackFeed",
    "PlaybackPoller",
    "PlaybackSnapshot",
    "PlaybackTransport",
    "TrackDescriptor",
]
