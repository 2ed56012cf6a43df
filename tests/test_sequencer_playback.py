import asyncio
from typing import List

import pytest

from domain.store import PatternStore
from sequencer.coordinator import TrackChangeCoordinator
from sequencer.playback import PlaybackPoller, PlaybackSnapshot, TrackDescriptor


class ScriptedFeed:
    def __init__(self, snapshots: List[PlaybackSnapshot]) -> None:
        self._snapshots = list(snapshots)
        self._last = PlaybackSnapshot()

    def snapshot(self) -> PlaybackSnapshot:
        if self._snapshots:
            self._last = self._snapshots.pop(0)
        return self._last


class AsyncScriptedFeed(ScriptedFeed):
    async def snapshot(self) -> PlaybackSnapshot:  # type: ignore[override]
        await asyncio.sleep(0)
        return super().snapshot()


def test_track_descriptor_joins_artists():
    track = TrackDescriptor(id="x", artists=("A", "B"))
    assert track.artist_name == "A, B"
    assert TrackDescriptor(id="y").artist_name == ""


def test_poller_rejects_negative_interval(coordinator):
    with pytest.raises(ValueError):
        PlaybackPoller(ScriptedFeed([]), coordinator, interval_seconds=-1)


@pytest.mark.asyncio
async def test_poller_drives_replay(coordinator: TrackChangeCoordinator, store: PatternStore, example_pattern, track_a, callbacks):
    store.upsert_song(example_pattern)
    feed = ScriptedFeed(
        [
            PlaybackSnapshot(track_a, position_ms, True)
            for position_ms in (3_900, 4_900, 5_900, 6_900, 11_900, 12_900)
        ]
    )
    poller = PlaybackPoller(feed, coordinator, interval_seconds=0)

    polls = await poller.run(max_polls=6)

    assert polls == 6
    assert poller.poll_count == 6
    assert callbacks.intensities == [7]
    assert callbacks.messages == ["PUSH IT!"]


@pytest.mark.asyncio
async def test_poller_accepts_async_feed(coordinator: TrackChangeCoordinator, track_a):
    feed = AsyncScriptedFeed([PlaybackSnapshot(track_a, 0, True)])
    poller = PlaybackPoller(feed, coordinator, interval_seconds=0)

    snapshot = await poller.poll_once()

    assert snapshot.track == track_a
    assert coordinator.current_track == track_a


@pytest.mark.asyncio
async def test_poller_stops_on_event(coordinator: TrackChangeCoordinator):
    stop = asyncio.Event()
    stop.set()
    poller = PlaybackPoller(ScriptedFeed([]), coordinator, interval_seconds=0)

    assert await poller.run(stop=stop) == 0
