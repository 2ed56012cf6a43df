import sys
from pathlib import Path
from typing import List

import pytest

ROOT = Path(__file__).resolve().parents[1]
for candidate in (ROOT, ROOT / "src"):
    if str(candidate) not in sys.path:
        sys.path.insert(0, str(candidate))

from domain.models import PatternEvent, PatternLibrary, SongPattern  # noqa: E402
from domain.persistence import InMemoryLibraryPort  # noqa: E402
from domain.store import PatternStore  # noqa: E402
from sequencer.coordinator import TrackChangeCoordinator  # noqa: E402
from sequencer.playback import TrackDescriptor  # noqa: E402
from sequencer.recorder import Recorder  # noqa: E402
from sequencer.scheduler import Scheduler  # noqa: E402


class CallbackLog:
    def __init__(self) -> None:
        self.intensities: List[int] = []
        self.messages: List[str] = []

    def on_intensity(self, level: int) -> None:
        self.intensities.append(level)

    def on_message(self, text: str) -> None:
        self.messages.append(text)


@pytest.fixture()
def example_pattern() -> SongPattern:
    return SongPattern(
        track_id="A",
        track_name="Eye of the Tiger",
        artist_name="Survivor",
        duration_ms=180_000,
        events=[
            PatternEvent.intensity(5_000, 7),
            PatternEvent.message(12_000, "PUSH IT!", "Enter"),
        ],
        recorded_at=1_700_000_000_000,
    )


@pytest.fixture()
def example_library(example_pattern: SongPattern) -> PatternLibrary:
    library = PatternLibrary.default()
    library.add_song(example_pattern)
    return library


@pytest.fixture()
def port() -> InMemoryLibraryPort:
    return InMemoryLibraryPort()


@pytest.fixture()
def store(port: InMemoryLibraryPort) -> PatternStore:
    pattern_store = PatternStore(port)
    pattern_store.load()
    return pattern_store


@pytest.fixture()
def callbacks() -> CallbackLog:
    return CallbackLog()


@pytest.fixture()
def recorder(store: PatternStore) -> Recorder:
    return Recorder(store, clock=lambda: 1_700_000_000_000)


@pytest.fixture()
def scheduler(store: PatternStore, callbacks: CallbackLog) -> Scheduler:
    return Scheduler(store, on_intensity=callbacks.on_intensity, on_message=callbacks.on_message)


@pytest.fixture()
def coordinator(
    store: PatternStore, recorder: Recorder, scheduler: Scheduler
) -> TrackChangeCoordinator:
    return TrackChangeCoordinator(recorder, scheduler, store=store)


@pytest.fixture()
def track_a() -> TrackDescriptor:
    return TrackDescriptor(id="A", name="Eye of the Tiger", artists=("Survivor",), duration_ms=180_000)


@pytest.fixture()
def track_b() -> TrackDescriptor:
    return TrackDescriptor(
        id="B", name="Stronger", artists=("Kanye West", "Daft Punk"), duration_ms=312_000
    )
