"""Recording, replay, and track-change coordination for workout patterns."""

from .bindings import InputAction, InputEvent, KeyBindings
from .coordinator import DEFAULT_PLAYLIST_URI, TrackChangeCoordinator
from .playback import (
    PlaybackFeed,
    PlaybackPoller,
    PlaybackSnapshot,
    PlaybackTransport,
    TrackDescriptor,
)
from .recorder import Recorder, RecorderState, RecorderStateError
from .scheduler import EVENT_DUE_WINDOW_MS, LoadedPattern, Scheduler
from .settings import ReplaySettings, SettingsError

__all__ = [
    "Recorder",
    "RecorderState",
    "RecorderStateError",
    "Scheduler",
    "LoadedPattern",
    "EVENT_DUE_WINDOW_MS",
    "TrackChangeCoordinator",
    "DEFAULT_PLAYLIST_URI",
    "InputAction",
    "InputEvent",
    "KeyBindings",
    "PlaybackFeed",
    "PlaybackPoller",
    "PlaybackSnapshot",
    "PlaybackTransport",
    "TrackDescriptor",
    "ReplaySettings",
    "SettingsError",
]
