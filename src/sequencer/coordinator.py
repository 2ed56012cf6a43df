"""Route playback-feed updates and user input to the recorder or scheduler.

Capture and replay are mutually exclusive: while the recorder is recording,
track changes rotate the recording and the scheduler is never ticked. While
idle, track changes reload the scheduler and every snapshot ticks it.
"""
from __future__ import annotations

import logging
from typing import Union

from domain.models import PatternEvent
from domain.store import LibraryChange, PatternStore

from .bindings import InputAction, InputEvent, KeyBindings
from .playback import PlaybackSnapshot, PlaybackTransport, TrackDescriptor
from .recorder import Recorder
from .scheduler import Scheduler

logger = logging.getLogger(__name__)

DEFAULT_PLAYLIST_URI = "spotify:playlist:2yCWTfAD9DUUqa4xyCc9SC"


class TrackChangeCoordinator:
    """Single entry point for playback notifications and input events."""

    def __init__(
        self,
        recorder: Recorder,
        scheduler: Scheduler,
        *,
        store: PatternStore | None = None,
        bindings: KeyBindings | None = None,
        transport: PlaybackTransport | None = None,
        playlist_uri: str = DEFAULT_PLAYLIST_URI,
    ) -> None:
        self._recorder = recorder
        self._scheduler = scheduler
        self._bindings = bindings or KeyBindings()
        self._transport = transport
        self._playlist_uri = playlist_uri
        self._track: TrackDescriptor | None = None
        self._track_lost = False
        self._position_ms = 0
        self._is_playing = False
        if store is not None:
            store.add_listener(self._on_library_change)

    @property
    def recorder(self) -> Recorder:
        return self._recorder

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def is_recording(self) -> bool:
        return self._recorder.is_recording

    @property
    def current_track(self) -> TrackDescriptor | None:
        return self._track

    @property
    def position_ms(self) -> int:
        return self._position_ms

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    # ------------------------------------------------------------------
    # Playback feed
    # ------------------------------------------------------------------
    def on_playback(self, snapshot: PlaybackSnapshot) -> None:
        """Process one feed reading: track change first, then the replay tick."""

        previous_id = self._track.id if self._track is not None else None
        new_id = snapshot.track.id if snapshot.track is not None else None
        self._position_ms = max(0, int(snapshot.position_ms))
        self._is_playing = snapshot.is_playing
        if new_id != previous_id:
            self.on_track_change(snapshot.track)
        elif snapshot.track is not None:
            self._track = snapshot.track

        if not self._recorder.is_recording:
            self._scheduler.tick(self._position_ms, self._is_playing)

    def on_track_change(self, track: TrackDescriptor | None) -> None:
        """Rotate an active recording or reload replay for the new track."""

        if track is None:
            if self._recorder.is_recording:
                # Keep capturing for the last known track until a new one appears.
                logger.debug("Playback feed lost its track while recording")
                self._track_lost = True
            else:
                self._track = None
                self._scheduler.unload()
            return

        self._track = track
        self._track_lost = False
        if self._recorder.is_recording:
            self._recorder.rotate(track.id, track.name, track.artist_name, track.duration_ms)
        else:
            self._scheduler.load_for_track(track.id)

    # ------------------------------------------------------------------
    # User commands
    # ------------------------------------------------------------------
    def start_recording(self) -> bool:
        """Begin capturing for the current track; ``False`` when that is impossible."""

        if self._recorder.is_recording:
            logger.debug("Recording already in progress")
            return False
        track = self._track
        if track is None:
            logger.warning("Cannot start recording without an active track")
            return False
        self._recorder.start(track.id, track.name, track.artist_name, track.duration_ms)
        return True

    def stop_recording(self) -> bool:
        """Finish capturing and resume replay for the current track."""

        if not self._recorder.is_recording:
            return False
        self._recorder.stop()
        self._reload_scheduler()
        return True

    def toggle_recording(self) -> bool:
        """Flip recording state and return the resulting ``is_recording`` flag."""

        if self._recorder.is_recording:
            self.stop_recording()
        else:
            self.start_recording()
        return self._recorder.is_recording

    def start_playlist(self, uri: str | None = None) -> None:
        transport = self._require_transport("start playlist")
        if transport is not None:
            transport.play_playlist(uri or self._playlist_uri)

    def handle_input(self, event: Union[InputEvent, str]) -> bool:
        """Dispatch a key name or :class:`InputEvent`; returns ``False`` if unhandled."""

        if isinstance(event, str):
            resolved = self._bindings.resolve(event)
            if resolved is None:
                return False
            event = resolved

        action = event.action
        if action is InputAction.INTENSITY and event.level is not None:
            self._apply_live(PatternEvent.intensity(self._position_ms, event.level))
        elif action is InputAction.MESSAGE and event.text is not None:
            self._apply_live(PatternEvent.message(self._position_ms, event.text, event.key))
        elif action is InputAction.TOGGLE_RECORDING:
            self.toggle_recording()
        elif action is InputAction.START_RECORDING:
            self.start_recording()
        elif action is InputAction.STOP_RECORDING:
            self.stop_recording()
        elif action is InputAction.PLAY_PAUSE:
            self._send_transport("toggle_play")
        elif action is InputAction.NEXT_TRACK:
            self._send_transport("next_track")
        elif action is InputAction.PREVIOUS_TRACK:
            self._send_transport("previous_track")
        elif action is InputAction.START_PLAYLIST:
            self.start_playlist()
        else:
            return False
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _apply_live(self, event: PatternEvent) -> None:
        self._scheduler.emit(event)
        self._recorder.record(event)

    def _reload_scheduler(self) -> None:
        if self._track_lost:
            self._track = None
            self._track_lost = False
        if self._track is None:
            self._scheduler.unload()
        else:
            self._scheduler.load_for_track(self._track.id)

    def _on_library_change(self, change: LibraryChange) -> None:
        if self._recorder.is_recording or change.kind == "upserted":
            return
        if change.kind == "deleted" and self._track is not None and change.track_id != self._track.id:
            return
        self._reload_scheduler()

    def _require_transport(self, command: str) -> PlaybackTransport | None:
        if self._transport is None:
            logger.warning("No playback transport configured; ignoring %s", command)
        return self._transport

    def _send_transport(self, command: str) -> None:
        transport = self._require_transport(command)
        if transport is not None:
            getattr(transport, command)()


__all__ = ["DEFAULT_PLAYLIST_URI", "TrackChangeCoordinator"]
