"""Discrete input events and the key map that produces them."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping


class InputAction(str, Enum):
    INTENSITY = "intensity"
    MESSAGE = "message"
    TOGGLE_RECORDING = "toggle_recording"
    START_RECORDING = "start_recording"
    STOP_RECORDING = "stop_recording"
    PLAY_PAUSE = "play_pause"
    NEXT_TRACK = "next_track"
    PREVIOUS_TRACK = "previous_track"
    START_PLAYLIST = "start_playlist"


@dataclass(frozen=True)
class InputEvent:
    """A user command delivered to :meth:`TrackChangeCoordinator.handle_input`."""

    action: InputAction
    level: int | None = None
    text: str | None = None
    key: str = ""

    @classmethod
    def intensity(cls, level: int, key: str = "") -> InputEvent:
        if not 1 <= level <= 10:
            raise ValueError(f"Intensity level must be between 1 and 10, got {level}")
        return cls(InputAction.INTENSITY, level=level, key=key)

    @classmethod
    def message(cls, text: str, key: str = "") -> InputEvent:
        return cls(InputAction.MESSAGE, text=text, key=key)


DEFAULT_MESSAGE_TRIGGERS: Dict[str, str] = {
    " ": "KEEP GOING!",
    "Enter": "PUSH IT!",
    "ArrowUp": "FASTER!",
    "ArrowDown": "RECOVER",
    "f": "🔥 BURN 🔥",
    "p": "POWER",
    "s": "STRONG",
}

DEFAULT_COMMAND_KEYS: Dict[str, InputAction] = {
    "r": InputAction.TOGGLE_RECORDING,
    "R": InputAction.TOGGLE_RECORDING,
    "MediaPlayPause": InputAction.PLAY_PAUSE,
    "MediaTrackNext": InputAction.NEXT_TRACK,
    "MediaTrackPrevious": InputAction.PREVIOUS_TRACK,
}


@dataclass
class KeyBindings:
    """Translate key names into :class:`InputEvent` objects.

    Number keys set intensity directly with ``0`` standing for 10.
    """

    message_triggers: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_MESSAGE_TRIGGERS)
    )
    command_keys: Dict[str, InputAction] = field(
        default_factory=lambda: dict(DEFAULT_COMMAND_KEYS)
    )

    @classmethod
    def with_messages(cls, triggers: Mapping[str, str]) -> KeyBindings:
        bindings = cls()
        bindings.message_triggers.update(triggers)
        return bindings

    def resolve(self, key: str) -> InputEvent | None:
        if len(key) == 1 and key in "0123456789":
            level = 10 if key == "0" else int(key)
            return InputEvent.intensity(level, key=key)
        text = self.message_triggers.get(key)
        if text is not None:
            return InputEvent.message(text, key=key)
        action = self.command_keys.get(key)
        if action is not None:
            return InputEvent(action, key=key)
        return None


__all__ = [
    "DEFAULT_COMMAND_KEYS",
    "DEFAULT_MESSAGE_TRIGGERS",
    "InputAction",
    "InputEvent",
    "KeyBindings",
]
