"""Environment-driven configuration for the replay engine.

Recognised variables:

``WORKOUT_PATTERNS_BACKEND``
    ``file`` (default), ``memory`` or ``s3``.
``WORKOUT_PATTERNS_PATH``
    Library JSON path for the ``file`` backend; defaults to
    ``~/.workout_patterns/pattern_library.json``.
``WORKOUT_PATTERNS_S3_BUCKET`` / ``WORKOUT_PATTERNS_S3_KEY``
    Bucket (required for ``s3``) and object key.
``WORKOUT_PATTERNS_POLL_INTERVAL``
    Seconds between playback feed polls; defaults to ``1.0``.
``WORKOUT_PATTERNS_PLAYLIST_URI``
    Playlist started by the start-playlist command.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping

from domain.persistence import (
    InMemoryLibraryPort,
    LibraryFileAdapter,
    LibraryPort,
    S3LibraryPort,
)

from .coordinator import DEFAULT_PLAYLIST_URI

BACKENDS = ("file", "memory", "s3")


class SettingsError(ValueError):
    """Raised when environment configuration is missing or malformed."""


def default_library_path() -> Path:
    return Path.home() / ".workout_patterns" / "pattern_library.json"


@dataclass(frozen=True)
class ReplaySettings:
    backend: str = "file"
    library_path: Path = field(default_factory=default_library_path)
    s3_bucket: str | None = None
    s3_key: str = "pattern_library.json"
    poll_interval_seconds: float = 1.0
    playlist_uri: str = DEFAULT_PLAYLIST_URI

    @classmethod
    def from_environment(cls, env: Mapping[str, str] | None = None) -> ReplaySettings:
        environment: Mapping[str, str] = env if env is not None else os.environ

        backend = environment.get("WORKOUT_PATTERNS_BACKEND", "file").strip().lower()
        if backend not in BACKENDS:
            raise SettingsError(
                f"WORKOUT_PATTERNS_BACKEND must be one of {', '.join(BACKENDS)}; got {backend!r}"
            )

        raw_interval = environment.get("WORKOUT_PATTERNS_POLL_INTERVAL", "1.0")
        try:
            interval = float(raw_interval)
        except ValueError as exc:
            raise SettingsError(
                f"WORKOUT_PATTERNS_POLL_INTERVAL must be a number; got {raw_interval!r}"
            ) from exc
        if interval <= 0:
            raise SettingsError("WORKOUT_PATTERNS_POLL_INTERVAL must be positive")

        bucket = environment.get("WORKOUT_PATTERNS_S3_BUCKET") or None
        if backend == "s3" and not bucket:
            raise SettingsError(
                "WORKOUT_PATTERNS_S3_BUCKET must be set when using the s3 backend"
            )

        path_value = environment.get("WORKOUT_PATTERNS_PATH")
        library_path = Path(path_value).expanduser() if path_value else default_library_path()

        return cls(
            backend=backend,
            library_path=library_path,
            s3_bucket=bucket,
            s3_key=environment.get("WORKOUT_PATTERNS_S3_KEY", "pattern_library.json"),
            poll_interval_seconds=interval,
            playlist_uri=environment.get("WORKOUT_PATTERNS_PLAYLIST_URI", DEFAULT_PLAYLIST_URI),
        )

    def build_port(
        self,
        *,
        env: Mapping[str, str] | None = None,
        s3_client_factory: Callable[[Mapping[str, str]], Any] | None = None,
    ) -> LibraryPort:
        """Instantiate the persistence port selected by ``backend``."""

        if self.backend == "memory":
            return InMemoryLibraryPort()
        if self.backend == "s3":
            if not self.s3_bucket:
                raise SettingsError("An S3 bucket is required for the s3 backend")
            return S3LibraryPort.from_environment(
                bucket=self.s3_bucket,
                key=self.s3_key,
                env=env,
                client_factory=s3_client_factory,
            )
        return LibraryFileAdapter(self.library_path)


__all__ = ["BACKENDS", "ReplaySettings", "SettingsError", "default_library_path"]
