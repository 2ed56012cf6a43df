from pathlib import Path

import pytest

from domain.persistence import InMemoryLibraryPort, LibraryFileAdapter, S3LibraryPort
from sequencer.coordinator import DEFAULT_PLAYLIST_URI
from sequencer.settings import ReplaySettings, SettingsError, default_library_path


def test_defaults_from_empty_environment():
    settings = ReplaySettings.from_environment({})

    assert settings.backend == "file"
    assert settings.library_path == default_library_path()
    assert settings.poll_interval_seconds == 1.0
    assert settings.playlist_uri == DEFAULT_PLAYLIST_URI


def test_file_backend_builds_file_adapter(tmp_path: Path):
    settings = ReplaySettings.from_environment(
        {"WORKOUT_PATTERNS_PATH": str(tmp_path / "lib.json"), "WORKOUT_PATTERNS_POLL_INTERVAL": "0.5"}
    )
    port = settings.build_port()

    assert isinstance(port, LibraryFileAdapter)
    assert port.path == tmp_path / "lib.json"
    assert settings.poll_interval_seconds == 0.5


def test_memory_backend():
    settings = ReplaySettings.from_environment({"WORKOUT_PATTERNS_BACKEND": "Memory"})
    assert isinstance(settings.build_port(), InMemoryLibraryPort)


def test_s3_backend_uses_client_factory():
    env = {"WORKOUT_PATTERNS_BACKEND": "s3", "WORKOUT_PATTERNS_S3_BUCKET": "gym"}
    settings = ReplaySettings.from_environment(env)
    port = settings.build_port(env=env, s3_client_factory=lambda _env: object())

    assert isinstance(port, S3LibraryPort)
    assert port.location == "s3://gym/pattern_library.json"


@pytest.mark.parametrize(
    "env",
    [
        {"WORKOUT_PATTERNS_BACKEND": "ftp"},
        {"WORKOUT_PATTERNS_BACKEND": "s3"},
        {"WORKOUT_PATTERNS_POLL_INTERVAL": "soon"},
        {"WORKOUT_PATTERNS_POLL_INTERVAL": "0"},
    ],
)
def test_invalid_environment_raises(env):
    with pytest.raises(SettingsError):
        ReplaySettings.from_environment(env)
