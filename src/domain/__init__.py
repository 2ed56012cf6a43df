"""Domain package exposing pattern models, persistence ports, and the store."""
from .library_transfer import (
    LibraryImportResult,
    LibraryTransfer,
    default_export_filename,
    export_library,
)
from .models import (
    LIBRARY_VERSION,
    IntensityPayload,
    MessagePayload,
    PatternEvent,
    PatternLibrary,
    SongPattern,
    default_pattern_events,
)
from .persistence import (
    InMemoryLibraryPort,
    LibraryFileAdapter,
    LibraryFormatError,
    LibraryPersistenceError,
    LibraryPort,
    LibrarySerializer,
    S3LibraryPort,
)
from .store import LibraryChange, PatternStore, SongSummary

__all__ = [
    "LIBRARY_VERSION",
    "IntensityPayload",
    "MessagePayload",
    "PatternEvent",
    "SongPattern",
    "PatternLibrary",
    "default_pattern_events",
    "LibraryPort",
    "LibraryFileAdapter",
    "InMemoryLibraryPort",
    "S3LibraryPort",
    "LibrarySerializer",
    "LibraryFormatError",
    "LibraryPersistenceError",
    "PatternStore",
    "LibraryChange",
    "SongSummary",
    "LibraryTransfer",
    "LibraryImportResult",
    "export_library",
    "default_export_filename",
]
