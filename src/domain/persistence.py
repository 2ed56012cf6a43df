"""Persistence helpers for reading and writing pattern library documents.

The store talks to a :class:`LibraryPort`, a minimal text read/write
interface. Local files, an in-memory slot and a single S3 object are
supported; backend failures surface as :class:`LibraryPersistenceError` and
undecodable content as :class:`LibraryFormatError`.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Tuple

from pydantic import ValidationError

from .models import PatternLibrary


class LibraryPersistenceError(Exception):
    """Raised when a persistence backend cannot be read or written."""


class LibraryFormatError(ValueError):
    """Raised when library content is not a structurally valid document."""


class LibrarySerializer:
    """Serialize :class:`PatternLibrary` instances to/from JSON-compatible data."""

    @staticmethod
    def to_dict(library: PatternLibrary) -> Dict[str, Any]:
        """Convert a library to a JSON-ready dictionary using wire key names."""

        return library.model_dump(mode="json", by_alias=True)

    @staticmethod
    def from_dict(payload: Any) -> PatternLibrary:
        """Rehydrate a library, rejecting payloads without ``version`` and ``songs``."""

        if not isinstance(payload, Mapping):
            raise LibraryFormatError("Library document must be a JSON object")
        if not payload.get("version"):
            raise LibraryFormatError("Library document is missing 'version'")
        if not isinstance(payload.get("songs"), Mapping):
            raise LibraryFormatError("Library document is missing a 'songs' mapping")
        try:
            return PatternLibrary.model_validate(payload)
        except ValidationError as exc:
            raise LibraryFormatError(f"Library document failed validation: {exc}") from exc

    @classmethod
    def to_json(cls, library: PatternLibrary, *, indent: int | None = 2) -> str:
        return json.dumps(cls.to_dict(library), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> PatternLibrary:
        try:
            payload = json.loads(text)
        except (TypeError, ValueError) as exc:
            raise LibraryFormatError(f"Library document is not valid JSON: {exc}") from exc
        return cls.from_dict(payload)


class LibraryPort(Protocol):
    """Backend holding the serialized library text."""

    def read(self) -> Optional[str]:
        """Return the persisted document or ``None`` when nothing was saved yet.

        Undecodable content raises :class:`LibraryFormatError`; backend
        failures raise :class:`LibraryPersistenceError`.
        """

    def write(self, text: str) -> None:
        """Replace the persisted document."""


class LibraryFileAdapter(LibraryPort):
    """Filesystem adapter that persists the library as one JSON document."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise LibraryFormatError(f"Library at {self.path} is not valid UTF-8") from exc
        except OSError as exc:
            raise LibraryPersistenceError(f"Failed to read library at {self.path}") from exc

    def write(self, text: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise LibraryPersistenceError(f"Failed to write library to {self.path}") from exc


class InMemoryLibraryPort(LibraryPort):
    """Single-slot port suitable for tests or throwaway sessions."""

    def __init__(self, text: Optional[str] = None) -> None:
        self.text = text
        self.write_count = 0

    def read(self) -> Optional[str]:
        return self.text

    def write(self, text: str) -> None:
        self.text = text
        self.write_count += 1


class S3LibraryPort(LibraryPort):
    """Stores the library document as a single object in an S3 bucket."""

    def __init__(
        self,
        s3_client: Any,
        *,
        bucket: str,
        key: str = "pattern_library.json",
        missing_exceptions: Optional[Tuple[type[BaseException], ...]] = None,
    ) -> None:
        self._s3 = s3_client
        self._bucket = bucket
        self._key = key
        if missing_exceptions is not None:
            self._missing_exceptions = missing_exceptions
        else:
            candidates: list[type[BaseException]] = [KeyError]
            no_such_key = getattr(getattr(s3_client, "exceptions", None), "NoSuchKey", None)
            if isinstance(no_such_key, type):
                candidates.append(no_such_key)
            self._missing_exceptions = tuple(candidates)

    @property
    def location(self) -> str:
        return f"s3://{self._bucket}/{self._key}"

    @classmethod
    def from_environment(
        cls,
        *,
        bucket: str,
        key: str = "pattern_library.json",
        env: Mapping[str, str] | None = None,
        client_factory: Callable[[Mapping[str, str]], Any] | None = None,
    ) -> "S3LibraryPort":
        """Build a port whose client is configured from AWS environment variables.

        ``AWS_ACCESS_KEY_ID`` / ``AWS_SECRET_ACCESS_KEY`` / ``AWS_SESSION_TOKEN``
        and ``AWS_REGION`` (or ``AWS_DEFAULT_REGION``) are forwarded to
        ``boto3``; ``WORKOUT_PATTERNS_S3_ENDPOINT_URL`` targets S3-compatible
        services. A ``client_factory`` replaces boto3 entirely.
        """

        environment: Mapping[str, str] = env if env is not None else os.environ
        if client_factory is None:
            try:
                import boto3
            except ImportError as exc:  # pragma: no cover - depends on optional dependency
                raise LibraryPersistenceError(
                    "boto3 is required to store the pattern library in S3"
                ) from exc

            session = boto3.session.Session(
                aws_access_key_id=environment.get("AWS_ACCESS_KEY_ID"),
                aws_secret_access_key=environment.get("AWS_SECRET_ACCESS_KEY"),
                aws_session_token=environment.get("AWS_SESSION_TOKEN"),
                region_name=environment.get("AWS_REGION") or environment.get("AWS_DEFAULT_REGION"),
            )
            client_kwargs: Dict[str, Any] = {}
            endpoint_url = environment.get("WORKOUT_PATTERNS_S3_ENDPOINT_URL")
            if endpoint_url:
                client_kwargs["endpoint_url"] = endpoint_url
            s3_client = session.client("s3", **client_kwargs)
        else:
            s3_client = client_factory(environment)
        return cls(s3_client, bucket=bucket, key=key)

    def read(self) -> Optional[str]:
        try:
            response = self._s3.get_object(Bucket=self._bucket, Key=self._key)
        except self._missing_exceptions:
            return None
        except Exception as exc:  # pragma: no cover - provider specific error
            raise LibraryPersistenceError(f"Failed to download {self.location}") from exc

        body = response.get("Body")
        if body is None:
            raise LibraryPersistenceError("S3 response missing Body payload")
        raw = body.read() if hasattr(body, "read") else body
        if isinstance(raw, (bytes, bytearray)):
            try:
                return bytes(raw).decode("utf-8")
            except UnicodeDecodeError as exc:
                raise LibraryFormatError(f"{self.location} is not valid UTF-8") from exc
        if isinstance(raw, str):
            return raw
        raise LibraryPersistenceError("Unsupported S3 body payload type")

    def write(self, text: str) -> None:
        try:
            self._s3.put_object(
                Bucket=self._bucket,
                Key=self._key,
                Body=text.encode("utf-8"),
                ContentType="application/json",
            )
        except Exception as exc:  # pragma: no cover - provider specific error
            raise LibraryPersistenceError(f"Failed to upload {self.location}") from exc


__all__ = [
    "InMemoryLibraryPort",
    "LibraryFileAdapter",
    "LibraryFormatError",
    "LibraryPersistenceError",
    "LibraryPort",
    "LibrarySerializer",
    "S3LibraryPort",
]
