"""
Schema version detection and schema loading.

PocketBase exports come in two incompatible shapes: the current one lists
a collection's fields under ``fields``, the legacy one under ``schema``. A
document must use exactly one of them for every collection.
"""

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from ...logging_config import get_logger
from ...utils import read_schema_file
from .config import ConfigError
from .schema import CollectionSchema, parse_collections

logger = get_logger(__name__)

LATEST_KEY = "fields"
LEGACY_KEY = "schema"


class SchemaVersion(Enum):
    """Which field-list key a schema document uses."""

    UNKNOWN = "unknown"
    LATEST = "latest"
    LEGACY = "legacy"

    def __str__(self) -> str:
        return self.value


class SchemaVersionError(Exception):
    """
    Base error for schema version detection.

    Subclasses identify the failure kind so callers can branch on type
    rather than on the message text.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        text = f"schema version detection failed: {self.message}"
        if self.cause is not None:
            text += f" (cause: {self.cause})"
        return text


class MalformedSchemaError(SchemaVersionError):
    """The document is empty, not valid JSON, not an array, or has no collections."""

    pass


class AmbiguousFieldKeyError(SchemaVersionError):
    """A collection declares both field-list keys, or neither."""

    def __init__(
        self,
        message: str,
        collection: str = "",
        index: int = -1,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.collection = collection
        self.index = index


class SchemaVersionMismatchError(SchemaVersionError):
    """Collections disagree on the key convention, or differ from an expected version."""

    def __init__(
        self,
        message: str,
        expected: SchemaVersion = SchemaVersion.UNKNOWN,
        actual: SchemaVersion = SchemaVersion.UNKNOWN,
        collection: str = "",
        index: int = -1,
    ):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.collection = collection
        self.index = index


class InvalidSchemaVersionError(SchemaVersionError, ConfigError):
    """A forced version value is not one of the recognized names."""

    def __init__(self, value: str):
        super().__init__(
            f"invalid schema version {value!r}: must be 'latest' or 'legacy'"
        )
        self.value = value


def parse_schema_version(value: str) -> SchemaVersion:
    """
    Resolve a version name given on the command line or in a config file.

    Raises:
        InvalidSchemaVersionError: For anything except latest/legacy
    """
    normalized = (value or "").strip().lower()
    if normalized == SchemaVersion.LATEST.value:
        return SchemaVersion.LATEST
    if normalized == SchemaVersion.LEGACY.value:
        return SchemaVersion.LEGACY
    raise InvalidSchemaVersionError(value)


def _collection_label(entry: Any, index: int) -> str:
    if isinstance(entry, dict) and isinstance(entry.get("name"), str) and entry["name"]:
        return entry["name"]
    return f"#{index}"


class SchemaVersionDetector:
    """Classifies a whole schema document as latest or legacy."""

    def detect_version(self, data: bytes | str) -> SchemaVersion:
        """
        Detect the key convention used by every collection of a document.

        Args:
            data: Raw JSON document

        Returns:
            SchemaVersion.LATEST or SchemaVersion.LEGACY

        Raises:
            MalformedSchemaError: Empty input, invalid JSON, non-array or empty array
            AmbiguousFieldKeyError: A collection has both keys or neither key
            SchemaVersionMismatchError: Collections use different keys
        """
        collections = self._decode(data)

        detected = SchemaVersion.UNKNOWN
        first_label = ""
        for index, entry in enumerate(collections):
            label = _collection_label(entry, index)
            version = self._classify(entry, index, label)

            if detected is SchemaVersion.UNKNOWN:
                detected, first_label = version, label
            elif version is not detected:
                raise SchemaVersionMismatchError(
                    f"mixed schema versions: collection {first_label!r} uses "
                    f"{detected} format but collection {label!r} uses {version} format",
                    expected=detected,
                    actual=version,
                    collection=label,
                    index=index,
                )

        logger.debug("Detected %s schema format across %d collections", detected, len(collections))
        return detected

    def validate_schema(self, data: bytes | str, expected: SchemaVersion) -> SchemaVersion:
        """
        Detect the version and require it to match ``expected``.

        Raises:
            SchemaVersionMismatchError: When the detected version differs
        """
        detected = self.detect_version(data)
        if detected is not expected:
            raise SchemaVersionMismatchError(
                f"expected {expected} schema format, detected {detected}",
                expected=expected,
                actual=detected,
            )
        return detected

    def _decode(self, data: bytes | str) -> List[Any]:
        if not data or (isinstance(data, (bytes, str)) and not data.strip()):
            raise MalformedSchemaError("empty schema data")

        try:
            collections = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedSchemaError("invalid JSON", cause=e) from e

        if not isinstance(collections, list):
            raise MalformedSchemaError(
                f"schema must be a JSON array of collections, got {type(collections).__name__}"
            )
        if not collections:
            raise MalformedSchemaError("schema contains no collections")
        return collections

    def _classify(self, entry: Any, index: int, label: str) -> SchemaVersion:
        if not isinstance(entry, dict):
            raise MalformedSchemaError(
                f"collection {label!r} must be a JSON object, got {type(entry).__name__}"
            )

        has_latest = LATEST_KEY in entry
        has_legacy = LEGACY_KEY in entry

        if has_latest and has_legacy:
            raise AmbiguousFieldKeyError(
                f"collection {label!r} has both '{LATEST_KEY}' and '{LEGACY_KEY}' keys",
                collection=label,
                index=index,
            )
        if not has_latest and not has_legacy:
            raise AmbiguousFieldKeyError(
                f"collection {label!r} has neither '{LATEST_KEY}' nor '{LEGACY_KEY}' key",
                collection=label,
                index=index,
            )
        return SchemaVersion.LATEST if has_latest else SchemaVersion.LEGACY


@dataclass(frozen=True)
class SchemaLoadResult:
    """Parsed collections plus the version downstream code should use."""

    schemas: List[CollectionSchema]
    schema_version: SchemaVersion
    detected_version: SchemaVersion

    @property
    def is_forced(self) -> bool:
        return self.schema_version is not self.detected_version


def load_schema(
    data: bytes | str, force_version: Optional[str | SchemaVersion] = None
) -> SchemaLoadResult:
    """
    Detect, parse and optionally override the version of a schema document.

    Detection runs first, so no collections are returned for a document
    that fails it.

    Args:
        data: Raw JSON document
        force_version: "latest"/"legacy" (or a SchemaVersion) replacing the
            detected version for everything downstream

    Returns:
        SchemaLoadResult

    Raises:
        SchemaVersionError: Detection failed or the forced value is invalid
        SchemaParseError: A collection or field entry is malformed
    """
    forced = None
    if force_version is not None and force_version != "":
        forced = (
            force_version
            if isinstance(force_version, SchemaVersion)
            else parse_schema_version(force_version)
        )
        if forced is SchemaVersion.UNKNOWN:
            raise InvalidSchemaVersionError(str(forced))

    detected = SchemaVersionDetector().detect_version(data)
    logger.info("Detected schema version: %s", detected)

    schemas = parse_collections(json.loads(data))

    version = detected
    if forced is not None:
        version = forced
        if forced is not detected:
            logger.warning(
                "Overriding detected schema version %s with forced version %s",
                detected,
                forced,
            )
        else:
            logger.info("Forced schema version %s matches detected version", forced)

    return SchemaLoadResult(schemas=schemas, schema_version=version, detected_version=detected)


def load_schema_file(
    path: str | Path, force_version: Optional[str | SchemaVersion] = None
) -> SchemaLoadResult:
    """Read a schema export from disk and load it."""
    _, data = read_schema_file(path)
    return load_schema(data, force_version)
