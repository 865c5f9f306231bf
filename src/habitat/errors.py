"""Exception hierarchy shared by the data layer, dispatcher and backends."""

from __future__ import annotations


class HabitatError(Exception):
    """Base class for every error raised by habitat."""


class NotFoundError(HabitatError, LookupError):
    """A mutation targeted a row that does not exist."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class UnsupportedOperationError(HabitatError):
    """The active backend does not implement the requested operation."""


class UnsupportedSnapshotVersionError(HabitatError, ValueError):
    """A logical export bundle declared a version this build cannot import."""

    def __init__(self, version: object) -> None:
        super().__init__(f"Unsupported export version: {version}")
        self.version = version


class StorageUnavailableError(HabitatError):
    """The exclusive writer lock could not be obtained, or storage failed to start."""


class SchemaError(HabitatError):
    """Schema creation or a migration step failed."""


class RequestFailedError(HabitatError):
    """A request came back with ``ok: false``; carries the tag and the error text."""

    def __init__(self, request_type: str, message: str) -> None:
        super().__init__(message)
        self.request_type = request_type
