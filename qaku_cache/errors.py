"""Error taxonomy of the replication pipeline."""

from enum import Enum


class QakuCacheError(Exception):
    """Base class for all cache node errors."""


class DecodeError(QakuCacheError):
    """Announcement payload is malformed."""


class ResolutionErrorKind(str, Enum):
    """Why a manifest could not be resolved."""

    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    MALFORMED = "malformed"


class ResolutionError(QakuCacheError):
    """Manifest lookup in the storage network failed."""

    def __init__(self, kind: ResolutionErrorKind, content_id: str, detail: str = ""):
        self.kind = kind
        self.content_id = content_id
        self.detail = detail
        message = f"manifest for {content_id}: {kind.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class TriggerError(QakuCacheError):
    """Storage network did not accept the replication request."""

    def __init__(self, content_id: str, status_code: int | None = None, detail: str = ""):
        self.content_id = content_id
        self.status_code = status_code
        self.detail = detail
        if status_code is not None:
            message = f"replication of {content_id} rejected with status {status_code}"
        else:
            message = f"replication of {content_id} failed: {detail}"
        super().__init__(message)


class StorageNetworkError(QakuCacheError):
    """Read-through call to the storage network failed."""
