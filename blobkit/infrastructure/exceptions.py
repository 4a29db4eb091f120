"""Infrastructure exceptions for object storage operations.

Transport failures from a backend are wrapped in the Storage*Error types
below so callers see one hierarchy regardless of backend. Absence of an
object is not an error at the StorageService level; backends still raise
StorageNotFoundError from download so the service can decide.
"""

from blobkit.domain.exceptions import BlobKitException, ValidationException


class StorageException(BlobKitException):
    """Base exception for storage operations."""


def _location(container: str, key: str) -> str:
    return f"{container}/{key}" if key else container


class StorageNotFoundError(StorageException):
    """Object not found in storage."""

    def __init__(self, container: str, key: str) -> None:
        super().__init__(
            f"Object not found: {_location(container, key)}",
            "STORAGE_NOT_FOUND",
            {"container": container, "key": key},
        )


class StorageContainerError(StorageException):
    """Container could not be created or resolved."""

    def __init__(self, container: str, reason: str) -> None:
        super().__init__(
            f"Failed to ensure container: {container}",
            "STORAGE_CONTAINER_ERROR",
            {"container": container, "reason": reason},
        )


class StorageUploadError(StorageException):
    """Object upload failed."""

    def __init__(self, container: str, key: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload object: {_location(container, key)}",
            "STORAGE_UPLOAD_ERROR",
            {"container": container, "key": key, "reason": reason},
        )


class StorageDownloadError(StorageException):
    """Object download or existence check failed."""

    def __init__(self, container: str, key: str, reason: str) -> None:
        super().__init__(
            f"Failed to download object: {_location(container, key)}",
            "STORAGE_DOWNLOAD_ERROR",
            {"container": container, "key": key, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """Object deletion failed."""

    def __init__(self, container: str, key: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete object: {_location(container, key)}",
            "STORAGE_DELETE_ERROR",
            {"container": container, "key": key, "reason": reason},
        )


class StoragePermissionError(StorageException):
    """Path escapes the storage root (local backend)."""

    def __init__(self, path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {path}",
            "STORAGE_PERMISSION_ERROR",
            {"path": path, "operation": operation},
        )


class ArchiveBundleError(StorageException):
    """Building or committing a zip bundle failed; destination untouched."""

    def __init__(self, destination: str, source: str | None, reason: str) -> None:
        super().__init__(
            f"Failed to bundle archive: {destination}",
            "ARCHIVE_BUNDLE_ERROR",
            {"destination": destination, "source": source, "reason": reason},
        )


class SigningInputError(ValidationException):
    """Signed URL inputs are malformed (e.g. unparseable IP range)."""

    def __init__(self, value: str, reason: str, field: str = "ip") -> None:
        super().__init__(f"Invalid {field} for signed URL: {value!r} ({reason})", field)
        self.error_code = "SIGNING_INPUT_INVALID"
        self.details["value"] = value
        self.details["reason"] = reason
