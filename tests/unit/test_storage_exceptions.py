"""Tests for exception codes and details."""

from blobkit.domain.exceptions import BlobKitException, ValidationException
from blobkit.infrastructure.exceptions import (
    ArchiveBundleError,
    SigningInputError,
    StorageContainerError,
    StorageException,
    StorageNotFoundError,
    StorageUploadError,
)


def test_base_exception_default_error_code() -> None:
    exc = BlobKitException("Something failed")
    assert exc.error_code == "BlobKitException"
    assert exc.details == {}
    assert str(exc) == "Something failed"


def test_validation_exception_field() -> None:
    exc = ValidationException("bad path", field="path")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "path"}


def test_storage_errors_share_base() -> None:
    for exc in (
        StorageNotFoundError("c1", "a.txt"),
        StorageUploadError("c1", "a.txt", "boom"),
        StorageContainerError("c1", "boom"),
        ArchiveBundleError("d/out.zip", "c1/a.txt", "boom"),
    ):
        assert isinstance(exc, StorageException)
        assert isinstance(exc, BlobKitException)


def test_not_found_message() -> None:
    exc = StorageNotFoundError("c1", "dir/a.txt")
    assert exc.message == "Object not found: c1/dir/a.txt"
    assert exc.error_code == "STORAGE_NOT_FOUND"


def test_upload_error_details() -> None:
    exc = StorageUploadError("c1", "a.txt", "quota exceeded")
    assert exc.details == {"container": "c1", "key": "a.txt", "reason": "quota exceeded"}


def test_signing_input_error() -> None:
    exc = SigningInputError("1.2.3", "bad octets")
    assert isinstance(exc, ValidationException)
    assert exc.error_code == "SIGNING_INPUT_INVALID"
    assert exc.details == {"field": "ip", "value": "1.2.3", "reason": "bad octets"}
