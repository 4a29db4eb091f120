"""Pytest configuration and fixtures for blobkit.

Storage tests run against LocalObjectStore under tmp_path; Azure backend
tests use a mocked BlobServiceClient. No network access is needed.
"""

import base64
from datetime import UTC, datetime

import pytest

from blobkit.infrastructure.external.storage.local_store import LocalObjectStore
from blobkit.infrastructure.external.storage.options import StorageOptions
from blobkit.infrastructure.external.storage.service import StorageService

ACCOUNT_NAME = "devaccount"
ACCOUNT_KEY = base64.b64encode(b"blobkit-test-account-key-0123456789").decode()
CONNECTION_STRING = (
    "DefaultEndpointsProtocol=https;"
    f"AccountName={ACCOUNT_NAME};AccountKey={ACCOUNT_KEY};"
    "EndpointSuffix=core.windows.net"
)
BASE_URL = "http://localhost:10000/files"
# Sub-second part is dropped when signing.
NOW = datetime(2026, 1, 15, 12, 0, 0, 654321, tzinfo=UTC)


@pytest.fixture
def options() -> StorageOptions:
    """Options with a 2 hour SAS lifetime."""
    return StorageOptions(
        connection_string=CONNECTION_STRING,
        account_key=ACCOUNT_KEY,
        account_name=ACCOUNT_NAME,
        sas_ttl_hours=2,
    )


@pytest.fixture
def fixed_clock():
    """Clock pinned to NOW."""
    return lambda: NOW


@pytest.fixture
def local_store(tmp_path) -> LocalObjectStore:
    """Filesystem store rooted in a temp dir."""
    return LocalObjectStore(str(tmp_path / "storage"), base_url=BASE_URL)


@pytest.fixture
def service(local_store, options, fixed_clock) -> StorageService:
    """StorageService over the local store."""
    return StorageService(local_store, options, clock=fixed_clock)
