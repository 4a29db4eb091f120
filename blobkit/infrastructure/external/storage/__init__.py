"""Storage: Azure Blob Storage and local filesystem backends.

StorageFactory builds a StorageService from blobkit.core.config. Backend
modules are imported inside StorageFactory.create_store() so only the
configured backend is loaded.

Backends implement ObjectStoreProtocol (ensure_container, upload, download,
download_into, exists, delete, url_for).
"""

from blobkit.infrastructure.external.storage.archive import ArchiveBundler
from blobkit.infrastructure.external.storage.factory import StorageFactory
from blobkit.infrastructure.external.storage.options import StorageOptions
from blobkit.infrastructure.external.storage.paths import (
    BundleRequest,
    PathList,
    join_path,
    split_path,
)
from blobkit.infrastructure.external.storage.protocol import ObjectStoreProtocol
from blobkit.infrastructure.external.storage.service import StorageService
from blobkit.infrastructure.external.storage.signing import SignedUrlIssuer

__all__ = [
    "ArchiveBundler",
    "BundleRequest",
    "ObjectStoreProtocol",
    "PathList",
    "SignedUrlIssuer",
    "StorageFactory",
    "StorageOptions",
    "StorageService",
    "join_path",
    "split_path",
]
