"""Storage service factory: builds StorageService for the configured backend."""

from __future__ import annotations

from typing import TYPE_CHECKING

from blobkit.infrastructure.external.storage.options import StorageOptions
from blobkit.infrastructure.external.storage.protocol import ObjectStoreProtocol
from blobkit.infrastructure.external.storage.service import StorageService

if TYPE_CHECKING:
    from blobkit.core.config import Settings


class StorageFactory:
    """Factory for storage service instances based on configuration."""

    @staticmethod
    def create_store(settings: "Settings") -> ObjectStoreProtocol:
        """Create the backend named by settings.storage_backend.

        Raises:
            ValueError: Unknown backend or missing required config.
        """
        backend = settings.storage_backend.lower()
        if backend == "local":
            from blobkit.infrastructure.external.storage.local_store import (
                LocalObjectStore,
            )

            if not settings.storage_root:
                raise ValueError("STORAGE_ROOT required for local backend")
            return LocalObjectStore(
                storage_root=settings.storage_root,
                base_url=settings.storage_base_url,
            )
        if backend == "azure":
            from blobkit.infrastructure.external.storage.azure_blob_store import (
                AzureBlobObjectStore,
            )

            connection_string = settings.azure_storage_connection_string.get_secret_value()
            if not connection_string:
                raise ValueError(
                    "AZURE_STORAGE_CONNECTION_STRING required for azure backend"
                )
            return AzureBlobObjectStore(connection_string=connection_string)
        raise ValueError(
            f"Unknown storage backend: {backend}. Supported: 'azure', 'local'"
        )

    @staticmethod
    def create_storage_service(settings: "Settings | None" = None) -> StorageService:
        """Create StorageService from settings.

        Args:
            settings: Settings; if None, uses get_settings().

        Returns:
            StorageService over an Azure or local backend.
        """
        from blobkit.core.config import get_settings

        s = settings or get_settings()
        return StorageService(
            store=StorageFactory.create_store(s),
            options=StorageOptions.from_settings(s),
        )
