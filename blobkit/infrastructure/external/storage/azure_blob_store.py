"""Azure Blob Storage backend.

Uses the sync azure-storage-blob client via asyncio.to_thread for the async
API, one BlobServiceClient shared by all operations (the SDK client is
thread-safe and reuses its connection pool).
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from typing import BinaryIO

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings

from blobkit.infrastructure.exceptions import (
    StorageContainerError,
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StorageUploadError,
)


class AzureBlobObjectStore:
    """Block blob storage addressed by (container, key)."""

    def __init__(
        self,
        connection_string: str,
        client: BlobServiceClient | None = None,
    ) -> None:
        """Initialize the service client.

        Args:
            connection_string: Azure storage connection string.
            client: Pre-built client (tests, custom transport); overrides
                connection_string.
        """
        self._client = client or BlobServiceClient.from_connection_string(
            connection_string
        )

    async def ensure_container(self, container: str) -> None:
        """Create container if missing; an existing container is not an error."""
        def _create() -> None:
            try:
                self._client.create_container(container)
            except ResourceExistsError:
                pass

        try:
            await asyncio.to_thread(_create)
        except AzureError as e:
            raise StorageContainerError(container, str(e)) from e

    async def upload(
        self,
        container: str,
        key: str,
        data: bytes | BinaryIO,
        content_type: str | None = None,
    ) -> str:
        """Upload as block blob, overwriting. Content type set only when given."""
        def _upload() -> str:
            blob = self._client.get_blob_client(container, key)
            content_settings = (
                ContentSettings(content_type=content_type) if content_type else None
            )
            blob.upload_blob(data, overwrite=True, content_settings=content_settings)
            return blob.url

        try:
            return await asyncio.to_thread(_upload)
        except AzureError as e:
            raise StorageUploadError(container, key, str(e)) from e

    async def download(self, container: str, key: str) -> bytes:
        """Return blob content."""
        def _get() -> bytes:
            return self._client.get_blob_client(container, key).download_blob().readall()

        try:
            return await asyncio.to_thread(_get)
        except ResourceNotFoundError as e:
            raise StorageNotFoundError(container, key) from e
        except AzureError as e:
            raise StorageDownloadError(container, key, str(e)) from e

    async def download_into(self, container: str, key: str, sink: BinaryIO) -> int:
        """Stream blob chunks into sink.

        Worker threads only fetch chunks; sink is written from the calling
        task, so cancellation stops the copy at a chunk boundary.
        """
        def _open() -> Iterator[bytes]:
            return self._client.get_blob_client(container, key).download_blob().chunks()

        written = 0
        try:
            chunks = await asyncio.to_thread(_open)
            while True:
                chunk = await asyncio.to_thread(next, chunks, None)
                if chunk is None:
                    break
                sink.write(chunk)
                written += len(chunk)
        except ResourceNotFoundError as e:
            raise StorageNotFoundError(container, key) from e
        except AzureError as e:
            raise StorageDownloadError(container, key, str(e)) from e
        return written

    async def exists(self, container: str, key: str) -> bool:
        """Return True if blob exists (False when the container is missing too)."""
        def _exists() -> bool:
            return self._client.get_blob_client(container, key).exists()

        try:
            return await asyncio.to_thread(_exists)
        except AzureError as e:
            raise StorageDownloadError(container, key, str(e)) from e

    async def delete(self, container: str, key: str) -> bool:
        """Delete blob if it exists. Returns True if deleted."""
        def _delete() -> bool:
            try:
                self._client.get_blob_client(container, key).delete_blob()
            except ResourceNotFoundError:
                return False
            return True

        try:
            return await asyncio.to_thread(_delete)
        except AzureError as e:
            raise StorageDeleteError(container, key, str(e)) from e

    def url_for(self, container: str, key: str) -> str:
        """Blob URL from the client's endpoint; container URL when key is empty."""
        if not key:
            return self._client.get_container_client(container).url
        return self._client.get_blob_client(container, key).url
