"""Object store protocol (DIP). Implementations: AzureBlobObjectStore, LocalObjectStore."""

from typing import BinaryIO, Protocol


class ObjectStoreProtocol(Protocol):
    """Container/blob primitives the storage service is built on.

    Every coroutine may suspend on I/O and honours asyncio cancellation.
    """

    async def ensure_container(self, container: str) -> None:
        """Create container if missing. Idempotent."""
        ...

    async def upload(
        self,
        container: str,
        key: str,
        data: bytes | BinaryIO,
        content_type: str | None = None,
    ) -> str:
        """Write object (overwriting) and return its canonical URI."""
        ...

    async def download(self, container: str, key: str) -> bytes:
        """Return full object content. Raises StorageNotFoundError if absent."""
        ...

    async def download_into(self, container: str, key: str, sink: BinaryIO) -> int:
        """Stream object content into a writable sink; return bytes written."""
        ...

    async def exists(self, container: str, key: str) -> bool:
        """Return True if the object exists."""
        ...

    async def delete(self, container: str, key: str) -> bool:
        """Delete object if present. Returns True if deleted, False if not found."""
        ...

    def url_for(self, container: str, key: str) -> str:
        """Canonical unsigned URI of an object (no I/O)."""
        ...
