"""StorageService: public API over an object store.

add/get/delete/get_uri/get_access_url/zip take logical remote paths
(``container/key``). Empty input is a no-op, not an error, and a missing
object reads as empty bytes / False. Transport failures propagate as
StorageException subclasses; nothing here retries.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime

from blobkit.domain.exceptions import ValidationException
from blobkit.infrastructure.exceptions import StorageException, StorageNotFoundError
from blobkit.infrastructure.external.storage.archive import ArchiveBundler
from blobkit.infrastructure.external.storage.options import StorageOptions
from blobkit.infrastructure.external.storage.paths import parse_path_list, split_path
from blobkit.infrastructure.external.storage.protocol import ObjectStoreProtocol
from blobkit.infrastructure.external.storage.signing import SignedUrlIssuer
from blobkit.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@contextmanager
def _log_failure(operation: str, path: str) -> Iterator[None]:
    """Log storage failures once at this layer, then re-raise."""
    try:
        yield
    except StorageException as e:
        logger.error("Storage %s failed for %s: %s (%s)", operation, path, e.message, e.error_code)
        raise


def _resolve(path: str) -> tuple[str, str]:
    """Split path; both container and key are required for object operations."""
    container, key = split_path(path)
    if not container or not key:
        raise ValidationException(
            f"Remote path must be 'container/key', got: {path!r}", field="path"
        )
    return container, key


class StorageService:
    """Blob storage facade.

    Each coroutine accepts ``timeout`` (seconds); on expiry TimeoutError is
    raised. Calls share no mutable state, so one instance serves concurrent
    tasks.
    """

    def __init__(
        self,
        store: ObjectStoreProtocol,
        options: StorageOptions,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the service.

        Args:
            store: Backend implementing ObjectStoreProtocol.
            options: Immutable account/signing options.
            clock: UTC clock used for SAS start/expiry.
        """
        self._store = store
        self._options = options
        self._signer = SignedUrlIssuer(options, clock=clock)
        self._bundler = ArchiveBundler(store)

    @property
    def options(self) -> StorageOptions:
        return self._options

    @property
    def store(self) -> ObjectStoreProtocol:
        return self._store

    async def add(
        self,
        path: str,
        data: bytes,
        content_type: str | None = None,
        *,
        timeout: float | None = None,
    ) -> str:
        """Upload data to path (overwriting) and return its URI; "" for empty path."""
        if not path:
            logger.debug("add skipped: empty path")
            return ""
        container, key = _resolve(path)
        with _log_failure("add", path):
            async with asyncio.timeout(timeout):
                await self._store.ensure_container(container)
                uri = await self._store.upload(container, key, data, content_type or None)
        logger.debug("Stored %s (%d bytes)", path, len(data))
        return uri

    async def get(self, path: str, *, timeout: float | None = None) -> bytes:
        """Return object content; b"" for empty path or missing object."""
        if not path:
            return b""
        container, key = _resolve(path)
        with _log_failure("get", path):
            async with asyncio.timeout(timeout):
                if not await self._store.exists(container, key):
                    logger.debug("get: %s does not exist", path)
                    return b""
                try:
                    return await self._store.download(container, key)
                except StorageNotFoundError:
                    # deleted between exists() and download()
                    return b""

    async def delete(self, path: str, *, timeout: float | None = None) -> bool:
        """Delete object if present; True only when something was deleted."""
        if not path:
            return False
        container, key = _resolve(path)
        with _log_failure("delete", path):
            async with asyncio.timeout(timeout):
                deleted = await self._store.delete(container, key)
        logger.debug("delete %s: %s", path, "deleted" if deleted else "not found")
        return deleted

    def get_uri(self, path: str) -> str:
        """Canonical unsigned URI of the first path in a comma-joined list.

        Input without any path is returned unchanged.
        """
        paths = parse_path_list(path) if path else None
        if paths is None:
            return path
        container, key = split_path(paths.primary)
        return self._store.url_for(container, key)

    def get_access_url(self, path: str, source_ip: str) -> str:
        """Signed, IP-restricted URL for path valid for the configured TTL.

        Raises:
            SigningInputError: source_ip is not an IPv4 address or range.
        """
        return self._signer.issue(path, source_ip)

    async def zip(self, paths: str, *, timeout: float | None = None) -> bool:
        """Bundle ``dest,src1,src2,...`` into a zip at dest; False for empty input.

        Raises:
            ArchiveBundleError: any source read or the final upload failed.
        """
        async with asyncio.timeout(timeout):
            return await self._bundler.bundle(paths)
