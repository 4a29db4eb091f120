"""Zip bundling of remote objects into a single remote archive."""

from __future__ import annotations

import io
import logging
import zipfile

from blobkit.domain.exceptions import BlobKitException
from blobkit.infrastructure.exceptions import ArchiveBundleError
from blobkit.infrastructure.external.storage.paths import (
    archive_entry_name,
    parse_bundle_request,
    split_path,
)
from blobkit.infrastructure.external.storage.protocol import ObjectStoreProtocol

logger = logging.getLogger(__name__)

COMPRESS_LEVEL = 9


class ArchiveBundler:
    """Packs sources into a zip held in memory, then uploads it in one write.

    The destination is written only after every source has been packed, so a
    failed or cancelled bundle never leaves a partial archive behind. Archive
    size is bounded by available memory.

    Entry names are the last path segment of each source key. Duplicate names
    are kept (zipfile stores both entries and emits a UserWarning).
    """

    def __init__(self, store: ObjectStoreProtocol) -> None:
        self._store = store

    async def bundle(self, remote_paths: str) -> bool:
        """Zip ``dest,src1,src2,...`` into dest.

        Returns:
            False if remote_paths holds no path, True once the archive is uploaded.

        Raises:
            ArchiveBundleError: a source could not be read or the upload failed.
        """
        request = parse_bundle_request(remote_paths) if remote_paths else None
        if request is None:
            logger.debug("Bundle skipped: no paths given")
            return False

        dest_container, dest_key = split_path(request.destination)
        if not dest_container or not dest_key:
            raise ArchiveBundleError(
                request.destination, None, "destination must be container/key"
            )

        buffer = io.BytesIO()
        source: str | None = None
        try:
            with zipfile.ZipFile(
                buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=COMPRESS_LEVEL
            ) as archive:
                for source in request.sources:
                    container, key = split_path(source)
                    name = archive_entry_name(key)
                    if not name:
                        raise ArchiveBundleError(
                            request.destination, source, "source has no object name"
                        )
                    with archive.open(name, "w") as entry:
                        size = await self._store.download_into(container, key, entry)
                    logger.debug("Packed %s as %s (%d bytes)", source, name, size)
            source = None
            buffer.seek(0)
            await self._store.ensure_container(dest_container)
            await self._store.upload(dest_container, dest_key, buffer)
        except (ArchiveBundleError, TimeoutError):
            raise
        except (BlobKitException, OSError, ValueError, RuntimeError) as e:
            logger.error("Bundle into %s failed at %s: %s", request.destination, source, e)
            raise ArchiveBundleError(request.destination, source, str(e)) from e
        finally:
            buffer.close()

        logger.info(
            "Bundled %d object(s) into %s", len(request.sources), request.destination
        )
        return True
