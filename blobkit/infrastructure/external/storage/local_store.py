"""Local filesystem object store with path validation and atomic writes."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, BinaryIO
from urllib.parse import quote

import aiofiles
import aiofiles.os

from blobkit.infrastructure.exceptions import (
    StorageContainerError,
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageUploadError,
)
from blobkit.shared.utils.datetime import utc_now

META_SUFFIX = ".meta.json"


class LocalObjectStore:
    """Filesystem storage: one directory per container, keys as relative paths.

    Paths are validated against storage_root. Writes use temp file + rename
    so readers never see a partial object. Content type lives in a
    .meta.json sidecar.

    Limits compared to blob storage: a key cannot also be a "directory"
    prefix of another key (storing both c1/a and c1/a/b raises
    StorageUploadError), and keys ending in .meta.json are rejected with
    StoragePermissionError.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    def __init__(self, storage_root: str, base_url: str | None = None) -> None:
        """Initialize local storage.

        Args:
            storage_root: Base directory holding one sub-directory per container.
            base_url: Base URL that serves storage_root (e.g. http://localhost:10000/files).
        """
        self.storage_root = Path(storage_root).resolve()
        self.base_url = base_url.rstrip("/") if base_url else None
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _container_path(self, container: str) -> Path:
        """Resolve container directory. Raises StoragePermissionError if it escapes the root."""
        path = (self.storage_root / container).resolve()
        if not container or path.parent != self.storage_root:
            raise StoragePermissionError(container, "container_validation")
        return path

    def _object_path(self, container: str, key: str) -> Path:
        """Resolve object path strictly inside its container directory."""
        container_path = self._container_path(container)
        path = (container_path / key).resolve()
        try:
            path.relative_to(container_path)
        except ValueError as e:
            raise StoragePermissionError(f"{container}/{key}", "path_validation") from e
        if path == container_path or path.name.endswith(META_SUFFIX):
            raise StoragePermissionError(f"{container}/{key}", "path_validation")
        return path

    @staticmethod
    def _meta_path(path: Path) -> Path:
        return path.with_name(path.name + META_SUFFIX)

    async def ensure_container(self, container: str) -> None:
        """Create container directory if missing."""
        path = self._container_path(container)
        try:
            await aiofiles.os.makedirs(path, mode=0o750, exist_ok=True)
        except OSError as e:
            raise StorageContainerError(container, str(e)) from e

    async def upload(
        self,
        container: str,
        key: str,
        data: bytes | BinaryIO,
        content_type: str | None = None,
    ) -> str:
        """Atomically write object (overwriting) and its metadata sidecar."""
        target_path = self._object_path(container, key)
        body = data if isinstance(data, bytes) else data.read()
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(dir=target_path.parent, prefix=".tmp_")
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(body)
                os.chmod(temp_path, 0o640)
                await aiofiles.os.replace(temp_path, target_path)
            finally:
                if Path(temp_path).exists():
                    os.unlink(temp_path)
            meta: dict[str, Any] = {
                "size": len(body),
                "uploaded_at": utc_now().isoformat(),
            }
            if content_type:
                meta["content_type"] = content_type
            async with aiofiles.open(self._meta_path(target_path), "w") as f:
                await f.write(json.dumps(meta, indent=2))
        except OSError as e:
            raise StorageUploadError(container, key, str(e)) from e
        return self.url_for(container, key)

    async def download(self, container: str, key: str) -> bytes:
        """Return file content."""
        path = self._object_path(container, key)
        if not path.is_file():
            raise StorageNotFoundError(container, key)
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except OSError as e:
            raise StorageDownloadError(container, key, str(e)) from e

    async def download_into(self, container: str, key: str, sink: BinaryIO) -> int:
        """Copy file into sink chunk by chunk."""
        path = self._object_path(container, key)
        if not path.is_file():
            raise StorageNotFoundError(container, key)
        written = 0
        try:
            async with aiofiles.open(path, "rb") as f:
                while True:
                    chunk = await f.read(self.CHUNK_SIZE)
                    if not chunk:
                        break
                    sink.write(chunk)
                    written += len(chunk)
        except OSError as e:
            raise StorageDownloadError(container, key, str(e)) from e
        return written

    async def exists(self, container: str, key: str) -> bool:
        """Return True if the object file exists."""
        return await aiofiles.os.path.isfile(self._object_path(container, key))

    async def delete(self, container: str, key: str) -> bool:
        """Delete file and sidecar. Returns True if deleted."""
        path = self._object_path(container, key)
        if not path.is_file():
            return False
        try:
            await aiofiles.os.remove(path)
            meta_path = self._meta_path(path)
            if meta_path.exists():
                await aiofiles.os.remove(meta_path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageDeleteError(container, key, str(e)) from e
        return True

    async def get_content_type(self, container: str, key: str) -> str | None:
        """Content type recorded at upload, if any."""
        meta_path = self._meta_path(self._object_path(container, key))
        if not meta_path.exists():
            return None
        async with aiofiles.open(meta_path, "r") as f:
            meta = json.loads(await f.read())
        return meta.get("content_type") if isinstance(meta, dict) else None

    def url_for(self, container: str, key: str) -> str:
        """base_url/container/key when configured, else a file:// URI."""
        if self.base_url:
            return f"{self.base_url}/{quote(container)}/{quote(key, safe='/')}".rstrip("/")
        path = self.storage_root / container / key if key else self.storage_root / container
        return path.as_uri()
