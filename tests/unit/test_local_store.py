"""LocalObjectStore: containers as directories, path validation, atomic writes."""

import io

import pytest

from blobkit.infrastructure.exceptions import (
    StorageNotFoundError,
    StoragePermissionError,
    StorageUploadError,
)
from blobkit.infrastructure.external.storage.local_store import LocalObjectStore
from tests.conftest import BASE_URL


@pytest.mark.asyncio
async def test_upload_download_roundtrip(local_store) -> None:
    await local_store.ensure_container("c1")
    uri = await local_store.upload("c1", "dir/a.bin", b"\x00\x01payload", "application/octet-stream")
    assert uri == f"{BASE_URL}/c1/dir/a.bin"
    assert await local_store.download("c1", "dir/a.bin") == b"\x00\x01payload"
    assert (local_store.storage_root / "c1" / "dir" / "a.bin").is_file()


@pytest.mark.asyncio
async def test_upload_accepts_stream(local_store) -> None:
    await local_store.upload("c1", "s.txt", io.BytesIO(b"streamed"))
    assert await local_store.download("c1", "s.txt") == b"streamed"


@pytest.mark.asyncio
async def test_no_temp_files_left(local_store) -> None:
    await local_store.upload("c1", "a.txt", b"one")
    await local_store.upload("c1", "a.txt", b"two")
    names = sorted(p.name for p in (local_store.storage_root / "c1").iterdir())
    assert names == ["a.txt", "a.txt.meta.json"]


@pytest.mark.asyncio
async def test_ensure_container_idempotent(local_store) -> None:
    await local_store.ensure_container("c1")
    await local_store.ensure_container("c1")
    assert (local_store.storage_root / "c1").is_dir()


@pytest.mark.asyncio
async def test_download_missing_raises(local_store) -> None:
    with pytest.raises(StorageNotFoundError) as exc_info:
        await local_store.download("c1", "nope.txt")
    assert exc_info.value.details == {"container": "c1", "key": "nope.txt"}


@pytest.mark.asyncio
async def test_download_into_streams_chunks(local_store) -> None:
    payload = b"x" * (LocalObjectStore.CHUNK_SIZE * 2 + 10)
    await local_store.upload("c1", "big.bin", payload)
    sink = io.BytesIO()
    assert await local_store.download_into("c1", "big.bin", sink) == len(payload)
    assert sink.getvalue() == payload


@pytest.mark.asyncio
async def test_exists_and_delete(local_store) -> None:
    assert await local_store.exists("c1", "a.txt") is False
    assert await local_store.delete("c1", "a.txt") is False
    await local_store.upload("c1", "a.txt", b"x", "text/plain")
    assert await local_store.exists("c1", "a.txt") is True
    assert await local_store.delete("c1", "a.txt") is True
    assert await local_store.exists("c1", "a.txt") is False
    assert not (local_store.storage_root / "c1" / "a.txt.meta.json").exists()


@pytest.mark.asyncio
async def test_content_type_optional(local_store) -> None:
    await local_store.upload("c1", "plain", b"x")
    assert await local_store.get_content_type("c1", "plain") is None


@pytest.mark.parametrize(
    ("container", "key"),
    [
        ("c1", "../c2/a.txt"),
        ("c1", "../../etc/passwd"),
        ("..", "a.txt"),
        ("", "a.txt"),
        ("c1", ""),
        ("c1", "a.txt.meta.json"),
    ],
)
@pytest.mark.asyncio
async def test_path_validation(local_store, container: str, key: str) -> None:
    with pytest.raises(StoragePermissionError):
        await local_store.upload(container, key, b"x")


def test_url_for_without_base_url(tmp_path) -> None:
    store = LocalObjectStore(str(tmp_path))
    assert store.url_for("c1", "a.txt") == (tmp_path.resolve() / "c1" / "a.txt").as_uri()


def test_url_for_quotes_key(local_store) -> None:
    assert local_store.url_for("c1", "my file.txt") == f"{BASE_URL}/c1/my%20file.txt"


@pytest.mark.asyncio
async def test_key_cannot_also_be_prefix(local_store) -> None:
    """A file key blocks keys nested under it (blob storage would allow both)."""
    await local_store.upload("c1", "a", b"leaf")
    with pytest.raises(StorageUploadError):
        await local_store.upload("c1", "a/b", b"nested")
    assert await local_store.download("c1", "a") == b"leaf"


@pytest.mark.asyncio
async def test_prefix_cannot_become_key(local_store) -> None:
    await local_store.upload("c1", "a/b", b"nested")
    with pytest.raises(StorageUploadError):
        await local_store.upload("c1", "a", b"leaf")
    assert await local_store.download("c1", "a/b") == b"nested"
