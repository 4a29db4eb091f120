"""Remote path codec.

A remote path is ``container/key...``: the first ``/`` segment names the
container, the rest (rejoined with ``/``) is the object key. Multi-path
operations take comma-separated paths where the first entry is special;
PathList and BundleRequest make that asymmetry explicit.
"""

from __future__ import annotations

from dataclasses import dataclass

PATH_SEPARATOR = "/"
LIST_SEPARATOR = ","


def split_path(path: str) -> tuple[str, str]:
    """Split a remote path into (container, key).

    Never fails and never validates: a path without ``/`` yields an empty
    key, an empty path yields ("", "").
    """
    container, _, key = path.partition(PATH_SEPARATOR)
    return container, key


def join_path(container: str, key: str) -> str:
    """Inverse of split_path."""
    return f"{container}{PATH_SEPARATOR}{key}" if key else container


def archive_entry_name(key: str) -> str:
    """Final segment of a key (text after the last ``/``)."""
    return key.rsplit(PATH_SEPARATOR, 1)[-1]


def split_path_list(raw: str) -> list[str]:
    """Split comma-separated remote paths, dropping empty entries."""
    return [p for p in raw.split(LIST_SEPARATOR) if p]


@dataclass(frozen=True)
class PathList:
    """A comma-joined path list where only ``primary`` is resolved."""

    primary: str
    rest: tuple[str, ...] = ()


@dataclass(frozen=True)
class BundleRequest:
    """Zip request: first path is the archive destination, the rest are sources."""

    destination: str
    sources: tuple[str, ...] = ()


def parse_path_list(raw: str) -> PathList | None:
    """Parse ``a,b,c`` into PathList; None when there is no non-empty entry."""
    paths = split_path_list(raw)
    if not paths:
        return None
    return PathList(primary=paths[0], rest=tuple(paths[1:]))


def parse_bundle_request(raw: str) -> BundleRequest | None:
    """Parse ``dest,src1,src2`` into BundleRequest; None when empty."""
    paths = split_path_list(raw)
    if not paths:
        return None
    return BundleRequest(destination=paths[0], sources=tuple(paths[1:]))
