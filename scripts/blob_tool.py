"""Operate on configured blob storage from the command line.

Usage:
    python -m scripts.blob_tool put <container/key> <local_file> [content_type]
    python -m scripts.blob_tool get <container/key> [local_file]
    python -m scripts.blob_tool delete <container/key>
    python -m scripts.blob_tool uri <container/key>[,...]
    python -m scripts.blob_tool sas <container/key> <ip_or_range>
    python -m scripts.blob_tool zip <dest/archive.zip>,<container/key>[,...]
Backend and credentials come from blobkit.core.config (env / .env).
"""

import asyncio
import sys
from pathlib import Path

from blobkit.domain.exceptions import BlobKitException
from blobkit.infrastructure.external.storage import StorageFactory, StorageService
from blobkit.shared.telemetry import setup_logging

USAGE = __doc__.split("Usage:", 1)[1].split("Backend", 1)[0].rstrip()


async def run(service: StorageService, command: str, args: list[str]) -> int:
    """Execute one command; return process exit code."""
    if command == "put" and len(args) in (2, 3):
        data = Path(args[1]).read_bytes()
        content_type = args[2] if len(args) == 3 else None
        print(await service.add(args[0], data, content_type))
        return 0
    if command == "get" and len(args) in (1, 2):
        data = await service.get(args[0])
        if len(args) == 2:
            Path(args[1]).write_bytes(data)
            print(f"Wrote {len(data)} bytes to {args[1]}")
        else:
            sys.stdout.buffer.write(data)
        return 0 if data else 1
    if command == "delete" and len(args) == 1:
        deleted = await service.delete(args[0])
        print("deleted" if deleted else "not found")
        return 0 if deleted else 1
    if command == "uri" and len(args) == 1:
        print(service.get_uri(args[0]))
        return 0
    if command == "sas" and len(args) == 2:
        print(service.get_access_url(args[0], args[1]))
        return 0
    if command == "zip" and len(args) == 1:
        bundled = await service.zip(args[0])
        print(service.get_uri(args[0]) if bundled else "nothing to bundle")
        return 0 if bundled else 1
    print(f"Usage:{USAGE}", file=sys.stderr)
    return 2


async def main() -> None:
    """Parse argv, build the service from settings, run the command."""
    if len(sys.argv) < 2:
        print(f"Usage:{USAGE}", file=sys.stderr)
        sys.exit(2)
    setup_logging()
    try:
        service = StorageFactory.create_storage_service()
        code = await run(service, sys.argv[1], sys.argv[2:])
    except (BlobKitException, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    asyncio.run(main())
