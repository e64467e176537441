"""ZIP decompression into an in-memory file table."""

from __future__ import annotations

import asyncio
import io
import logging
import zipfile
import zlib
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Union

from .errors import ArchiveCorruptError
from .utils import normalize_path

logger = logging.getLogger("insta_export")

ArchiveInput = Union[bytes, bytearray, memoryview]

_ENTRY_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    NotImplementedError,
    RuntimeError,
    ValueError,
    OSError,
)


def _read_entries(data: bytes) -> Dict[str, bytes]:
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, ValueError, OSError) as exc:
        raise ArchiveCorruptError(f"Not a readable ZIP archive: {exc}") from exc

    table: Dict[str, bytes] = {}
    with archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            try:
                content = archive.read(info)
            except _ENTRY_ERRORS as exc:
                raise ArchiveCorruptError(
                    f"Could not decompress entry {info.filename}: {exc}"
                ) from exc
            path = normalize_path(info.filename)
            if not path or path.endswith("/"):
                continue
            table[path] = content
    return table


async def load_archive(data: ArchiveInput) -> Mapping[str, bytes]:
    """Decompress ``data`` into a read-only mapping of path to file bytes."""
    payload = bytes(data)
    table = await asyncio.to_thread(_read_entries, payload)
    logger.info("Loaded %d files from archive (%d bytes)", len(table), len(payload))
    return MappingProxyType(table)


async def read_archive_file(path: Union[str, Path]) -> bytes:
    """Read an archive from disk without blocking the event loop."""
    source = Path(path).expanduser()
    if not source.exists():
        raise FileNotFoundError(f"Archive path does not exist: {source}")
    return await asyncio.to_thread(source.read_bytes)
