from __future__ import annotations

import asyncio
import io
import zipfile

import pytest

from helpers import JPEG_BYTES, make_zip
from insta_export.archive import load_archive, read_archive_file
from insta_export.errors import ArchiveCorruptError


def test_load_archive_skips_directories_and_keeps_bytes():
    data = make_zip(
        {"media/posts/a.jpg": JPEG_BYTES, "notes.txt": "hello"},
        directories=("media/", "media/posts/"),
    )
    table = asyncio.run(load_archive(data))
    assert list(table) == ["media/posts/a.jpg", "notes.txt"]
    assert table["media/posts/a.jpg"] == JPEG_BYTES
    assert table["notes.txt"] == b"hello"


def test_load_archive_accepts_bytearray():
    table = asyncio.run(load_archive(bytearray(make_zip({"x.json": "[]"}))))
    assert table["x.json"] == b"[]"


def test_loaded_table_is_read_only():
    table = asyncio.run(load_archive(make_zip({"x.json": "[]"})))
    with pytest.raises(TypeError):
        table["y.json"] = b"{}"  # type: ignore[index]


def test_backslash_paths_are_normalized():
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("media\\posts\\a.jpg", JPEG_BYTES)
    table = asyncio.run(load_archive(buffer.getvalue()))
    assert "media/posts/a.jpg" in table


def test_garbage_input_is_corrupt():
    with pytest.raises(ArchiveCorruptError):
        asyncio.run(load_archive(b"this is not a zip file"))


def test_empty_input_is_corrupt():
    with pytest.raises(ArchiveCorruptError):
        asyncio.run(load_archive(b""))


def test_damaged_entry_is_corrupt():
    payload = b"A" * 4096
    data = bytearray(make_zip({"big.txt": payload}))
    # Deflated stream starts right after the 30-byte local header and filename.
    offset = 30 + len("big.txt")
    for index in range(offset, offset + 8):
        data[index] ^= 0xFF
    with pytest.raises(ArchiveCorruptError):
        asyncio.run(load_archive(bytes(data)))


def test_read_archive_file(tmp_path):
    target = tmp_path / "export.zip"
    target.write_bytes(make_zip({"x.json": "[]"}))
    assert asyncio.run(read_archive_file(target)) == target.read_bytes()


def test_read_archive_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        asyncio.run(read_archive_file(tmp_path / "missing.zip"))
