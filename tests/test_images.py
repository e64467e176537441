from __future__ import annotations

import asyncio
import base64

from helpers import JPEG_BYTES, PNG_BYTES
from insta_export.config import DEFAULT_IMAGE_EXTENSIONS
from insta_export.images import (
    FALLBACK_MIME_TYPE,
    HandleRegistry,
    detect_image_mime,
    locate_images,
)


def test_locate_images_filters_root_and_extension():
    paths = [
        "media/posts/a.JPG",
        "media/posts/b.png",
        "media/posts/c.mp4",
        "media/posts/d.webp",
        "media/posts/noext",
        "other/posts/e.jpg",
        "media/stories/f.jpeg",
    ]
    found = locate_images(paths, "media/", DEFAULT_IMAGE_EXTENSIONS)
    assert found == [
        "media/posts/a.JPG",
        "media/posts/b.png",
        "media/posts/d.webp",
        "media/stories/f.jpeg",
    ]


def test_detect_image_mime_from_bytes():
    assert detect_image_mime(PNG_BYTES, "x.jpg") == "image/png"
    assert detect_image_mime(JPEG_BYTES) == "image/jpeg"


def test_detect_image_mime_falls_back_to_extension():
    assert detect_image_mime(b"not really an image", "photo.png") == "image/png"
    assert detect_image_mime(b"???", "photo.unknown") == FALLBACK_MIME_TYPE


def test_mint_creates_data_uri():
    registry = HandleRegistry()
    handle = asyncio.run(registry.mint("media/posts/a.png", PNG_BYTES))
    prefix = "data:image/png;base64,"
    assert handle.uri.startswith(prefix)
    assert base64.b64decode(handle.uri[len(prefix):]) == PNG_BYTES
    assert handle.size == len(PNG_BYTES)
    assert handle.source_path == "media/posts/a.png"
    assert len(registry) == 1


def test_mint_without_bytes_gives_placeholder():
    handle = asyncio.run(HandleRegistry().mint("gone.jpg", None))
    assert handle.is_placeholder
    assert handle.uri == ""


def test_release_all_revokes_and_is_repeatable():
    registry = HandleRegistry()
    first = asyncio.run(registry.mint("a.jpg", JPEG_BYTES))
    second = asyncio.run(registry.mint("b.jpg", JPEG_BYTES))
    assert registry.release_all() == 2
    assert first.released and second.released
    assert first.uri == "" and not first.is_placeholder
    assert len(registry) == 0
    assert registry.release_all() == 0
