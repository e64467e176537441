"""Image discovery and display handle utilities."""

from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes
from dataclasses import dataclass
from typing import Iterable, List, Optional

from filetype import guess

from .utils import extension_of

logger = logging.getLogger("insta_export")

FALLBACK_MIME_TYPE = "application/octet-stream"


def locate_images(
    paths: Iterable[str],
    media_root: str,
    image_extensions: Iterable[str],
) -> List[str]:
    """Return paths under ``media_root`` whose extension is a known image type."""
    allowed = {ext.lower() for ext in image_extensions}
    return [
        path
        for path in paths
        if path.startswith(media_root) and extension_of(path) in allowed
    ]


def detect_image_mime(data: bytes, path: str = "") -> str:
    """Detect an image MIME type using filetype; fall back to the file extension."""
    kind = guess(data) if data else None
    if kind and kind.mime.startswith("image/"):
        return kind.mime
    guessed, _ = mimetypes.guess_type(path)
    if guessed and guessed.startswith("image/"):
        return guessed
    return FALLBACK_MIME_TYPE


@dataclass
class ImageHandle:
    """Renderable reference to image bytes held in memory as a ``data:`` URI."""

    uri: str
    mime_type: str
    size: int
    source_path: str
    released: bool = False

    @classmethod
    def placeholder(cls, source_path: str) -> "ImageHandle":
        return cls(uri="", mime_type=FALLBACK_MIME_TYPE, size=0, source_path=source_path)

    @property
    def is_placeholder(self) -> bool:
        return not self.uri and not self.released

    def release(self) -> None:
        self.uri = ""
        self.released = True


def _encode_data_uri(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


class HandleRegistry:
    """Mints display handles and remembers them so they can be released."""

    def __init__(self) -> None:
        self._handles: List[ImageHandle] = []

    def __len__(self) -> int:
        return len(self._handles)

    async def mint(self, source_path: str, data: Optional[bytes]) -> ImageHandle:
        """Create a handle for ``data``; missing bytes give a placeholder."""
        if data is None:
            logger.warning("No bytes for image %s; using placeholder handle", source_path)
            handle = ImageHandle.placeholder(source_path)
        else:
            mime_type = detect_image_mime(data, source_path)
            uri = await asyncio.to_thread(_encode_data_uri, data, mime_type)
            handle = ImageHandle(
                uri=uri,
                mime_type=mime_type,
                size=len(data),
                source_path=source_path,
            )
        self._handles.append(handle)
        return handle

    def release_all(self) -> int:
        """Revoke every handle minted so far and forget them."""
        count = 0
        for handle in self._handles:
            if not handle.released:
                handle.release()
                count += 1
        self._handles.clear()
        if count:
            logger.debug("Released %d image handles", count)
        return count
