from __future__ import annotations

import io
import json
import zipfile
from typing import Any, Dict, Union

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00" + b"\x00" * 64

ACTIVITY = "your_instagram_activity/content"

FileSpec = Union[bytes, str, Any]


def make_zip(files: Dict[str, FileSpec], directories: tuple = ()) -> bytes:
    """Build a ZIP in memory; str values are stored as text, other non-bytes as JSON."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for directory in directories:
            archive.writestr(zipfile.ZipInfo(directory), b"")
        for name, content in files.items():
            if isinstance(content, bytes):
                payload = content
            elif isinstance(content, str):
                payload = content.encode("utf-8")
            else:
                payload = json.dumps(content).encode("utf-8")
            archive.writestr(name, payload)
    return buffer.getvalue()
