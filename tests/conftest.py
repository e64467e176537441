from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from helpers import ACTIVITY, JPEG_BYTES, make_zip  # noqa: E402


@pytest.fixture
def build_archive() -> Callable[..., bytes]:
    return make_zip


@pytest.fixture
def happy_archive() -> bytes:
    return make_zip(
        {
            "media/posts/p1/IMG_1.jpg": JPEG_BYTES,
            f"{ACTIVITY}/posts_1.json": [
                {
                    "title": "A",
                    "media": [
                        {"uri": "media/posts/p1/IMG_1.jpg", "creation_timestamp": 1000}
                    ],
                }
            ],
        }
    )
