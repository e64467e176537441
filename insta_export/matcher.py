"""Pairing of post metadata with image files."""

from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional, Sequence

from .config import DEFAULT_FALLBACK_CAP, DEFAULT_FALLBACK_CAPTION_TEMPLATE
from .models import MatchedPair, PostInfo
from .utils import filename_of, path_segments

logger = logging.getLogger("insta_export.matcher")

DAY_MS = 86_400_000


def build_image_map(image_files: Sequence[str]) -> Dict[str, str]:
    """Map each image filename to its full path; later duplicates win."""
    image_map: Dict[str, str] = {}
    for path in image_files:
        image_map[filename_of(path)] = path
    return image_map


def find_image_by_uri(uri: str, image_map: Dict[str, str]) -> Optional[str]:
    """Exact filename lookup first, then the first image containing a URI segment."""
    segments = path_segments(uri)
    exact = image_map.get(segments[-1])
    if exact:
        return exact
    parts = [part for part in segments if part]
    for image_name, image_path in image_map.items():
        if any(part in image_name for part in parts):
            return image_path
    return None


def find_image_by_timestamp(timestamp: int, image_files: Sequence[str]) -> Optional[str]:
    """Return the first image.

    Images carry no capture time here, so this only guarantees that a dated post
    is kept. It does not pick the temporally closest image.
    """
    if image_files:
        return image_files[0]
    return None


def _pair(info: PostInfo, image_path: str) -> MatchedPair:
    return MatchedPair(
        image_path=image_path,
        caption=info.caption,
        timestamp=info.timestamp,
        original_payload=info.original_payload,
    )


def synthesize_pairs(
    image_files: Sequence[str],
    cap: int = DEFAULT_FALLBACK_CAP,
    caption_template: str = DEFAULT_FALLBACK_CAPTION_TEMPLATE,
    now_ms: Optional[int] = None,
) -> List[MatchedPair]:
    """Generic posts for the first ``cap`` images, newest first."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return [
        MatchedPair(
            image_path=path,
            caption=caption_template.format(index=index + 1),
            timestamp=now_ms - index * DAY_MS,
            original_payload={},
        )
        for index, path in enumerate(image_files[:cap])
    ]


def match_posts(
    post_infos: Sequence[PostInfo],
    image_files: Sequence[str],
    cap: int = DEFAULT_FALLBACK_CAP,
    caption_template: str = DEFAULT_FALLBACK_CAPTION_TEMPLATE,
    now_ms: Optional[int] = None,
) -> List[MatchedPair]:
    """Pair each PostInfo with an image, falling back to synthetic posts."""
    image_map = build_image_map(image_files)
    pairs: List[MatchedPair] = []
    unmatched = 0

    for info in post_infos:
        image_path = find_image_by_uri(info.media_uri, image_map)
        if image_path is None and info.timestamp is not None:
            image_path = find_image_by_timestamp(info.timestamp, image_files)
        if image_path is None:
            unmatched += 1
            continue
        pairs.append(_pair(info, image_path))

    if not pairs and image_files:
        pairs = synthesize_pairs(image_files, cap, caption_template, now_ms)
        logger.info(
            "No post matched an image; generated %d fallback posts from %d images",
            len(pairs),
            len(image_files),
        )
    else:
        logger.info("Matched %d posts (%d unmatched)", len(pairs), unmatched)
    return pairs
