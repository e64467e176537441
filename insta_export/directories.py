"""Heuristic discovery of the media and activity roots."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from .config import ACTIVITY_MARKER, MEDIA_MARKER, POSTS_MARKER, ParserConfig
from .errors import DirectoryNotFoundError
from .models import DirectoryRoots

logger = logging.getLogger("insta_export")


def find_media_root(
    paths: Iterable[str],
    media_marker: str = MEDIA_MARKER,
    posts_marker: str = POSTS_MARKER,
) -> Optional[str]:
    """Prefix of the first path naming both markers, cut before ``posts_marker``."""
    for path in paths:
        if media_marker in path and posts_marker in path:
            return path[: path.index(posts_marker)]
    return None


def find_activity_root(
    paths: Iterable[str],
    activity_marker: str = ACTIVITY_MARKER,
) -> Optional[str]:
    """Prefix of the first path containing ``activity_marker``, marker included."""
    for path in paths:
        if activity_marker in path:
            return path[: path.index(activity_marker) + len(activity_marker)]
    return None


def resolve_directories(paths: Sequence[str], config: ParserConfig) -> DirectoryRoots:
    """Locate both roots, raising DirectoryNotFoundError when either is missing."""
    if config.media_root_detector is not None:
        media_root = config.media_root_detector(paths)
    else:
        media_root = find_media_root(paths, config.media_marker, config.posts_marker)
    if config.activity_root_detector is not None:
        activity_root = config.activity_root_detector(paths)
    else:
        activity_root = find_activity_root(paths, config.activity_marker)

    missing = []
    if media_root is None:
        missing.append("media")
    if activity_root is None:
        missing.append("activity")
    if missing:
        raise DirectoryNotFoundError(
            "Could not find required directories in Instagram data "
            f"(missing: {', '.join(missing)})"
        )

    logger.info("Media root: %r, activity root: %r", media_root, activity_root)
    return DirectoryRoots(media_root=media_root, activity_root=activity_root)
