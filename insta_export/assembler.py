"""Conversion of matched pairs into the final parse result."""

from __future__ import annotations

import logging
from typing import List, Mapping, Sequence

from .images import HandleRegistry
from .models import MatchedPair, ParseResult, Post

logger = logging.getLogger("insta_export")


async def assemble_result(
    pairs: Sequence[MatchedPair],
    image_file_count: int,
    metadata_file_names: Sequence[str],
    table: Mapping[str, bytes],
    registry: HandleRegistry,
) -> ParseResult:
    """Mint a display handle per pair and number the posts in order."""
    posts: List[Post] = []
    for index, pair in enumerate(pairs):
        handle = await registry.mint(pair.image_path, table.get(pair.image_path))
        posts.append(
            Post(
                id=f"post_{index}",
                image=handle,
                caption=pair.caption,
                timestamp=pair.timestamp,
                selected=True,
                original_payload=pair.original_payload,
                image_path=pair.image_path,
            )
        )
    logger.info("Assembled %d posts from %d images", len(posts), image_file_count)
    return ParseResult(
        posts=posts,
        total_posts=len(posts),
        total_images=image_file_count,
        metadata_file_names=list(metadata_file_names),
        raw_files=table,
    )
