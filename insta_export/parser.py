"""High-level orchestration for parsing an Instagram data export."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Optional, Union

from .archive import ArchiveInput, load_archive, read_archive_file
from .assembler import assemble_result
from .config import ParserConfig
from .directories import resolve_directories
from .errors import ExportParserError, MetadataFileParseError, ParseFailedError
from .images import HandleRegistry, locate_images
from .matcher import match_posts
from .metadata import extract_metadata
from .models import ParseResult

logger = logging.getLogger("insta_export")


class InstagramDataParser:
    """One parser instance owns the file table and handles of its latest run."""

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self.config = config or ParserConfig()
        self._table: Mapping[str, bytes] = MappingProxyType({})
        self._handles = HandleRegistry()
        self.diagnostics: List[MetadataFileParseError] = []

    def __enter__(self) -> "InstagramDataParser":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()

    @property
    def raw_files(self) -> Mapping[str, bytes]:
        return self._table

    async def parse(self, data: ArchiveInput) -> ParseResult:
        """Run the whole pipeline over a ZIP archive held in memory.

        Any fatal error is re-raised as ParseFailedError. Metadata files that
        cannot be parsed are skipped and recorded in ``diagnostics``.
        """
        self.cleanup()
        start = time.perf_counter()
        try:
            self._table = await load_archive(data)
            paths = list(self._table)
            roots = resolve_directories(paths, self.config)
            image_files = locate_images(
                paths, roots.media_root, self.config.image_extensions
            )
            post_infos, metadata_files, skipped = extract_metadata(
                self._table, roots.activity_root, self.config
            )
            self.diagnostics = skipped
            pairs = match_posts(
                post_infos,
                image_files,
                cap=self.config.fallback_cap,
                caption_template=self.config.fallback_caption_template,
            )
            result = await assemble_result(
                pairs,
                len(image_files),
                metadata_files,
                self._table,
                self._handles,
            )
        except ExportParserError as exc:
            logger.error("Error parsing Instagram data: %s", exc)
            raise ParseFailedError(exc) from exc

        logger.info(
            "Parsed %d posts from %d images in %.2fs",
            result.total_posts,
            result.total_images,
            time.perf_counter() - start,
        )
        return result

    async def parse_file(self, path: Union[str, Path]) -> ParseResult:
        """Read a ZIP archive from disk and parse it."""
        data = await read_archive_file(path)
        return await self.parse(data)

    def cleanup(self) -> None:
        """Release every display handle and drop the file table."""
        self._handles.release_all()
        self._table = MappingProxyType({})
        self.diagnostics = []


async def parse_archive(
    data: ArchiveInput,
    config: Optional[ParserConfig] = None,
) -> ParseResult:
    """Parse one archive with a fresh parser instance."""
    parser = InstagramDataParser(config)
    return await parser.parse(data)
