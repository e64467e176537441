"""Metadata discovery and tolerant JSON normalization into PostInfo records."""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import ParserConfig
from .errors import MetadataFileParseError
from .models import JsonValue, PostInfo
from .utils import filename_of

logger = logging.getLogger("insta_export.metadata")

_EXIF_DT_FMT = "%Y:%m:%d %H:%M:%S"


def find_metadata_files(
    paths: Sequence[str],
    activity_root: str,
    priority: Sequence[str],
) -> List[str]:
    """JSON files under ``activity_root``, known filenames first in priority order."""
    candidates = [
        path for path in paths if path.startswith(activity_root) and path.endswith(".json")
    ]
    rank = {name: index for index, name in enumerate(priority)}
    unlisted = len(priority)
    return sorted(candidates, key=lambda path: rank.get(filename_of(path), unlisted))


def parse_metadata_file(path: str, content: bytes) -> JsonValue:
    """Decode ``content`` as UTF-8 JSON or raise MetadataFileParseError."""
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MetadataFileParseError(path, f"not UTF-8 text ({exc})") from exc
    try:
        return json.loads(text)
    except RecursionError as exc:
        raise MetadataFileParseError(path, "JSON nested too deeply") from exc
    except ValueError as exc:
        raise MetadataFileParseError(path, f"invalid JSON ({exc})") from exc


def normalize_items(data: JsonValue, container_keys: Sequence[str]) -> List[JsonValue]:
    """Turn an arbitrarily shaped JSON document into a list of candidate items."""
    if isinstance(data, list):
        return data
    items: List[JsonValue] = []
    if isinstance(data, dict):
        for key in container_keys:
            value = data.get(key)
            if isinstance(value, list):
                items = value
                break
    return items or [data]


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, float) and math.isnan(value):
        return ""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        value = int(value)
    if isinstance(value, (int, float)) and value:
        return str(value)
    return ""


def first_text(item: Mapping[str, Any], field_names: Sequence[str]) -> str:
    """First non-blank textual value among ``field_names``, else ``""``."""
    for name in field_names:
        text = _as_text(item.get(name))
        if text:
            return text
    return ""


def parse_timestamp_text(value: str) -> Optional[int]:
    """Parse a textual date into epoch milliseconds; None when unrecognized."""
    text = value.strip()
    if not text:
        return None
    parsed: Optional[datetime] = None
    iso = text[:-1] + "+00:00" if text[-1] in "Zz" else text
    try:
        parsed = datetime.fromisoformat(iso)
    except ValueError:
        try:
            parsed = datetime.strptime(text, _EXIF_DT_FMT)
        except ValueError:
            try:
                parsed = parsedate_to_datetime(text)
            except (TypeError, ValueError, IndexError):
                parsed = None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return int(parsed.timestamp() * 1000)
    except (OverflowError, OSError, ValueError):
        return None


def first_timestamp(item: Mapping[str, Any], field_names: Sequence[str]) -> Optional[int]:
    """Timestamp from the first present field; unparseable values give None."""
    for name in field_names:
        value = item.get(name)
        if value is None or value == "" or value is False:
            continue
        if value is True:
            return None
        if isinstance(value, float):
            return int(value) if math.isfinite(value) else None
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            return parse_timestamp_text(value)
        return None
    return None


def _nested_entries(item: Mapping[str, Any], config: ParserConfig) -> List[Dict[str, Any]]:
    for key in config.nested_media_keys:
        value = item.get(key)
        if isinstance(value, list):
            return [entry for entry in value if isinstance(entry, dict)]
    return []


def extract_post_info(item: Mapping[str, Any], config: ParserConfig) -> List[PostInfo]:
    """Build PostInfo records for one metadata item.

    An item with its own media URI yields exactly one record. An item without
    one but with a list of nested media entries (the layout of ``posts_1.json``)
    yields one record per entry carrying a URI. Anything else yields nothing.
    """
    caption = first_text(item, config.caption_fields)
    timestamp = first_timestamp(item, config.timestamp_fields)
    media_uri = first_text(item, config.media_uri_fields)
    if media_uri:
        return [
            PostInfo(
                caption=caption or config.default_caption,
                media_uri=media_uri,
                timestamp=timestamp,
                original_payload=dict(item),
            )
        ]

    infos: List[PostInfo] = []
    for entry in _nested_entries(item, config):
        entry_uri = first_text(entry, config.media_uri_fields)
        if not entry_uri:
            continue
        entry_timestamp = first_timestamp(entry, config.timestamp_fields)
        infos.append(
            PostInfo(
                caption=caption
                or first_text(entry, config.caption_fields)
                or config.default_caption,
                media_uri=entry_uri,
                timestamp=entry_timestamp if entry_timestamp is not None else timestamp,
                original_payload=dict(item),
            )
        )
    return infos


def extract_metadata(
    table: Mapping[str, bytes],
    activity_root: str,
    config: ParserConfig,
) -> Tuple[List[PostInfo], List[str], List[MetadataFileParseError]]:
    """Parse every candidate metadata file under ``activity_root``.

    Returns the PostInfo records in file priority order, the candidate paths,
    and the errors for files that had to be skipped.
    """
    metadata_files = find_metadata_files(
        list(table), activity_root, config.metadata_filename_priority
    )
    post_infos: List[PostInfo] = []
    skipped: List[MetadataFileParseError] = []

    for path in metadata_files:
        try:
            data = parse_metadata_file(path, table[path])
        except MetadataFileParseError as exc:
            logger.warning("Skipping metadata file: %s", exc)
            skipped.append(exc)
            continue

        found = 0
        for item in normalize_items(data, config.container_keys):
            if not isinstance(item, dict):
                continue
            infos = extract_post_info(item, config)
            post_infos.extend(infos)
            found += len(infos)
        logger.debug("Extracted %d post records from %s", found, path)

    logger.info(
        "Extracted %d post records from %d metadata files (%d skipped)",
        len(post_infos),
        len(metadata_files),
        len(skipped),
    )
    return post_infos, metadata_files, skipped
