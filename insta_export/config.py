"""Configuration objects and constants for the export parser."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable, FrozenSet, Mapping, Optional, Sequence, Tuple

DEFAULT_CAPTION_FIELDS = ("title", "caption", "description", "text", "content")
DEFAULT_MEDIA_URI_FIELDS = ("uri", "media_uri", "file_path", "path", "url")
DEFAULT_TIMESTAMP_FIELDS = (
    "creation_timestamp",
    "timestamp",
    "created_time",
    "date",
    "time",
)
DEFAULT_CONTAINER_KEYS = ("media", "posts", "data", "items")
DEFAULT_NESTED_MEDIA_KEYS = ("media",)
DEFAULT_IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "bmp", "webp"})
DEFAULT_METADATA_PRIORITY = (
    "posts_1.json",
    "posts.json",
    "media.json",
    "saved_posts.json",
)
DEFAULT_FALLBACK_CAP = 20
DEFAULT_CAPTION = "Instagram post"
DEFAULT_FALLBACK_CAPTION_TEMPLATE = "Instagram post {index}"

MEDIA_MARKER = "media"
POSTS_MARKER = "posts"
ACTIVITY_MARKER = "your_instagram_activity"

RootDetector = Callable[[Sequence[str]], Optional[str]]

_TUPLE_FIELDS = {
    "caption_fields",
    "media_uri_fields",
    "timestamp_fields",
    "container_keys",
    "nested_media_keys",
    "metadata_filename_priority",
}


@dataclass
class ParserConfig:
    """Field names, markers and limits that steer every pipeline stage."""

    caption_fields: Tuple[str, ...] = DEFAULT_CAPTION_FIELDS
    media_uri_fields: Tuple[str, ...] = DEFAULT_MEDIA_URI_FIELDS
    timestamp_fields: Tuple[str, ...] = DEFAULT_TIMESTAMP_FIELDS
    container_keys: Tuple[str, ...] = DEFAULT_CONTAINER_KEYS
    nested_media_keys: Tuple[str, ...] = DEFAULT_NESTED_MEDIA_KEYS
    image_extensions: FrozenSet[str] = DEFAULT_IMAGE_EXTENSIONS
    metadata_filename_priority: Tuple[str, ...] = DEFAULT_METADATA_PRIORITY
    fallback_cap: int = DEFAULT_FALLBACK_CAP
    default_caption: str = DEFAULT_CAPTION
    fallback_caption_template: str = DEFAULT_FALLBACK_CAPTION_TEMPLATE
    media_marker: str = MEDIA_MARKER
    posts_marker: str = POSTS_MARKER
    activity_marker: str = ACTIVITY_MARKER
    media_root_detector: Optional[RootDetector] = None
    activity_root_detector: Optional[RootDetector] = None

    def __post_init__(self) -> None:
        if self.fallback_cap < 0:
            raise ValueError(f"fallback_cap must be >= 0, got {self.fallback_cap}")
        if not self.media_uri_fields:
            raise ValueError("media_uri_fields must name at least one field")
        self.image_extensions = frozenset(
            ext.lower().lstrip(".") for ext in self.image_extensions
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ParserConfig":
        """Build a config from plain settings, e.g. a decoded JSON document."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise ValueError(f"Unknown parser settings: {', '.join(unknown)}")
        values = dict(mapping)
        for name in _TUPLE_FIELDS & set(values):
            values[name] = tuple(values[name])
        if "image_extensions" in values:
            values["image_extensions"] = frozenset(values["image_extensions"])
        return cls(**values)
