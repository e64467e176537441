"""Data models used throughout the export parsing pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from .images import ImageHandle

# Parsed JSON: null, bool, number, string, array or object.
JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]


@dataclass(frozen=True)
class DirectoryRoots:
    """Path prefixes under which media files and activity metadata live."""

    media_root: str
    activity_root: str


@dataclass(frozen=True)
class PostInfo:
    """Normalized metadata for one post, before it is paired with an image."""

    caption: str
    media_uri: str
    timestamp: Optional[int]
    original_payload: JsonValue


@dataclass(frozen=True)
class MatchedPair:
    """A post's metadata associated with one image path in the archive."""

    image_path: str
    caption: str
    timestamp: Optional[int]
    original_payload: JsonValue


@dataclass
class Post:
    """Final post record handed to the caller."""

    id: str
    image: ImageHandle
    caption: str
    timestamp: Optional[int]
    selected: bool = True
    original_payload: JsonValue = field(default_factory=dict)
    image_path: str = ""


@dataclass
class ParseResult:
    """Terminal value of one parse run."""

    posts: List[Post]
    total_posts: int
    total_images: int
    metadata_file_names: List[str]
    raw_files: Mapping[str, bytes]
