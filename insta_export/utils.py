"""Utility helpers for archive path handling."""

from __future__ import annotations

from typing import List


def normalize_path(value: str) -> str:
    """Use forward slashes and drop a leading ``./`` or ``/``."""
    normalized = value.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.lstrip("/")


def path_segments(value: str) -> List[str]:
    """Split a slash separated path, keeping empty segments."""
    return value.split("/")


def filename_of(value: str) -> str:
    """Return the last path segment (may be empty for a trailing slash)."""
    return value.rsplit("/", 1)[-1]


def extension_of(value: str) -> str:
    """Lowercased text after the last dot of the filename, or ``""``."""
    name = filename_of(value)
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()
