"""Exception hierarchy raised by the export parser."""

from __future__ import annotations


class ExportParserError(Exception):
    """Base class for every error raised by this package."""


class ArchiveCorruptError(ExportParserError):
    """The input is not an openable ZIP container or an entry cannot be inflated."""


class DirectoryNotFoundError(ExportParserError):
    """The media root or the activity root could not be located."""


class MetadataFileParseError(ExportParserError):
    """A single metadata file is not decodable text or not valid JSON."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not parse metadata file {path}: {reason}")
        self.path = path
        self.reason = reason


class ParseFailedError(ExportParserError):
    """Wraps any fatal error raised while parsing an export."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Failed to parse Instagram data: {cause}")
        self.cause = cause
