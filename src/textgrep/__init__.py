"""Stateless text search over files and directory trees."""

from textgrep.version import __version__
from textgrep.core import (
    DirectoryNotFoundError,
    DirectorySearchResult,
    FileSearchResult,
    Match,
    NotRegularFileError,
    PatternCompileError,
    SearchError,
    SearchOptions,
    StreamProcessingError,
    directory_grep,
    file_grep,
    project_grep,
)

__all__ = [
    "__version__",
    "DirectoryNotFoundError",
    "DirectorySearchResult",
    "FileSearchResult",
    "Match",
    "NotRegularFileError",
    "PatternCompileError",
    "SearchError",
    "SearchOptions",
    "StreamProcessingError",
    "directory_grep",
    "file_grep",
    "project_grep",
]
