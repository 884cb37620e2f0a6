from .directory_search import directory_grep, project_grep
from .errors import (
    DirectoryNotFoundError,
    NotRegularFileError,
    PatternCompileError,
    SearchError,
    StreamProcessingError,
)
from .file_search import file_grep
from .models import (
    DirectoryOptions,
    DirectorySearchResult,
    FileMatchSummary,
    FileSearchResult,
    Match,
    NormalizedOptions,
    SearchOptions,
)
from .settings import settings

__all__ = [
    "directory_grep",
    "project_grep",
    "file_grep",
    "DirectoryNotFoundError",
    "NotRegularFileError",
    "PatternCompileError",
    "SearchError",
    "StreamProcessingError",
    "DirectoryOptions",
    "DirectorySearchResult",
    "FileMatchSummary",
    "FileSearchResult",
    "Match",
    "NormalizedOptions",
    "SearchOptions",
    "settings",
]
