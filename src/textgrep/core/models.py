from typing import Any, Dict, Literal, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from textgrep.core.constants import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_MAX_FILE_SIZE_BYTES,
    DEFAULT_MAX_RESULTS,
    DEFAULT_REGEX_FLAGS,
)


class MatchResult(NamedTuple):
    found: bool
    position: int


class Context(NamedTuple):
    before_context: Tuple[str, ...]
    after_context: Tuple[str, ...]


class SearchOptions(BaseModel):
    """Caller-supplied options. Every field may be left unset."""
    model_config = ConfigDict(frozen=True)
    use_regex: Optional[bool] = None
    case_sensitive: Optional[bool] = None
    regex_flags: Optional[str] = None
    max_results: Optional[int] = None
    context_lines: Optional[int] = None
    # directory-only
    file_types: Optional[Tuple[str, ...]] = None
    recursive: Optional[bool] = None
    exclude_patterns: Optional[Tuple[str, ...]] = None
    include_hidden: Optional[bool] = None
    max_file_size_bytes: Optional[int] = None
    follow_symlinks: Optional[bool] = None


class NormalizedOptions(BaseModel):
    model_config = ConfigDict(frozen=True)
    use_regex: bool = False
    case_sensitive: bool = False
    regex_flags: str = DEFAULT_REGEX_FLAGS
    max_results: int = DEFAULT_MAX_RESULTS
    context_lines: int = 0


class DirectoryOptions(NormalizedOptions):
    file_types: Tuple[str, ...] = ()
    recursive: bool = True
    exclude_patterns: Tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS
    include_hidden: bool = False
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES
    follow_symlinks: bool = False


class Match(BaseModel):
    model_config = ConfigDict(frozen=True)
    line_number: int
    content: str
    match_offset: int = -1
    before_context: Optional[Tuple[str, ...]] = None
    after_context: Optional[Tuple[str, ...]] = None


def _check_match_list(matches: Tuple[Match, ...], match_count: int) -> None:
    if match_count != len(matches):
        raise ValueError(f"match_count={match_count} but {len(matches)} matches")
    last = 0
    for m in matches:
        if m.line_number <= last:
            raise ValueError("matches must be ordered by ascending line number")
        last = m.line_number


class FileSearchResult(BaseModel):
    path: str
    file_size_bytes: int
    matches: Tuple[Match, ...] = ()
    match_count: int = 0
    truncated: bool = False
    mode: Literal["sync", "stream"] = "sync"
    total_lines: Optional[int] = None
    total_lines_processed: Optional[int] = None

    @model_validator(mode="after")
    def _validate_matches(self) -> "FileSearchResult":
        _check_match_list(self.matches, self.match_count)
        return self

    def to_result_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class FileMatchSummary(BaseModel):
    """Per-file entry of a directory search; path is relative to the search root."""
    path: str
    matches: Tuple[Match, ...] = ()
    match_count: int = 0
    file_size_bytes: int = 0
    total_lines: Optional[int] = None
    truncated: bool = False

    @model_validator(mode="after")
    def _validate_matches(self) -> "FileMatchSummary":
        _check_match_list(self.matches, self.match_count)
        return self


class DirectorySearchResult(BaseModel):
    pattern: str
    total_matches: int = 0
    files_with_matches: int = 0
    files_searched: int = 0
    total_files_encountered: int = 0
    results: Tuple[FileMatchSummary, ...] = ()
    truncated: bool = False
    skipped_files: Tuple[str, ...] = Field(default_factory=tuple)

    def to_result_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
