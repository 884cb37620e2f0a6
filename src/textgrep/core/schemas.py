"""
Argument validation for the command layer.

The engine itself never rejects options (the normalizer falls back to
defaults); callers that take user input validate it here first.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from textgrep.core.constants import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_MAX_FILE_SIZE_BYTES,
    DEFAULT_MAX_RESULTS,
    DEFAULT_REGEX_FLAGS,
    MAX_CONTEXT_LINES,
)


class FileGrepOptionsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    use_regex: bool = Field(False, description="Treat the pattern as a regular expression")
    case_sensitive: bool = Field(False, description="Match case exactly (literal mode)")
    regex_flags: str = Field(DEFAULT_REGEX_FLAGS, description="Regex flags, e.g. 'im'")
    max_results: int = Field(DEFAULT_MAX_RESULTS, ge=1, le=10000, description="Maximum matches returned")
    context_lines: int = Field(0, ge=0, le=MAX_CONTEXT_LINES, description="Lines of context around each match")

    def to_options(self) -> Dict[str, Any]:
        # Only what the caller set; the normalizer owns the defaults.
        return self.model_dump(exclude_unset=True)


class DirectoryGrepOptionsModel(FileGrepOptionsModel):
    file_types: List[str] = Field(default_factory=list, description="Extensions to search, e.g. ['.py']")
    recursive: bool = True
    exclude_patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    include_hidden: bool = False
    max_file_size_bytes: int = Field(DEFAULT_MAX_FILE_SIZE_BYTES, ge=1024)
    follow_symlinks: bool = False


class FileGrepArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")

    file_path: str = Field(..., min_length=1)
    pattern: str = Field(..., min_length=1)
    options: FileGrepOptionsModel = Field(default_factory=FileGrepOptionsModel)
    request_id: Optional[str] = None


class DirectoryGrepArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")

    dir_path: str = Field(..., min_length=1)
    pattern: str = Field(..., min_length=1)
    options: DirectoryGrepOptionsModel = Field(default_factory=DirectoryGrepOptionsModel)
    request_id: Optional[str] = None


class ProjectGrepArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pattern: str = Field(..., min_length=1)
    options: Optional[DirectoryGrepOptionsModel] = None
    request_id: Optional[str] = None
