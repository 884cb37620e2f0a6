"""
Directory and project search.

Drives the walker, runs the single-file engine on every candidate and
merges the results under a file ceiling and a global match ceiling.
A failing file becomes a ``skipped_files`` entry; only an invalid root or
an invalid pattern aborts the whole search.
"""

import os
from typing import List, Optional

from textgrep.core.constants import (
    MIN_RESULTS_PER_FILE,
    PROJECT_EXCLUDE_PATTERNS,
    RESULTS_PER_FILE_DIVISOR,
)
from textgrep.core.errors import DirectoryNotFoundError, SearchError
from textgrep.core.file_search import search_file
from textgrep.core.matcher import create_matcher
from textgrep.core.models import DirectorySearchResult, FileMatchSummary
from textgrep.core.options import OptionsInput, as_mapping, normalize_directory_options
from textgrep.core.scanner import walk_directory
from textgrep.core.settings import settings
from textgrep.core.utils.logging import get_logger

logger = get_logger("textgrep.directory_search")


def validate_directory_path(dir_path: str) -> None:
    if not os.path.exists(dir_path):
        raise DirectoryNotFoundError(f"Directory not found: {dir_path}")
    if not os.path.isdir(dir_path):
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")


def per_file_budget(max_results: int) -> int:
    return max(MIN_RESULTS_PER_FILE, max_results // RESULTS_PER_FILE_DIVISOR)


def directory_grep(
    dir_path: str,
    pattern: str,
    options: OptionsInput = None,
    *,
    stream_threshold: Optional[int] = None,
    max_files: Optional[int] = None,
) -> DirectorySearchResult:
    dir_path = str(dir_path)
    validate_directory_path(dir_path)
    opts = normalize_directory_options(options)
    matcher = create_matcher(pattern, opts)
    file_opts = opts.model_copy(update={"max_results": per_file_budget(opts.max_results)})
    max_files = settings.MAX_FILES_TO_SEARCH if max_files is None else max_files

    results: List[FileMatchSummary] = []
    skipped: List[str] = []
    total_matches = 0
    files_with_matches = 0
    files_searched = 0
    total_files = 0
    truncated = False

    logger.info("directory_search_started", path=dir_path, pattern=pattern)

    for file_path in walk_directory(dir_path, opts):
        total_files += 1

        if files_searched >= max_files:
            skipped.append(f"... file limit reached ({max_files} files searched)")
            truncated = True
            break

        rel = os.path.relpath(file_path, dir_path)
        files_searched += 1
        try:
            found = search_file(file_path, matcher, file_opts, stream_threshold)
        except (OSError, SearchError) as exc:
            logger.debug("file_skipped", path=rel, error=str(exc))
            skipped.append(f"{rel}: {exc}")
            continue

        if found.match_count > 0:
            results.append(FileMatchSummary(
                path=rel,
                matches=found.matches,
                match_count=found.match_count,
                file_size_bytes=found.file_size_bytes,
                total_lines=found.total_lines,
                truncated=found.truncated,
            ))
            total_matches += found.match_count
            files_with_matches += 1
            if found.truncated:
                truncated = True

        if total_matches >= opts.max_results:
            truncated = True
            break

    logger.info(
        "directory_search_completed",
        path=dir_path,
        files_with_matches=files_with_matches,
        files_searched=files_searched,
        total_matches=total_matches,
        skipped=len(skipped),
    )

    return DirectorySearchResult(
        pattern=pattern,
        total_matches=total_matches,
        files_with_matches=files_with_matches,
        files_searched=files_searched,
        total_files_encountered=total_files,
        results=tuple(results),
        truncated=truncated,
        skipped_files=tuple(skipped),
    )


def project_grep(
    pattern: str,
    options: OptionsInput = None,
    *,
    project_root: Optional[str] = None,
    stream_threshold: Optional[int] = None,
    max_files: Optional[int] = None,
) -> DirectorySearchResult:
    """directory_grep over the project root, also skipping ``logs`` unless overridden."""
    merged = {"recursive": True, "exclude_patterns": PROJECT_EXCLUDE_PATTERNS}
    merged.update(as_mapping(options))
    return directory_grep(
        project_root or settings.PROJECT_ROOT,
        pattern,
        merged,
        stream_threshold=stream_threshold,
        max_files=max_files,
    )
