"""
Single-file search engine.

Two strategies are selected by file size:

- sync: the whole file is read and split into lines; context is sliced
  straight out of the line list.
- stream: lines are pulled one at a time from a buffered reader, so memory
  stays bounded by the context window no matter how large the file is.

Both produce the same ``(line_number, content)`` pairs for the same input.
"""

import os
import stat
from collections import deque
from dataclasses import dataclass, field
from itertools import islice
from typing import Deque, Iterator, List, Optional, Sequence, Tuple

from textgrep.core.constants import DEFAULT_STREAM_THRESHOLD_BYTES
from textgrep.core.context import extract_context
from textgrep.core.errors import NotRegularFileError, StreamProcessingError
from textgrep.core.matcher import Matcher, create_matcher
from textgrep.core.models import Context, FileSearchResult, Match, MatchResult, NormalizedOptions
from textgrep.core.options import OptionsInput, normalize_options
from textgrep.core.settings import settings
from textgrep.core.utils.file import decode_line, decode_text
from textgrep.core.utils.logging import get_logger

logger = get_logger("textgrep.file_search")


def should_use_stream_processing(file_size: int, threshold: int = DEFAULT_STREAM_THRESHOLD_BYTES) -> bool:
    return file_size > threshold


def validate_file_path(file_path: str) -> os.stat_result:
    """Stat ``file_path``; raise before any read unless it is an existing regular file."""
    try:
        st = os.stat(file_path)
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {file_path}") from None
    if stat.S_ISDIR(st.st_mode):
        raise IsADirectoryError(f"Path is a directory: {file_path}")
    if not stat.S_ISREG(st.st_mode):
        raise NotRegularFileError(f"Not a regular file: {file_path}")
    return st


def read_lines(file_path: str) -> List[str]:
    with open(file_path, "rb") as fh:
        data = fh.read()
    return decode_text(data).split("\n")


def read_file_stream(file_path: str) -> Iterator[str]:
    """
    Yield the file's lines one at a time (split on ``\\n``, newline removed).

    Produces exactly what ``read_lines`` returns: an empty file or one ending
    in a newline yields a final ``""``, and only the first line drops a BOM.
    """
    with open(file_path, "rb") as fh:
        decode = decode_text
        ended_with_newline = True
        for raw in fh:
            ended_with_newline = raw.endswith(b"\n")
            if ended_with_newline:
                raw = raw[:-1]
            yield decode(raw)
            decode = decode_line
        if ended_with_newline:
            yield ""


def format_match(line_number: int, line: str, hit: MatchResult, context: Optional[Context] = None) -> Match:
    if context is None:
        return Match(line_number=line_number, content=line.strip(), match_offset=hit.position)
    return Match(
        line_number=line_number,
        content=line.strip(),
        match_offset=hit.position,
        before_context=context.before_context,
        after_context=context.after_context,
    )


def process_lines_sync(
    lines: Sequence[str], matcher: Matcher, options: NormalizedOptions
) -> Tuple[List[Match], bool]:
    results: List[Match] = []
    last_index = -1
    for i, line in enumerate(lines):
        if len(results) >= options.max_results:
            break
        hit = matcher(line)
        if not hit.found:
            continue
        context = extract_context(lines, i, options.context_lines) if options.context_lines > 0 else None
        results.append(format_match(i + 1, line, hit, context))
        last_index = i

    truncated = False
    if len(results) >= options.max_results:
        # Only need to know whether one more match exists past the cap.
        for line in islice(lines, last_index + 1, None):
            if matcher(line).found:
                truncated = True
                break
    return results, truncated


@dataclass
class _PendingMatch:
    line_number: int
    line: str
    hit: MatchResult
    before: Tuple[str, ...]
    after: List[str] = field(default_factory=list)

    def finish(self, context_lines: int) -> Match:
        window = (*self.before, self.line, *self.after)
        context = extract_context(window, len(self.before), context_lines)
        return format_match(self.line_number, self.line, self.hit, context)


@dataclass
class StreamOutcome:
    matches: List[Match]
    truncated: bool
    total_lines_processed: int


def process_lines_stream(file_path: str, matcher: Matcher, options: NormalizedOptions) -> StreamOutcome:
    """
    Search ``file_path`` line by line.

    A deque keeps the last ``context_lines`` lines for before-context. A hit
    waits in ``pending`` until ``context_lines`` more lines have arrived
    (or EOF), so after-context is exact rather than guessed from the window.
    Once ``max_results`` hits are collected, remaining lines are only checked
    to set ``truncated``. Any I/O failure discards everything collected.
    """
    ctx = options.context_lines
    before: Deque[str] = deque(maxlen=ctx)
    pending: Deque[_PendingMatch] = deque()
    results: List[Match] = []
    collected = 0
    truncated = False
    line_number = 0

    try:
        for line in read_file_stream(file_path):
            line_number += 1

            for p in pending:
                p.after.append(line)
            while pending and len(pending[0].after) >= ctx:
                results.append(pending.popleft().finish(ctx))

            hit = matcher(line)
            if hit.found:
                if collected >= options.max_results:
                    truncated = True
                elif ctx > 0:
                    collected += 1
                    pending.append(_PendingMatch(line_number, line, hit, tuple(before)))
                else:
                    collected += 1
                    results.append(format_match(line_number, line, hit))

            if ctx > 0:
                before.append(line)
    except OSError as exc:
        raise StreamProcessingError(file_path, exc) from exc

    while pending:
        results.append(pending.popleft().finish(ctx))

    return StreamOutcome(matches=results, truncated=truncated, total_lines_processed=line_number)


def search_file(
    file_path: str,
    matcher: Matcher,
    options: NormalizedOptions,
    stream_threshold: Optional[int] = None,
) -> FileSearchResult:
    """Run an already-built matcher over one file. Shared by file and directory search."""
    st = validate_file_path(file_path)
    threshold = settings.STREAM_THRESHOLD_BYTES if stream_threshold is None else stream_threshold

    if should_use_stream_processing(st.st_size, threshold):
        logger.info(
            "large_file_stream_mode",
            path=file_path,
            size_mb=round(st.st_size / 1024 / 1024, 1),
        )
        outcome = process_lines_stream(file_path, matcher, options)
        return FileSearchResult(
            path=file_path,
            file_size_bytes=st.st_size,
            matches=tuple(outcome.matches),
            match_count=len(outcome.matches),
            truncated=outcome.truncated,
            mode="stream",
            total_lines_processed=outcome.total_lines_processed,
        )

    lines = read_lines(file_path)
    matches, truncated = process_lines_sync(lines, matcher, options)
    return FileSearchResult(
        path=file_path,
        file_size_bytes=st.st_size,
        matches=tuple(matches),
        match_count=len(matches),
        truncated=truncated,
        mode="sync",
        total_lines=len(lines),
    )


def file_grep(
    file_path: str,
    pattern: str,
    options: OptionsInput = None,
    *,
    stream_threshold: Optional[int] = None,
) -> FileSearchResult:
    """
    Search one file for ``pattern``.

    Raises FileNotFoundError / IsADirectoryError for a bad path,
    PatternCompileError for a bad regex and StreamProcessingError if a
    large file fails mid-read. Never returns a partial result.
    """
    normalized = normalize_options(options)
    matcher = create_matcher(pattern, normalized)
    return search_file(str(file_path), matcher, normalized, stream_threshold)
