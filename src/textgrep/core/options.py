"""
Option normalization.

Turns a partial, caller-supplied options object into a complete, frozen
options record. This is the only place defaults are applied: every other
module receives fully-resolved options. Invalid values never raise here,
they fall back to defaults (bounds validation lives in ``schemas``).
"""

from collections.abc import Mapping
from typing import Any, Iterable, Optional, Tuple, Union

from pydantic import BaseModel

from textgrep.core.constants import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_MAX_FILE_SIZE_BYTES,
    DEFAULT_MAX_RESULTS,
    DEFAULT_REGEX_FLAGS,
    MAX_CONTEXT_LINES,
)
from textgrep.core.models import DirectoryOptions, NormalizedOptions

OptionsInput = Union[Mapping, BaseModel, None]


def as_mapping(options: OptionsInput) -> Mapping:
    if options is None:
        return {}
    if isinstance(options, BaseModel):
        return options.model_dump(exclude_none=True)
    if isinstance(options, Mapping):
        return options
    return {}


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    return default


def _coerce_int(value: Any, default: int) -> int:
    """Accept real integers only; bools and everything else fall back."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value


def _coerce_strings(value: Any) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, Iterable):
        return None
    return tuple(str(v) for v in value if str(v))


def normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    if not ext:
        return ""
    return ext if ext.startswith(".") else f".{ext}"


def normalize_options(options: OptionsInput = None) -> NormalizedOptions:
    raw = as_mapping(options)
    max_results = _coerce_int(raw.get("max_results"), DEFAULT_MAX_RESULTS)
    if max_results < 1:
        max_results = DEFAULT_MAX_RESULTS
    context_lines = _coerce_int(raw.get("context_lines"), 0)
    flags = raw.get("regex_flags")
    return NormalizedOptions(
        use_regex=_coerce_bool(raw.get("use_regex"), False),
        case_sensitive=_coerce_bool(raw.get("case_sensitive"), False),
        regex_flags=flags if isinstance(flags, str) else DEFAULT_REGEX_FLAGS,
        max_results=max_results,
        context_lines=max(0, min(MAX_CONTEXT_LINES, context_lines)),
    )


def normalize_directory_options(options: OptionsInput = None) -> DirectoryOptions:
    raw = as_mapping(options)
    base = normalize_options(raw)

    file_types = []
    for ext in _coerce_strings(raw.get("file_types")) or ():
        norm = normalize_extension(ext)
        if norm and norm not in file_types:
            file_types.append(norm)

    exclude = _coerce_strings(raw.get("exclude_patterns"))
    if exclude is None:
        exclude = DEFAULT_EXCLUDE_PATTERNS

    max_size = _coerce_int(raw.get("max_file_size_bytes"), DEFAULT_MAX_FILE_SIZE_BYTES)
    if max_size < 0:
        max_size = DEFAULT_MAX_FILE_SIZE_BYTES

    return DirectoryOptions(
        **base.model_dump(),
        file_types=tuple(file_types),
        recursive=_coerce_bool(raw.get("recursive"), True),
        exclude_patterns=exclude,
        include_hidden=_coerce_bool(raw.get("include_hidden"), False),
        max_file_size_bytes=max_size,
        follow_symlinks=_coerce_bool(raw.get("follow_symlinks"), False),
    )
