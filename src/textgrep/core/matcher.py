import re
from typing import Callable

from textgrep.core.errors import PatternCompileError
from textgrep.core.models import MatchResult, NormalizedOptions

Matcher = Callable[[str], MatchResult]

_NO_MATCH = MatchResult(False, -1)

# Flag letters accepted in regex_flags. "g" and "u" are no-ops: only the first
# match per line is reported and str patterns are always unicode.
_FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "a": re.ASCII,
    "u": 0,
    "g": 0,
    "y": 0,
}


def compile_flags(pattern: str, flags: str) -> int:
    value = 0
    for ch in flags:
        if ch not in _FLAG_MAP:
            raise PatternCompileError(pattern, f"unknown flag {ch!r} in {flags!r}")
        value |= _FLAG_MAP[ch]
    return value


def create_matcher(pattern: str, options: NormalizedOptions) -> Matcher:
    """
    Build a single-line match function for ``pattern``.

    Regex mode compiles once up front and raises PatternCompileError on an
    invalid pattern or flag. ``regex_flags`` controls case there, not
    ``case_sensitive``. Literal mode does a plain substring search, lower-casing
    both sides unless ``case_sensitive`` is set.
    """
    if options.use_regex:
        flags = compile_flags(pattern, options.regex_flags)
        try:
            regex = re.compile(pattern, flags)
        except (re.error, OverflowError, ValueError) as exc:
            raise PatternCompileError(pattern, str(exc)) from exc
        # sticky: only a match starting at the beginning of the line counts
        find = regex.match if "y" in options.regex_flags else regex.search

        def _regex_matcher(line: str) -> MatchResult:
            m = find(line)
            if m is None:
                return _NO_MATCH
            return MatchResult(True, m.start())

        return _regex_matcher

    if options.case_sensitive:
        def _literal_matcher(line: str) -> MatchResult:
            pos = line.find(pattern)
            return MatchResult(pos != -1, pos)

        return _literal_matcher

    needle = pattern.lower()

    def _folded_matcher(line: str) -> MatchResult:
        pos = line.lower().find(needle)
        return MatchResult(pos != -1, pos)

    return _folded_matcher
