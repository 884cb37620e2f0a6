from typing import Sequence, Tuple

from textgrep.core.models import Context

_EMPTY = Context((), ())


def _clean(lines: Sequence[str]) -> Tuple[str, ...]:
    return tuple(t for t in (line.strip() for line in lines) if t)


def extract_context(lines: Sequence[str], target_index: int, context_lines: int) -> Context:
    """Trimmed, blank-filtered lines around ``lines[target_index]``."""
    if context_lines <= 0:
        return _EMPTY
    start = max(0, target_index - context_lines)
    end = min(len(lines), target_index + context_lines + 1)
    return Context(
        before_context=_clean(lines[start:target_index]),
        after_context=_clean(lines[target_index + 1:end]),
    )
