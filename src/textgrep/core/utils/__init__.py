from .logging import get_logger, configure_logging
from .file import _parse_size, parse_size, decode_text, decode_line

__all__ = [
    "get_logger",
    "configure_logging",
    "_parse_size",
    "parse_size",
    "decode_text",
    "decode_line",
]
