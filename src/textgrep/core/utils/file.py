from typing import Optional

def _parse_size(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    s = str(value).strip().lower()
    if not s:
        return default
    mult = 1
    if s.endswith("kb"):
        mult = 1024
        s = s[:-2]
    elif s.endswith("mb"):
        mult = 1024 * 1024
        s = s[:-2]
    elif s.endswith("gb"):
        mult = 1024 * 1024 * 1024
        s = s[:-2]
    elif s.endswith("tb"):
        mult = 1024 * 1024 * 1024 * 1024
        s = s[:-2]
    elif s.endswith("b"):
        s = s[:-1]
    s = s.replace(",", "").replace("_", "")
    try:
        return int(float(s) * mult)
    except (ValueError, OverflowError):
        return default


def parse_size(value: Optional[str]) -> int:
    """Parse a human size ("10MB", "512kb", "1,024"); raises ValueError if unparseable."""
    size = _parse_size(value, -1)
    if size < 0:
        raise ValueError(f"invalid size: {value!r}")
    return size


def decode_text(raw: bytes) -> str:
    """Decode file content (or its first line), dropping a UTF-8 BOM and replacing bad bytes."""
    return raw.decode("utf-8-sig", errors="replace")


def decode_line(raw: bytes) -> str:
    # a U+FEFF past the start of the file is content, not a BOM
    return raw.decode("utf-8", errors="replace")
