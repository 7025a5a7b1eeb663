"""Common formatting utilities."""

import re

_BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")
_BYTES_PER_UNIT = 1024.0
_MS_PER_SECOND = 1000
_SECONDS_PER_MINUTE = 60
_MINUTES_PER_HOUR = 60
_SIZE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*([KMGT]?B)?$", re.IGNORECASE)


def format_bytes(num_bytes: object) -> str:
    """
    Format a byte count to a human-readable string.

    Args:
        num_bytes: Size in bytes

    Returns:
        Size with a binary unit suffix (e.g., "512.00 B", "1.50 MB")
    """
    if not isinstance(num_bytes, (int, float)) or isinstance(num_bytes, bool):
        return "0.00 B"

    size = float(num_bytes)
    sign = "-" if size < 0 else ""
    size = abs(size)
    unit_index = 0
    while size >= _BYTES_PER_UNIT and unit_index < len(_BYTE_UNITS) - 1:
        size /= _BYTES_PER_UNIT
        unit_index += 1
    return f"{sign}{size:.2f} {_BYTE_UNITS[unit_index]}"


def format_duration(milliseconds: object) -> str:
    """
    Format a duration in milliseconds to a human-readable string.

    Args:
        milliseconds: Duration in milliseconds

    Returns:
        Duration string (e.g., "250ms", "45s", "3m 5s", "2h 0m 10s")
    """
    if not isinstance(milliseconds, (int, float)) or isinstance(milliseconds, bool):
        return "0ms"

    amount = max(0, int(milliseconds))
    if amount < _MS_PER_SECOND:
        return f"{amount}ms"

    seconds = amount // _MS_PER_SECOND
    minutes = seconds // _SECONDS_PER_MINUTE
    hours = minutes // _MINUTES_PER_HOUR
    if hours > 0:
        return f"{hours}h {minutes % _MINUTES_PER_HOUR}m {seconds % _SECONDS_PER_MINUTE}s"
    if minutes > 0:
        return f"{minutes}m {seconds % _SECONDS_PER_MINUTE}s"
    return f"{seconds}s"


def parse_size(text: str) -> int:
    """
    Parse a size string such as "512MB" or "1.5 GB" into bytes.

    Raises:
        ValueError: If the string is not a recognised size
    """
    match = _SIZE_PATTERN.match(text.strip())
    if not match:
        raise ValueError(f"Invalid size format: {text!r}")

    value = float(match.group(1))
    unit = (match.group(2) or "B").upper()
    return int(value * _BYTES_PER_UNIT ** _BYTE_UNITS.index(unit))


__all__ = ["format_bytes", "format_duration", "parse_size"]
