"""Human-readable size strings.

Parses configuration values such as ``"5MB"`` into byte counts and
renders byte counts for reports. Units are binary (1KB = 1024 bytes).
"""

import re

from filequarantine.errors import InvalidSizeFormatError

KB = 1024
MB = 1024 * KB
GB = 1024 * MB

UNIT_MULTIPLIERS: dict[str, int] = {
    "B": 1,
    "KB": KB,
    "MB": MB,
    "GB": GB,
}

# Number immediately followed by a unit, no whitespace in between
_SIZE_PATTERN = re.compile(r"^(?P<number>\d+(?:\.\d+)?|\.\d+)(?P<unit>[A-Za-z]+)$")


def parse_size(text: str) -> int:
    """Convert a size string to a number of bytes.

    Accepts a non-negative decimal number immediately followed by one
    of the units B, KB, MB or GB (case-insensitive). There is no
    default unit: ``"500"`` is rejected.

    Fractional values are multiplied out and rounded half-to-even,
    so ``"1.5KB"`` is 1536 bytes.

    Args:
        text: Size string such as ``"5MB"`` or ``"500b"``.

    Returns:
        Size in bytes.

    Raises:
        InvalidSizeFormatError: If the number or unit is missing,
            negative, or not recognized.
    """
    if not isinstance(text, str):
        msg = f"Size must be a string, got {type(text).__name__}"
        raise InvalidSizeFormatError(msg)

    match = _SIZE_PATTERN.match(text.strip())
    if match is None:
        msg = f"Invalid size '{text}'. Expected a number followed by B, KB, MB or GB (e.g. 5MB)."
        raise InvalidSizeFormatError(msg)

    unit = match.group("unit").upper()
    multiplier = UNIT_MULTIPLIERS.get(unit)
    if multiplier is None:
        msg = f"Invalid size unit '{match.group('unit')}' in '{text}'. Use B, KB, MB, or GB."
        raise InvalidSizeFormatError(msg)

    return round(float(match.group("number")) * multiplier)


def format_size(size_bytes: int) -> str:
    """Render a byte count using the largest fitting unit.

    Bytes are shown as an integer (``"512B"``); KB, MB and GB use two
    decimals. Rounding follows Python's float formatting, which rounds
    exact ties to even (1152 bytes is ``"1.12KB"``).

    Args:
        size_bytes: Non-negative byte count.

    Returns:
        Human-readable size string without a space before the unit.

    Raises:
        ValueError: If size_bytes is negative.
    """
    if size_bytes < 0:
        msg = f"Size cannot be negative: {size_bytes}"
        raise ValueError(msg)

    if size_bytes < KB:
        return f"{int(size_bytes)}B"
    if size_bytes < MB:
        return f"{size_bytes / KB:.2f}KB"
    if size_bytes < GB:
        return f"{size_bytes / MB:.2f}MB"
    return f"{size_bytes / GB:.2f}GB"
