"""Hexadecimal color parsing."""

import string

from typeport.exceptions import ColorParseError

RGBA = tuple[int, int, int, int]

_HEX_DIGITS = frozenset(string.hexdigits)


def parse_color(value: str) -> RGBA:
    """Parse a hexadecimal RGB(A) color.

    Accepts 3, 4, 6 or 8 hex digits with an optional leading ``#``
    (``"fff"``, ``"#ffffff80"``).

    Args:
        value: Color string

    Returns:
        (red, green, blue, alpha) with components in 0..255

    Raises:
        ColorParseError: If the string is not a hex color
    """
    digits = value[1:] if value.startswith("#") else value
    if not digits or not set(digits) <= _HEX_DIGITS:
        raise ColorParseError(value, "expected string to be hex")

    if len(digits) in (3, 4):
        components = [int(d * 2, 16) for d in digits]
    elif len(digits) in (6, 8):
        components = [int(digits[i : i + 2], 16) for i in range(0, len(digits), 2)]
    else:
        raise ColorParseError(value, "string has wrong length")

    if len(components) == 3:
        components.append(255)
    red, green, blue, alpha = components
    return (red, green, blue, alpha)
