"""Parsing of 64-bit integer arguments.

Seeds and phases are given on the command line and in metadata files either
as signed decimal or as ``0x``-prefixed hex of at most 16 digits, optionally
signed (``-0x10``). Hex input is a raw bit pattern, negated modulo 2^64 when
prefixed with ``-``, and is reinterpreted as signed 64-bit; decimal input must
already fit in int64. Leading zeros are decimal, not octal.
"""

import string

from chi32.core.bits import i64

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


def parse_int64(text: str) -> int:
    """Parse a decimal or 0x-hex string into a signed 64-bit integer.

    Args:
        text: Input string, surrounding whitespace ignored

    Returns:
        Signed 64-bit integer

    Raises:
        ValueError: If the text is empty, malformed, longer than 16 hex
            digits, or a decimal value outside int64

    Example:
        >>> parse_int64("0xFFFFFFFFFFFFFFFF")
        -1
    """
    if text is None or not text.strip():
        raise ValueError("integer argument cannot be empty")

    s = text.strip()

    sign = s[0] if s[0] in "+-" else ""
    if s[len(sign):len(sign) + 2].lower() == "0x":
        digits = s[len(sign) + 2:]
        if not digits or len(digits) > 16:
            raise ValueError(
                f"hex value '{s}' is empty or too long after '0x' (max 16 hex digits)"
            )
        if not all(c in string.hexdigits for c in digits):
            raise ValueError(f"invalid hexadecimal value: '{s}'")
        value = int(digits, 16)
        # A leading '-' negates the bit pattern modulo 2^64
        return i64(-value if sign == "-" else value)

    try:
        value = int(s, 10)
    except ValueError:
        raise ValueError(f"invalid decimal value: '{s}'") from None

    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError(
            f"decimal value '{s}' does not fit in a signed 64-bit integer; "
            "prefix with '0x' to give a raw bit pattern"
        )
    return value
