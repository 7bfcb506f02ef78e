"""Fixed-width integer helpers.

Python ints are unbounded, so every operation of the CHI32 pipeline forces
its result back into a 32-bit or 64-bit domain. Signed views are produced by
reinterpreting the bit pattern (two's complement), never by value-preserving
conversion.
"""

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF


def u32(x: int) -> int:
    """Force integer into unsigned 32-bit domain.

    Args:
        x: Input integer (can be negative or any size)

    Returns:
        Unsigned 32-bit integer (value modulo 2^32)
    """
    return x & MASK32


def u64(x: int) -> int:
    """Force integer into unsigned 64-bit domain.

    Args:
        x: Input integer (can be negative or any size)

    Returns:
        Unsigned 64-bit integer (value modulo 2^64)
    """
    return x & MASK64


def i32(x: int) -> int:
    """Reinterpret the low 32 bits of x as a signed 32-bit integer."""
    x &= MASK32
    return x - (1 << 32) if x & 0x80000000 else x


def i64(x: int) -> int:
    """Reinterpret the low 64 bits of x as a signed 64-bit integer."""
    x &= MASK64
    return x - (1 << 64) if x & 0x8000000000000000 else x


def rotate_left_32(x: int, k: int) -> int:
    """Rotate a 32-bit word left by k positions.

    The caller masks k into [0, 31]. For k == 0 the right shift by 32 of an
    in-range word is zero, so the word is returned unchanged.

    Args:
        x: Value to rotate (masked to 32 bits)
        k: Rotation amount in [0, 31]

    Returns:
        Rotated unsigned 32-bit value
    """
    x = u32(x)
    return u32((x << k) | (x >> (32 - k)))


def rotate_left_64(x: int, k: int) -> int:
    """Rotate a 64-bit word left by k positions (k in [0, 63])."""
    x = u64(x)
    return u64((x << k) | (x >> (64 - k)))
