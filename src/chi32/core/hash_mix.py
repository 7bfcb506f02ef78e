"""Single-round 32-bit avalanche mixer.

``update_hash_value`` is the only chaining primitive of CHI32. A chain starts
from ``previous_hash = 0`` and threads each result into the next call; the
chain lives only as a local value inside one interleave computation.
"""

from chi32.core.bits import i32, rotate_left_32, u32

PRIME_1 = 0x8ADDB2D1
PRIME_2 = 0x8C723B45
PRIME_3 = 0xFD923173
PRIME_4 = 0x89A6AA0B
PRIME_5 = 0x1F844CB7
PRIME_6 = 0xFD2C1E9D

SHIFT_1 = 15
SHIFT_2 = 7
SHIFT_3 = 29
SHIFT_4 = 16


def update_hash_value(previous_hash: int, value: int) -> int:
    """Fold a 32-bit value into a running 32-bit hash.

    Both arguments are treated as raw 32-bit patterns, so signed and unsigned
    spellings of the same word are interchangeable.

    Args:
        previous_hash: Prior hash in the chain (0 for the first call)
        value: Input word contributing to the hash

    Returns:
        Updated hash as a signed 32-bit integer

    Example:
        >>> update_hash_value(0, 0)
        150996269
    """
    h = u32(previous_hash) ^ PRIME_1

    # Rotation amount depends on the hash, not on the value
    rotate_amount = h & 0x1F
    h = u32(h + (PRIME_2 ^ rotate_left_32(value, rotate_amount)))
    h = u32(h * PRIME_3)

    h ^= h >> SHIFT_1
    h = u32(h * PRIME_4)

    h ^= h >> SHIFT_2
    h = u32(h + (h >> SHIFT_3))
    h = u32(h * PRIME_5)

    h ^= h >> SHIFT_4
    h = u32(h * PRIME_6)

    return i32(h)
