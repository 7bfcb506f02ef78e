"""Extraction step and public entry point of CHI32.

The combined 64-bit state is rotated by a state-dependent amount and then
truncated through a 32-bit window. The rotation amount XOR-folds three
overlapping windows of the state (bits [0:32), [29:61) and [58:64)).
"""

from chi32.core.bits import MASK32, i32, rotate_left_64, u32, u64
from chi32.core.interleave import apply_cascading_hash_interleave

MID_WINDOW_SHIFT = 29
HIGH_WINDOW_SHIFT = 58
OFFSET_MASK = 0x3F


def extraction_offset(state: int) -> int:
    """Compute the rotation amount for a combined state.

    Args:
        state: Combined 64-bit state (signed or unsigned spelling)

    Returns:
        Rotation amount in [0, 63]
    """
    state = u64(state)
    low = state & MASK32
    mid = u32(state >> MID_WINDOW_SHIFT)
    high = u32(state >> HIGH_WINDOW_SHIFT)
    return (low ^ mid ^ high) & OFFSET_MASK


def derive_value_at(selector: int, index: int) -> int:
    """Derive the pseudo-random value at (selector, index).

    Pure and total: any pair of 64-bit integers (and any Python int, reduced
    modulo 2^64) maps to the same output on every run and platform.

    Args:
        selector: Stream selector
        index: Position within the stream

    Returns:
        Signed 32-bit pseudo-random value

    Example:
        >>> hex(derive_value_at(0, 0) & 0xFFFFFFFF)
        '0x52dd0945'
    """
    state = u64(apply_cascading_hash_interleave(selector, index))
    rotated = rotate_left_64(state, extraction_offset(state))
    return i32(rotated)


def derive_u32_at(selector: int, index: int) -> int:
    """Same as derive_value_at, viewed as an unsigned 32-bit value."""
    return u32(derive_value_at(selector, index))
