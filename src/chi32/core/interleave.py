"""Cascading hash interleave: selector/index combination step.

Selector and index are coupled into two 64-bit pointers through an
anchor/offset scheme (NOT, AND, XOR, wrapping add/sub), split into four
32-bit lanes and folded through ``update_hash_value`` with a progressive
16-bit left-shift interleave. The 64-bit accumulator is finished with one
wrapping multiplication.
"""

from chi32.core.bits import MASK32, i32, i64, u32, u64
from chi32.core.hash_mix import update_hash_value

GOLDEN_RATIO_PRIME = 0x9E3779B97F4A7C55
FINAL_STEP_PRIME = 0x72A4EB92D796ED93

INTERLEAVE_SHIFT = 16
WRAP_AROUND_SHIFT = INTERLEAVE_SHIFT * 3


def split_lanes(x: int) -> tuple[int, int]:
    """Split a 64-bit word into (low, high) unsigned 32-bit lanes."""
    x = u64(x)
    return x & MASK32, x >> 32


def _mix_lane(accumulator: int, lane: int) -> int:
    # The mixer sees only the low 32 bits of the accumulator; its result is
    # zero-extended back into the 64-bit domain.
    return u32(update_hash_value(i32(accumulator), lane))


def apply_cascading_hash_interleave(selector: int, index: int) -> int:
    """Combine selector and index into a well-mixed 64-bit state.

    Args:
        selector: Stream selector (any int, reduced modulo 2^64)
        index: Position within the stream (any int, reduced modulo 2^64)

    Returns:
        Combined state as a signed 64-bit integer
    """
    primary_anchor = u64(selector)
    alternate_anchor = u64(u64(~selector) * GOLDEN_RATIO_PRIME)
    anchor_coupling_mask = primary_anchor & alternate_anchor

    primary_offset = u64(index)
    alternate_offset = u64(~index) ^ anchor_coupling_mask

    primary_pointer = u64(primary_anchor + primary_offset)
    alternate_pointer = u64(alternate_anchor - alternate_offset)

    primary_low, primary_high = split_lanes(primary_pointer)
    alternate_low, alternate_high = split_lanes(alternate_pointer)

    acc = _mix_lane(0, alternate_low)
    acc = _mix_lane(acc, alternate_high) ^ u64(acc << INTERLEAVE_SHIFT)
    acc = _mix_lane(acc, primary_high) ^ u64(acc << INTERLEAVE_SHIFT)
    acc = (
        _mix_lane(acc, primary_low)
        ^ u64(acc << INTERLEAVE_SHIFT)
        ^ (acc >> WRAP_AROUND_SHIFT)
    )

    return i64(acc * FINAL_STEP_PRIME)
