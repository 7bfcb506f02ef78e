"""Vectorized CHI32 over torch tensors.

Bit-exact twin of the scalar pipeline in ``hash_mix``, ``interleave`` and
``derive``. Every 64-bit quantity is carried as a pair of 32-bit lanes
``(hi, lo)`` stored in int64 tensors, so each intermediate stays below 2^63
and no operation relies on signed-overflow behaviour of the backend.
Multiplications by 32-bit constants are split into 16-bit halves for the
same reason.
"""

import numbers
from typing import Iterable, Tuple, Union

import torch

from chi32.core.bits import MASK32, i64
from chi32.core.hash_mix import (
    PRIME_1,
    PRIME_2,
    PRIME_3,
    PRIME_4,
    PRIME_5,
    PRIME_6,
    SHIFT_1,
    SHIFT_2,
    SHIFT_3,
    SHIFT_4,
)
from chi32.core.interleave import FINAL_STEP_PRIME, GOLDEN_RATIO_PRIME, INTERLEAVE_SHIFT

Lanes = Tuple[torch.Tensor, torch.Tensor]

MASK16 = 0xFFFF


def as_int64_tensor(
    values: Union[int, Iterable[int], torch.Tensor],
    device: Union[str, torch.device, None] = None,
) -> torch.Tensor:
    """Convert ints (any size) or a tensor to an int64 tensor of bit patterns.

    Python ints are reduced modulo 2^64 and stored with their signed 64-bit
    spelling so that values >= 2^63 survive the conversion.
    """
    if isinstance(values, torch.Tensor):
        if values.dtype != torch.long:
            raise TypeError(f"expected torch.long tensor, got {values.dtype}")
        return values if device is None else values.to(device)
    if isinstance(values, numbers.Integral):
        return torch.tensor(i64(int(values)), dtype=torch.long, device=device)
    return torch.tensor([i64(int(v)) for v in values], dtype=torch.long, device=device)


def split_lanes_tensor(x: torch.Tensor) -> Lanes:
    """Split int64 bit patterns into (hi, lo) unsigned 32-bit lanes."""
    return (x >> 32) & MASK32, x & MASK32


def _mul32(a: torch.Tensor, c: int) -> torch.Tensor:
    """(a * c) mod 2^32 for a 32-bit lane and a 32-bit constant."""
    c_lo = c & MASK16
    c_hi = c >> 16
    return (a * c_lo + (((a * c_hi) & MASK16) << 16)) & MASK32


def _mul32_wide(a: torch.Tensor, c: int) -> Lanes:
    """Full 64-bit product of a 32-bit lane and a 32-bit constant."""
    c_lo = c & MASK16
    c_hi = c >> 16
    t0 = a * c_lo
    t1 = a * c_hi
    partial = t0 + ((t1 & MASK16) << 16)
    hi = ((t1 >> 16) + (partial >> 32)) & MASK32
    return hi, partial & MASK32


def _mul64(x: Lanes, c: int) -> Lanes:
    """(x * c) mod 2^64 for lane pair x and a 64-bit constant."""
    x_hi, x_lo = x
    c_hi = (c >> 32) & MASK32
    c_lo = c & MASK32
    p_hi, p_lo = _mul32_wide(x_lo, c_lo)
    hi = (p_hi + _mul32(x_hi, c_lo) + _mul32(x_lo, c_hi)) & MASK32
    return hi, p_lo


def _add64(a: Lanes, b: Lanes) -> Lanes:
    lo = a[1] + b[1]
    hi = (a[0] + b[0] + (lo >> 32)) & MASK32
    return hi, lo & MASK32


def _sub64(a: Lanes, b: Lanes) -> Lanes:
    lo = a[1] - b[1]
    borrow = (lo < 0).to(lo.dtype)
    hi = (a[0] - b[0] - borrow) & MASK32
    return hi, lo & MASK32


def _shl64(x: Lanes, k: int) -> Lanes:
    # k in (0, 32)
    hi, lo = x
    return ((hi << k) | (lo >> (32 - k))) & MASK32, (lo << k) & MASK32


def _rotate_left_32(x: torch.Tensor, k: torch.Tensor) -> torch.Tensor:
    # k in [0, 31]; x >> 32 is zero for a 32-bit lane
    return ((x << k) | (x >> (32 - k))) & MASK32


def update_hash_value_tensor(previous_hash: torch.Tensor, value: torch.Tensor) -> torch.Tensor:
    """Vectorized ``update_hash_value`` over unsigned 32-bit lanes.

    Args:
        previous_hash: Lane tensor of prior hashes (values in [0, 2^32))
        value: Lane tensor of input words (values in [0, 2^32))

    Returns:
        Lane tensor of updated hashes (unsigned view)
    """
    h = (previous_hash & MASK32) ^ PRIME_1
    rotate_amount = h & 0x1F
    h = (h + (PRIME_2 ^ _rotate_left_32(value & MASK32, rotate_amount))) & MASK32
    h = _mul32(h, PRIME_3)

    h = h ^ (h >> SHIFT_1)
    h = _mul32(h, PRIME_4)

    h = h ^ (h >> SHIFT_2)
    h = (h + (h >> SHIFT_3)) & MASK32
    h = _mul32(h, PRIME_5)

    h = h ^ (h >> SHIFT_4)
    return _mul32(h, PRIME_6)


def apply_cascading_hash_interleave_tensor(
    selectors: torch.Tensor, indices: torch.Tensor
) -> Lanes:
    """Vectorized ``apply_cascading_hash_interleave``.

    Args:
        selectors: int64 tensor of selectors
        indices: int64 tensor of indices (broadcastable against selectors)

    Returns:
        (hi, lo) lane tensors of the combined 64-bit state
    """
    selectors, indices = torch.broadcast_tensors(selectors, indices)

    primary_anchor = split_lanes_tensor(selectors)
    not_selector = (primary_anchor[0] ^ MASK32, primary_anchor[1] ^ MASK32)
    alternate_anchor = _mul64(not_selector, GOLDEN_RATIO_PRIME)
    coupling_mask = (
        primary_anchor[0] & alternate_anchor[0],
        primary_anchor[1] & alternate_anchor[1],
    )

    primary_offset = split_lanes_tensor(indices)
    alternate_offset = (
        primary_offset[0] ^ MASK32 ^ coupling_mask[0],
        primary_offset[1] ^ MASK32 ^ coupling_mask[1],
    )

    primary_high, primary_low = _add64(primary_anchor, primary_offset)
    alternate_high, alternate_low = _sub64(alternate_anchor, alternate_offset)

    zero = torch.zeros_like(primary_low)

    acc = (zero, update_hash_value_tensor(zero, alternate_low))

    shifted = _shl64(acc, INTERLEAVE_SHIFT)
    acc = (shifted[0], shifted[1] ^ update_hash_value_tensor(acc[1], alternate_high))

    shifted = _shl64(acc, INTERLEAVE_SHIFT)
    acc = (shifted[0], shifted[1] ^ update_hash_value_tensor(acc[1], primary_high))

    # acc >> 48 keeps only the top 16 bits of the high lane
    shifted = _shl64(acc, INTERLEAVE_SHIFT)
    wrapped = acc[0] >> INTERLEAVE_SHIFT
    acc = (
        shifted[0],
        shifted[1] ^ update_hash_value_tensor(acc[1], primary_low) ^ wrapped,
    )

    return _mul64(acc, FINAL_STEP_PRIME)


def derive_values_tensor(
    selectors: Union[int, Iterable[int], torch.Tensor],
    indices: Union[int, Iterable[int], torch.Tensor],
    device: Union[str, torch.device, None] = None,
) -> torch.Tensor:
    """Vectorized ``derive_value_at``.

    Element i of the result equals ``derive_u32_at(selectors[i], indices[i])``
    after broadcasting.

    Args:
        selectors: Selectors as an int64 tensor or ints
        indices: Indices as an int64 tensor or ints
        device: Target device for non-tensor inputs

    Returns:
        int64 tensor of unsigned 32-bit outputs
    """
    selectors = as_int64_tensor(selectors, device)
    indices = as_int64_tensor(indices, selectors.device)

    hi, lo = apply_cascading_hash_interleave_tensor(selectors, indices)

    mid = ((hi << 3) | (lo >> 29)) & MASK32
    high = hi >> 26
    offset = (lo ^ mid ^ high) & 0x3F

    # Rotating by 32 or more swaps the lanes first
    swap = offset >= 32
    rot_hi = torch.where(swap, lo, hi)
    rot_lo = torch.where(swap, hi, lo)
    k = offset & 0x1F

    return ((rot_lo << k) | (rot_hi >> (32 - k))) & MASK32
