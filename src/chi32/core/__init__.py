"""CHI32 core: scalar pipeline and its vectorized torch twin."""

from .bits import MASK32, MASK64, i32, i64, rotate_left_32, rotate_left_64, u32, u64
from .derive import derive_u32_at, derive_value_at, extraction_offset
from .hash_mix import update_hash_value
from .interleave import apply_cascading_hash_interleave
from .tensor import (
    apply_cascading_hash_interleave_tensor,
    derive_values_tensor,
    update_hash_value_tensor,
)

__all__ = [
    "derive_value_at",
    "derive_u32_at",
    "extraction_offset",
    "apply_cascading_hash_interleave",
    "update_hash_value",
    "derive_values_tensor",
    "apply_cascading_hash_interleave_tensor",
    "update_hash_value_tensor",
    "rotate_left_32",
    "rotate_left_64",
    "u32",
    "u64",
    "i32",
    "i64",
    "MASK32",
    "MASK64",
]
