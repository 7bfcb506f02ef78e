"""CHI32: Cascading Hash Interleave 32-bit, a stateless random-access PRNG."""

from .config import load_config
from .core import (
    apply_cascading_hash_interleave,
    apply_cascading_hash_interleave_tensor,
    derive_u32_at,
    derive_value_at,
    derive_values_tensor,
    update_hash_value,
)
from .errors import (
    Chi32Error,
    MetadataError,
    ReferenceDataError,
    UnknownBatteryError,
    UnknownStrategyError,
)
from .strategies import Strategy, StrategyState, feedback_step, generate_values, iter_values
from .utils import Timer, get_logger, parse_int64

__version__ = "0.1.0"

__all__ = [
    # Core pipeline
    "derive_value_at",
    "derive_u32_at",
    "apply_cascading_hash_interleave",
    "update_hash_value",
    # Vectorized
    "derive_values_tensor",
    "apply_cascading_hash_interleave_tensor",
    # Strategies
    "Strategy",
    "StrategyState",
    "feedback_step",
    "iter_values",
    "generate_values",
    # Errors
    "Chi32Error",
    "MetadataError",
    "ReferenceDataError",
    "UnknownStrategyError",
    "UnknownBatteryError",
    # Utils
    "get_logger",
    "Timer",
    "parse_int64",
    "load_config",
]
