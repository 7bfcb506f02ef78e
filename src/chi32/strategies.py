"""Iteration strategies over the (selector, index) plane.

CHI32 itself is stateless. Harnesses that need a stream of values walk the
(selector, index) plane with one of three strategies and keep their position
in an explicit ``StrategyState`` they own:

- sequential: selector fixed to the seed, index starts at the phase and
  increments
- swapped: index fixed to the seed, selector starts at the phase and
  decrements
- feedback: both coordinates are re-derived from the previous pair and
  its output
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple

import numpy as np

from chi32.core.bits import MASK32, i64, u32, u64
from chi32.core.derive import derive_value_at
from chi32.core.tensor import as_int64_tensor, derive_values_tensor
from chi32.errors import UnknownStrategyError


class Strategy(Enum):
    """Iteration strategy with its metadata code and command-line name."""

    SEQUENTIAL = (0, "sequential")
    SWAPPED = (1, "swapped")
    FEEDBACK = (2, "feedback")

    def __init__(self, code: int, label: str):
        self.code = code
        self.label = label

    @classmethod
    def from_code(cls, code: int) -> "Strategy":
        for strategy in cls:
            if strategy.code == code:
                return strategy
        raise UnknownStrategyError(
            f"Invalid strategy code {code}. Available: 0=sequential, 1=swapped, 2=feedback."
        )

    @classmethod
    def from_name(cls, name: str) -> "Strategy":
        key = name.strip().lower() if isinstance(name, str) else name
        for strategy in cls:
            if strategy.label == key:
                return strategy
        raise UnknownStrategyError(
            f"Invalid strategy_name '{name}'. Available: sequential, swapped, feedback."
        )

    @classmethod
    def coerce(cls, value) -> "Strategy":
        """Accept a Strategy, its name or its code."""
        if isinstance(value, Strategy):
            return value
        if isinstance(value, str):
            return cls.from_name(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return cls.from_code(value)
        raise UnknownStrategyError(f"Cannot interpret {value!r} as a strategy")

    def __str__(self) -> str:
        return self.label


def feedback_step(selector: int, index: int, output: int) -> Tuple[int, int]:
    """Advance a feedback chain by one step.

    new_selector = (selector << 32) | (index >> 32)
    new_index    = (index << 32) | zero_extended(output)

    All as unsigned 64-bit, returned with their signed 64-bit spelling.
    """
    prev_selector = u64(selector)
    prev_index = u64(index)
    new_selector = u64(prev_selector << 32) | (prev_index >> 32)
    new_index = u64(prev_index << 32) | u32(output)
    return i64(new_selector), i64(new_index)


@dataclass
class StrategyState:
    """Current (selector, index) position of a strategy walk.

    Attributes:
        strategy: Iteration strategy
        selector: Selector used for the next value (signed 64-bit)
        index: Index used for the next value (signed 64-bit)
    """

    strategy: Strategy
    selector: int
    index: int

    def __post_init__(self) -> None:
        self.strategy = Strategy.coerce(self.strategy)
        self.selector = i64(self.selector)
        self.index = i64(self.index)

    @classmethod
    def start(cls, strategy, seed: int, phase: int) -> "StrategyState":
        """Initial position for a strategy given a seed and a phase.

        For the swapped strategy the seed is the fixed index and the phase is
        the initial selector.
        """
        strategy = Strategy.coerce(strategy)
        if strategy is Strategy.SWAPPED:
            return cls(strategy, selector=phase, index=seed)
        return cls(strategy, selector=seed, index=phase)

    def peek_u32(self) -> int:
        """Value at the current position without advancing."""
        return derive_value_at(self.selector, self.index) & MASK32

    def next_u32(self) -> int:
        """Return the value at the current position and advance.

        Returns:
            Unsigned 32-bit value
        """
        value = self.peek_u32()
        if self.strategy is Strategy.SEQUENTIAL:
            self.index = i64(self.index + 1)
        elif self.strategy is Strategy.SWAPPED:
            self.selector = i64(self.selector - 1)
        else:
            self.selector, self.index = feedback_step(self.selector, self.index, value)
        return value


def iter_values(
    strategy, seed: int, phase: int, length: Optional[int] = None
) -> Iterator[int]:
    """Yield unsigned 32-bit values of a strategy walk.

    Args:
        strategy: Strategy, name or code
        seed: Seed (selector for sequential/feedback, fixed index for swapped)
        phase: Phase (starting index, or starting selector for swapped)
        length: Number of values, or None for an endless stream

    Yields:
        Unsigned 32-bit values
    """
    if length is not None and length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    state = StrategyState.start(strategy, seed, phase)
    produced = 0
    while length is None or produced < length:
        yield state.next_u32()
        produced += 1


def generate_values(strategy, seed: int, phase: int, length: int) -> np.ndarray:
    """Collect ``length`` values of a strategy walk into a uint32 array.

    Sequential and swapped walks have no data dependency between steps and
    are computed in one batch with ``derive_values_tensor``; feedback walks
    are inherently serial.
    """
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    strategy = Strategy.coerce(strategy)
    if length == 0:
        return np.empty(0, dtype=np.uint32)

    if strategy is Strategy.FEEDBACK:
        values = np.empty(length, dtype=np.uint32)
        state = StrategyState.start(strategy, seed, phase)
        for i in range(length):
            values[i] = state.next_u32()
        return values

    # Coordinates wrap modulo 2^64, so they are built as Python ints
    if strategy is Strategy.SEQUENTIAL:
        selectors = seed
        indices = [phase + i for i in range(length)]
    else:
        selectors = [phase - i for i in range(length)]
        indices = seed
    out = derive_values_tensor(as_int64_tensor(selectors), as_int64_tensor(indices))
    return out.cpu().numpy().astype(np.uint32)
