"""Statistical test-suite adapter.

Exposes CHI32 as a "next 32-bit value" source walking the (selector, index)
plane with one of the iteration strategies, and runs named batteries of
checks over it. The walk position is held by the source object, never in
module state.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from chi32.battery.checks import CHECKS, TestOutcome
from chi32.core.bits import i64
from chi32.errors import UnknownBatteryError
from chi32.strategies import Strategy, StrategyState, generate_values
from chi32.utils.logging import get_logger
from chi32.utils.timing import Timer

SUSPICIOUS_EPSILON = 1e-3

logger = get_logger("battery")


@dataclass(frozen=True)
class BatteryConfig:
    """A named set of checks run over one block of values.

    Attributes:
        name: Battery name used on the command line
        sample_size: Number of 32-bit values drawn from the source
        checks: Names of checks from ``CHECKS``
    """

    name: str
    sample_size: int
    checks: Tuple[str, ...]

    def __post_init__(self) -> None:
        """Validate parameters."""
        if self.sample_size < 2:
            raise ValueError(f"sample_size must be >= 2, got {self.sample_size}")
        unknown = [c for c in self.checks if c not in CHECKS]
        if unknown:
            raise ValueError(f"unknown checks {unknown}; available: {sorted(CHECKS)}")


BATTERIES: Dict[str, BatteryConfig] = {
    "quick": BatteryConfig("quick", 1 << 16, tuple(CHECKS)),
    "standard": BatteryConfig("standard", 1 << 20, tuple(CHECKS)),
}


def get_battery(name: str) -> BatteryConfig:
    try:
        return BATTERIES[name]
    except KeyError:
        raise UnknownBatteryError(
            f"Unknown battery name '{name}'. Available: {', '.join(BATTERIES)}"
        ) from None


class Chi32Source:
    """CHI32 behind a "produce next 32-bit value" interface.

    Args:
        seed: Seed (selector, or fixed index for the swapped strategy)
        phase: Phase (starting index, or starting selector for swapped)
        strategy: Strategy, name or code
    """

    def __init__(self, seed: int, phase: int, strategy=Strategy.SEQUENTIAL):
        self.seed = i64(seed)
        self.phase = i64(phase)
        self.state = StrategyState.start(strategy, self.seed, self.phase)

    @property
    def strategy(self) -> Strategy:
        return self.state.strategy

    @property
    def name(self) -> str:
        if self.strategy is Strategy.SWAPPED:
            return (
                f"CHI32 (Strategy={self.strategy}, "
                f"InitialSelector=0x{self.phase & 0xFFFFFFFFFFFFFFFF:016X}, "
                f"FixedIndex=0x{self.seed & 0xFFFFFFFFFFFFFFFF:016X})"
            )
        return (
            f"CHI32 (Strategy={self.strategy}, "
            f"Seed=0x{self.seed & 0xFFFFFFFFFFFFFFFF:016X}, "
            f"InitialPhase=0x{self.phase & 0xFFFFFFFFFFFFFFFF:016X})"
        )

    def next_u32(self) -> int:
        return self.state.next_u32()

    def __call__(self) -> int:
        return self.next_u32()

    def take(self, n: int) -> np.ndarray:
        """Draw the next n values as a uint32 array and advance the source."""
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        state = self.state
        if state.strategy is Strategy.SEQUENTIAL:
            values = generate_values(state.strategy, state.selector, state.index, n)
            state.index = i64(state.index + n)
        elif state.strategy is Strategy.SWAPPED:
            values = generate_values(state.strategy, state.index, state.selector, n)
            state.selector = i64(state.selector - n)
        else:
            values = np.fromiter((state.next_u32() for _ in range(n)), dtype=np.uint32, count=n)
        return values


@dataclass
class BatteryReport:
    """Outcome of a battery run."""

    battery: str
    generator: str
    outcomes: List[TestOutcome] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def suspicious(self) -> List[TestOutcome]:
        return [o for o in self.outcomes if o.is_suspicious(SUSPICIOUS_EPSILON)]

    @property
    def passed(self) -> bool:
        return bool(self.outcomes) and not self.suspicious

    def summary_lines(self) -> List[str]:
        lines = [f"Battery {self.battery} on {self.generator}"]
        for outcome in self.outcomes:
            flag = "  <-- suspicious" if outcome.is_suspicious(SUSPICIOUS_EPSILON) else ""
            lines.append(
                f"  {outcome.name:<22} stat={outcome.statistic:12.4f}  p={outcome.p_value:.4f}{flag}"
            )
        if self.suspicious:
            lines.append(f"  {len(self.suspicious)} test(s) outside [{SUSPICIOUS_EPSILON}, {1 - SUSPICIOUS_EPSILON}]")
        else:
            lines.append("  All tests were passed")
        return lines


def run_battery(
    battery_name: str,
    seed: int,
    phase: int,
    strategy="sequential",
    sample_size: Optional[int] = None,
    progress: Optional[Callable[[str], None]] = None,
) -> BatteryReport:
    """Run a named battery against a CHI32 source.

    Args:
        battery_name: Registered battery name
        seed: Seed argument
        phase: Phase argument
        strategy: Strategy, name or code
        sample_size: Override the battery's sample size
        progress: Optional callable receiving progress lines

    Returns:
        BatteryReport with one outcome per check

    Raises:
        UnknownBatteryError: If the battery is not registered
        UnknownStrategyError: If the strategy is not recognized
    """
    cfg = get_battery(battery_name)
    source = Chi32Source(seed, phase, Strategy.coerce(strategy))
    n = cfg.sample_size if sample_size is None else sample_size
    if n < 2:
        raise ValueError(f"sample_size must be >= 2, got {n}")

    report = BatteryReport(battery=cfg.name, generator=source.name)
    logger.info(f"Running battery {cfg.name} ({n} values) on {source.name}")

    with Timer(f"Battery {cfg.name}", report=progress) as t:
        values = source.take(n)
        for check_name in cfg.checks:
            outcome = CHECKS[check_name](values)
            report.outcomes.append(outcome)
            logger.info(f"{check_name}: p={outcome.p_value:.4f}")
    report.elapsed = t.elapsed
    return report
