"""Statistical checks over blocks of 32-bit outputs.

Each check takes a uint32 array and returns a ``TestOutcome`` carrying the
test statistic and a two-sided-safe p-value. Under the null hypothesis of
uniform independent bits every p-value is uniform on [0, 1].
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict

import numpy as np
from scipy import stats


@dataclass(frozen=True)
class TestOutcome:
    """Result of one statistical check."""

    __test__ = False  # not a pytest class

    name: str
    statistic: float
    p_value: float
    samples: int

    def is_suspicious(self, epsilon: float = 1e-3) -> bool:
        """p-value outside [epsilon, 1 - epsilon]."""
        return self.p_value < epsilon or self.p_value > 1.0 - epsilon


def _as_u32(values: np.ndarray) -> np.ndarray:
    arr = np.ascontiguousarray(values, dtype=np.uint32)
    if arr.ndim != 1:
        raise ValueError(f"expected a 1-D array of values, got shape {arr.shape}")
    if arr.size < 2:
        raise ValueError("at least two values are required")
    return arr


def _bits(values: np.ndarray) -> np.ndarray:
    # Little-endian byte order so bit positions are stable across platforms
    return np.unpackbits(values.astype("<u4").view(np.uint8), bitorder="little")


def _chi_square(observed: np.ndarray, expected: float) -> tuple:
    chi2 = float(np.sum((observed - expected) ** 2) / expected)
    df = observed.size - 1
    return chi2, float(stats.chi2.sf(chi2, df))


def monobit_frequency(values: np.ndarray) -> TestOutcome:
    """Proportion of one bits over the whole block (NIST frequency test)."""
    arr = _as_u32(values)
    bits = _bits(arr)
    n = bits.size
    s = 2.0 * float(bits.sum()) - n
    statistic = abs(s) / math.sqrt(n)
    p_value = math.erfc(statistic / math.sqrt(2.0))
    return TestOutcome("monobit_frequency", statistic, p_value, int(arr.size))


def bit_position_balance(values: np.ndarray) -> TestOutcome:
    """Balance of each of the 32 bit positions, combined as a chi-square."""
    arr = _as_u32(values)
    n = arr.size
    ones = np.array(
        [np.count_nonzero(arr & np.uint32(1 << bit)) for bit in range(32)],
        dtype=np.float64,
    )
    # Each position contributes z^2 with z = (2 * ones - n) / sqrt(n)
    statistic = float(np.sum((2.0 * ones - n) ** 2) / n)
    p_value = float(stats.chi2.sf(statistic, 32))
    return TestOutcome("bit_position_balance", statistic, p_value, int(n))


def byte_distribution(values: np.ndarray) -> TestOutcome:
    """Chi-square of the 256 byte values over all four bytes of each word."""
    arr = _as_u32(values)
    counts = np.bincount(arr.astype("<u4").view(np.uint8), minlength=256).astype(np.float64)
    statistic, p_value = _chi_square(counts, counts.sum() / 256.0)
    return TestOutcome("byte_distribution", statistic, p_value, int(arr.size))


def runs(values: np.ndarray) -> TestOutcome:
    """Number of uninterrupted runs in the bit stream (NIST runs test)."""
    arr = _as_u32(values)
    bits = _bits(arr).astype(np.int8)
    n = bits.size
    pi = float(bits.sum()) / n
    if abs(pi - 0.5) >= 2.0 / math.sqrt(n):
        # Frequency prerequisite failed, the runs statistic is meaningless
        return TestOutcome("runs", float("inf"), 0.0, int(arr.size))
    v_obs = 1 + int(np.count_nonzero(bits[1:] != bits[:-1]))
    expected = 2.0 * n * pi * (1.0 - pi)
    statistic = abs(v_obs - expected) / (2.0 * math.sqrt(2.0 * n) * pi * (1.0 - pi))
    p_value = math.erfc(statistic)
    return TestOutcome("runs", statistic, p_value, int(arr.size))


def serial_pairs(values: np.ndarray, bits_per_value: int = 4) -> TestOutcome:
    """Chi-square over non-overlapping pairs of the top bits of consecutive values."""
    arr = _as_u32(values)
    if not 1 <= bits_per_value <= 8:
        raise ValueError(f"bits_per_value must be in [1, 8], got {bits_per_value}")
    shift = np.uint32(32 - bits_per_value)
    pairs = arr.size // 2
    first = (arr[0 : 2 * pairs : 2] >> shift).astype(np.int64)
    second = (arr[1 : 2 * pairs : 2] >> shift).astype(np.int64)
    cells = 1 << (2 * bits_per_value)
    counts = np.bincount((first << bits_per_value) | second, minlength=cells).astype(np.float64)
    statistic, p_value = _chi_square(counts, pairs / cells)
    return TestOutcome("serial_pairs", statistic, p_value, int(arr.size))


def top_byte_uniformity(values: np.ndarray) -> TestOutcome:
    """Chi-square of the most significant byte of each value."""
    arr = _as_u32(values)
    counts = np.bincount((arr >> np.uint32(24)).astype(np.int64), minlength=256).astype(np.float64)
    statistic, p_value = _chi_square(counts, arr.size / 256.0)
    return TestOutcome("top_byte_uniformity", statistic, p_value, int(arr.size))


CHECKS: Dict[str, Callable[[np.ndarray], TestOutcome]] = {
    "monobit_frequency": monobit_frequency,
    "bit_position_balance": bit_position_balance,
    "byte_distribution": byte_distribution,
    "runs": runs,
    "serial_pairs": serial_pairs,
    "top_byte_uniformity": top_byte_uniformity,
}
