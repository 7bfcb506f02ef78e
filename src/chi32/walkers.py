"""Random-walk bias visualization.

A walker starts at the origin and takes one unit step per 32-bit sample in
the direction given by the sample's top two bits. Visit counts are binned on
a square grid centered on the origin. A biased generator shows up as drift,
streaks or lattice patterns in the heatmap; an unbiased one gives a diffuse
isotropic blob.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence, Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import LogNorm

from chi32.battery.adapter import Chi32Source
from chi32.core.bits import u64
from chi32.strategies import Strategy
from chi32.utils.logging import get_logger

DEFAULT_SEED = 0x88B66D918A3B2AD9
DEFAULT_STEPS = 4_000_000
DEFAULT_GRID_BITS = 10
DEFAULT_SCALE_SHIFT = 3
CHUNK_STEPS = 1 << 20

SPLITMIX64_GAMMA = 0x9E3779B97F4A7C15
SPLITMIX64_MUL_1 = 0xBF58476D1CE4E5B9
SPLITMIX64_MUL_2 = 0x94D049BB133111EB

logger = get_logger("walkers")


class Chi32DirectionSource:
    """Directions from CHI32 walked sequentially from phase 0."""

    def __init__(self, seed: int = DEFAULT_SEED):
        self.name = "chi32"
        self._source = Chi32Source(seed, 0, Strategy.SEQUENTIAL)

    def take(self, n: int) -> np.ndarray:
        return (self._source.take(n) >> np.uint32(30)).astype(np.int8)


class SplitMix64DirectionSource:
    """Directions from SplitMix64, used as a baseline.

    The i-th state is ``seed + i * gamma`` so a whole chunk is computed at
    once; uint64 array arithmetic wraps modulo 2^64.
    """

    def __init__(self, seed: int = DEFAULT_SEED):
        self.name = "splitmix64"
        self.state = u64(seed)

    def take(self, n: int) -> np.ndarray:
        steps = np.arange(1, n + 1, dtype=np.uint64)
        z = np.uint64(self.state) + steps * np.uint64(SPLITMIX64_GAMMA)
        self.state = u64(self.state + n * SPLITMIX64_GAMMA)
        z = (z ^ (z >> np.uint64(30))) * np.uint64(SPLITMIX64_MUL_1)
        z = (z ^ (z >> np.uint64(27))) * np.uint64(SPLITMIX64_MUL_2)
        z = z ^ (z >> np.uint64(31))
        low = (z & np.uint64(0xFFFFFFFF)).astype(np.uint32)
        return (low >> np.uint32(30)).astype(np.int8)


DIRECTION_SOURCES = {
    "chi32": Chi32DirectionSource,
    "splitmix64": SplitMix64DirectionSource,
}


@dataclass
class WalkerResult:
    """Visit counts of one walk.

    Attributes:
        name: Direction source name
        steps: Number of steps taken
        counts: (2^grid_bits, 2^grid_bits) int64 array indexed [y, x]
        final_position: Walker position after the last step
        scale_shift: Right shift applied to positions before binning
    """

    name: str
    steps: int
    counts: np.ndarray
    final_position: tuple
    scale_shift: int

    @property
    def visited_cells(self) -> int:
        return int(np.count_nonzero(self.counts))


def direction_deltas(directions: np.ndarray):
    """Map directions 0..3 to unit moves.

    0 -> +x, 1 -> -x, 2 -> +y, 3 -> -y.
    """
    d = directions.astype(np.int64)
    delta = 1 - ((d & 1) << 1)
    affects_y = (d >> 1) & 1
    return delta * (1 - affects_y), delta * affects_y


def run_walker(
    source,
    steps: int = DEFAULT_STEPS,
    grid_bits: int = DEFAULT_GRID_BITS,
    scale_shift: int = DEFAULT_SCALE_SHIFT,
) -> WalkerResult:
    """Run one walker and bin its visits.

    Args:
        source: Object with ``name`` and ``take(n)`` returning directions 0..3
        steps: Number of steps
        grid_bits: Grid side is 2^grid_bits cells
        scale_shift: Positions are shifted right by this before binning

    Returns:
        WalkerResult with visit counts
    """
    if steps < 0:
        raise ValueError(f"steps must be non-negative, got {steps}")
    if not 1 <= grid_bits <= 14:
        raise ValueError(f"grid_bits must be in [1, 14], got {grid_bits}")
    if scale_shift < 0:
        raise ValueError(f"scale_shift must be non-negative, got {scale_shift}")

    size = 1 << grid_bits
    half = size // 2
    counts = np.zeros(size * size, dtype=np.int64)
    x0, y0 = 0, 0

    done = 0
    while done < steps:
        n = min(CHUNK_STEPS, steps - done)
        dx, dy = direction_deltas(source.take(n))
        xs = x0 + np.cumsum(dx)
        ys = y0 + np.cumsum(dy)
        x0, y0 = int(xs[-1]), int(ys[-1])

        # Arithmetic shift floors negative positions like the integer walker
        gx = (xs >> scale_shift) + half
        gy = (ys >> scale_shift) + half
        inside = (gx >= 0) & (gx < size) & (gy >= 0) & (gy < size)
        cells = (gy[inside] << grid_bits) | gx[inside]
        counts += np.bincount(cells, minlength=size * size)
        done += n

    logger.info(f"Walker {source.name}: {steps} steps, final position ({x0}, {y0})")
    return WalkerResult(
        name=source.name,
        steps=steps,
        counts=counts.reshape(size, size),
        final_position=(x0, y0),
        scale_shift=scale_shift,
    )


def run_walkers(
    names: Sequence[str] = tuple(DIRECTION_SOURCES),
    seed: int = DEFAULT_SEED,
    steps: int = DEFAULT_STEPS,
    grid_bits: int = DEFAULT_GRID_BITS,
    scale_shift: int = DEFAULT_SCALE_SHIFT,
) -> List[WalkerResult]:
    """Run one walker per named direction source with a shared seed."""
    unknown = [n for n in names if n not in DIRECTION_SOURCES]
    if unknown:
        raise ValueError(f"unknown direction sources {unknown}; available: {sorted(DIRECTION_SOURCES)}")
    return [
        run_walker(DIRECTION_SOURCES[name](seed), steps, grid_bits, scale_shift)
        for name in names
    ]


def save_heatmap(results: Sequence[WalkerResult], path: Union[str, Path]) -> Path:
    """Render walker heatmaps side by side.

    Args:
        results: Walker results to plot
        path: Output image path; the format follows the suffix

    Returns:
        Path written
    """
    if not results:
        raise ValueError("no walker results to plot")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, axes = plt.subplots(1, len(results), figsize=(5 * len(results), 5), squeeze=False)
    for ax, result in zip(axes[0], results):
        counts = np.ma.masked_equal(result.counts, 0)
        size = result.counts.shape[0]
        if counts.count():
            ax.imshow(counts, origin="lower", cmap="magma", norm=LogNorm(vmin=1, vmax=counts.max()))
        ax.axhline(size // 2, color="white", linewidth=0.5, alpha=0.5)
        ax.axvline(size // 2, color="white", linewidth=0.5, alpha=0.5)
        ax.set_facecolor("#051f39")
        ax.set_title(f"{result.name} ({result.steps:,} steps)")
        ax.set_xticks([])
        ax.set_yticks([])

    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    logger.info(f"Saved walker heatmap to {path}")
    return path


def summarize(results: Sequence[WalkerResult]) -> Dict[str, dict]:
    """Per-source summary suitable for logging or JSON."""
    return {
        r.name: {
            "steps": r.steps,
            "final_position": list(r.final_position),
            "visited_cells": r.visited_cells,
        }
        for r in results
    }
