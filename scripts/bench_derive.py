#!/usr/bin/env python3
"""Micro-benchmark for CHI32 derivation throughput.

Measures the scalar reference path (derive_value_at), the batched tensor path
(derive_values_tensor) and the feedback strategy on CPU and, when available,
CUDA. Not part of unit test suite.
"""

import random
import sys
import time
from pathlib import Path
from typing import Any, Dict

# Add src to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

import torch

from chi32.core import derive_value_at, derive_values_tensor
from chi32.core.tensor import as_int64_tensor
from chi32.strategies import generate_values
from chi32.utils import values_per_second


def benchmark_scalar(pairs: list[tuple[int, int]], num_warmup: int = 100) -> Dict[str, Any]:
    """Benchmark derive_value_at() one pair at a time."""
    for selector, index in pairs[:num_warmup]:
        _ = derive_value_at(selector, index)

    start = time.perf_counter()
    for selector, index in pairs:
        _ = derive_value_at(selector, index)
    elapsed = time.perf_counter() - start

    return {
        "method": "derive_value_at()",
        "device": "python",
        "values": len(pairs),
        "total_sec": elapsed,
        "avg_usec": (elapsed / len(pairs)) * 1e6,
        "values_per_sec": values_per_second(len(pairs), elapsed),
    }


def benchmark_tensor(
    selectors: torch.Tensor, indices: torch.Tensor, device: torch.device, repeats: int = 5
) -> Dict[str, Any]:
    """Benchmark derive_values_tensor() over one batch."""
    selectors = selectors.to(device)
    indices = indices.to(device)
    _ = derive_values_tensor(selectors, indices)

    if device.type == "cuda":
        torch.cuda.synchronize()

    start = time.perf_counter()
    for _ in range(repeats):
        _ = derive_values_tensor(selectors, indices)
    if device.type == "cuda":
        torch.cuda.synchronize()
    elapsed = (time.perf_counter() - start) / repeats

    n = selectors.numel()
    return {
        "method": "derive_values_tensor()",
        "device": str(device),
        "values": n,
        "total_sec": elapsed,
        "avg_usec": (elapsed / n) * 1e6,
        "values_per_sec": values_per_second(n, elapsed),
    }


def benchmark_feedback(length: int) -> Dict[str, Any]:
    """Benchmark the serial feedback walk."""
    start = time.perf_counter()
    _ = generate_values("feedback", 0, 0, length)
    elapsed = time.perf_counter() - start
    return {
        "method": "generate_values(feedback)",
        "device": "python",
        "values": length,
        "total_sec": elapsed,
        "avg_usec": (elapsed / length) * 1e6,
        "values_per_sec": values_per_second(length, elapsed),
    }


def main():
    """Run derivation benchmarks."""
    random.seed(42)

    scalar_count = 50_000
    batch_count = 1 << 20

    pairs = [(random.getrandbits(64), random.getrandbits(64)) for _ in range(scalar_count)]
    selectors = as_int64_tensor([random.getrandbits(64) for _ in range(batch_count)])
    indices = torch.arange(batch_count, dtype=torch.long)

    results = [benchmark_scalar(pairs), benchmark_feedback(scalar_count)]

    devices = [torch.device("cpu")]
    if torch.cuda.is_available():
        devices.append(torch.device("cuda"))
    for device in devices:
        print(f"Benchmarking tensor path on {device}...")
        results.append(benchmark_tensor(selectors, indices, device))

    print()
    print(f"{'method':<28} {'device':<8} {'values':>10} {'avg_usec':>10} {'values/sec':>14}")
    for r in results:
        print(
            f"{r['method']:<28} {r['device']:<8} {r['values']:>10,} "
            f"{r['avg_usec']:>10.3f} {r['values_per_sec']:>14,.0f}"
        )


if __name__ == "__main__":
    main()
