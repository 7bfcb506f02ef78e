"""Timing utilities."""

import time
from typing import Callable, Optional


class Timer:
    """Context manager for timing code blocks."""

    def __init__(self, name: str = "Operation", report: Optional[Callable[[str], None]] = None):
        """
        Initialize timer.

        Args:
            name: Name/description of the operation being timed
            report: Callable receiving the summary line on exit (e.g. logger.info).
                    Nothing is reported when None.
        """
        self.name = name
        self.report = report
        self.start_time: Optional[float] = None
        self.elapsed_time: Optional[float] = None

    def __enter__(self) -> "Timer":
        """Start timing."""
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Stop timing and record elapsed time."""
        if self.start_time is not None:
            self.elapsed_time = time.perf_counter() - self.start_time
            if self.report is not None:
                self.report(f"{self.name} took {self.elapsed_time:.4f} seconds")

    @property
    def elapsed(self) -> float:
        """Get elapsed time in seconds."""
        if self.elapsed_time is None:
            raise ValueError("Timer has not been used as context manager yet")
        return self.elapsed_time


def values_per_second(num_values: int, elapsed_seconds: float) -> float:
    """Calculate throughput from a value count and elapsed time.

    Returns:
        Values per second (0.0 if elapsed_seconds <= 0)
    """
    if elapsed_seconds <= 0:
        return 0.0
    return num_values / elapsed_seconds
