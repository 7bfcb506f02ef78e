"""Utilities module for CHI32."""

from chi32.utils.logging import get_logger
from chi32.utils.parsing import INT64_MAX, INT64_MIN, parse_int64
from chi32.utils.timing import Timer, values_per_second

__all__ = [
    "get_logger",
    "parse_int64",
    "INT64_MIN",
    "INT64_MAX",
    "Timer",
    "values_per_second",
]
