"""Pytest configuration and fixtures."""

import random
from pathlib import Path

import pytest
import torch

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

CANONICAL_DIR = Path(__file__).parent / "data" / "canonical"


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up test environment with fixed seed."""
    random.seed(42)
    torch.manual_seed(42)
    yield


@pytest.fixture
def rng() -> random.Random:
    """Local deterministic RNG for drawing test coordinates."""
    return random.Random(42)


@pytest.fixture
def canonical_dir() -> Path:
    """Directory with the bundled canonical reference files."""
    return CANONICAL_DIR


@pytest.fixture
def edge_values():
    """Signed 64-bit values that exercise wraparound paths."""
    return [0, 1, -1, 2, 42, -42, 0x7FFF, 0x7FFFFFFF, -0x80000000, INT64_MIN, INT64_MAX]
