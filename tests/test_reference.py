"""Tests for reference data files."""

import logging

import numpy as np
import pytest

from chi32.canonical.reference import load_reference_data, write_reference_data
from chi32.errors import ReferenceDataError


def test_little_endian_layout(tmp_path) -> None:
    """Test that values are stored as little-endian uint32."""
    path = write_reference_data(tmp_path / "v.bin", [1, 0x01020304, 0xFFFFFFFF])
    assert path.read_bytes() == bytes([1, 0, 0, 0, 4, 3, 2, 1, 255, 255, 255, 255])

    values = load_reference_data(path, 3)
    assert values.dtype == np.uint32
    assert values.tolist() == [1, 0x01020304, 0xFFFFFFFF]


def test_fixture_file_loads(canonical_dir) -> None:
    """Test that the bundled feedback fixture starts with derive(0, 0)."""
    values = load_reference_data(canonical_dir / "chi32_feedback.bin", 256)
    assert values.shape == (256,)
    assert int(values[0]) == 0x52DD0945


def test_short_file_raises(tmp_path) -> None:
    """Test that a truncated file raises ReferenceDataError."""
    path = tmp_path / "short.bin"
    path.write_bytes(b"\x00" * 10)
    with pytest.raises(ReferenceDataError, match="expected 3 values, read 2"):
        load_reference_data(path, 3)


def test_missing_file_raises(tmp_path) -> None:
    """Test that a missing file raises ReferenceDataError."""
    with pytest.raises(ReferenceDataError, match="Could not open binary data file"):
        load_reference_data(tmp_path / "missing.bin", 1)


def test_invalid_length_raises(tmp_path) -> None:
    """Test that non-positive lengths are rejected."""
    with pytest.raises(ReferenceDataError):
        load_reference_data(tmp_path / "any.bin", 0)


def test_trailing_data_warns(tmp_path, caplog) -> None:
    """Test that extra data is tolerated with a warning."""
    path = write_reference_data(tmp_path / "long.bin", [1, 2, 3, 4])
    with caplog.at_level(logging.WARNING):
        values = load_reference_data(path, 2)
    assert values.tolist() == [1, 2]
    assert "more data than expected" in caplog.text


def test_write_rejects_out_of_range(tmp_path) -> None:
    """Test that values outside uint32 are rejected."""
    with pytest.raises(ValueError):
        write_reference_data(tmp_path / "bad.bin", [1 << 32])
    with pytest.raises(ValueError):
        write_reference_data(tmp_path / "bad.bin", [-1])
