"""Tests for raw binary streaming."""

import io
import logging

import numpy as np
import pytest

from chi32.stream import stream_values
from chi32.strategies import generate_values


class ClosingPipe(io.BytesIO):
    """Binary sink that breaks after a number of writes."""

    def __init__(self, writes_allowed: int):
        super().__init__()
        self.writes_allowed = writes_allowed

    def write(self, data):
        if self.writes_allowed == 0:
            raise BrokenPipeError(32, "Broken pipe")
        self.writes_allowed -= 1
        return super().write(data)


@pytest.mark.parametrize("strategy", ["sequential", "swapped", "feedback"])
def test_stream_bytes_match_generator(strategy) -> None:
    """Test that streamed bytes are the little-endian outputs in order."""
    out = io.BytesIO()
    written = stream_values(strategy, 42, 7, out, limit=1000, buffer_values=300)

    assert written == 1000
    expected = generate_values(strategy, 42, 7, 1000).astype("<u4").tobytes()
    assert out.getvalue() == expected


def test_stream_first_value_layout() -> None:
    """Test byte order of the first streamed value."""
    out = io.BytesIO()
    stream_values("feedback", 0, 0, out, limit=1)
    # derive(0, 0) == 0x52DD0945
    assert out.getvalue() == bytes([0x45, 0x09, 0xDD, 0x52])


def test_stream_stops_on_broken_pipe(caplog) -> None:
    """Test that a consumer closing the pipe ends the stream normally."""
    sink = ClosingPipe(writes_allowed=3)
    with caplog.at_level(logging.INFO, logger="chi32.stream"):
        written = stream_values("sequential", 1, 0, sink, limit=None, buffer_values=64)

    assert written == 3 * 64
    assert np.frombuffer(sink.getvalue(), dtype="<u4").tolist() == generate_values(
        "sequential", 1, 0, 192
    ).tolist()
    assert "pipe closed by consumer" in caplog.text


def test_stream_zero_limit() -> None:
    """Test that a zero limit writes nothing."""
    out = io.BytesIO()
    assert stream_values("sequential", 0, 0, out, limit=0) == 0
    assert out.getvalue() == b""


def test_stream_validates_arguments() -> None:
    """Test argument validation."""
    with pytest.raises(ValueError):
        stream_values("sequential", 0, 0, io.BytesIO(), limit=-1)
    with pytest.raises(ValueError):
        stream_values("sequential", 0, 0, io.BytesIO(), buffer_values=0)
