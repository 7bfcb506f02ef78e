"""Raw binary streaming of CHI32 output.

Values are written as little-endian uint32 in fixed-size blocks, suitable for
piping into external randomness test suites (e.g. ``RNG_test stdin32``).
A consumer closing the pipe ends the stream normally.
"""

from typing import BinaryIO, Optional

from chi32.battery.adapter import Chi32Source
from chi32.canonical.reference import REFERENCE_DTYPE
from chi32.utils.logging import get_logger
from chi32.utils.timing import Timer

DEFAULT_BUFFER_VALUES = 16384  # 64 KiB per write

logger = get_logger("stream")


def stream_values(
    strategy,
    seed: int,
    phase: int,
    output: BinaryIO,
    limit: Optional[int] = None,
    buffer_values: int = DEFAULT_BUFFER_VALUES,
) -> int:
    """Write CHI32 values to a binary stream.

    Args:
        strategy: Strategy, name or code
        seed: Seed argument
        phase: Phase argument
        output: Writable binary stream
        limit: Total number of values, or None to stream until the consumer
            closes the pipe
        buffer_values: Values per write

    Returns:
        Number of values handed to the stream

    Raises:
        ValueError: If limit or buffer_values is invalid
    """
    if buffer_values <= 0:
        raise ValueError(f"buffer_values must be positive, got {buffer_values}")
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    source = Chi32Source(seed, phase, strategy)
    logger.info(f"Streamer: starting {source.name}")

    written = 0
    with Timer("Streamer", report=logger.info):
        try:
            while limit is None or written < limit:
                n = buffer_values if limit is None else min(buffer_values, limit - written)
                block = source.take(n).astype(REFERENCE_DTYPE)
                output.write(block.tobytes())
                written += n
            output.flush()
        except BrokenPipeError:
            logger.info(f"Streamer: pipe closed by consumer after {written} values.")
            return written

    logger.info(f"Streamer: normal exit. Total values: {written}.")
    return written
