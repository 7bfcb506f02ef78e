"""Reference data files: raw little-endian uint32 arrays."""

from pathlib import Path
from typing import Sequence, Union

import numpy as np

from chi32.errors import ReferenceDataError
from chi32.utils.logging import get_logger

REFERENCE_DTYPE = np.dtype("<u4")

logger = get_logger("canonical.reference")


def load_reference_data(path: Union[str, Path], length: int) -> np.ndarray:
    """Load ``length`` little-endian uint32 values from a reference file.

    Trailing data beyond ``length`` values is tolerated with a warning.

    Args:
        path: Reference file path
        length: Number of values expected

    Returns:
        uint32 array of shape [length] in native byte order

    Raises:
        ReferenceDataError: If the file is missing, unreadable or short
    """
    path = Path(path)
    if length <= 0:
        raise ReferenceDataError(f"Invalid expected length {length} for {path}")

    try:
        with open(path, "rb") as f:
            raw = f.read(length * REFERENCE_DTYPE.itemsize)
            trailing = f.read(1)
    except OSError as e:
        raise ReferenceDataError(f"Could not open binary data file: {path} ({e})") from e

    available = len(raw) // REFERENCE_DTYPE.itemsize
    if available < length:
        raise ReferenceDataError(
            f"Reached end of {path} prematurely - expected {length} values, read {available}"
        )

    if trailing:
        logger.warning(f"File {path} contains more data than expected length {length}.")

    return np.frombuffer(raw, dtype=REFERENCE_DTYPE).astype(np.uint32)


def write_reference_data(path: Union[str, Path], values: Union[np.ndarray, Sequence[int]]) -> Path:
    """Write values as little-endian uint32.

    Raises:
        ValueError: If a value does not fit in 32 bits
    """
    path = Path(path)
    arr = np.asarray(values)
    if arr.size and (arr.min() < 0 or arr.max() > 0xFFFFFFFF):
        raise ValueError("reference values must be in [0, 2^32)")
    path.parent.mkdir(parents=True, exist_ok=True)
    arr.astype(REFERENCE_DTYPE).tofile(path)
    return path
