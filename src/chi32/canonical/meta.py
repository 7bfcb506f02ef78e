"""Canonical test-case metadata (CSV).

One row per case::

    logical_name,strategy_code,seed,phase,length,bin_filename

Blank lines and ``#`` comment lines are ignored. Bad rows are logged and
skipped so the remaining cases still run.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from chi32.errors import MetadataError, UnknownStrategyError
from chi32.strategies import Strategy
from chi32.utils.logging import get_logger
from chi32.utils.parsing import parse_int64

META_FILENAME = "chi32_canonical_meta.csv"
FIELD_NAMES = ("logical_name", "strategy_code", "seed", "phase", "length", "bin_filename")
HEADER_LINES = (
    "# MetaData for CHI32 Canonical Tests",
    "# Fields: " + ",".join(FIELD_NAMES),
    "# strategy_code: 0=sequential, 1=swapped, 2=feedback",
)
MAX_LENGTH = (1 << 31) - 1
META_ENCODING = "utf-8"

logger = get_logger("canonical.meta")


@dataclass(frozen=True)
class CanonicalCase:
    """One canonical reference sequence.

    Attributes:
        logical_name: Case name
        strategy: Iteration strategy
        seed: Seed (signed 64-bit)
        phase: Phase (signed 64-bit)
        length: Number of 32-bit values in the reference file
        bin_filename: Reference file name, relative to the data directory
    """

    logical_name: str
    strategy: Strategy
    seed: int
    phase: int
    length: int
    bin_filename: str

    def __post_init__(self) -> None:
        """Validate parameters."""
        if not self.logical_name:
            raise ValueError("logical_name must not be empty")
        if not isinstance(self.strategy, Strategy):
            raise TypeError(f"strategy must be a Strategy, got {type(self.strategy).__name__}")
        if not 0 < self.length <= MAX_LENGTH:
            raise ValueError(f"length must be in [1, {MAX_LENGTH}], got {self.length}")
        if not self.bin_filename or any(c.isspace() for c in self.bin_filename):
            raise ValueError(f"invalid bin_filename {self.bin_filename!r}")

    def to_row(self) -> str:
        return (
            f"{self.logical_name},{self.strategy.code},{self.seed},"
            f"{self.phase},{self.length},{self.bin_filename}"
        )


def parse_meta_line(line: str) -> CanonicalCase:
    """Parse one data row.

    Raises:
        ValueError: If the row does not hold six well-formed fields
        UnknownStrategyError: If the strategy code is not 0, 1 or 2
    """
    fields = [f.strip() for f in line.split(",")]
    if len(fields) != len(FIELD_NAMES):
        raise ValueError(f"expected {len(FIELD_NAMES)} fields, got {len(fields)}")

    name, code_text, seed_text, phase_text, length_text, bin_filename = fields
    try:
        code = int(code_text)
        length = int(length_text)
    except ValueError:
        raise ValueError(f"non-integer strategy code or length in {line!r}") from None

    return CanonicalCase(
        logical_name=name,
        strategy=Strategy.from_code(code),
        seed=parse_int64(seed_text),
        phase=parse_int64(phase_text),
        length=length,
        bin_filename=bin_filename,
    )


def parse_meta_csv(
    csv_path: Union[str, Path], max_cases: Optional[int] = None
) -> List[CanonicalCase]:
    """Parse a canonical metadata file.

    Args:
        csv_path: Path to the metadata CSV
        max_cases: Stop after this many valid cases (None for all)

    Returns:
        Parsed cases in file order; malformed rows are skipped

    Raises:
        MetadataError: If the file cannot be opened or read
    """
    csv_path = Path(csv_path)
    try:
        data = csv_path.read_bytes()
    except OSError as e:
        raise MetadataError(f"Could not open CSV metadata file: {csv_path} ({e})") from e

    cases: List[CanonicalCase] = []
    for line_number, raw in enumerate(data.splitlines(), start=1):
        if max_cases is not None and len(cases) >= max_cases:
            break
        # Decoded per row; an undecodable row is skipped like a malformed one
        try:
            line = raw.decode(META_ENCODING).strip()
        except UnicodeDecodeError as e:
            logger.warning(f"Undecodable line {line_number} in CSV {csv_path} ({e}). Skipping.")
            continue
        if not line or line.startswith("#"):
            continue
        try:
            cases.append(parse_meta_line(line))
        except UnknownStrategyError as e:
            logger.warning(f"{e} on line {line_number} of {csv_path}. Skipping line.")
        except (ValueError, TypeError) as e:
            logger.warning(
                f"Malformed line {line_number} in CSV {csv_path} ({e}). "
                f"Line: '{line}'. Skipping."
            )
    return cases


def format_meta_csv(cases: Iterable[CanonicalCase]) -> str:
    """Render cases as metadata CSV text, header comments included."""
    lines = list(HEADER_LINES)
    lines.extend(case.to_row() for case in cases)
    return "\n".join(lines) + "\n"


def write_meta_csv(csv_path: Union[str, Path], cases: Iterable[CanonicalCase]) -> Path:
    csv_path = Path(csv_path)
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    csv_path.write_text(format_meta_csv(cases), encoding=META_ENCODING)
    return csv_path
