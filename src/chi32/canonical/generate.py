"""Canonical data generation.

Writes one reference file per definition plus the metadata CSV that the
regression harness reads back.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from chi32.canonical.meta import META_FILENAME, CanonicalCase, write_meta_csv
from chi32.canonical.reference import write_reference_data
from chi32.config import load_config
from chi32.strategies import Strategy, generate_values
from chi32.utils.logging import get_logger
from chi32.utils.parsing import parse_int64
from chi32.utils.timing import Timer

CANONICAL_LENGTH = 0xFFFF

DEFAULT_DEFINITIONS: tuple = (
    CanonicalCase(
        logical_name="chi32_sequential",
        strategy=Strategy.SEQUENTIAL,
        seed=42,
        phase=0x7FFFFFFF - 0x7FFF,
        length=CANONICAL_LENGTH,
        bin_filename="chi32_sequential.bin",
    ),
    CanonicalCase(
        logical_name="chi32_swapped",
        strategy=Strategy.SWAPPED,
        seed=-42,
        phase=0x7FFF,
        length=CANONICAL_LENGTH,
        bin_filename="chi32_swapped.bin",
    ),
    CanonicalCase(
        logical_name="chi32_feedback",
        strategy=Strategy.FEEDBACK,
        seed=0,
        phase=0,
        length=CANONICAL_LENGTH,
        bin_filename="chi32_feedback.bin",
    ),
)

logger = get_logger("canonical.generate")


def definition_from_dict(entry: Dict[str, Any]) -> CanonicalCase:
    """Build a case from a config mapping.

    Required keys: name, strategy, seed, phase, length. ``bin_filename``
    defaults to ``<name>.bin``. Seed and phase may be ints or decimal/hex
    strings.
    """
    missing = [k for k in ("name", "strategy", "seed", "phase", "length") if k not in entry]
    if missing:
        raise ValueError(f"dataset definition missing keys: {missing}")

    def as_int64(value: Any) -> int:
        return parse_int64(value) if isinstance(value, str) else int(value)

    return CanonicalCase(
        logical_name=str(entry["name"]),
        strategy=Strategy.coerce(entry["strategy"]),
        seed=as_int64(entry["seed"]),
        phase=as_int64(entry["phase"]),
        length=int(entry["length"]),
        bin_filename=str(entry.get("bin_filename", f"{entry['name']}.bin")),
    )


def load_definitions(config_path: Union[str, Path]) -> List[CanonicalCase]:
    """Load dataset definitions from the ``datasets`` list of a YAML file."""
    config = load_config(Path(config_path))
    entries = config.get("datasets")
    if not entries:
        raise ValueError(f"No 'datasets' defined in {config_path}")
    return [definition_from_dict(entry) for entry in entries]


def with_length(definitions: Sequence[CanonicalCase], length: int) -> List[CanonicalCase]:
    """Copy definitions with a different length."""
    return [
        CanonicalCase(d.logical_name, d.strategy, d.seed, d.phase, length, d.bin_filename)
        for d in definitions
    ]


def generate_canonical_data(
    out_dir: Union[str, Path],
    definitions: Optional[Sequence[CanonicalCase]] = None,
    meta_filename: str = META_FILENAME,
) -> List[CanonicalCase]:
    """Generate reference files and metadata.

    Args:
        out_dir: Output directory (created if needed)
        definitions: Cases to generate (DEFAULT_DEFINITIONS when None)
        meta_filename: Metadata CSV name

    Returns:
        The definitions written, in metadata order
    """
    out_dir = Path(out_dir)
    definitions = list(DEFAULT_DEFINITIONS if definitions is None else definitions)
    names = [d.logical_name for d in definitions]
    if len(set(names)) != len(names):
        raise ValueError(f"duplicate logical names in definitions: {names}")

    for definition in definitions:
        logger.info(
            f"Processing definition: {definition.logical_name} "
            f"(seed={definition.seed}, phase={definition.phase}, "
            f"length={definition.length}, strategy={definition.strategy})"
        )
        with Timer(f"Data generation for {definition.logical_name}", report=logger.info):
            values = generate_values(
                definition.strategy, definition.seed, definition.phase, definition.length
            )
        path = write_reference_data(out_dir / definition.bin_filename, values)
        logger.info(f"Wrote {path.name} ({path.stat().st_size} bytes)")

    csv_path = write_meta_csv(out_dir / meta_filename, definitions)
    logger.info(f"Wrote CSV metadata to {csv_path}")
    return definitions
