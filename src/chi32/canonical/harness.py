"""Canonical-vector regression harness.

Each case recomputes its reference sequence with the named strategy and
compares it value by value against the stored reference data. Comparison
always runs to the end of the sequence so a report shows the full extent of
a regression; only the first few mismatches are kept in detail.

Per-case data problems (unreadable reference file) fail that case and the
suite moves on. A metadata file that yields no case at all is fatal.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np

from chi32.canonical.meta import META_FILENAME, CanonicalCase, parse_meta_csv
from chi32.canonical.reference import load_reference_data
from chi32.errors import MetadataError, ReferenceDataError
from chi32.strategies import StrategyState
from chi32.utils.logging import get_logger

MAX_REPORTED_MISMATCHES = 5

logger = get_logger("canonical.harness")


@dataclass(frozen=True)
class Mismatch:
    """A position where computed and reference values differ."""

    position: int
    selector: int
    index: int
    expected: int
    actual: int

    def describe(self) -> str:
        return (
            f"at index {self.position} (Selector: 0x{self.selector & 0xFFFFFFFFFFFFFFFF:016X}, "
            f"Index: 0x{self.index & 0xFFFFFFFFFFFFFFFF:016X}): "
            f"expected 0x{self.expected:08X} ({self.expected}), "
            f"actual 0x{self.actual:08X} ({self.actual})"
        )


@dataclass
class CaseResult:
    """Outcome of one canonical case.

    Attributes:
        case: The case that was run
        compared: Number of values compared
        mismatch_count: Total number of mismatching values
        mismatches: First mismatches in full (at most the reporting limit)
        error: Reason the case could not run, if any
    """

    case: CanonicalCase
    compared: int = 0
    mismatch_count: int = 0
    mismatches: List[Mismatch] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.error is None and self.mismatch_count == 0 and self.compared == self.case.length

    @property
    def suppressed(self) -> int:
        """Mismatches counted but not kept in detail."""
        return self.mismatch_count - len(self.mismatches)


@dataclass
class SuiteReport:
    """Outcome of a canonical suite run."""

    results: List[CaseResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return bool(self.results) and all(r.passed for r in self.results)

    @property
    def failed(self) -> List[CaseResult]:
        return [r for r in self.results if not r.passed]


def verify_case(
    case: CanonicalCase,
    expected: Union[np.ndarray, Sequence[int]],
    max_reported: int = MAX_REPORTED_MISMATCHES,
) -> CaseResult:
    """Recompute a case and compare against reference values.

    Args:
        case: Canonical case definition
        expected: Reference values (at least case.length of them)
        max_reported: Mismatches kept in detail

    Returns:
        CaseResult with mismatch count and the first mismatches
    """
    result = CaseResult(case=case)
    if len(expected) < case.length:
        result.error = f"reference holds {len(expected)} values, case needs {case.length}"
        return result

    state = StrategyState.start(case.strategy, case.seed, case.phase)
    for position in range(case.length):
        selector, index = state.selector, state.index
        actual = state.next_u32()
        reference = int(expected[position])
        if actual != reference:
            if len(result.mismatches) < max_reported:
                result.mismatches.append(
                    Mismatch(position, selector, index, reference, actual)
                )
            result.mismatch_count += 1
        result.compared += 1

    return result


def _log_case(result: CaseResult) -> None:
    name = result.case.logical_name
    if result.error is not None:
        logger.error(f"Test case '{name}' skipped: {result.error}")
        return
    for mismatch in result.mismatches:
        logger.error(f"MISMATCH ({result.case.strategy}) {mismatch.describe()}")
    if result.suppressed:
        logger.error(f"({result.suppressed} further {result.case.strategy} mismatches suppressed)")
    if result.passed:
        logger.info(f"PASS: Test case '{name}' verified ({result.compared} values).")
    else:
        logger.error(f"FAIL: Test case '{name}' failed with {result.mismatch_count} mismatch(es).")


def run_canonical_suite(
    data_dir: Union[str, Path],
    meta_filename: str = META_FILENAME,
    max_reported: int = MAX_REPORTED_MISMATCHES,
) -> SuiteReport:
    """Run every case listed in a canonical data directory.

    Args:
        data_dir: Directory holding the metadata CSV and reference files
        meta_filename: Metadata file name inside data_dir
        max_reported: Mismatches kept in detail per case

    Returns:
        SuiteReport over all parsed cases

    Raises:
        MetadataError: If the metadata cannot be read or holds no valid case
    """
    data_dir = Path(data_dir)
    csv_path = data_dir / meta_filename
    cases = parse_meta_csv(csv_path)
    if not cases:
        raise MetadataError(f"Failed to parse any test cases from metadata CSV {csv_path}")

    logger.info(f"Parsed {len(cases)} test case definitions from {csv_path}.")

    report = SuiteReport()
    for case in cases:
        logger.info(
            f"Processing test case {case.logical_name}: strategy={case.strategy}, "
            f"seed={case.seed}, phase={case.phase}, length={case.length}"
        )
        try:
            expected = load_reference_data(data_dir / case.bin_filename, case.length)
        except ReferenceDataError as e:
            result = CaseResult(case=case, error=str(e))
        else:
            result = verify_case(case, expected, max_reported=max_reported)
        _log_case(result)
        report.results.append(result)

    return report
