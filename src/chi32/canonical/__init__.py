"""Canonical-vector regression harness and data generator."""

from .generate import DEFAULT_DEFINITIONS, generate_canonical_data, load_definitions
from .harness import CaseResult, Mismatch, SuiteReport, run_canonical_suite, verify_case
from .meta import META_FILENAME, CanonicalCase, format_meta_csv, parse_meta_csv, write_meta_csv
from .reference import load_reference_data, write_reference_data

__all__ = [
    "CanonicalCase",
    "META_FILENAME",
    "parse_meta_csv",
    "format_meta_csv",
    "write_meta_csv",
    "load_reference_data",
    "write_reference_data",
    "verify_case",
    "run_canonical_suite",
    "CaseResult",
    "Mismatch",
    "SuiteReport",
    "DEFAULT_DEFINITIONS",
    "generate_canonical_data",
    "load_definitions",
]
