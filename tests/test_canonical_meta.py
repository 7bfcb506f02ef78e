"""Tests for canonical metadata parsing."""

import logging

import pytest

from chi32.canonical.meta import (
    HEADER_LINES,
    META_FILENAME,
    CanonicalCase,
    format_meta_csv,
    parse_meta_csv,
    parse_meta_line,
    write_meta_csv,
)
from chi32.errors import MetadataError, UnknownStrategyError
from chi32.strategies import Strategy


def test_parse_fixture_metadata(canonical_dir) -> None:
    """Test parsing the bundled metadata file."""
    cases = parse_meta_csv(canonical_dir / META_FILENAME)

    assert [c.logical_name for c in cases] == ["chi32_sequential", "chi32_swapped", "chi32_feedback"]
    assert cases[0] == CanonicalCase("chi32_sequential", Strategy.SEQUENTIAL, 42, 2147450880, 256, "chi32_sequential.bin")
    assert cases[1].strategy is Strategy.SWAPPED
    assert cases[1].seed == -42
    assert cases[2].phase == 0


def test_parse_line_accepts_hex() -> None:
    """Test that seed and phase accept 0x-prefixed hex."""
    case = parse_meta_line("hexcase, 0, 0xFFFFFFFFFFFFFFFF, 0x10, 4, hex.bin")
    assert case.seed == -1
    assert case.phase == 16
    assert case.length == 4


@pytest.mark.parametrize("line", [
    "too,few,fields",
    "a,0,1,2,3,b.bin,extra",
    "a,x,1,2,3,b.bin",
    "a,0,1,2,many,b.bin",
    "a,0,notanumber,2,3,b.bin",
    "a,0,1,0x,3,b.bin",
    "a,0,99999999999999999999,2,3,b.bin",
    "a,0,1,2,0,b.bin",
    ",0,1,2,3,b.bin",
])
def test_parse_line_rejects_malformed(line) -> None:
    """Test that malformed rows raise ValueError."""
    with pytest.raises(ValueError):
        parse_meta_line(line)


def test_parse_line_rejects_unknown_strategy() -> None:
    """Test that strategy codes outside 0..2 are rejected."""
    with pytest.raises(UnknownStrategyError):
        parse_meta_line("a,7,1,2,3,b.bin")


def test_bad_rows_are_skipped(tmp_path, caplog) -> None:
    """Test skip-and-continue over bad metadata rows."""
    csv_path = tmp_path / "meta.csv"
    csv_path.write_text(
        "# comment\n"
        "\n"
        "good_a,0,1,2,3,a.bin\n"
        "bad_code,9,1,2,3,b.bin\n"
        "bad_fields,0,1\n"
        "good_b,2,0x0,0,5,c.bin\n"
    )

    with caplog.at_level(logging.WARNING):
        cases = parse_meta_csv(csv_path)

    assert [c.logical_name for c in cases] == ["good_a", "good_b"]
    assert "Invalid strategy code 9" in caplog.text
    assert "Malformed line 5" in caplog.text


def test_max_cases(tmp_path) -> None:
    """Test that parsing stops after max_cases valid rows."""
    csv_path = tmp_path / "meta.csv"
    csv_path.write_text("".join(f"case{i},0,{i},0,1,c{i}.bin\n" for i in range(10)))
    assert len(parse_meta_csv(csv_path, max_cases=3)) == 3


def test_missing_file_raises(tmp_path) -> None:
    """Test that a missing metadata file raises MetadataError."""
    with pytest.raises(MetadataError, match="Could not open CSV metadata file"):
        parse_meta_csv(tmp_path / "nope.csv")


def test_write_then_parse(tmp_path) -> None:
    """Test that written metadata parses back to the same cases."""
    cases = [
        CanonicalCase("x", Strategy.FEEDBACK, -(1 << 63), (1 << 63) - 1, 10, "x.bin"),
        CanonicalCase("y", Strategy.SWAPPED, 3, -4, 1, "y.bin"),
    ]
    path = write_meta_csv(tmp_path / "sub" / META_FILENAME, cases)

    assert path.read_text().splitlines()[: len(HEADER_LINES)] == list(HEADER_LINES)
    assert parse_meta_csv(path) == cases
    assert format_meta_csv([]).count("\n") == len(HEADER_LINES)


def test_case_validation() -> None:
    """Test CanonicalCase parameter checks."""
    with pytest.raises(TypeError):
        CanonicalCase("a", 0, 1, 2, 3, "a.bin")
    with pytest.raises(ValueError):
        CanonicalCase("a", Strategy.SEQUENTIAL, 1, 2, 3, "has space.bin")
    with pytest.raises(ValueError):
        CanonicalCase("a", Strategy.SEQUENTIAL, 1, 2, -1, "a.bin")
