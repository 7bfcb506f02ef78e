"""Tests for the command-line interface."""

import logging
import shutil

import pytest

from chi32.canonical.meta import META_FILENAME
from chi32.cli import main
from chi32.strategies import generate_values


def test_derive(capsys) -> None:
    """Test printing a derived value."""
    assert main(["derive", "0", "0"]) == 0
    assert capsys.readouterr().out.strip() == "1390217541 0x52DD0945"


def test_derive_hex_arguments(capsys) -> None:
    """Test that hex arguments are raw 64-bit patterns."""
    assert main(["derive", "0xFFFFFFFFFFFFFFFF", "0x0"]) == 0
    assert capsys.readouterr().out.strip() == "-1500040914 0xA697312E"


@pytest.mark.parametrize("argv", [
    [],
    ["derive", "0"],
    ["derive", "zero", "0"],
    ["derive", "0x", "0"],
    ["derive", "0x10000000000000000", "0"],
    ["derive", "9223372036854775808", "0"],
    ["stream", "--seed", "1", "--strategy", "random"],
    ["nonsense"],
])
def test_invalid_arguments_exit_1(argv) -> None:
    """Test that usage errors map to exit status 1."""
    assert main(argv) == 1


def test_help_exits_0(capsys) -> None:
    """Test that --help is not an error."""
    assert main(["--help"]) == 0
    assert "derive" in capsys.readouterr().out


def test_stream_limit(capsysbinary) -> None:
    """Test streaming a bounded number of values to stdout."""
    assert main(["stream", "--seed", "42", "--phase", "7", "--strategy", "swapped", "--limit", "100"]) == 0
    out = capsysbinary.readouterr().out
    assert out == generate_values("swapped", 42, 7, 100).astype("<u4").tobytes()


@pytest.mark.parametrize("argv", [
    ["battery", "BigCrush", "1", "2"],
    ["battery", "quick", "not_a_number", "2"],
    ["battery", "quick", "1", "0x"],
    ["battery", "quick", "1", "2", "random"],
])
def test_battery_invalid_exit_1(argv, capsys) -> None:
    """Test battery argument errors."""
    assert main(argv) == 1
    assert "Error:" in capsys.readouterr().err


def test_battery_runs(capsys) -> None:
    """Test a small battery run prints its summary."""
    code = main(["battery", "quick", "0x1234", "0", "feedback", "--sample-size", "4096"])
    assert code in (0, 1)
    out = capsys.readouterr().out
    assert "Battery quick on CHI32 (Strategy=feedback" in out
    assert "monobit_frequency" in out


def test_battery_config_override(tmp_path, caplog) -> None:
    """Test the YAML battery override."""
    config = tmp_path / "battery.yaml"
    config.write_text("battery:\n  sample_size: 1024\n")
    with caplog.at_level(logging.INFO, logger="chi32.battery"):
        main(["battery", "quick", "1", "2", "--config", str(config)])
    assert "(1024 values)" in caplog.text


def test_verify_fixtures(canonical_dir, capsys) -> None:
    """Test verifying the bundled canonical data."""
    assert main(["verify", str(canonical_dir)]) == 0
    out = capsys.readouterr().out
    assert "PASS chi32_feedback (256/256 values)" in out
    assert "All 3 canonical cases passed" in out


def test_verify_missing_metadata(tmp_path, capsys) -> None:
    """Test that verify fails fast without metadata."""
    assert main(["verify", str(tmp_path)]) == 1
    assert "FAIL" in capsys.readouterr().err


def test_verify_detects_corruption(tmp_path) -> None:
    """Test that verify reports a corrupted reference file."""
    assert main(["generate", str(tmp_path), "--length", "32"]) == 0
    path = tmp_path / "chi32_swapped.bin"
    data = bytearray(path.read_bytes())
    data[0] ^= 0xFF
    path.write_bytes(bytes(data))
    assert main(["verify", str(tmp_path)]) == 1


def test_generate_then_verify(tmp_path, capsys) -> None:
    """Test generating canonical data and verifying it."""
    assert main(["generate", str(tmp_path), "--length", "64"]) == 0
    assert (tmp_path / META_FILENAME).exists()
    assert (tmp_path / "chi32_feedback.bin").stat().st_size == 64 * 4
    assert main(["verify", str(tmp_path)]) == 0


def test_generate_from_config(tmp_path) -> None:
    """Test generating datasets defined in YAML."""
    config = tmp_path / "datasets.yaml"
    config.write_text(
        "datasets:\n"
        "  - {name: only, strategy: feedback, seed: 0, phase: 0, length: 4}\n"
    )
    out_dir = tmp_path / "out"
    assert main(["generate", str(out_dir), "--config", str(config)]) == 0
    assert (out_dir / "only.bin").read_bytes()[:4] == bytes([0x45, 0x09, 0xDD, 0x52])


def test_generate_missing_config(tmp_path, capsys) -> None:
    """Test that a missing config file is reported."""
    assert main(["generate", str(tmp_path), "--config", str(tmp_path / "nope.yaml")]) == 1
    assert "Config file not found" in capsys.readouterr().err


def test_walk(tmp_path, capsys) -> None:
    """Test rendering walker heatmaps."""
    out_png = tmp_path / "walk.png"
    assert main(["walk", str(out_png), "--steps", "2000", "--grid-bits", "6"]) == 0
    assert out_png.exists()
    out = capsys.readouterr().out
    assert "chi32: final position" in out
    assert "splitmix64: final position" in out


def test_verify_skips_undecodable_metadata_row(tmp_path, canonical_dir, capsys) -> None:
    """Test that verify still passes with one undecodable metadata row."""
    data_dir = tmp_path / "canonical"
    shutil.copytree(canonical_dir, data_dir)
    meta = data_dir / META_FILENAME
    meta.write_bytes(meta.read_bytes() + b"bad\xff\xfe,0,1,2,3,x.bin\n")

    assert main(["verify", str(data_dir)]) == 0
    assert "All 3 canonical cases passed" in capsys.readouterr().out


def test_signed_hex_arguments(capsys) -> None:
    """Test signed hex after -- and in --opt=VALUE form."""
    assert main(["derive", "--", "-0x1", "0"]) == 0
    assert capsys.readouterr().out.strip() == "-1500040914 0xA697312E"

    code = main(["battery", "quick", "--sample-size", "256", "--", "0x2A", "-0x10"])
    assert code in (0, 1)
    assert "InitialPhase=0xFFFFFFFFFFFFFFF0" in capsys.readouterr().out


def test_stream_signed_hex_phase(capsysbinary) -> None:
    """Test a signed hex phase given as --phase=VALUE."""
    assert main(["stream", "--seed", "1", "--phase=-0x10", "--limit", "8"]) == 0
    out = capsysbinary.readouterr().out
    assert out == generate_values("sequential", 1, -16, 8).astype("<u4").tobytes()


@pytest.mark.parametrize("value", ["lots", "[1, 2]", "{n: 3}"])
def test_battery_config_non_integer_sample_size(tmp_path, capsys, value) -> None:
    """Test a non-integer YAML sample size exits 1 with an error."""
    config = tmp_path / "battery.yaml"
    config.write_text(f"battery:\n  sample_size: {value}\n")
    assert main(["battery", "quick", "1", "2", "--config", str(config)]) == 1
    assert "battery.sample_size must be an integer" in capsys.readouterr().err


def test_battery_config_numeric_string_sample_size(tmp_path, caplog) -> None:
    """Test a quoted integer sample size is accepted."""
    config = tmp_path / "battery.yaml"
    config.write_text("battery:\n  sample_size: '512'\n")
    with caplog.at_level(logging.INFO, logger="chi32.battery"):
        main(["battery", "quick", "1", "2", "--config", str(config)])
    assert "(512 values)" in caplog.text
