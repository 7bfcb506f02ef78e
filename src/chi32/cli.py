"""Command-line entry point for the CHI32 tools."""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from chi32.battery import BATTERIES, run_battery
from chi32.canonical import (
    DEFAULT_DEFINITIONS,
    generate_canonical_data,
    load_definitions,
    run_canonical_suite,
)
from chi32.canonical.generate import with_length
from chi32.config import load_config
from chi32.core import derive_value_at
from chi32.errors import Chi32Error, UnknownBatteryError, UnknownStrategyError
from chi32.stream import stream_values
from chi32.strategies import Strategy
from chi32.utils.parsing import parse_int64
from chi32.walkers import DEFAULT_SEED, DIRECTION_SOURCES, run_walkers, save_heatmap, summarize

EXIT_OK = 0
EXIT_FAILURE = 1


def _int64_arg(text: str) -> int:
    try:
        return parse_int64(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _strategy_arg(text: str) -> Strategy:
    try:
        return Strategy.from_name(text)
    except UnknownStrategyError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _cmd_derive(args) -> int:
    value = derive_value_at(args.selector, args.index)
    print(f"{value} 0x{value & 0xFFFFFFFF:08X}")
    return EXIT_OK


def _cmd_stream(args) -> int:
    written = stream_values(args.strategy, args.seed, args.phase, sys.stdout.buffer, limit=args.limit)
    if args.limit is None or written < args.limit:
        # Consumer closed the pipe; keep interpreter shutdown from flushing into it
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    return EXIT_OK


def _cmd_battery(args) -> int:
    # Positional arguments are parsed here so every problem maps to exit code 1
    try:
        seed = parse_int64(args.seed)
        phase = parse_int64(args.phase)
        strategy = Strategy.from_name(args.strategy)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    sample_size = args.sample_size
    if args.config is not None:
        overrides = load_config(args.config).get("battery", {}) or {}
        raw = overrides.get("sample_size", sample_size)
        try:
            sample_size = None if raw is None else int(raw)
        except (TypeError, ValueError):
            print(f"Error: battery.sample_size must be an integer, got {raw!r}", file=sys.stderr)
            return EXIT_FAILURE

    try:
        report = run_battery(
            args.battery, seed, phase, strategy, sample_size=sample_size, progress=print
        )
    except (UnknownBatteryError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    for line in report.summary_lines():
        print(line)
    return EXIT_OK if report.passed else EXIT_FAILURE


def _cmd_verify(args) -> int:
    try:
        report = run_canonical_suite(args.data_dir)
    except Chi32Error as e:
        print(f"FAIL: {e}", file=sys.stderr)
        return EXIT_FAILURE

    for result in report.results:
        status = "PASS" if result.passed else "FAIL"
        print(f"{status} {result.case.logical_name} ({result.compared}/{result.case.length} values)")
    if report.passed:
        print(f"All {len(report.results)} canonical cases passed")
        return EXIT_OK
    print(f"{len(report.failed)} of {len(report.results)} canonical cases failed", file=sys.stderr)
    return EXIT_FAILURE


def _cmd_generate(args) -> int:
    definitions = load_definitions(args.config) if args.config else list(DEFAULT_DEFINITIONS)
    if args.length is not None:
        definitions = with_length(definitions, args.length)
    written = generate_canonical_data(args.out_dir, definitions)
    print(f"Wrote {len(written)} reference files to {Path(args.out_dir).resolve()}")
    return EXIT_OK


def _cmd_walk(args) -> int:
    results = run_walkers(
        args.sources, seed=args.seed, steps=args.steps,
        grid_bits=args.grid_bits, scale_shift=args.scale_shift,
    )
    path = save_heatmap(results, args.out_png)
    for name, info in summarize(results).items():
        print(f"{name}: final position {tuple(info['final_position'])}, {info['visited_cells']} cells visited")
    print(f"Heatmap: {path}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chi32",
        description="CHI32 stateless PRNG tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Integer arguments accept decimal or 0x-prefixed hex (up to 16 digits, "
            "optionally signed as in -0x10; pass signed hex after -- or as --opt=-0x10). "
            "Octal is not supported: 010 is ten."
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("derive", help="Print the value at (selector, index)")
    p.add_argument("selector", type=_int64_arg)
    p.add_argument("index", type=_int64_arg)
    p.set_defaults(func=_cmd_derive)

    p = subparsers.add_parser("stream", help="Write raw little-endian uint32 values to stdout")
    p.add_argument("--seed", type=_int64_arg, required=True)
    p.add_argument("--phase", type=_int64_arg, default=0)
    p.add_argument("--strategy", type=_strategy_arg, default=Strategy.SEQUENTIAL,
                   help="sequential, swapped or feedback")
    p.add_argument("--limit", type=int, default=None, help="Number of values (default: unbounded)")
    p.set_defaults(func=_cmd_stream)

    p = subparsers.add_parser("battery", help="Run a statistical battery")
    p.add_argument("battery", help=f"One of: {', '.join(BATTERIES)}")
    p.add_argument("seed", help="Decimal or hex seed, e.g. 42, 0x2A, or -0x2A after --")
    p.add_argument("phase", help="Decimal or hex phase; octal is not supported")
    p.add_argument("strategy", nargs="?", default="sequential")
    p.add_argument("--sample-size", type=int, default=None, help="Override the battery sample size")
    p.add_argument("--config", type=Path, default=None,
                   help="YAML file with a 'battery' section of overrides")
    p.set_defaults(func=_cmd_battery)

    p = subparsers.add_parser("verify", help="Check canonical reference data")
    p.add_argument("data_dir", type=Path)
    p.set_defaults(func=_cmd_verify)

    p = subparsers.add_parser("generate", help="Write canonical reference data")
    p.add_argument("out_dir", type=Path)
    p.add_argument("--config", type=Path, default=None, help="YAML file with a 'datasets' list")
    p.add_argument("--length", type=int, default=None, help="Override every dataset length")
    p.set_defaults(func=_cmd_generate)

    p = subparsers.add_parser("walk", help="Render random-walk bias heatmaps")
    p.add_argument("out_png", type=Path)
    p.add_argument("--steps", type=int, default=4_000_000)
    p.add_argument("--seed", type=_int64_arg, default=DEFAULT_SEED)
    p.add_argument("--grid-bits", type=int, default=10)
    p.add_argument("--scale-shift", type=int, default=3)
    p.add_argument("--sources", nargs="+", choices=list(DIRECTION_SOURCES),
                   default=list(DIRECTION_SOURCES))
    p.set_defaults(func=_cmd_walk)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entrypoint."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits with 2 on usage errors
        return EXIT_FAILURE if e.code else EXIT_OK

    try:
        return args.func(args)
    except (Chi32Error, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
