"""Command line interface for tolerantdiff."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from .config import build_differ, load_config, merge_overrides
from .exceptions import TolerantDiffError
from .models import ComparatorConfig
from .runner import run_datasets

logger = logging.getLogger(__name__)

EXIT_EQUAL = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tolerantdiff",
        description="Compare JSON documents with tolerant leaf comparison",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tolerantdiff diff expected.json actual.json --float-tolerance 0.01
  tolerantdiff diff expected.json actual.json -c tolerantdiff.yaml --ignore '$..updatedAt'
  tolerantdiff run datasets/ -c tolerantdiff.yaml -r report.json
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    diff = subparsers.add_parser("diff", help="Compare two JSON files")
    diff.add_argument("left", help="Path to the expected JSON document")
    diff.add_argument("right", help="Path to the actual JSON document")
    diff.add_argument("-c", "--config", help="Path to YAML/JSON config file")
    diff.add_argument("--float-tolerance", type=float, help="Allowed difference between floating-point numbers")
    diff.add_argument("--int-tolerance", type=int, help="Allowed difference between integers")
    diff.add_argument("--time-tolerance", help="Allowed difference between times, e.g. 1s or 500ms")
    diff.add_argument("--time-layout", help="Time layout: ISO8601 or a strptime format")
    diff.add_argument("--strip-pattern", help="Regex whose matches are deleted from strings before comparing")
    diff.add_argument(
        "--ignore", action="append", dest="ignore_paths", metavar="JSONPATH",
        help="JSONPath to ignore in both documents (repeatable)"
    )
    diff.add_argument("--color", action="store_true", default=None, help="Colorize the diff")
    diff.add_argument("-q", "--quiet", action="store_true", help="Only set the exit code")

    run = subparsers.add_parser("run", help="Run a folder of dataset files")
    run.add_argument("datasets", help="Path to folder containing dataset JSON files")
    run.add_argument("-c", "--config", help="Path to YAML/JSON config file")
    run.add_argument("-r", "--report", help="Path to output JSON report file")
    run.add_argument("-q", "--quiet", action="store_true", help="Suppress console output")

    return parser


def _read(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def cmd_diff(args: argparse.Namespace) -> int:
    config = load_config(args.config) if args.config else ComparatorConfig()
    config = merge_overrides(config, {
        "float_tolerance": args.float_tolerance,
        "int_tolerance": args.int_tolerance,
        "time_tolerance": args.time_tolerance,
        "time_layout": args.time_layout,
        "strip_pattern": args.strip_pattern,
        "ignore_paths": args.ignore_paths,
        "color": args.color,
    })

    result = build_differ(config).compare(_read(args.left), _read(args.right))
    if not result.modified:
        return EXIT_EQUAL

    if not args.quiet:
        sys.stdout.write(result.format(color=config.color))
    return EXIT_DIFFERENT


def cmd_run(args: argparse.Namespace) -> int:
    if not args.quiet:
        print(f"Datasets: {args.datasets}")
        if args.config:
            print(f"Config: {args.config}")

    report = run_datasets(args.datasets, args.config, print_report=not args.quiet)

    if args.report:
        with open(args.report, 'w') as f:
            json.dump(report.to_dict(), indent=2, fp=f)
        if not args.quiet:
            print(f"\nReport saved to: {args.report}")

    return EXIT_EQUAL if report.failed == 0 else EXIT_DIFFERENT


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    handler = cmd_diff if args.command == "diff" else cmd_run
    try:
        return handler(args)
    except (TolerantDiffError, OSError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
