"""Terminal CLI entrypoint for the workbook to erg converter."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ergsheet.core.converter import WorkbookConverter
from ergsheet.workout.errors import ErgSheetError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert a workout workbook (.xlsx) into erg course files"
    )
    parser.add_argument("workbook", type=Path, help="Workbook with an Overview sheet")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for .erg files (default: next to the workbook)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Log parsing details"
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Only log warnings and errors"
    )
    return parser


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    converter = WorkbookConverter(out_dir=args.output_dir)
    try:
        results = converter.convert(args.workbook)
    except ErgSheetError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    for result in results:
        print(result.summary_line())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
