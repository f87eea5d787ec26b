# value_study/cli.py
"""
value_study CLI.
Posterize photographs to a chosen set of brightness values for value studies.

Usage:
  value_study FILE [FILE ...] [-v LEVELS | -n COUNT] [-k] [-c COLOURS]
              [-o OUTPUT] [-e EXT] [--outdir DIR] [--luma srgb|rec601]
              [--jobs N] [--workers N] [--dry-run] [--debug]

Levels:
  The value scale has 11 levels, 0 = black .. 10 = white.
  -v 2,5,9 : keep levels 2, 5 and 9; other levels fold into the nearest
             lower selected level.
  -k       : selected levels keep their own canonical brightness instead
             of being re-spaced evenly.
  -n 5     : split 0..255 into 5 even buckets.
  Nothing  : all 11 levels (or one bucket per colour when -c is given).

Colours:
  -c 1b1b3a,#693668,#a74482 : one hex colour per output level.

Output:
  <stem>_values.<ext> next to the input unless -o/--outdir say otherwise.
  Extension defaults to the input's. PNG and JPEG are supported.

Exit status:
  0 all files written, 1 some file failed, 2 bad arguments.
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import List, Optional, Sequence

from .constants import DEFAULT_LUMA_METHOD, LUMA_METHODS
from .core_types import EvenSplit, Explicit, LookupTable, Selection, rgb_to_hex
from .errors import ConfigurationError, UnsupportedFormat
from .image_io import is_supported_output_ext
from .batch import BatchOptions, normalise_ext, run_batch
from .levels import parse_colour_list, parse_level_list, resolve_selection
from .thresholds import build_lookup_table, describe_table
from .utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    key_value_pairs_to_string,
    log,
    print_config_line,
)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


# CLI args & small helpers


def _default_workers() -> int:
    """Leave a few cores free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 4
    reserve = 1 if n <= 6 else 2 if n <= 12 else 3 if n <= 18 else 4
    return max(1, n - reserve)


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected >= 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="value_study",
        description="Posterize images to a chosen set of brightness values (0=black .. 10=white).",
    )
    parser.add_argument(
        "files", type=Path, nargs="+", metavar="FILE", help="Input image(s) or folder(s)"
    )
    parser.add_argument(
        "-v",
        "--values",
        default=None,
        help="Comma-separated ascending levels 0-10 to keep, e.g. 2,5,9",
    )
    parser.add_argument(
        "-n",
        "--num-steps",
        type=int,
        default=None,
        help="Split into N even value steps (2-11). Not combinable with -v.",
    )
    parser.add_argument(
        "-k",
        "--keep",
        action="store_true",
        help="Selected levels keep their own canonical value instead of being re-spaced.",
    )
    parser.add_argument(
        "-c",
        "--colors",
        "--colours",
        dest="colours",
        default=None,
        help="Comma-separated hex colours, one per output level.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output file. With several inputs, its stem is appended to each input stem.",
    )
    parser.add_argument(
        "-e",
        "--ext",
        default=None,
        help="Output extension (png, jpg). Defaults to the input's extension.",
    )
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--luma",
        choices=list(LUMA_METHODS),
        default=DEFAULT_LUMA_METHOD,
        help="Luma weighting used to measure brightness.",
    )
    parser.add_argument(
        "--jobs", type=_positive_int, default=1, help="Files processed in parallel"
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        default=_default_workers(),
        help="Row-chunk threads per image",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the resolved value table and exit without writing files.",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        files: list of input Paths
        values / colours: raw comma-separated strings or None
        num_steps: int or None
        keep, dry_run, debug: bool
        output, outdir: optional Paths
        ext: optional extension string
        luma: luma method name
        jobs, workers: int
    """
    return build_parser().parse_args(argv)


def selection_from_args(args: argparse.Namespace) -> Selection:
    """Raise ConfigurationError for any invalid combination."""
    values = parse_level_list(args.values) if args.values is not None else None
    colours = parse_colour_list(args.colours) if args.colours is not None else None
    return resolve_selection(
        values=values, steps=args.num_steps, colours=colours, keep=args.keep
    )


def check_output_format(args: argparse.Namespace) -> None:
    """Reject an explicitly requested output format we cannot write."""
    ext = normalise_ext(args.ext)
    if ext is not None and not is_supported_output_ext(ext):
        raise UnsupportedFormat(Path(f"*{ext}"), ext)
    if args.output is not None and args.output.suffix:
        if not is_supported_output_ext(args.output.suffix):
            raise UnsupportedFormat(args.output)


def _mode_label(selection: Selection) -> str:
    mode = selection.mode
    if isinstance(mode, EvenSplit):
        return f"even/{mode.steps}"
    if isinstance(mode, Explicit):
        levels = ",".join(str(v) for v in mode.levels)
        return f"levels {levels}" + (" keep" if mode.keep else "")
    return repr(mode)


def print_table(table: LookupTable, debug: bool) -> None:
    """Print the per-level output array and the luma plateaus."""
    emit = debug_log if debug else log
    emit(f"level values: {table.level_values.tolist()}")
    emit(f"boundaries:   {table.boundaries.tolist()}")
    for value, rgb, lo, hi in describe_table(table):
        emit(
            key_value_pairs_to_string(
                [("luma", f"{lo:3d}-{hi:3d}"), ("value", value), ("colour", rgb_to_hex(rgb))]
            )
        )


# Entry point


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point. Returns the process exit status.

    Configuration errors are reported before any file is opened.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    try:
        selection = selection_from_args(args)
        check_output_format(args)
    except ConfigurationError as e:
        error(str(e))
        return EXIT_CONFIG
    except UnsupportedFormat as e:
        error(e.reason)
        return EXIT_CONFIG

    table = build_lookup_table(selection)

    print_config_line(
        "run",
        [
            ("Files", len(args.files)),
            ("Mode", _mode_label(selection)),
            ("Colours", selection.colours is not None),
            ("Luma", args.luma),
            ("Jobs", args.jobs),
            ("Workers", args.workers),
        ],
        debug=False,
    )
    if args.debug or args.dry_run:
        print_table(table, debug=not args.dry_run)
    if args.dry_run:
        return EXIT_OK

    options = BatchOptions(
        output=args.output,
        outdir=args.outdir,
        ext=args.ext,
        jobs=args.jobs,
        workers=args.workers,
        luma_method=args.luma,
        debug=args.debug,
    )
    if args.outdir is not None:
        try:
            args.outdir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            error(f"cannot create output directory {args.outdir}: {e}")
            return EXIT_CONFIG
    report = run_batch(args.files, table, options)
    return EXIT_FAILED if report.exit_code else EXIT_OK


__all__ = [
    "build_parser",
    "parse_cli_args",
    "selection_from_args",
    "check_output_format",
    "print_table",
    "main",
]
