# value_study/utils.py
from __future__ import annotations

"""
Shared utilities for value_study.

Includes time/number formatting, row partitioning for threaded mapping,
plateau usage reporting, and tidy console logging. Log lines can be
captured per task so parallel batch runs still print in input order.
"""

import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple

import numpy as np

from .core_types import U8Image, U8Mask


#  Time / size formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'Ss.s', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


# Image helpers


def split_rows_into_parts(height: int, parts: int) -> List[Tuple[int, int]]:
    """Partition range [0, height) into ~parts contiguous [start, end) row spans."""
    parts = max(1, int(parts))
    step = max(1, (height + parts - 1) // parts)
    return [(start, min(start + step, height)) for start in range(0, height, step)]


def colour_usage_report(
    mapped_rgb: U8Image, alpha_mask: Optional[U8Mask], name_of: Mapping[str, str]
) -> List[Tuple[str, str, int]]:
    """
    Compute a simple colour usage report for visible pixels.

    Returns a list of (hex, name, count) sorted by count descending.
    """
    if alpha_mask is None:
        flat = mapped_rgb.reshape(-1, 3)
    else:
        visible_mask = alpha_mask > 0
        if not np.any(visible_mask):
            return []
        flat = mapped_rgb[visible_mask].reshape(-1, 3)
    if flat.shape[0] == 0:
        return []
    uniques, counts = np.unique(flat, axis=0, return_counts=True)
    report: List[Tuple[str, str, int]] = []
    for rgb_row, count in sorted(zip(uniques, counts), key=lambda x: -int(x[1])):
        hex_str = f"#{int(rgb_row[0]):02x}{int(rgb_row[1]):02x}{int(rgb_row[2]):02x}"
        report.append((hex_str, name_of.get(hex_str, "?"), int(count)))
    return report


#  CLI / output capture


def enable_line_buffered_stdout() -> None:
    """
    Enable line-buffered stdout when supported.
    Helps live progress printing in terminals that expose .reconfigure().
    """
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


# (stream, text) records collected while a capture is active
_CAPTURE: ContextVar[Optional[List[Tuple[str, str]]]] = ContextVar(
    "value_study_capture", default=None
)


def _emit(text: str, stream: str = "stdout") -> None:
    records = _CAPTURE.get()
    if records is not None:
        records.append((stream, text))
        return
    out = sys.stderr if stream == "stderr" else sys.stdout
    print(text, file=out, flush=True)


@contextmanager
def capture_output() -> Iterator[List[Tuple[str, str]]]:
    """
    Collect log lines emitted in the current context instead of printing.
    Safe across worker threads: each task captures into its own list.
    """
    records: List[Tuple[str, str]] = []
    token = _CAPTURE.set(records)
    try:
        yield records
    finally:
        _CAPTURE.reset(token)


def replay_output(records: Iterable[Tuple[str, str]]) -> None:
    """Print captured records to their original streams."""
    for stream, text in records:
        _emit(text, stream)


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1_234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, bool):
        return format_bool_on_off(value)
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        out.append(f"{name}{eq}{format_number_compact(value)}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [run] Files: 3  Jobs: 1  Workers: 4  Luma: srgb
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    _emit(f"\n=== {title} ===")


def log(message: str) -> None:
    """Plain log line."""
    _emit(message)


def debug_log(message: str) -> None:
    """Debug log line."""
    _emit(f"[debug] {message}")


def warn(message: str) -> None:
    """Warning log line."""
    _emit(f"[warn] {message}")


def error(message: str) -> None:
    """Error log line to stderr."""
    _emit(f"[error] {message}", stream="stderr")


__all__ = [
    # formatting
    "format_seconds_compact",
    "format_total_duration_compact",
    "format_bool_on_off",
    "format_number_compact",
    "key_value_pairs_to_string",
    # image helpers
    "split_rows_into_parts",
    "colour_usage_report",
    # output capture
    "enable_line_buffered_stdout",
    "capture_output",
    "replay_output",
    # logging
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
