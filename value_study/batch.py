# value_study/batch.py
from __future__ import annotations

"""
Batch driver: decode -> map -> encode for each input, one shared table.

Per-file failures (DecodeFailure, EncodeFailure, UnsupportedFormat) are
logged and counted; the remaining files are still processed. Nothing is
retried. With jobs > 1, files run on a thread pool and each file's log
lines are buffered and printed in input order.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .constants import DEFAULT_LUMA_METHOD, MULTI_OUTPUT_SEP, OUTPUT_SUFFIX
from .core_types import LookupTable
from .errors import EncodeFailure, FileProcessingError
from .image_io import has_image_suffix, load_image, output_format_for, save_image
from .mapper import apply_lookup_table
from .thresholds import plateau_names
from .utils import (
    capture_output,
    colour_usage_report,
    debug_log,
    error,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    replay_output,
    warn,
)

DEFAULT_EXT = ".png"


@dataclass(frozen=True)
class BatchOptions:
    output: Optional[Path] = None
    outdir: Optional[Path] = None
    ext: Optional[str] = None
    jobs: int = 1
    workers: int = 1
    luma_method: str = DEFAULT_LUMA_METHOD
    debug: bool = False


@dataclass(frozen=True)
class FileResult:
    src: Path
    dst: Optional[Path]
    error: Optional[FileProcessingError] = None
    seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchReport:
    results: List[FileResult] = field(default_factory=list)

    @property
    def failures(self) -> List[FileResult]:
        return [r for r in self.results if not r.ok]

    @property
    def succeeded(self) -> List[FileResult]:
        return [r for r in self.results if r.ok]

    @property
    def exit_code(self) -> int:
        """0 when every input was written; 1 on any failure or no input at all."""
        return 1 if self.failures or not self.results else 0


# Inputs / outputs


def normalise_ext(ext: Optional[str]) -> Optional[str]:
    """'png' / '.PNG' -> '.png'. None and '' stay None."""
    if not ext:
        return None
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


def is_output_artifact(path: Path) -> bool:
    return path.stem.endswith(OUTPUT_SUFFIX)


def collect_inputs(paths: Sequence[Path], debug: bool = False) -> List[Path]:
    """
    Expand folders into their image files (sorted, skipping our own
    outputs). Plain paths pass through untouched, even if missing, so the
    driver can report them as failures. A file reached twice (listed
    twice, or listed and inside a listed folder) is kept once.
    """
    files: List[Path] = []
    seen: Set[Path] = set()
    for p in paths:
        p = Path(p)
        if p.is_dir():
            entries = list(p.iterdir())
            found = [
                e
                for e in entries
                if e.is_file() and has_image_suffix(e) and not is_output_artifact(e)
            ]
            found.sort(key=lambda e: e.name.lower())
            if debug:
                debug_log(
                    key_value_pairs_to_string(
                        [("Folder", str(p)), ("Entries", len(entries)), ("Images", len(found))]
                    )
                )
            if not found:
                warn(f"no images found in {p}")
            candidates = found
        else:
            candidates = [p]
        for f in candidates:
            key = f.resolve()
            if key in seen:
                if debug:
                    debug_log(f"duplicate input {f}; skipped")
                continue
            seen.add(key)
            files.append(f)
    return files


def derive_output_path(
    src: Path,
    *,
    output: Optional[Path] = None,
    outdir: Optional[Path] = None,
    ext: Optional[str] = None,
    multiple: bool = False,
) -> Path:
    """
    Output path for `src`.

      no output            : <outdir or src dir>/<stem>_values<ext>
      single input, output : output (gets <ext> if it has no suffix)
      many inputs, output  : <output dir>/<src stem>-<output stem><output ext or ext>

    <ext> defaults to the input's own extension.
    """
    src = Path(src)
    ext_eff = normalise_ext(ext) or src.suffix.lower() or DEFAULT_EXT
    if output is None:
        base = outdir if outdir is not None else src.parent
        return base / f"{src.stem}{OUTPUT_SUFFIX}{ext_eff}"

    output = Path(output)
    if not multiple:
        return output if output.suffix else output.with_suffix(ext_eff)
    out_ext = output.suffix or ext_eff
    return output.with_name(f"{src.stem}{MULTI_OUTPUT_SEP}{output.stem}{out_ext}")


def find_output_clashes(pairs: Sequence[Tuple[Path, Path]]) -> Dict[int, EncodeFailure]:
    """
    Index -> EncodeFailure for every pair whose destination was already
    claimed by an earlier input. The first claimant keeps the name.
    """
    owners: Dict[Path, Path] = {}
    clashes: Dict[int, EncodeFailure] = {}
    for i, (src, dst) in enumerate(pairs):
        key = dst.resolve()
        owner = owners.get(key)
        if owner is None:
            owners[key] = src
        else:
            clashes[i] = EncodeFailure(dst, f"output name already used by {owner}")
    return clashes


# Per-file processing


def process_file(
    src: Path,
    dst: Path,
    table: LookupTable,
    options: BatchOptions,
    names: Optional[Dict[str, str]] = None,
) -> Path:
    """
    Process a single image path end-to-end:
      load -> map -> save -> report.
    Raises FileProcessingError subclasses.
    """
    t_start = time.perf_counter()
    names = names if names is not None else plateau_names(table)
    output_format_for(dst)  # unsupported target: fail before decoding

    rgb, alpha = load_image(src)
    height, width = int(rgb.shape[0]), int(rgb.shape[1])
    t_loaded = time.perf_counter()
    if options.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{width}x{height}"),
                    ("Alpha", alpha is not None),
                    ("Load time", format_seconds_compact(t_loaded - t_start)),
                ]
            )
        )

    mapped = apply_lookup_table(
        rgb, table, workers=options.workers, luma_method=options.luma_method
    )
    t_mapped = time.perf_counter()

    written = save_image(dst, mapped, alpha)
    t_saved = time.perf_counter()

    log(f"Wrote {written.name} | size={width}x{height} | levels={len(names)}")
    log("Values used:")
    for hex_code, name, count in colour_usage_report(mapped, alpha, names):
        log(f"  {hex_code}  {name}: {count:,}")

    if options.debug:
        map_secs = t_mapped - t_loaded
        total_pixels = width * height
        if map_secs > 0:
            rate_mpx_s = (total_pixels / map_secs) / 1e6
            debug_log(
                f"throughput {rate_mpx_s:.2f} MPx/s  ({total_pixels / 1e6:.2f} MPx in {format_seconds_compact(map_secs)})"
            )
        debug_log(
            f"Total {format_total_duration_compact(t_saved - t_start)}  "
            f"(load={format_seconds_compact(t_loaded - t_start)}, "
            f"map={format_seconds_compact(t_mapped - t_loaded)}, "
            f"save={format_seconds_compact(t_saved - t_mapped)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_saved - t_start)}")
    return written


def _process_one(
    src: Path,
    dst: Path,
    table: LookupTable,
    options: BatchOptions,
    names: Dict[str, str],
    clash: Optional[EncodeFailure] = None,
) -> FileResult:
    """Run process_file, turning per-file errors into a failed FileResult."""
    print_banner(src.name)
    t0 = time.perf_counter()
    try:
        if clash is not None:
            raise clash
        written = process_file(src, dst, table, options, names)
    except FileProcessingError as e:
        error(f"{src.name}: {e.reason}; skipped")
        return FileResult(src=src, dst=None, error=e, seconds=time.perf_counter() - t0)
    return FileResult(src=src, dst=written, seconds=time.perf_counter() - t0)


def _process_one_captured(
    src: Path,
    dst: Path,
    table: LookupTable,
    options: BatchOptions,
    names: Dict[str, str],
    clash: Optional[EncodeFailure] = None,
) -> Tuple[FileResult, List[Tuple[str, str]]]:
    """
    Process a single file with log capture.

    Useful for concurrent execution where output should be printed in order.
    """
    with capture_output() as records:
        result = _process_one(src, dst, table, options, names, clash)
    return result, records


# Entry point


def run_batch(
    paths: Sequence[Path], table: LookupTable, options: BatchOptions
) -> BatchReport:
    """
    Process every input with the shared table. Never raises for per-file
    I/O problems; inspect the report's failures / exit_code instead.
    """
    files = collect_inputs(paths, debug=options.debug)
    multiple = len(files) > 1
    names = plateau_names(table)
    pairs = [
        (
            src,
            derive_output_path(
                src,
                output=options.output,
                outdir=options.outdir,
                ext=options.ext,
                multiple=multiple,
            ),
        )
        for src in files
    ]
    clashes = find_output_clashes(pairs)
    if not files:
        error("no input images found")

    report = BatchReport()
    if options.jobs <= 1 or len(pairs) <= 1:
        for i, (src, dst) in enumerate(pairs):
            report.results.append(
                _process_one(src, dst, table, options, names, clashes.get(i))
            )
    else:
        with ThreadPoolExecutor(max_workers=options.jobs) as ex:
            futures = [
                ex.submit(
                    _process_one_captured, src, dst, table, options, names, clashes.get(i)
                )
                for i, (src, dst) in enumerate(pairs)
            ]
            for fu in futures:
                result, records = fu.result()
                replay_output(records)
                report.results.append(result)

    ok = len(report.succeeded)
    log("")
    log(
        key_value_pairs_to_string(
            [("Processed", len(report.results)), ("Written", ok), ("Failed", len(report.failures))]
        )
    )
    for r in report.failures:
        error(f"failed: {r.src}")
    return report


__all__ = [
    "BatchOptions",
    "FileResult",
    "BatchReport",
    "normalise_ext",
    "collect_inputs",
    "derive_output_path",
    "find_output_clashes",
    "process_file",
    "run_batch",
]
