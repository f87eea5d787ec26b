# value_study/thresholds.py
from __future__ import annotations

"""
Threshold builder: Selection -> 256-entry LookupTable.

Bucket grid:
  boundary(i) = i * (255 // steps), i in [0, steps)
  A luma belongs to the greatest boundary <= luma; the last bucket absorbs
  the remainder up to 255. Step size is floor-divided, so the 11-step grid
  is [0, 23, 46, ..., 230], not an evenly rounded one.

Explicit levels, per canonical level L:
  active(L) = last selected level <= L, else the first selected level.
  keep on  : output = canonical boundary of active(L)
  keep off : output = rank(active(L)) * (255 // number_selected)
"""

from typing import Dict, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from .constants import LUMA_MAX, LUMA_SIZE, NUM_LEVELS
from .core_types import (
    ColourTable,
    EvenSplit,
    Explicit,
    LevelSet,
    LookupTable,
    RGBTuple,
    Selection,
    rgb_to_hex,
)


def bucket_boundaries(steps: int) -> NDArray[np.int32]:
    """Lower luma bound of each of `steps` buckets."""
    if steps < 1:
        raise ValueError(f"steps must be >= 1, got {steps}")
    step = LUMA_MAX // steps
    return np.arange(steps, dtype=np.int32) * np.int32(step)


def bucket_indices(boundaries: NDArray[np.int32]) -> NDArray[np.intp]:
    """Bucket index for every luma 0..255 (inclusive lower bounds)."""
    luma = np.arange(LUMA_SIZE, dtype=np.int32)
    idx = np.searchsorted(boundaries, luma, side="right") - 1
    return np.clip(idx, 0, boundaries.shape[0] - 1)


def active_ranks(levels: LevelSet, num_levels: int = NUM_LEVELS) -> NDArray[np.intp]:
    """
    Rank (index into `levels`) of the selected level governing each
    canonical level. Levels before the first selection redirect forward.
    """
    ranks = np.zeros(num_levels, dtype=np.intp)
    rank = 0
    for level in range(num_levels):
        while rank + 1 < len(levels) and levels[rank + 1] <= level:
            rank += 1
        ranks[level] = rank
    return ranks


def explicit_level_values(
    levels: LevelSet, keep: bool, boundaries: Optional[NDArray[np.int32]] = None
) -> NDArray[np.uint8]:
    """Output value for each of the 11 canonical levels."""
    grid = bucket_boundaries(NUM_LEVELS) if boundaries is None else boundaries
    ranks = active_ranks(levels, grid.shape[0])
    if keep:
        chosen = np.asarray(levels, dtype=np.int32)[ranks]
        values = grid[chosen]
    else:
        values = ranks * (LUMA_MAX // len(levels))
    return values.astype(np.uint8)


def _plateau_colours(
    values: NDArray[np.uint8],
    ranks: NDArray[np.intp],
    colours: Optional[ColourTable],
) -> NDArray[np.uint8]:
    """Per-bucket RGB: the colour table entry by rank, else grey of the value."""
    if colours is None:
        return np.repeat(values[:, None], 3, axis=1).astype(np.uint8)
    table = np.asarray(colours, dtype=np.uint8).reshape(-1, 3)
    return table[ranks]


def build_lookup_table(selection: Selection) -> LookupTable:
    """
    Build the immutable luma -> output table for a validated selection.
    Every entry 0..255 is populated.
    """
    mode = selection.mode
    if isinstance(mode, EvenSplit):
        boundaries = bucket_boundaries(mode.steps)
        level_values = boundaries.astype(np.uint8)
        ranks = np.arange(mode.steps, dtype=np.intp)
    elif isinstance(mode, Explicit):
        boundaries = bucket_boundaries(NUM_LEVELS)
        level_values = explicit_level_values(mode.levels, mode.keep, boundaries)
        ranks = active_ranks(mode.levels, NUM_LEVELS)
    else:
        raise TypeError(f"unknown selection mode {mode!r}")

    level_colours = _plateau_colours(level_values, ranks, selection.colours)
    idx = bucket_indices(boundaries)
    return LookupTable(
        values=np.ascontiguousarray(level_values[idx]),
        colours=np.ascontiguousarray(level_colours[idx]),
        level_values=level_values,
        boundaries=boundaries,
        mode=mode,
    )


def describe_table(table: LookupTable) -> List[Tuple[int, RGBTuple, int, int]]:
    """
    Collapse the table into plateaus: (value, rgb, luma_lo, luma_hi).
    A plateau is a maximal run of luma values sharing one output colour.
    """
    out: List[Tuple[int, RGBTuple, int, int]] = []
    start = 0
    colours = table.colours
    for luma in range(1, LUMA_SIZE + 1):
        if luma == LUMA_SIZE or not np.array_equal(colours[luma], colours[start]):
            rgb = colours[start]
            out.append(
                (
                    int(table.values[start]),
                    (int(rgb[0]), int(rgb[1]), int(rgb[2])),
                    start,
                    luma - 1,
                )
            )
            start = luma
    return out


def plateau_names(table: LookupTable) -> Dict[str, str]:
    """'#rrggbb' -> 'value N' label for usage reports."""
    names: Dict[str, str] = {}
    for value, rgb, _lo, _hi in describe_table(table):
        names.setdefault(rgb_to_hex(rgb), f"value {value}")
    return names


__all__ = [
    "bucket_boundaries",
    "bucket_indices",
    "active_ranks",
    "explicit_level_values",
    "build_lookup_table",
    "describe_table",
    "plateau_names",
]
