# value_study/levels.py
from __future__ import annotations

"""
Level selection: parse and validate what the user asked for.

Exports:
  parse_level_list(text)            -> list[int]
  parse_colour_list(text)           -> ColourTable
  validate_levels(values)           -> LevelSet
  resolve_selection(values, steps, colours, keep) -> Selection

Rules:
  - explicit levels and an even-split count are mutually exclusive
  - levels lie in [0, 10] and are strictly ascending
  - nothing given: all 11 levels, or an even split by colour count when
    only colours are given
  - a colour table has exactly one entry per output level
"""

from typing import Iterable, List, Optional, Sequence

from .constants import ALL_LEVELS, MAX_LEVEL, MAX_STEPS, MIN_LEVEL, MIN_STEPS
from .core_types import (
    ColourTable,
    EvenSplit,
    Explicit,
    LevelSet,
    RGBTuple,
    Selection,
    SelectionMode,
    hex_to_rgb,
)
from .errors import (
    ColorCountMismatch,
    ConflictingMode,
    InvalidColor,
    InvalidLevel,
    InvalidStepCount,
)
from .utils import warn


def _split_csv(text: str) -> List[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def parse_level_list(text: str) -> List[int]:
    """Parse '2,5,9' into [2, 5, 9]. Validation is left to validate_levels."""
    out: List[int] = []
    for part in _split_csv(text):
        try:
            out.append(int(part))
        except ValueError:
            raise InvalidLevel(f"level {part!r} is not an integer") from None
    return out


def parse_colour_list(text: str) -> ColourTable:
    """Parse 'ff0000,#00ff00,#00f' into RGB triples."""
    return tuple(hex_to_rgb(part) for part in _split_csv(text))


def validate_levels(values: Iterable[int]) -> LevelSet:
    """Return values as a LevelSet or raise InvalidLevel."""
    levels = tuple(int(v) for v in values)
    if not levels:
        raise InvalidLevel("at least one level is required")
    for v in levels:
        if v < MIN_LEVEL or v > MAX_LEVEL:
            raise InvalidLevel(
                f"level {v} is outside [{MIN_LEVEL}, {MAX_LEVEL}]"
            )
    for prev, cur in zip(levels, levels[1:]):
        if cur <= prev:
            raise InvalidLevel(
                f"levels must be unique and ascending, got {list(levels)}"
            )
    return levels


def validate_steps(steps: int) -> int:
    steps = int(steps)
    if steps < MIN_STEPS or steps > MAX_STEPS:
        raise InvalidStepCount(
            f"number of steps must be in [{MIN_STEPS}, {MAX_STEPS}], got {steps}"
        )
    return steps


def resolve_selection(
    values: Optional[Sequence[int]] = None,
    steps: Optional[int] = None,
    colours: Optional[Sequence[RGBTuple]] = None,
    keep: bool = False,
) -> Selection:
    """
    Resolve CLI-style inputs into a validated Selection.

    Raises ConflictingMode, InvalidLevel, InvalidStepCount, InvalidColor
    or ColorCountMismatch. Runs before any image is touched.
    """
    # an empty list counts as given: `-v ""` is an error, not a default
    has_values = values is not None
    has_colours = colours is not None
    if has_colours and not colours:
        raise InvalidColor("at least one colour is required")
    if has_values and steps is not None:
        raise ConflictingMode("explicit levels and a step count are mutually exclusive")

    mode: SelectionMode
    if has_values:
        mode = Explicit(validate_levels(values or ()), keep=bool(keep))
    else:
        if keep:
            warn("keep has no effect without explicit levels; ignoring")
        if steps is not None:
            mode = EvenSplit(validate_steps(steps))
        elif has_colours:
            mode = EvenSplit(validate_steps(len(colours or ())))
        else:
            mode = Explicit(ALL_LEVELS, keep=False)

    table: Optional[ColourTable] = None
    if has_colours:
        table = tuple(tuple(int(c) for c in rgb) for rgb in colours or ())  # type: ignore[misc]
        if len(table) != mode.plateau_count:
            raise ColorCountMismatch(mode.plateau_count, len(table))

    return Selection(mode=mode, colours=table)


__all__ = [
    "parse_level_list",
    "parse_colour_list",
    "validate_levels",
    "validate_steps",
    "resolve_selection",
]
