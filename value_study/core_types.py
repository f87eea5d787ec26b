# value_study/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

import string
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidColor

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str
Level = int
LevelSet = Tuple[Level, ...]  # strictly increasing, each in [0, 10]
ColourTable = Tuple[RGBTuple, ...]

U8Image = NDArray[np.uint8]  # (H, W, 3)
U8Mask = NDArray[np.uint8]  # (H, W)
U8Luma = NDArray[np.uint8]  # (H, W)
U8Lut = NDArray[np.uint8]  # (256,) or (256, 3)

# Selection modes


@dataclass(frozen=True)
class EvenSplit:
    """Divide 0..255 into `steps` equal-width buckets."""

    steps: int

    @property
    def plateau_count(self) -> int:
        return self.steps


@dataclass(frozen=True)
class Explicit:
    """User-chosen canonical levels; `keep` keeps their own boundaries."""

    levels: LevelSet
    keep: bool = False

    @property
    def plateau_count(self) -> int:
        return len(self.levels)


SelectionMode = Union[EvenSplit, Explicit]


@dataclass(frozen=True)
class Selection:
    """Validated mode plus optional colour table (one colour per plateau)."""

    mode: SelectionMode
    colours: Optional[ColourTable] = None


@dataclass(frozen=True, eq=False)
class LookupTable:
    """
    Immutable luma -> output mapping.

    values       : uint8 [256] greyscale output per input luma
    colours      : uint8 [256, 3] RGB written per input luma
    level_values : uint8 [steps] output value per bucket of the grid
    boundaries   : int [steps] lower luma bound of each bucket
    """

    values: U8Lut
    colours: U8Lut
    level_values: NDArray[np.uint8]
    boundaries: NDArray[np.int32]
    mode: SelectionMode

    def __post_init__(self) -> None:
        for arr in (self.values, self.colours, self.level_values, self.boundaries):
            arr.setflags(write=False)

    def __getitem__(self, luma: int) -> RGBTuple:
        return coerce_to_rgb_tuple(self.colours[int(luma)])

    def __len__(self) -> int:
        return int(self.values.shape[0])


# Small helpers


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse 'rrggbb', '#rrggbb' or '#rgb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower()
    if not s.startswith("#"):
        s = f"#{s}"
    if len(s) == 4:
        r, g, b = s[1], s[2], s[3]
        s = f"#{r}{r}{g}{g}{b}{b}"
    if len(s) != 7:
        raise InvalidColor(f"invalid colour {hex_str!r}: must be '#rrggbb' or '#rgb'")
    if not all(c in string.hexdigits for c in s[1:]):
        raise InvalidColor(f"invalid colour {hex_str!r}: not hexadecimal")
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def coerce_to_rgb_tuple(value: Union[Sequence[int], NDArray[np.generic]]) -> RGBTuple:
    """
    Coerce a 3-length sequence or array to an (int, int, int) RGB tuple.
    Helpful when extracting values from NumPy rows.
    """
    if isinstance(value, np.ndarray):
        if value.size < 3:
            raise ValueError("array too small for RGB")
        return (int(value[..., 0]), int(value[..., 1]), int(value[..., 2]))
    if len(value) < 3:  # type: ignore[arg-type]
        raise ValueError("sequence too small for RGB")
    v = value  # type: ignore[assignment]
    return (int(v[0]), int(v[1]), int(v[2]))


def assert_u8_image_rgb(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,3 or 4) image and return it typed as U8Image."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] < 3:
        raise TypeError("expected uint8 (H,W,3/4) image")
    return image  # type: ignore[return-value]


def assert_u8_mask_2d(mask_array: np.ndarray) -> U8Mask:
    """Validate a uint8 (H,W) mask and return it typed as U8Mask."""
    if mask_array.dtype != np.uint8 or mask_array.ndim != 2:
        raise TypeError("expected uint8 (H,W) mask")
    return mask_array  # type: ignore[return-value]


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "Level",
    "LevelSet",
    "ColourTable",
    "U8Image",
    "U8Mask",
    "U8Luma",
    "U8Lut",
    # value objects
    "EvenSplit",
    "Explicit",
    "SelectionMode",
    "Selection",
    "LookupTable",
    # helpers
    "rgb_to_hex",
    "hex_to_rgb",
    "coerce_to_rgb_tuple",
    "assert_u8_image_rgb",
    "assert_u8_mask_2d",
]
