# value_study/mapper.py
from __future__ import annotations

"""
Pixel mapper: apply a LookupTable to an RGB buffer.

Per pixel: luma via colour_convert.rgb_to_luma, then one array index into
the table. The table is read-only and shared, so row chunks can be mapped
on worker threads and stitched back without locking.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .colour_convert import rgb_to_luma
from .constants import DEFAULT_LUMA_METHOD, MIN_ROWS_PER_WORKER
from .core_types import LookupTable, U8Image, assert_u8_image_rgb
from .utils import split_rows_into_parts


def _map_rows(rgb: U8Image, table: LookupTable, luma_method: str) -> U8Image:
    luma = rgb_to_luma(rgb, luma_method)
    return table.colours[luma]


def apply_lookup_table(
    rgb: U8Image,
    table: LookupTable,
    *,
    workers: int = 1,
    luma_method: str = DEFAULT_LUMA_METHOD,
) -> U8Image:
    """
    Map every pixel of uint8 [H,W,3] (alpha channel, if any, is ignored)
    to its table colour. Returns a new contiguous uint8 [H,W,3]; the input
    is never modified.
    """
    img = assert_u8_image_rgb(rgb)
    height = int(img.shape[0])
    if workers <= 1 or height < MIN_ROWS_PER_WORKER:
        return np.ascontiguousarray(_map_rows(img, table, luma_method))

    out = np.empty((height, img.shape[1], 3), dtype=np.uint8)
    spans = split_rows_into_parts(height, workers)
    with ThreadPoolExecutor(max_workers=workers) as ex:
        futs = [
            (s, e, ex.submit(_map_rows, img[s:e], table, luma_method))
            for s, e in spans
        ]
        for s, e, fu in futs:
            out[s:e] = fu.result()
    return out


def map_luma(luma: np.ndarray, table: LookupTable) -> np.ndarray:
    """Map a precomputed uint8 luma plane to greyscale output values."""
    if luma.dtype != np.uint8:
        raise TypeError("expected uint8 luma")
    return table.values[luma]


__all__ = ["apply_lookup_table", "map_luma"]
