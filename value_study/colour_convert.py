# value_study/colour_convert.py
from __future__ import annotations

"""
Colour conversions: sRGB -> single-channel luma in 0..255.

Exports:
  rgb_to_linear(srgb)
  linear_to_srgb(linear)
  rgb_to_luma(rgb, method="srgb")

Methods:
  srgb   : Rec. 709 relative luminance in linear light, re-encoded with the
           sRGB transfer curve. Greys map to themselves.
  rec601 : ITU-R 601-2 weights on the encoded values, same integer
           arithmetic as Pillow's convert("L").
"""

import numpy as np

from .constants import DEFAULT_LUMA_METHOD, LUMA_MAX, LUMA_METHODS, REC709_WEIGHTS
from .core_types import U8Image, U8Luma, assert_u8_image_rgb


# sRGB transfer curve


def rgb_to_linear(srgb: np.ndarray) -> np.ndarray:
    """
    Convert sRGB (non-linear 0..1) to linear RGB (0..1). Vectorised.
    Returns float64 with shape preserved.
    """
    srgb_f = np.asarray(srgb, dtype=np.float64)
    return np.where(
        srgb_f <= 0.04045, srgb_f / 12.92, ((srgb_f + 0.055) / 1.055) ** 2.4
    )


def linear_to_srgb(linear: np.ndarray) -> np.ndarray:
    """Inverse of rgb_to_linear. Input is clipped to 0..1."""
    lin = np.clip(np.asarray(linear, dtype=np.float64), 0.0, 1.0)
    return np.where(
        lin <= 0.0031308, lin * 12.92, 1.055 * np.power(lin, 1.0 / 2.4) - 0.055
    )


# uint8 code value -> linear light, computed once
_LINEAR_OF_U8 = rgb_to_linear(np.arange(LUMA_MAX + 1, dtype=np.float64) / LUMA_MAX)
_LINEAR_OF_U8.setflags(write=False)


# RGB to luma


def _luma_srgb(rgb: U8Image) -> U8Luma:
    lin = _LINEAR_OF_U8[rgb[..., :3]]
    wr, wg, wb = REC709_WEIGHTS
    y = wr * lin[..., 0] + wg * lin[..., 1] + wb * lin[..., 2]
    encoded = linear_to_srgb(y) * LUMA_MAX
    return np.rint(encoded).astype(np.uint8)


def _luma_rec601(rgb: U8Image) -> U8Luma:
    # Pillow: L = (R*19595 + G*38470 + B*7471 + 0x8000) >> 16
    r = rgb[..., 0].astype(np.uint32)
    g = rgb[..., 1].astype(np.uint32)
    b = rgb[..., 2].astype(np.uint32)
    return ((r * 19595 + g * 38470 + b * 7471 + 0x8000) >> 16).astype(np.uint8)


def rgb_to_luma(rgb: np.ndarray, method: str = DEFAULT_LUMA_METHOD) -> U8Luma:
    """
    uint8 RGB [...,3] (or RGBA, alpha ignored) to uint8 luma [...].
    Deterministic; raises ValueError for an unknown method.
    """
    img = assert_u8_image_rgb(rgb) if rgb.ndim == 3 else rgb
    if img.dtype != np.uint8 or img.shape[-1] < 3:
        raise TypeError("expected uint8 (...,3/4) RGB data")
    if method == "srgb":
        return _luma_srgb(img)
    if method == "rec601":
        return _luma_rec601(img)
    raise ValueError(f"unknown luma method {method!r}; expected one of {LUMA_METHODS}")


__all__ = [
    "rgb_to_linear",
    "linear_to_srgb",
    "rgb_to_luma",
]
