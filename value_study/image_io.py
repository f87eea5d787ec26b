# value_study/image_io.py
from __future__ import annotations

"""
Image I/O helpers: decode to RGB (+ optional alpha), encode PNG/JPEG.

ICC profiles are not applied; pixels are taken as sRGB.
"""

from pathlib import Path
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import INPUT_EXTS, OUTPUT_FORMATS
from .core_types import U8Image, U8Mask, assert_u8_image_rgb, assert_u8_mask_2d
from .errors import DecodeFailure, EncodeFailure, UnsupportedFormat


def output_format_for(path: Path) -> str:
    """Pillow format name for an output path, by extension."""
    fmt = OUTPUT_FORMATS.get(Path(path).suffix.lower())
    if fmt is None:
        raise UnsupportedFormat(path)
    return fmt


def is_supported_output_ext(ext: str) -> bool:
    ext = ext if ext.startswith(".") else f".{ext}"
    return ext.lower() in OUTPUT_FORMATS


def has_image_suffix(path: Path) -> bool:
    return Path(path).suffix.lower() in INPUT_EXTS


def load_image(path: Path) -> Tuple[U8Image, Optional[U8Mask]]:
    """
    Decode with Pillow, honour EXIF orientation.

    Returns (rgb uint8 [H,W,3], alpha uint8 [H,W] or None).
    Raises DecodeFailure.
    """
    try:
        with Image.open(path) as im0:
            im = ImageOps.exif_transpose(im0)
            has_alpha = im.mode in ("RGBA", "LA", "PA") or (
                im.mode == "P" and "transparency" in im.info
            )
            arr = np.array(im.convert("RGBA" if has_alpha else "RGB"), dtype=np.uint8)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
    ) as e:
        raise DecodeFailure(path, str(e) or type(e).__name__) from e

    if has_alpha:
        return np.ascontiguousarray(arr[..., :3]), np.ascontiguousarray(arr[..., 3])
    return arr, None


def save_image(path: Path, rgb: U8Image, alpha: Optional[U8Mask] = None) -> Path:
    """
    Encode rgb to `path`, format chosen by extension. PNG keeps alpha,
    JPEG drops it. The image is written to a hidden sibling and moved into
    place, so a failed save leaves neither a partial file nor a clobbered
    previous output.
    Raises UnsupportedFormat or EncodeFailure.
    """
    path = Path(path)
    fmt = output_format_for(path)
    rgb = assert_u8_image_rgb(rgb)[..., :3]

    if alpha is not None and fmt == "PNG":
        alpha = assert_u8_mask_2d(alpha)
        out = np.concatenate([rgb, alpha[..., None]], axis=-1)
        im = Image.fromarray(np.ascontiguousarray(out))
    else:
        im = Image.fromarray(np.ascontiguousarray(rgb))

    tmp = path.with_name(f".{path.name}.part")
    try:
        im.save(tmp, format=fmt)
        tmp.replace(path)
    except (OSError, ValueError) as e:
        tmp.unlink(missing_ok=True)
        raise EncodeFailure(path, str(e) or type(e).__name__) from e
    return path


__all__ = [
    "output_format_for",
    "is_supported_output_ext",
    "has_image_suffix",
    "load_image",
    "save_image",
]
