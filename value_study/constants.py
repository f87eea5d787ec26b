# value_study/constants.py
"""
Global tunables used across the project.

- Canonical value scale (NUM_LEVELS, LUMA_MAX, CANONICAL_STEP)
- Even-split limits (MIN_STEPS, MAX_STEPS)
- Formats and output naming (OUTPUT_FORMATS, OUTPUT_SUFFIX)
- Luma methods
"""
from __future__ import annotations

from typing import Dict, Tuple

# =========================
# Value scale
# =========================
# 0 = black .. 10 = white
NUM_LEVELS: int = 11
MIN_LEVEL: int = 0
MAX_LEVEL: int = NUM_LEVELS - 1
ALL_LEVELS: Tuple[int, ...] = tuple(range(NUM_LEVELS))

LUMA_MAX: int = 255
LUMA_SIZE: int = LUMA_MAX + 1

# Bucket width of the 11-step grid. Floor division, so the grid tops out
# at 230 and the last bucket absorbs 230..255.
CANONICAL_STEP: int = LUMA_MAX // NUM_LEVELS

MIN_STEPS: int = 2
MAX_STEPS: int = NUM_LEVELS

# =========================
# Files
# =========================
OUTPUT_FORMATS: Dict[str, str] = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
}
INPUT_EXTS = {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".tif", ".tiff"}

OUTPUT_SUFFIX: str = "_values"
MULTI_OUTPUT_SEP: str = "-"

# =========================
# Luma
# =========================
LUMA_METHODS: Tuple[str, ...] = ("srgb", "rec601")
DEFAULT_LUMA_METHOD: str = "srgb"

# Rec. 709 relative luminance weights (linear light)
REC709_WEIGHTS: Tuple[float, float, float] = (0.2126, 0.7152, 0.0722)

# Images shorter than this are mapped on one thread
MIN_ROWS_PER_WORKER: int = 256

__all__ = [
    "NUM_LEVELS",
    "MIN_LEVEL",
    "MAX_LEVEL",
    "ALL_LEVELS",
    "LUMA_MAX",
    "LUMA_SIZE",
    "CANONICAL_STEP",
    "MIN_STEPS",
    "MAX_STEPS",
    "OUTPUT_FORMATS",
    "INPUT_EXTS",
    "OUTPUT_SUFFIX",
    "MULTI_OUTPUT_SEP",
    "LUMA_METHODS",
    "DEFAULT_LUMA_METHOD",
    "REC709_WEIGHTS",
    "MIN_ROWS_PER_WORKER",
]
