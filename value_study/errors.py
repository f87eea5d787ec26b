# value_study/errors.py
from __future__ import annotations

"""
Exception taxonomy.

ConfigurationError subclasses are fatal and raised before any image is
decoded. FileProcessingError subclasses are per-file and recovered by the
batch driver.
"""

from pathlib import Path
from typing import Optional


class ValueStudyError(Exception):
    """Base class for every error raised by value_study."""


# Configuration


class ConfigurationError(ValueStudyError, ValueError):
    """Invalid user selection. Nothing has been read or written yet."""


class InvalidLevel(ConfigurationError):
    """A level is outside [0, 10] or the list is not strictly ascending."""


class InvalidStepCount(ConfigurationError):
    """Even-split bucket count outside [2, 11]."""


class ConflictingMode(ConfigurationError):
    """Explicit levels and an even-split count were both given."""


class ColorCountMismatch(ConfigurationError):
    """Colour table length differs from the number of output levels."""

    def __init__(self, expected: int, got: int) -> None:
        super().__init__(
            f"number of colours ({got}) does not match number of levels ({expected})"
        )
        self.expected = expected
        self.got = got


class InvalidColor(ConfigurationError):
    """A colour is not a valid hex triple."""


# Per file


class FileProcessingError(ValueStudyError, OSError):
    """Decode/encode problem tied to a single file."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class DecodeFailure(FileProcessingError):
    pass


class EncodeFailure(FileProcessingError):
    pass


class UnsupportedFormat(FileProcessingError):
    def __init__(self, path: Path, ext: Optional[str] = None) -> None:
        ext = ext if ext is not None else Path(path).suffix
        super().__init__(path, f"unsupported output format {ext or '(none)'!r}")
        self.ext = ext


__all__ = [
    "ValueStudyError",
    "ConfigurationError",
    "InvalidLevel",
    "InvalidStepCount",
    "ConflictingMode",
    "ColorCountMismatch",
    "InvalidColor",
    "FileProcessingError",
    "DecodeFailure",
    "EncodeFailure",
    "UnsupportedFormat",
]
