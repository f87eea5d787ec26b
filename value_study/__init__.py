# value_study/__init__.py
"""
value_study package.

Purpose:
  Posterize images to a small set of brightness values for painters'
  value studies. See value_study.cli for the command line.

Public API:
  resolve_selection  : validate levels / step count / colours into a Selection.
  build_lookup_table : Selection -> immutable 256-entry LookupTable.
  apply_lookup_table : map an RGB buffer through a LookupTable.
  run_batch          : decode -> map -> encode over many files.
  colour_convert     : rgb_to_luma and the sRGB transfer curve.
  core_types         : shared type aliases and value objects.
  errors             : exception taxonomy.

Quick start:
  from value_study import resolve_selection, build_lookup_table, apply_lookup_table
  table = build_lookup_table(resolve_selection(values=[2, 5, 9], keep=True))
  out = apply_lookup_table(rgb, table)
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import core_types
from . import errors
from . import utils

from .core_types import EvenSplit, Explicit, LookupTable, Selection  # noqa: E402,F401
from .levels import resolve_selection  # noqa: E402,F401
from .thresholds import build_lookup_table  # noqa: E402,F401
from .mapper import apply_lookup_table  # noqa: E402,F401
from .batch import BatchOptions, BatchReport, run_batch  # noqa: E402,F401

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "errors",
    "utils",
    "EvenSplit",
    "Explicit",
    "LookupTable",
    "Selection",
    "resolve_selection",
    "build_lookup_table",
    "apply_lookup_table",
    "BatchOptions",
    "BatchReport",
    "run_batch",
]
