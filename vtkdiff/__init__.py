# vtkdiff/__init__.py
# Numerical comparison of two data arrays.
#
# ENTRY POINT:
#   vtkdiff FILE_A [FILE_B] -a NAME -b NAME [--abs FLOAT] [--rel FLOAT] [-q] [-v]
#   python -m vtkdiff ...
#
# LIBRARY USE:
#   from vtkdiff import DataArray, compare_arrays
#   verdict = compare_arrays(DataArray.from_values("a", a), DataArray.from_values("b", b))

from .version import TOOL_VERSION, REPORT_FORMAT_VERSION
from .core import (
    DOUBLE_EPSILON,
    ArrayNotFoundError,
    ArrayTypeError,
    ConfigurationError,
    DiffError,
    ErrorComputer,
    PerComponentNorms,
    ReadError,
    ShapeMismatchError,
    Verdict,
    VerdictEngine,
    compare_arrays,
)
from .source import DataArray, load_array, read_data_arrays

__version__ = TOOL_VERSION

__all__ = [
    "TOOL_VERSION",
    "REPORT_FORMAT_VERSION",
    "DOUBLE_EPSILON",
    # Exceptions
    "DiffError",
    "ConfigurationError",
    "ArrayNotFoundError",
    "ReadError",
    "ArrayTypeError",
    "ShapeMismatchError",
    # Core
    "ErrorComputer",
    "PerComponentNorms",
    "Verdict",
    "VerdictEngine",
    "compare_arrays",
    # Sources
    "DataArray",
    "load_array",
    "read_data_arrays",
]
