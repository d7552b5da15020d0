# vtkdiff/core/__init__.py
# Error computation and pass/fail decision for two aligned tuple sequences.
# No file IO. No printing. Pure functions of their inputs.

from .exceptions import (
    DiffError,
    ConfigurationError,
    ArrayNotFoundError,
    ReadError,
    ArrayTypeError,
    ShapeMismatchError,
)
from .error_norms import (
    ErrorAccumulator,
    PerComponentNorms,
    relative_error,
)
from .error_computer import (
    DOUBLE_EPSILON,
    ErrorComputer,
    compute_error_norms,
)
from .verdict import (
    Verdict,
    VerdictEngine,
    decide,
)
from .validation import (
    check_self_comparison,
    validate_array_pair,
    validate_thresholds,
)
from .engine import compare_arrays

__all__ = [
    # Exceptions
    "DiffError",
    "ConfigurationError",
    "ArrayNotFoundError",
    "ReadError",
    "ArrayTypeError",
    "ShapeMismatchError",
    # Accumulation
    "ErrorAccumulator",
    "PerComponentNorms",
    "relative_error",
    # Scan
    "DOUBLE_EPSILON",
    "ErrorComputer",
    "compute_error_norms",
    # Decision
    "Verdict",
    "VerdictEngine",
    "decide",
    # Validation
    "check_self_comparison",
    "validate_array_pair",
    "validate_thresholds",
    # Orchestration
    "compare_arrays",
]
