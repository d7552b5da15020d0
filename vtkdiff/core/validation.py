# =============================================================================
# vtkdiff -- DATA ARRAY COMPARISON
# File:   vtkdiff/core/validation.py
# =============================================================================
#
# SCOPE
# -----
# Fail-fast checks run before any element is compared:
#
#   validate_thresholds      -- both thresholds finite-or-inf and >= 0.
#   check_self_comparison    -- same array from the same single file.
#   validate_array_pair      -- numeric data, equal tuple count, equal arity.
#
# Validation order for a pair is fixed: a numeric, b numeric, tuple count,
# component count. The first violation raises; nothing is computed after it.
#
# Arrays are duck-typed: any object with `name`, `is_numeric`, `data_type`,
# `num_tuples` and `num_components` attributes is accepted.
# =============================================================================

from __future__ import annotations

import math
from typing import Any, Optional

from vtkdiff.core.exceptions import (
    ArrayTypeError,
    ConfigurationError,
    ShapeMismatchError,
)


def validate_thresholds(abs_err_thr: float, rel_err_thr: float) -> None:
    """
    Reject negative and NaN thresholds.

    Raises:
        ConfigurationError naming the offending threshold.
    """
    for name, value in (("abs_err_thr", abs_err_thr), ("rel_err_thr", rel_err_thr)):
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise ConfigurationError(
                f"{name} must be a real number. Received: {value!r}",
                field_name=name,
                value=value,
            )
        if math.isnan(value) or value < 0.0:
            raise ConfigurationError(
                f"{name} must be >= 0. Received: {value!r}",
                field_name=name,
                value=value,
            )


def check_self_comparison(
    input_a: str,
    input_b: Optional[str],
    array_a: str,
    array_b: str,
) -> None:
    """
    Refuse to compare a data array to itself within a single file.

    Only applies when no second input is given; naming the same file twice
    is an explicit request and is allowed.
    """
    if not input_b and array_a == array_b:
        raise ConfigurationError(
            f"You are trying to compare data array `{array_a}' "
            f"from file `{input_a}' to itself.",
            field_name="array_b",
            value=array_b,
        )


def validate_array_pair(a: Any, b: Any) -> None:
    """
    Check that two data arrays can be compared element by element.

    Raises:
        ArrayTypeError      if either array is not numeric.
        ShapeMismatchError  if tuple counts or component counts differ.
    """
    if not a.is_numeric:
        raise ArrayTypeError("a", a.name, a.data_type)
    if not b.is_numeric:
        raise ArrayTypeError("b", b.name, b.data_type)

    if a.num_tuples != b.num_tuples:
        raise ShapeMismatchError("tuples", a.num_tuples, b.num_tuples)

    if a.num_components != b.num_components:
        raise ShapeMismatchError("components", a.num_components, b.num_components)
