# =============================================================================
# vtkdiff -- DATA ARRAY COMPARISON
# File:   vtkdiff/core/engine.py
# =============================================================================
#
# SCOPE
# -----
# compare_arrays -- validation, scan and decision in one call.
#
#   validate_thresholds -> validate_array_pair -> ErrorComputer.compute
#                       -> VerdictEngine.decide
#
# Any validation failure raises before the scan begins; no partial result
# is ever produced. A failing comparison is returned, not raised.
# =============================================================================

from __future__ import annotations

from typing import Any, Optional

from vtkdiff.core.error_computer import DOUBLE_EPSILON, ErrorComputer, OutOfToleranceCallback
from vtkdiff.core.validation import validate_array_pair, validate_thresholds
from vtkdiff.core.verdict import Verdict, VerdictEngine


def compare_arrays(
    array_a:             Any,
    array_b:             Any,
    abs_err_thr:         float = DOUBLE_EPSILON,
    rel_err_thr:         float = DOUBLE_EPSILON,
    on_out_of_tolerance: Optional[OutOfToleranceCallback] = None,
) -> Verdict:
    """
    Compare two data arrays and return the Verdict.

    Parameters
    ----------
    array_a, array_b
        Data arrays exposing `name`, `is_numeric`, `data_type`, `num_tuples`,
        `num_components` and `values` (shape (num_tuples, num_components)).
    abs_err_thr, rel_err_thr
        Error thresholds for the maximum norm. Default: double epsilon.
    on_out_of_tolerance
        Optional callback (tuple_idx, component_idx, abs_err, rel_err),
        invoked for every element exceeding both thresholds.

    Raises
    ------
    ConfigurationError
        If a threshold is negative or NaN.
    ArrayTypeError
        If either array is not numeric.
    ShapeMismatchError
        If tuple counts or component counts differ.
    """
    validate_thresholds(abs_err_thr, rel_err_thr)
    validate_array_pair(array_a, array_b)

    computer = ErrorComputer(abs_err_thr=abs_err_thr, rel_err_thr=rel_err_thr)
    norms = computer.compute(
        array_a.values,
        array_b.values,
        on_out_of_tolerance=on_out_of_tolerance,
        num_components=array_a.num_components,
    )
    return VerdictEngine().decide(norms, abs_err_thr, rel_err_thr)
