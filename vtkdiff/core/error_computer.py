# =============================================================================
# vtkdiff -- DATA ARRAY COMPARISON
# File:   vtkdiff/core/error_computer.py
# =============================================================================
#
# SCOPE
# -----
# ErrorComputer -- single linear scan over two equally shaped tuple sequences.
#
# PRECONDITIONS
# -------------
# Both datasets have the same tuple count and the same arity. This is
# checked by vtkdiff.core.validation before the scan; compute() does not
# re-check and must not be reached with mismatched shapes.
#
# SCAN ORDER
# ----------
# Tuple-major, component-minor. For each element:
#   abs_err = |a - b|
#   rel_err = relative_error(a, b, abs_err)
#   accumulate both into the component totals
#   if abs_err > abs_err_thr AND rel_err > rel_err_thr:
#       on_out_of_tolerance(tuple_idx, component_idx, abs_err, rel_err)
#
# The callback is only invoked when an element exceeds BOTH thresholds.
# No side effects other than accumulation and the optional callback.
# =============================================================================

from __future__ import annotations

import numbers
import sys
from typing import Any, Callable, Optional, Sequence

from vtkdiff.core.error_norms import ErrorAccumulator, PerComponentNorms, relative_error

# Machine epsilon for double precision. Default for both thresholds.
DOUBLE_EPSILON: float = sys.float_info.epsilon

OutOfToleranceCallback = Callable[[int, int, float, float], None]


def _as_rows(dataset: Any) -> Sequence[Sequence[float]]:
    # numpy arrays are converted once to nested lists of Python floats.
    rows = dataset.tolist() if hasattr(dataset, "tolist") else dataset
    # Flat input holds single-component tuples.
    if len(rows) > 0 and isinstance(rows[0], numbers.Real):
        return [(value,) for value in rows]
    return rows


def _arity(dataset: Any, rows: Sequence[Sequence[float]]) -> int:
    shape = getattr(dataset, "shape", None)
    if shape is not None and len(shape) == 2:
        return int(shape[1])
    if shape is not None and len(shape) == 1:
        return 1
    if len(rows) == 0:
        return 0
    return len(rows[0])


class ErrorComputer:
    """
    Computes per-component absolute and relative error norms of two datasets.

    A dataset is any ordered sequence of equal-length numeric tuples, a
    2-D array of shape (tuple_count, arity), or a flat sequence or 1-D
    array of single-component values.

    Method:
      compute(dataset_a, dataset_b, on_out_of_tolerance=None) -> PerComponentNorms
    """

    def __init__(
        self,
        abs_err_thr: float = DOUBLE_EPSILON,
        rel_err_thr: float = DOUBLE_EPSILON,
    ):
        self.abs_err_thr = abs_err_thr
        self.rel_err_thr = rel_err_thr

    def compute(
        self,
        dataset_a: Any,
        dataset_b: Any,
        on_out_of_tolerance: Optional[OutOfToleranceCallback] = None,
        num_components: Optional[int] = None,
    ) -> PerComponentNorms:
        """
        Scan both datasets once and return the frozen norms.

        num_components overrides the arity derived from the data; it is
        needed for empty datasets given as plain sequences.
        """
        rows_a = _as_rows(dataset_a)
        rows_b = _as_rows(dataset_b)
        if num_components is None:
            num_components = _arity(dataset_a, rows_a)

        acc = ErrorAccumulator(num_components)
        abs_thr = self.abs_err_thr
        rel_thr = self.rel_err_thr

        for tuple_idx in range(len(rows_a)):
            tuple_a = rows_a[tuple_idx]
            tuple_b = rows_b[tuple_idx]
            for component_idx in range(num_components):
                a_comp = float(tuple_a[component_idx])
                b_comp = float(tuple_b[component_idx])
                abs_err = abs(a_comp - b_comp)
                rel_err = relative_error(a_comp, b_comp, abs_err)

                acc.update(component_idx, abs_err, rel_err)

                if (
                    on_out_of_tolerance is not None
                    and abs_err > abs_thr
                    and rel_err > rel_thr
                ):
                    on_out_of_tolerance(tuple_idx, component_idx, abs_err, rel_err)
            acc.num_tuples += 1

        return acc.freeze()


def compute_error_norms(
    dataset_a: Any,
    dataset_b: Any,
    abs_err_thr: float = DOUBLE_EPSILON,
    rel_err_thr: float = DOUBLE_EPSILON,
    on_out_of_tolerance: Optional[OutOfToleranceCallback] = None,
) -> PerComponentNorms:
    """Functional shortcut for ErrorComputer(...).compute(...)."""
    return ErrorComputer(abs_err_thr, rel_err_thr).compute(
        dataset_a, dataset_b, on_out_of_tolerance=on_out_of_tolerance,
    )
