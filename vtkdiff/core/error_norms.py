# =============================================================================
# vtkdiff -- DATA ARRAY COMPARISON
# File:   vtkdiff/core/error_norms.py
# =============================================================================
#
# SCOPE
# -----
# Per-component error norm accumulation.
#
#   relative_error(a, b, abs_err)  -- element relative error with the
#                                     zero / infinity policy below.
#   ErrorAccumulator               -- mutable running totals during a scan.
#   PerComponentNorms              -- frozen snapshot handed to the verdict.
#
# RELATIVE ERROR POLICY
# ---------------------
#   abs_err == 0            -> 0.0   (exact match, including 0 vs 0)
#   a == 0 or b == 0        -> +inf  (one side zero, values differ)
#   otherwise               -> abs_err / min(|a|, |b|)
#
# An infinite relative error makes the relative L1, L2^2 and max entries
# of that component infinite for the rest of the scan.
#
# ACCUMULATION ORDER
# ------------------
# Sums are formed strictly in update order. Callers scan tuple-major,
# component-minor; the resulting sums are bit-reproducible for that order.
# =============================================================================

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple


def relative_error(a: float, b: float, abs_err: float) -> float:
    """
    Relative error of two corresponding components.

    abs_err must be |a - b|. The smaller magnitude is the normalizer.
    """
    if abs_err == 0.0:
        return 0.0
    if a == 0.0 or b == 0.0:
        return math.inf
    return abs_err / min(abs(a), abs(b))


@dataclass(frozen=True)
class PerComponentNorms:
    """
    Frozen per-component error norms after a completed scan.

    Each field is a tuple of length `num_components`.

    Fields:
      abs_l1    -- sum of |a - b|.
      abs_l2sq  -- sum of |a - b|^2. Square root is taken by the verdict.
      abs_max   -- maximum of |a - b|.
      rel_l1    -- sum of relative errors.
      rel_l2sq  -- sum of squared relative errors.
      rel_max   -- maximum relative error.
      num_tuples -- number of tuples scanned.
    """
    abs_l1:     Tuple[float, ...]
    abs_l2sq:   Tuple[float, ...]
    abs_max:    Tuple[float, ...]
    rel_l1:     Tuple[float, ...]
    rel_l2sq:   Tuple[float, ...]
    rel_max:    Tuple[float, ...]
    num_tuples: int = 0

    @property
    def num_components(self) -> int:
        return len(self.abs_l1)


class ErrorAccumulator:
    """
    Running totals for the six norm families, one entry per component.

    Created empty (all zeros) for a given arity, updated once per
    (tuple, component) pair, then frozen with freeze().
    """

    def __init__(self, num_components: int) -> None:
        if not isinstance(num_components, int) or num_components < 0:
            raise ValueError(
                f"num_components must be a non-negative int. Received: {num_components!r}"
            )
        self.num_components = num_components
        self.num_tuples = 0
        self.abs_l1:   List[float] = [0.0] * num_components
        self.abs_l2sq: List[float] = [0.0] * num_components
        self.abs_max:  List[float] = [0.0] * num_components
        self.rel_l1:   List[float] = [0.0] * num_components
        self.rel_l2sq: List[float] = [0.0] * num_components
        self.rel_max:  List[float] = [0.0] * num_components

    def update(self, component: int, abs_err: float, rel_err: float) -> None:
        """Add one element's absolute and relative error to component totals."""
        self.abs_l1[component] += abs_err
        self.abs_l2sq[component] += abs_err * abs_err
        self.abs_max[component] = max(self.abs_max[component], abs_err)

        self.rel_l1[component] += rel_err
        self.rel_l2sq[component] += rel_err * rel_err
        self.rel_max[component] = max(self.rel_max[component], rel_err)

    def freeze(self) -> PerComponentNorms:
        return PerComponentNorms(
            abs_l1=tuple(self.abs_l1),
            abs_l2sq=tuple(self.abs_l2sq),
            abs_max=tuple(self.abs_max),
            rel_l1=tuple(self.rel_l1),
            rel_l2sq=tuple(self.rel_l2sq),
            rel_max=tuple(self.rel_max),
            num_tuples=self.num_tuples,
        )
