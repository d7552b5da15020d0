# =============================================================================
# vtkdiff -- DATA ARRAY COMPARISON
# File:   vtkdiff/core/verdict.py
# =============================================================================
#
# SCOPE
# -----
# VerdictEngine -- turns finished norms into a pass/fail Verdict.
#
# DECISION RULE
# -------------
#   M_abs = max over components of abs_max
#   M_rel = max over components of rel_max
#   FAIL iff M_abs > abs_err_thr AND M_rel > rel_err_thr
#
# A comparison passes when either worst-case error is within its threshold.
# The worst absolute and worst relative elements need not coincide.
#
# L2 FINALIZATION
# ---------------
# abs_l2 = sqrt(abs_l2sq) and rel_l2 = sqrt(rel_l2sq), componentwise.
# Reporting only; the decision uses the max family.
#
# The engine never prints and never exits.
# =============================================================================

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from vtkdiff.core.error_norms import PerComponentNorms


@dataclass(frozen=True)
class Verdict:
    """
    Outcome of one comparison.

    Fields:
      passed       -- True unless both max-norm thresholds are exceeded.
      abs_l1       -- absolute error L1 norm per component.
      abs_l2sq     -- squared absolute error L2 norm per component.
      abs_l2       -- absolute error L2 norm per component.
      abs_max      -- absolute error maximum norm per component.
      rel_l1       -- relative error L1 norm per component.
      rel_l2sq     -- squared relative error L2 norm per component.
      rel_l2       -- relative error L2 norm per component.
      rel_max      -- relative error maximum norm per component.
      max_abs_err  -- M_abs, largest abs_max entry (0.0 without components).
      max_rel_err  -- M_rel, largest rel_max entry (0.0 without components).
      abs_err_thr  -- absolute threshold the decision was made with.
      rel_err_thr  -- relative threshold the decision was made with.
      num_tuples   -- number of tuples compared.
    """
    passed:      bool
    abs_l1:      Tuple[float, ...]
    abs_l2sq:    Tuple[float, ...]
    abs_l2:      Tuple[float, ...]
    abs_max:     Tuple[float, ...]
    rel_l1:      Tuple[float, ...]
    rel_l2sq:    Tuple[float, ...]
    rel_l2:      Tuple[float, ...]
    rel_max:     Tuple[float, ...]
    max_abs_err: float
    max_rel_err: float
    abs_err_thr: float
    rel_err_thr: float
    num_tuples:  int

    @property
    def num_components(self) -> int:
        return len(self.abs_max)

    @property
    def abs_exceeded(self) -> bool:
        return self.max_abs_err > self.abs_err_thr

    @property
    def rel_exceeded(self) -> bool:
        return self.max_rel_err > self.rel_err_thr


def _max_norm(values: Tuple[float, ...]) -> float:
    # First largest entry in component order, compared with '<' only.
    result = values[0] if values else 0.0
    for v in values[1:]:
        if result < v:
            result = v
    return result


class VerdictEngine:
    """
    Derives the Verdict from finished PerComponentNorms.

    Method:
      decide(norms, abs_err_thr, rel_err_thr) -> Verdict
    """

    def decide(
        self,
        norms:       PerComponentNorms,
        abs_err_thr: float,
        rel_err_thr: float,
    ) -> Verdict:
        abs_l2 = tuple(math.sqrt(x) for x in norms.abs_l2sq)
        rel_l2 = tuple(math.sqrt(x) for x in norms.rel_l2sq)

        max_abs_err = _max_norm(norms.abs_max)
        max_rel_err = _max_norm(norms.rel_max)

        failed = max_abs_err > abs_err_thr and max_rel_err > rel_err_thr

        return Verdict(
            passed=not failed,
            abs_l1=norms.abs_l1,
            abs_l2sq=norms.abs_l2sq,
            abs_l2=abs_l2,
            abs_max=norms.abs_max,
            rel_l1=norms.rel_l1,
            rel_l2sq=norms.rel_l2sq,
            rel_l2=rel_l2,
            rel_max=norms.rel_max,
            max_abs_err=max_abs_err,
            max_rel_err=max_rel_err,
            abs_err_thr=abs_err_thr,
            rel_err_thr=rel_err_thr,
            num_tuples=norms.num_tuples,
        )


def decide(
    norms:       PerComponentNorms,
    abs_err_thr: float,
    rel_err_thr: float,
) -> Verdict:
    """Functional shortcut for VerdictEngine().decide(...)."""
    return VerdictEngine().decide(norms, abs_err_thr, rel_err_thr)
