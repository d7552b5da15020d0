import math

import pytest

from vtkdiff.core import PerComponentNorms, Verdict, VerdictEngine, decide


# =============================================================================
# SHARED HELPERS
# =============================================================================

def _norms(abs_max, rel_max, abs_l2sq=None, rel_l2sq=None) -> PerComponentNorms:
    n = len(abs_max)
    return PerComponentNorms(
        abs_l1=tuple(abs_max),
        abs_l2sq=tuple(abs_l2sq if abs_l2sq is not None else [0.0] * n),
        abs_max=tuple(abs_max),
        rel_l1=tuple(rel_max),
        rel_l2sq=tuple(rel_l2sq if rel_l2sq is not None else [0.0] * n),
        rel_max=tuple(rel_max),
        num_tuples=5,
    )


class TestDecisionRule:

    def test_both_within_thresholds_passes(self):
        verdict = decide(_norms([1e-10], [1e-20]), 1e-8, 1e-8)
        assert verdict.passed is True

    def test_relative_within_threshold_alone_passes(self):
        verdict = decide(_norms([1e-5], [1e-20]), 1e-8, 1e-8)
        assert verdict.passed is True
        assert verdict.abs_exceeded is True
        assert verdict.rel_exceeded is False

    def test_absolute_within_threshold_alone_passes(self):
        verdict = decide(_norms([1e-20], [1e-5]), 1e-8, 1e-8)
        assert verdict.passed is True

    def test_both_exceeded_fails(self):
        verdict = decide(_norms([1e-5], [1e-5]), 1e-8, 1e-8)
        assert verdict.passed is False

    def test_equal_to_threshold_is_within(self):
        verdict = decide(_norms([1.0], [1.0]), 1.0, 0.5)
        assert verdict.passed is True

    def test_maxima_taken_independently_across_components(self):
        # Worst absolute error in component 0, worst relative in component 1.
        verdict = decide(_norms([1.0, 1e-12], [1e-12, 1.0]), 1e-3, 1e-3)
        assert verdict.max_abs_err == 1.0
        assert verdict.max_rel_err == 1.0
        assert verdict.passed is False

    def test_infinite_relative_error_with_large_absolute_error_fails(self):
        verdict = decide(_norms([2.0], [math.inf]), 1e-8, 1e-8)
        assert verdict.passed is False

    def test_zero_components_passes(self):
        verdict = decide(_norms([], []), 0.0, 0.0)
        assert verdict.passed is True
        assert verdict.max_abs_err == 0.0
        assert verdict.num_components == 0


class TestL2Finalization:

    def test_absolute_l2_is_square_root(self):
        verdict = VerdictEngine().decide(_norms([4.0], [0.0], abs_l2sq=[25.0]), 0.0, 0.0)
        assert verdict.abs_l2sq == (25.0,)
        assert verdict.abs_l2 == (5.0,)

    def test_relative_l2_is_square_root(self):
        verdict = decide(_norms([1.0], [1.0], rel_l2sq=[16.0]), 0.0, 0.0)
        assert verdict.rel_l2sq == (16.0,)
        assert verdict.rel_l2 == (4.0,)

    def test_infinite_l2sq_stays_infinite(self):
        verdict = decide(_norms([1.0], [math.inf], rel_l2sq=[math.inf]), 0.0, 0.0)
        assert verdict.rel_l2 == (math.inf,)


class TestVerdictFields:

    def test_carries_norms_and_thresholds(self):
        norms = _norms([1.0, 2.0], [0.1, 0.2])
        verdict = decide(norms, 0.5, 0.05)
        assert verdict.abs_l1 == norms.abs_l1
        assert verdict.rel_max == norms.rel_max
        assert verdict.abs_err_thr == 0.5
        assert verdict.rel_err_thr == 0.05
        assert verdict.num_tuples == 5
        assert verdict.max_abs_err == 2.0
        assert verdict.max_rel_err == 0.2

    def test_is_frozen(self):
        verdict = decide(_norms([0.0], [0.0]), 0.0, 0.0)
        assert isinstance(verdict, Verdict)
        with pytest.raises(Exception):
            verdict.passed = False  # type: ignore[misc]
