# vtkdiff/report/report_writer.py
# ReportWriter -- human readable output of a comparison run.
#
# Informational text goes to `out`, errors to `err`. Both streams and the
# numeric precision are explicit constructor arguments; nothing here touches
# global stream state.
#
# quiet   suppresses informational text (header, norms, failure summary).
# verbose enables per-element lines for elements exceeding both thresholds.
# The two flags are independent: verbose lines are written even when quiet.

import sys
from typing import Iterable, Optional, TextIO

from vtkdiff.core.verdict import Verdict

# Decimal digits a double always round-trips to.
DOUBLE_DIGITS10: int = 15


class ReportWriter:
    """
    Writes the comparison header, per-element diagnostics, norm vectors
    and the final summary.
    """

    def __init__(
        self,
        out:       Optional[TextIO] = None,
        err:       Optional[TextIO] = None,
        precision: int = DOUBLE_DIGITS10,
        quiet:     bool = False,
        verbose:   bool = False,
    ):
        if precision < 0:
            raise ValueError(f"precision must be >= 0. Received: {precision}")
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.precision = precision
        self.quiet = quiet
        self.verbose = verbose

    # ------------------------------------------------------------------
    # Formatting.
    # ------------------------------------------------------------------

    def format_float(self, value: float) -> str:
        return f"{value:.{self.precision}e}"

    def format_vector(self, values: Iterable[float]) -> str:
        return "[" + ", ".join(self.format_float(v) for v in values) + "]"

    # ------------------------------------------------------------------
    # Output.
    # ------------------------------------------------------------------

    def comparing(self, array_a: str, input_a: str, array_b: str, input_b: str) -> None:
        if self.quiet:
            return
        self.out.write(
            f"Comparing data array `{array_a}' from file `{input_a}' "
            f"to data array `{array_b}' from file `{input_b}'.\n"
        )

    def out_of_tolerance(
        self,
        tuple_idx:     int,
        component_idx: int,
        abs_err:       float,
        rel_err:       float,
    ) -> None:
        """Diagnostics callback for ErrorComputer. No-op unless verbose."""
        if not self.verbose:
            return
        width = self.precision + 7
        self.out.write(
            f"tuple: {tuple_idx:4d} component: {component_idx:2d}: "
            f"abs err = {self.format_float(abs_err):>{width}}, "
            f"rel err = {self.format_float(rel_err):>{width}}\n"
        )

    def norms(self, verdict: Verdict) -> None:
        if self.quiet:
            return
        fv = self.format_vector
        self.out.write(
            "Computed difference between data arrays:\n"
            f"abs l1 norm      = {fv(verdict.abs_l1)}\n"
            f"abs l2-norm^2    = {fv(verdict.abs_l2sq)}\n"
            f"abs l2-norm      = {fv(verdict.abs_l2)}\n"
            f"abs maximum norm = {fv(verdict.abs_max)}\n"
            "\n"
            f"rel l1 norm      = {fv(verdict.rel_l1)}\n"
            f"rel l2-norm^2    = {fv(verdict.rel_l2sq)}\n"
            f"rel l2-norm      = {fv(verdict.rel_l2)}\n"
            f"rel maximum norm = {fv(verdict.rel_max)}\n"
        )

    def result(self, verdict: Verdict) -> None:
        if self.quiet or verdict.passed:
            return
        self.out.write(
            "Absolute and relative error (maximum norm) are larger than the "
            "corresponding thresholds.\n"
        )
