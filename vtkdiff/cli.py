# vtkdiff/cli.py
# Command line entry point.
#
# Standard invocation:
#   vtkdiff result.vtu reference.vtu -a pressure -b pressure --abs 1e-10 --rel 1e-8
#
# Two arrays of one file:
#   vtkdiff result.vtu -a pressure -b pressure_ref
#
# EXIT CODES:
#   0  -- Comparison passed.
#   1  -- Absolute and relative error (maximum norm) both above threshold.
#   2  -- Usage or configuration error.
#   3  -- Array not found, or input file unreadable.
#   4  -- Arrays not comparable (non-numeric data, tuple or component count differ).
#   5  -- Internal error.
#
# Single-threaded. One comparison per process.

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, TextIO

from vtkdiff.core.engine import compare_arrays
from vtkdiff.core.error_computer import DOUBLE_EPSILON
from vtkdiff.core.exceptions import DiffError
from vtkdiff.core.validation import validate_thresholds
from vtkdiff.failure_handler import FailureHandler
from vtkdiff.report.report_record import verdict_to_record, write_record
from vtkdiff.report.report_writer import ReportWriter
from vtkdiff.source.vtu_reader import read_data_arrays
from vtkdiff.version import TOOL_VERSION

_EPSILON_TEXT = f"{DOUBLE_EPSILON:.16e}"


@dataclass(frozen=True)
class DiffConfig:
    """
    Settings of one comparison run.

    Fields:
      quiet        -- suppress all but error output (and verbose lines).
      verbose      -- print each element exceeding both thresholds.
      abs_err_thr  -- absolute error threshold for the maximum norm.
      rel_err_thr  -- relative error threshold for the maximum norm.
      input_a      -- first input file.
      input_b      -- second input file; empty to read both arrays from input_a.
      array_a      -- first data array name.
      array_b      -- second data array name.
      report_path  -- optional JSON record destination.
    """
    quiet:       bool
    verbose:     bool
    abs_err_thr: float
    rel_err_thr: float
    input_a:     str
    input_b:     str
    array_a:     str
    array_b:     str
    report_path: Optional[Path] = None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vtkdiff",
        description=(
            "Compare two data arrays of VTK unstructured grid files (.vtu) "
            "using absolute and relative error norms."
        ),
    )
    parser.add_argument(
        "input_a",
        metavar="VTK_FILE",
        help="Path to the VTK unstructured grid input file.",
    )
    parser.add_argument(
        "input_b",
        metavar="VTK_FILE_B",
        nargs="?",
        default="",
        help="Path to the second VTK unstructured grid input file.",
    )
    parser.add_argument(
        "-a", "--first_data_array",
        dest="array_a",
        metavar="NAME",
        required=True,
        help="First data array name for comparison.",
    )
    parser.add_argument(
        "-b", "--second_data_array",
        dest="array_b",
        metavar="NAME",
        required=True,
        help="Second data array name for comparison.",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all but error output.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Also print which values differ.",
    )
    parser.add_argument(
        "--abs",
        dest="abs_err_thr",
        type=float,
        metavar="FLOAT",
        default=DOUBLE_EPSILON,
        help=f"Tolerance for the absolute error in the maximum norm ({_EPSILON_TEXT}).",
    )
    parser.add_argument(
        "--rel",
        dest="rel_err_thr",
        type=float,
        metavar="FLOAT",
        default=DOUBLE_EPSILON,
        help=f"Tolerance for the componentwise relative error ({_EPSILON_TEXT}).",
    )
    parser.add_argument(
        "--report-path",
        metavar="PATH",
        default=None,
        help="Write a JSON record of the result to PATH.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {TOOL_VERSION}",
    )
    return parser


def parse_config(argv: Optional[List[str]] = None) -> DiffConfig:
    args = _build_parser().parse_args(argv)
    return DiffConfig(
        quiet=args.quiet,
        verbose=args.verbose,
        abs_err_thr=args.abs_err_thr,
        rel_err_thr=args.rel_err_thr,
        input_a=args.input_a,
        input_b=args.input_b,
        array_a=args.array_a,
        array_b=args.array_b,
        report_path=Path(args.report_path) if args.report_path else None,
    )


def run(
    config: DiffConfig,
    out:    Optional[TextIO] = None,
    err:    Optional[TextIO] = None,
) -> int:
    """
    Run one comparison. Returns 0 on pass.

    On a failed comparison or any fatal error FailureHandler exits the
    process with the registered non-zero exit code.
    """
    writer = ReportWriter(out=out, err=err, quiet=config.quiet, verbose=config.verbose)
    fh = FailureHandler(report_path=config.report_path, err=writer.err)

    try:
        validate_thresholds(config.abs_err_thr, config.rel_err_thr)
        array_a, array_b = read_data_arrays(
            config.input_a, config.input_b, config.array_a, config.array_b,
        )
    except DiffError as exc:
        fh.handle_from_exception(exc)
    except Exception as exc:
        fh.handle("INTERNAL_ERROR", f"Unexpected {exc.__class__.__name__}: {exc}")

    writer.comparing(
        config.array_a, config.input_a,
        config.array_b, config.input_b or config.input_a,
    )

    try:
        verdict = compare_arrays(
            array_a,
            array_b,
            abs_err_thr=config.abs_err_thr,
            rel_err_thr=config.rel_err_thr,
            on_out_of_tolerance=writer.out_of_tolerance if config.verbose else None,
        )
    except DiffError as exc:
        fh.handle_from_exception(exc)
    except Exception as exc:
        fh.handle("INTERNAL_ERROR", f"Unexpected {exc.__class__.__name__}: {exc}")

    writer.norms(verdict)
    writer.result(verdict)

    if config.report_path is not None:
        record = verdict_to_record(
            verdict,
            input_a=config.input_a,
            input_b=config.input_b or config.input_a,
            array_a=config.array_a,
            array_b=config.array_b,
        )
        try:
            write_record(record, config.report_path)
        except OSError as exc:
            fh.handle("INTERNAL_ERROR", f"Failed to write report record: {exc}")

    if not verdict.passed:
        fh.comparison_failed()

    writer.out.flush()
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    config = parse_config(argv)
    sys.exit(run(config))


if __name__ == "__main__":
    main()
