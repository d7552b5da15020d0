# vtkdiff/failure_handler.py
# FailureHandler -- fatal error and failed-comparison policy of the CLI.
#
# Exit with a non-zero exit code on every failure.
# No catch-and-continue. No retry. A retry of a deterministic computation
# reproduces the identical failure.
# The message is written to stderr before exiting.
# If a report path is configured, a JSON failure record is written first.
# sys.exit is the last operation of handle().

import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional, TextIO

from vtkdiff.core.exceptions import (
    ArrayNotFoundError,
    ArrayTypeError,
    ConfigurationError,
    DiffError,
    ReadError,
    ShapeMismatchError,
)
from vtkdiff.report.report_record import write_record
from vtkdiff.version import REPORT_FORMAT_VERSION, TOOL_VERSION


# ---------------------------------------------------------------------------
# FAILURE TYPE REGISTRY
# ---------------------------------------------------------------------------
# Exit code mapping:
#   Code 1 -- comparison failed (both max-norm thresholds exceeded)
#   Code 2 -- configuration / usage error (same code argparse uses)
#   Code 3 -- array lookup or file read failure
#   Code 4 -- arrays not comparable (non-numeric data, shape mismatch)
#   Code 5 -- internal error

FAILURE_TYPES = {
    "COMPARISON_FAILED":   1,
    "CONFIGURATION_ERROR": 2,
    "ARRAY_NOT_FOUND":     3,
    "READ_ERROR":          3,
    "ARRAY_NOT_NUMERIC":   4,
    "SHAPE_MISMATCH":      4,
    "INTERNAL_ERROR":      5,
}

_EXCEPTION_TYPES = (
    (ConfigurationError, "CONFIGURATION_ERROR"),
    (ArrayNotFoundError, "ARRAY_NOT_FOUND"),
    (ReadError,          "READ_ERROR"),
    (ArrayTypeError,     "ARRAY_NOT_NUMERIC"),
    (ShapeMismatchError, "SHAPE_MISMATCH"),
)


def failure_type_of(exc: BaseException) -> str:
    """Map an exception to its FAILURE_TYPES key."""
    for exc_type, failure_type_id in _EXCEPTION_TYPES:
        if isinstance(exc, exc_type):
            return failure_type_id
    return "INTERNAL_ERROR"


@dataclass
class FailureRecord:
    """
    Failure record written when a report path is configured.

    Fields:
      format_version   -- REPORT_FORMAT_VERSION.
      tool_version     -- TOOL_VERSION.
      result           -- always "ERROR".
      failure_type_id  -- key from FAILURE_TYPES.
      exit_code        -- process exit code.
      field_name       -- offending input, empty if not applicable.
      detail           -- human readable failure description.
    """
    format_version:  str
    tool_version:    str
    result:          str
    failure_type_id: str
    exit_code:       int
    field_name:      str
    detail:          str


class FailureHandler:
    """
    Enforces the failure policy.

    On a fatal error:
      1. Write the failure record if report_path is set.
      2. Write the message to stderr.
      3. sys.exit(exit_code).
    """

    def __init__(
        self,
        report_path: Optional[Path] = None,
        err:         Optional[TextIO] = None,
    ):
        self._report_path = Path(report_path) if report_path else None
        self._err = err if err is not None else sys.stderr

    def handle(
        self,
        failure_type_id: str,
        detail:          str,
        field_name:      str = "",
    ) -> None:
        """Execute the failure policy. This method does not return."""
        exit_code = FAILURE_TYPES.get(failure_type_id, FAILURE_TYPES["INTERNAL_ERROR"])

        if self._report_path is not None:
            record = FailureRecord(
                format_version=REPORT_FORMAT_VERSION,
                tool_version=TOOL_VERSION,
                result="ERROR",
                failure_type_id=failure_type_id,
                exit_code=exit_code,
                field_name=field_name,
                detail=detail,
            )
            try:
                write_record(asdict(record), self._report_path)
            except OSError as exc:
                self._err.write(
                    f"Error: cannot write failure record {self._report_path}: {exc}\n"
                )

        self._err.write(f"Error: {detail}\n")
        self._err.flush()

        sys.exit(exit_code)

    def handle_from_exception(self, exc: DiffError) -> None:
        self.handle(
            failure_type_id=failure_type_of(exc),
            detail=str(exc),
            field_name=getattr(exc, "field_name", ""),
        )

    def comparison_failed(self) -> None:
        """Exit for a failed comparison. The summary was already reported."""
        sys.exit(FAILURE_TYPES["COMPARISON_FAILED"])
