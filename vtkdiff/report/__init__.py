# vtkdiff/report/__init__.py
# Text output and JSON records of comparison runs.

from .report_writer import DOUBLE_DIGITS10, ReportWriter
from .report_record import (
    deserialize_float,
    load_record,
    record_to_verdict,
    serialize_float,
    verdict_to_record,
    write_record,
)

__all__ = [
    "DOUBLE_DIGITS10",
    "ReportWriter",
    "deserialize_float",
    "load_record",
    "record_to_verdict",
    "serialize_float",
    "verdict_to_record",
    "write_record",
]
