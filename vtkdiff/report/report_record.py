# vtkdiff/report/report_record.py
# Lossless JSON records of a comparison run.
#
# All float values are serialized with float.hex(). +inf, -inf and NaN are
# written as the strings "inf", "-inf" and "nan". Loading restores the exact
# values and validates the format version.

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from vtkdiff.core.exceptions import ReadError
from vtkdiff.core.verdict import Verdict
from vtkdiff.version import REPORT_FORMAT_VERSION, TOOL_VERSION

_VECTOR_FIELDS = (
    "abs_l1",
    "abs_l2sq",
    "abs_l2",
    "abs_max",
    "rel_l1",
    "rel_l2sq",
    "rel_l2",
    "rel_max",
)

_SCALAR_FIELDS = (
    "max_abs_err",
    "max_rel_err",
    "abs_err_thr",
    "rel_err_thr",
)


def serialize_float(value: float) -> str:
    """Lossless hexadecimal representation; inf, -inf and nan as words."""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return float(value).hex()


def deserialize_float(value: str) -> float:
    if value == "nan":
        return float("nan")
    if value == "inf":
        return float("inf")
    if value == "-inf":
        return float("-inf")
    return float.fromhex(value)


def _serialize_vector(values: Sequence[float]) -> List[str]:
    return [serialize_float(v) for v in values]


def verdict_to_record(
    verdict: Verdict,
    input_a: str,
    input_b: str,
    array_a: str,
    array_b: str,
) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "format_version": REPORT_FORMAT_VERSION,
        "tool_version":   TOOL_VERSION,
        "result":         "PASS" if verdict.passed else "FAIL",
        "input_a":        input_a,
        "input_b":        input_b,
        "array_a":        array_a,
        "array_b":        array_b,
        "num_tuples":     verdict.num_tuples,
        "num_components": verdict.num_components,
    }
    for name in _SCALAR_FIELDS:
        record[name] = serialize_float(getattr(verdict, name))
    for name in _VECTOR_FIELDS:
        record[name] = _serialize_vector(getattr(verdict, name))
    return record


def write_record(record: Dict[str, Any], filepath: Path) -> Path:
    """Write a record as indented JSON. Parent directories are created."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(record, f, indent=4)
    return filepath


def record_to_verdict(record: Dict[str, Any]) -> Verdict:
    """Rebuild the Verdict stored in a PASS/FAIL record."""
    values = {
        name: tuple(deserialize_float(v) for v in record[name])
        for name in _VECTOR_FIELDS
    }
    for name in _SCALAR_FIELDS:
        values[name] = deserialize_float(record[name])
    return Verdict(
        passed=record["result"] == "PASS",
        num_tuples=int(record["num_tuples"]),
        **values,
    )


def load_record(filepath: Path) -> Dict[str, Any]:
    """
    Load a record written by write_record().

    Raises ReadError if the file is missing, not JSON, or of another
    format version.
    """
    filepath = Path(filepath)
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, ValueError) as exc:
        raise ReadError(str(filepath), f"cannot load report record: {exc}") from exc

    version: Optional[str] = payload.get("format_version") if isinstance(payload, dict) else None
    if version != REPORT_FORMAT_VERSION:
        raise ReadError(
            str(filepath),
            f"format_version mismatch. File: {version}, Expected: {REPORT_FORMAT_VERSION}.",
        )
    return payload
