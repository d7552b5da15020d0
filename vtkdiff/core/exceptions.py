# =============================================================================
# vtkdiff -- DATA ARRAY COMPARISON
# File:   vtkdiff/core/exceptions.py
# =============================================================================
#
# SCOPE
# -----
# Exception hierarchy for every fatal condition of a comparison run.
# All exceptions are pure value objects: no side effects, no printing,
# no I/O of any kind. Reporting and exit codes belong to the caller.
#
# EXCEPTION HIERARCHY
# -------------------
#   DiffError(Exception)                              -- base; never raised directly
#     ConfigurationError(DiffError, ValueError)       -- unusable invocation
#     ArrayNotFoundError(DiffError, LookupError)      -- array absent from point and cell data
#     ReadError(DiffError)                            -- input file unreadable or malformed
#     ArrayTypeError(DiffError, TypeError)            -- array data is not numeric
#     ShapeMismatchError(DiffError, ValueError)       -- tuple count or arity differ
#
# A failed comparison is NOT an exception. It is a Verdict with passed=False.
#
# MESSAGE CONTRACT
# ----------------
# Every exception message is:
#   - Deterministic: identical inputs -> identical message string.
#   - Explicit: the offending name and value(s) are always included.
#   - Non-empty.
#
# =============================================================================

from __future__ import annotations

from typing import Any


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class DiffError(Exception):
    """
    Base class for all comparison run exceptions.

    Never raised directly. Use a concrete subclass.

    Attributes:
        field_name:  Name of the offending input (array name, file name or
                     option), or empty string if not applicable.
        value:       The offending value, or None if the violation is
                     relational rather than local.
        message:     Human-readable description of the violation.
                     Always non-empty. Always deterministic.
    """

    def __init__(
        self,
        message:    str,
        field_name: str = "",
        value:      Any = None,
    ) -> None:
        if not message:
            raise ValueError("DiffError: message must be a non-empty string")
        super().__init__(message)
        self.field_name: str = field_name
        self.value:      Any = value
        self.message:    str = message

    def __str__(self) -> str:
        return self.message


# =============================================================================
# CONCRETE EXCEPTIONS
# =============================================================================

class ConfigurationError(DiffError, ValueError):
    """
    Raised when the requested comparison cannot be run as configured.

    This covers:
      - Comparing a data array to itself within a single file.
      - Input files of an unsupported type.
      - Negative or NaN error thresholds.

    Message format:
        "ConfigurationError: <reason>"

    Args:
        reason:      Human-readable description. Must be non-empty.
        field_name:  Offending option or input name.
        value:       Offending value.
    """

    def __init__(
        self,
        reason:     str,
        field_name: str = "",
        value:      Any = None,
    ) -> None:
        if not isinstance(reason, str) or not reason:
            raise ValueError(
                "ConfigurationError: reason must be a non-empty string"
            )
        super().__init__(
            message="ConfigurationError: " + reason,
            field_name=field_name,
            value=value,
        )
        self.reason: str = reason


class ArrayNotFoundError(DiffError, LookupError):
    """
    Raised when a named data array cannot be located in a dataset.

    Message format:
        "ArrayNotFoundError: data array '<array_name>' <where> in '<location>'."

    Args:
        array_name:  Name of the requested array. Must be non-empty.
        location:    Dataset location (file path) that was searched.
        where:       Description of the storage that was searched, e.g.
                     "neither found in point data nor in cell data".
    """

    def __init__(
        self,
        array_name: str,
        location:   str,
        where:      str = "neither found in point data nor in cell data",
    ) -> None:
        if not array_name:
            raise ValueError(
                "ArrayNotFoundError: array_name must be a non-empty string"
            )
        message = (
            "ArrayNotFoundError: data array '"
            + array_name
            + "' "
            + where
            + " in '"
            + str(location)
            + "'."
        )
        super().__init__(message=message, field_name=array_name, value=str(location))
        self.array_name: str = array_name
        self.location:   str = str(location)


class ReadError(DiffError):
    """
    Raised when an input dataset cannot be read or is malformed.

    Replaces process termination on read failure: callers observe the
    failure as a value and decide how to report it.

    Message format:
        "ReadError: error reading file '<location>': <detail>"
    """

    def __init__(self, location: str, detail: str) -> None:
        if not isinstance(detail, str) or not detail:
            raise ValueError(
                "ReadError: detail must be a non-empty string"
            )
        message = (
            "ReadError: error reading file '"
            + str(location)
            + "': "
            + detail
        )
        super().__init__(message=message, field_name="", value=str(location))
        self.location: str = str(location)
        self.detail:   str = detail


class ArrayTypeError(DiffError, TypeError):
    """
    Raised when a data array does not hold numeric data.

    Message format:
        "ArrayTypeError: data in data array <label> ('<array_name>') is not
         numeric: data type is <data_type>."
    """

    def __init__(self, label: str, array_name: str, data_type: str) -> None:
        if not label:
            raise ValueError(
                "ArrayTypeError: label must be a non-empty string"
            )
        message = (
            "ArrayTypeError: data in data array "
            + label
            + " ('"
            + array_name
            + "') is not numeric: data type is "
            + str(data_type)
            + "."
        )
        super().__init__(message=message, field_name=array_name, value=data_type)
        self.label:     str = label
        self.data_type: str = str(data_type)


class ShapeMismatchError(DiffError, ValueError):
    """
    Raised when the two data arrays differ in tuple count or component count.

    Both differing values are always reported. Raised before any element
    is compared.

    Message format:
        "ShapeMismatchError: number of <quantity> differ: <value_a> in data
         array a and <value_b> in data array b."

    Args:
        quantity:  "tuples" or "components".
        value_a:   Value observed for data array a.
        value_b:   Value observed for data array b.
    """

    def __init__(self, quantity: str, value_a: int, value_b: int) -> None:
        if not quantity:
            raise ValueError(
                "ShapeMismatchError: quantity must be a non-empty string"
            )
        message = (
            "ShapeMismatchError: number of "
            + quantity
            + " differ: "
            + repr(value_a)
            + " in data array a and "
            + repr(value_b)
            + " in data array b."
        )
        super().__init__(message=message, field_name=quantity, value=value_a)
        self.quantity: str = quantity
        self.value_a:  int = value_a
        self.value_b:  int = value_b

    def __repr__(self) -> str:
        return (
            "ShapeMismatchError("
            + "quantity=" + repr(self.quantity)
            + ", value_a=" + repr(self.value_a)
            + ", value_b=" + repr(self.value_b)
            + ")"
        )


# =============================================================================
# MODULE __all__
# =============================================================================

__all__ = [
    "DiffError",
    "ConfigurationError",
    "ArrayNotFoundError",
    "ReadError",
    "ArrayTypeError",
    "ShapeMismatchError",
]
