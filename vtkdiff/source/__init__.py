# vtkdiff/source/__init__.py
# Array sources: locate a named array in a dataset file and return it
# as a DataArray. Read failures are raised as ReadError, never fatal.

from .data_array import ASSOCIATIONS, CELL_DATA, POINT_DATA, DataArray
from .vtu_reader import (
    NUMERIC_TYPES,
    VtuDataset,
    VtuReader,
    check_input_type,
    load_array,
    read_data_arrays,
)

__all__ = [
    "ASSOCIATIONS",
    "CELL_DATA",
    "POINT_DATA",
    "DataArray",
    "NUMERIC_TYPES",
    "VtuDataset",
    "VtuReader",
    "check_input_type",
    "load_array",
    "read_data_arrays",
]
