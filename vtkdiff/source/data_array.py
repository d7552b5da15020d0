# vtkdiff/source/data_array.py
# DataArray -- one named array read from a dataset, ready for comparison.

from dataclasses import dataclass
from typing import Optional

import numpy as np

POINT_DATA: str = "point"
CELL_DATA: str = "cell"

ASSOCIATIONS = (POINT_DATA, CELL_DATA)


@dataclass(frozen=True)
class DataArray:
    """
    A named data array attached to the points or cells of a dataset.

    Fields:
      name            -- array name as stored in the dataset.
      association     -- POINT_DATA or CELL_DATA.
      data_type       -- type name as stored in the file (e.g. "Float64").
      is_numeric      -- False for string and other non-numeric arrays.
      num_tuples      -- number of tuples (points or cells).
      num_components  -- tuple arity.
      values          -- read-only float64 array of shape
                         (num_tuples, num_components); None if not numeric.
      location        -- dataset location the array was read from.
    """
    name:           str
    association:    str
    data_type:      str
    is_numeric:     bool
    num_tuples:     int
    num_components: int
    values:         Optional[np.ndarray]
    location:       str = ""

    @classmethod
    def from_values(
        cls,
        name: str,
        values,
        association: str = POINT_DATA,
        location: str = "",
    ) -> "DataArray":
        """
        Build a numeric DataArray from in-memory values.

        1-D input is treated as single-component tuples.
        """
        arr = np.asarray(values, dtype=np.float64)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        if arr.ndim != 2:
            raise ValueError(
                f"values must be 1-D or 2-D. Received shape: {arr.shape}"
            )
        arr = arr.copy()
        arr.setflags(write=False)
        return cls(
            name=name,
            association=association,
            data_type=str(np.asarray(values).dtype),
            is_numeric=True,
            num_tuples=int(arr.shape[0]),
            num_components=int(arr.shape[1]),
            values=arr,
            location=location,
        )
