import numpy as np
import pytest

from vtkdiff.source import CELL_DATA, POINT_DATA, DataArray


class TestFromValues:

    def test_one_dimensional_input_is_single_component(self):
        array = DataArray.from_values("T", [1.0, 2.0, 3.0])
        assert array.num_tuples == 3
        assert array.num_components == 1
        assert array.values.shape == (3, 1)
        assert array.association == POINT_DATA
        assert array.is_numeric is True

    def test_two_dimensional_input_keeps_shape(self, vector_values):
        array = DataArray.from_values("v", vector_values, association=CELL_DATA, location="x.vtu")
        assert (array.num_tuples, array.num_components) == (4, 3)
        assert array.association == CELL_DATA
        assert array.location == "x.vtu"

    def test_values_converted_to_float64(self):
        array = DataArray.from_values("ids", np.array([1, 2], dtype=np.int32))
        assert array.values.dtype == np.float64
        assert array.data_type == "int32"

    def test_values_are_copied_and_read_only(self, vector_values):
        array = DataArray.from_values("v", vector_values)
        vector_values[0, 0] = 99.0
        assert array.values[0, 0] == 1.0
        with pytest.raises(ValueError):
            array.values[0, 0] = 5.0

    def test_higher_rank_rejected(self):
        with pytest.raises(ValueError, match="1-D or 2-D"):
            DataArray.from_values("t", np.zeros((2, 2, 2)))

    def test_is_frozen(self):
        array = DataArray.from_values("T", [1.0])
        with pytest.raises(Exception):
            array.name = "U"  # type: ignore[misc]
