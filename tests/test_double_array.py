"""Tests for the DoubleArray numeric container."""

import copy
import math

import numpy as np
import pytest

from finstream.data import (
    ArrayKind,
    DoubleArray,
    as_double_array,
    bar_value,
    trade_bar_value,
    trade_bars,
)
from finstream.exceptions import (
    DisposedError,
    IndexOutOfRangeError,
    ReshapeError,
    ShapeMismatchError,
)


def make_bar(open_price=10.0, high=12.0, low=9.0, close=11.0, volume=100.0) -> DoubleArray:
    """Helper to create a trade bar array."""
    return DoubleArray.from_struct_scalar(trade_bar_value(open_price, high, low, close, volume))


class TestConstruction:
    """Tests for construction entry points."""

    def test_from_value_is_scalar(self):
        arr = DoubleArray.from_value(3.5)
        assert arr.kind is ArrayKind.SCALAR
        assert arr.shape == (1, 1)
        assert arr.value == 3.5
        assert arr.is_scalar is True

    def test_from_array_splits_properties(self):
        arr = DoubleArray.from_array([1, 2, 3, 4, 5, 6], properties=3)
        assert arr.kind is ArrayKind.VECTOR
        assert arr.count == 2
        assert arr.properties == 3
        assert arr.linear_length == 6
        assert arr[1, 2] == 6.0

    def test_from_array_rejects_ragged_length(self):
        with pytest.raises(ReshapeError):
            DoubleArray.from_array([1, 2, 3], properties=2)

    def test_from_array_zero_copy_shares_memory(self):
        source = np.array([1.0, 2.0, 3.0])
        arr = DoubleArray.from_array(source, copy=False)
        source[0] = 42.0
        assert arr[0] == 42.0
        assert arr.is_owned is False

    def test_from_array_copy_is_independent(self):
        source = np.array([1.0, 2.0, 3.0])
        arr = DoubleArray.from_array(source)
        source[0] = 42.0
        assert arr[0] == 1.0
        assert arr.is_owned is True

    def test_from_2d(self):
        arr = DoubleArray.from_2d([[1, 2], [3, 4], [5, 6]])
        assert arr.kind is ArrayKind.MATRIX
        assert arr.shape == (3, 2)
        assert arr[2, 0] == 5.0
        assert arr.at(3) == 4.0

    def test_from_jagged_requires_equal_rows(self):
        with pytest.raises(ReshapeError):
            DoubleArray.from_jagged([[1, 2], [3]])

    def test_from_struct_views_records(self):
        bars = trade_bars([(10, 12, 9, 11, 100), (11, 13, 10, 12, 50)])
        arr = DoubleArray.from_struct(bars)
        assert arr.kind is ArrayKind.STRUCT
        assert arr.shape == (2, 5)
        # close-first layout
        assert arr[0, 0] == 11.0
        assert arr[1, 4] == 50.0

    def test_from_struct_scalar(self):
        arr = make_bar()
        assert arr.count == 1
        assert arr.properties == 5
        assert arr.is_scalar is True

    def test_zeros(self):
        arr = DoubleArray.zeros(3, 2)
        assert arr.shape == (3, 2)
        assert arr.sum() == 0.0
        assert DoubleArray.zeros().kind is ArrayKind.SCALAR

    def test_zeros_matrix(self):
        arr = DoubleArray.zeros_matrix(1, 2)
        assert arr.kind is ArrayKind.MATRIX
        arr[1] += 2.5
        assert arr[1] == 2.5

    def test_as_double_array_coercions(self):
        assert as_double_array(2).kind is ArrayKind.SCALAR
        assert as_double_array(np.float64(2.0)).value == 2.0
        assert as_double_array(bar_value(1, 2, 0.5, 1.5)).properties == 4
        assert as_double_array([1.0, 2.0]).count == 2
        assert as_double_array(np.ones((2, 3))).shape == (2, 3)
        arr = DoubleArray.from_value(1.0)
        assert as_double_array(arr) is arr

    def test_as_double_array_rejects_unknown(self):
        with pytest.raises(TypeError):
            as_double_array("1.0")


class TestIndexing:
    """Tests for element access and named accessors."""

    def test_out_of_range_raises(self):
        arr = DoubleArray.from_array([1, 2, 3])
        with pytest.raises(IndexOutOfRangeError):
            arr.at(3)
        with pytest.raises(IndexOutOfRangeError):
            arr[-1]

    def test_index_error_is_an_index_error(self):
        with pytest.raises(IndexError):
            DoubleArray.from_value(1.0).at(1)

    def test_set_updates_element(self):
        arr = DoubleArray.from_array([1, 2, 3, 4], properties=2)
        arr[1, 1] = 9.0
        assert arr.at(3) == 9.0

    def test_bar_accessors(self):
        arr = make_bar(open_price=10, high=12, low=9, close=11, volume=100)
        assert arr.open == 10.0
        assert arr.high == 12.0
        assert arr.low == 9.0
        assert arr.close == 11.0
        assert arr.volume == 100.0
        assert arr.value == arr.close

    def test_scalar_fallbacks(self):
        arr = DoubleArray.from_value(5.0)
        assert arr.open == 5.0
        assert arr.high == 5.0
        assert arr.low == 5.0
        assert arr.close == 5.0
        assert arr.volume == 0.0

    def test_bar_without_volume_reports_zero(self):
        arr = as_double_array(bar_value(1, 2, 0.5, 1.5))
        assert arr.volume == 0.0
        with pytest.raises(IndexOutOfRangeError):
            arr.volume = 1.0

    def test_setters_write_through_struct(self):
        arr = make_bar()
        arr.high = 20.0
        arr.volume += 5
        assert arr.high == 20.0
        assert arr.volume == 105.0


class TestCloneAndReshape:
    """Tests for ownership and shape changes."""

    @pytest.mark.parametrize(
        "factory",
        [
            lambda: DoubleArray.from_value(1.0),
            lambda: DoubleArray.from_array([1, 2, 3, 4], properties=2),
            lambda: DoubleArray.from_2d([[1, 2], [3, 4]]),
            lambda: make_bar(),
        ],
    )
    def test_clone_is_independent(self, factory):
        """Mutating a clone never changes the source."""
        source = factory()
        before = source.tolist()
        clone = source.clone()
        clone[0] = -1.0
        assert source.tolist() == before
        assert clone.shape == source.shape
        assert clone.is_owned is True

    def test_clone_keeps_kind_family(self):
        assert DoubleArray.from_2d([[1, 2]]).clone().kind is ArrayKind.MATRIX
        assert make_bar().clone().kind is ArrayKind.STRUCT

    def test_copy_module_uses_clone(self):
        source = DoubleArray.from_array([1, 2])
        copied = copy.deepcopy(source)
        copied[0] = 10.0
        assert source[0] == 1.0

    def test_reshape(self):
        arr = DoubleArray.from_array([1, 2, 3, 4, 5, 6])
        reshaped = arr.reshape(2, 3)
        assert reshaped.shape == (2, 3)
        assert reshaped.tolist() == arr.tolist()

    def test_reshape_to_scalar(self):
        arr = DoubleArray.from_array([7.0, 8.0], properties=2).reshape(2, 1)
        assert arr.shape == (2, 1)
        single = DoubleArray.from_2d([[3.0]]).reshape(1, 1)
        assert single.kind is ArrayKind.SCALAR

    def test_reshape_mismatch(self):
        with pytest.raises(ReshapeError):
            DoubleArray.from_array([1, 2, 3, 4, 5, 6]).reshape(4, 2)

    def test_to_numpy(self):
        out = DoubleArray.from_array([1, 2, 3, 4], properties=2).to_numpy()
        assert out.shape == (2, 2)
        assert out[1, 0] == 3.0


class TestFunctions:
    """Tests for elementwise functions and broadcasting."""

    def test_scalar_scalar(self):
        result = DoubleArray.from_value(2.0).function(DoubleArray.from_value(3.0), np.multiply)
        assert result.kind is ArrayKind.SCALAR
        assert result.value == 6.0

    def test_scalar_broadcasts_to_every_element(self):
        vector = DoubleArray.from_array([1, 2, 3, 4, 5, 6], properties=3)
        result = vector.function(DoubleArray.from_value(10.0), np.add)
        assert result.tolist() == [11, 12, 13, 14, 15, 16]
        # left-hand scalar too
        result = DoubleArray.from_value(10.0).function(vector, np.subtract)
        assert result.tolist() == [9, 8, 7, 6, 5, 4]

    def test_operands_are_not_modified(self):
        lhs = DoubleArray.from_array([1, 2])
        rhs = DoubleArray.from_array([3, 4])
        lhs.function(rhs, np.add)
        assert lhs.tolist() == [1, 2]
        assert rhs.tolist() == [3, 4]

    def test_equal_properties_elementwise(self):
        lhs = DoubleArray.from_array([1, 2, 3, 4], properties=2)
        rhs = DoubleArray.from_array([10, 20, 30, 40], properties=2)
        assert lhs.function(rhs, np.add).tolist() == [11, 22, 33, 44]

    def test_different_properties_pair_leading_property(self):
        lhs = DoubleArray.from_array([1, 2, 3, 4, 5, 6], properties=3)
        rhs = DoubleArray.from_array([10, 20, 30, 40], properties=2)
        result = lhs.function(rhs, np.add)
        assert result.tolist() == [11, 2, 3, 34, 5, 6]

    def test_count_mismatch(self):
        lhs = DoubleArray.from_array([1, 2, 3])
        rhs = DoubleArray.from_array([1, 2])
        with pytest.raises(ShapeMismatchError):
            lhs.function(rhs, np.add)

    def test_python_callable(self):
        lhs = DoubleArray.from_array([1, 2, 3])
        result = lhs.function(DoubleArray.from_value(2.0), lambda a, b: a ** b)
        assert result.tolist() == [1, 4, 9]

    def test_function_on_property(self):
        lhs = DoubleArray.from_array([1, 2, 3, 4], properties=2)
        rhs = DoubleArray.from_array([10, 20, 30, 40], properties=2)
        result = lhs.function_on_property(rhs, 1, np.add)
        assert result.tolist() == [1, 22, 3, 44]

    def test_function_on_property_out_of_range(self):
        lhs = DoubleArray.from_array([1, 2, 3, 4], properties=2)
        with pytest.raises(IndexOutOfRangeError):
            lhs.function_on_property(lhs, 2, np.add)

    def test_unary_copy_and_in_place(self):
        arr = DoubleArray.from_array([1, -2, 3])
        copied = arr.unary_function(np.abs)
        assert copied.tolist() == [1, 2, 3]
        assert arr.tolist() == [1, -2, 3]
        same = arr.unary_function(np.abs, copy=False)
        assert same is arr
        assert arr.tolist() == [1, 2, 3]

    def test_unary_on_property(self):
        arr = DoubleArray.from_array([1, 2, 3, 4], properties=2)
        result = arr.unary_function_on_property(0, lambda v: v * 10)
        assert result.tolist() == [10, 2, 30, 4]


class TestIterationAndAggregates:
    """Tests for iteration, sum, mean and median."""

    def test_iteration_is_restartable(self):
        arr = DoubleArray.from_array([1, 2, 3])
        assert list(arr) == [1, 2, 3]
        assert list(arr) == [1, 2, 3]

    def test_iter_property(self):
        arr = DoubleArray.from_array([1, 2, 3, 4, 5, 6], properties=2)
        assert list(arr.iter_property(1)) == [2, 4, 6]

    def test_for_each(self):
        seen = []
        DoubleArray.from_array([1, 2, 3, 4], properties=2).for_each(seen.append, property=0)
        assert seen == [1, 3]

    def test_sum_and_mean(self):
        arr = DoubleArray.from_array([1, 2, 3, 4, 5, 6], properties=2)
        assert arr.sum() == 21.0
        assert arr.sum(0) == 9.0
        assert arr.mean(1) == 4.0
        assert arr.mean() == 7.0  # total divided by count

    def test_median_is_upper_middle_element(self):
        arr = DoubleArray.from_array([5, 6, 7, 8])
        assert arr.median() == 7.0  # index (4 + 1) // 2 == 2
        two_props = DoubleArray.from_array([1, 2, 3, 4, 5, 6], properties=2)
        assert two_props.median(1) == 6.0  # index 2 * 2 + 1

    def test_median_single_sample_out_of_range(self):
        with pytest.raises(IndexOutOfRangeError):
            DoubleArray.from_array([1.0, 2.0], properties=2).median(1)


class TestOperators:
    """Tests for Python operators and comparisons."""

    def test_arithmetic(self):
        arr = DoubleArray.from_array([2, 4])
        assert (arr + 1).tolist() == [3, 5]
        assert (1 - arr).tolist() == [-1, -3]
        assert (arr * arr).tolist() == [4, 16]
        assert (arr / 2).tolist() == [1, 2]
        assert (-arr).tolist() == [-2, -4]

    def test_division_by_zero_is_not_raised(self):
        result = DoubleArray.from_value(1.0) / 0
        assert math.isinf(result.value)

    def test_comparisons(self):
        arr = DoubleArray.from_value(3.0)
        assert arr == 3
        assert arr > 2
        assert arr <= 3
        assert float(arr) == 3.0

    def test_array_equality(self):
        assert DoubleArray.from_array([1, 2]) == DoubleArray.from_array([1, 2])
        assert DoubleArray.from_array([1, 2]) != DoubleArray.from_array([1, 2], properties=2)


class TestExternal:
    """Tests for externally owned buffers."""

    def test_wraps_buffer_zero_copy(self):
        buffer = bytearray(8 * 4)
        arr = DoubleArray.from_buffer(buffer, count=2, properties=2)
        arr[1, 1] = 3.0
        assert np.frombuffer(buffer, dtype=np.float64)[3] == 3.0
        assert arr.kind is ArrayKind.EXTERNAL
        assert arr.is_owned is False

    def test_zero_values(self):
        buffer = bytearray(np.ones(2).tobytes())
        arr = DoubleArray.from_buffer(buffer, count=2, properties=1)
        assert arr.tolist() == [0.0, 0.0]
        kept = DoubleArray.from_buffer(bytearray(np.ones(2).tobytes()), 2, 1, zero_values=False)
        assert kept.tolist() == [1.0, 1.0]

    def test_disposer_called_exactly_once(self):
        calls = []
        with DoubleArray.from_buffer(bytearray(16), 2, 1, disposer=lambda: calls.append(1)) as arr:
            clone = arr.clone()
        arr.dispose()
        clone.dispose()
        assert calls == [1]
        assert arr.disposed is True

    def test_clone_survives_disposal(self):
        arr = DoubleArray.from_buffer(bytearray(16), 2, 1)
        arr[0] = 5.0
        clone = arr.clone()
        arr.dispose()
        assert clone.kind is ArrayKind.VECTOR
        assert clone[0] == 5.0
        with pytest.raises(DisposedError):
            arr.at(0)
