"""Elementwise math, iteration and aggregates for DoubleArray.

Operations accept any callable. numpy ufuncs are applied vectorized;
plain Python callables are applied element by element.

Broadcasting is scalar-only: an operand with count == 1 and a single
property is applied across every element of the other operand. Any other
pairing needs equal counts. When both operands have the same number of
properties the operation is fully elementwise; when they differ, each side
advances through its own property stride, so the leading property of each
left sample is paired with the leading property of the matching right
sample and the remaining left properties pass through untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterator

import numpy as np

from finstream.exceptions import IndexOutOfRangeError, ShapeMismatchError

if TYPE_CHECKING:
    from finstream.data.double_array import DoubleArray

BinaryFunction = Callable[[float, float], float]
UnaryFunction = Callable[[float], float]


def _apply_binary(op: BinaryFunction, lhs, rhs) -> np.ndarray | float:
    if isinstance(op, np.ufunc):
        return op(lhs, rhs)
    lhs_arr, rhs_arr = np.broadcast_arrays(
        np.asarray(lhs, dtype=np.float64), np.asarray(rhs, dtype=np.float64)
    )
    values = np.fromiter(
        (op(float(a), float(b)) for a, b in zip(lhs_arr.flat, rhs_arr.flat)),
        dtype=np.float64,
        count=lhs_arr.size,
    )
    return values.reshape(lhs_arr.shape)


def _apply_unary(op: UnaryFunction, values: np.ndarray) -> np.ndarray:
    if isinstance(op, np.ufunc):
        return op(values)
    return np.fromiter(
        (op(float(v)) for v in values), dtype=np.float64, count=values.size
    )


class ArrayMathMixin:
    """Math and iteration primitives shared by every DoubleArray kind."""

    __slots__ = ()

    # -------------------------------------------------------------------------
    # Binary functions
    # -------------------------------------------------------------------------

    def function(self, rhs: DoubleArray, op: BinaryFunction) -> DoubleArray:
        """Apply ``op(lhs, rhs)`` elementwise and return a new array.

        Args:
            rhs: Right-hand operand
            op: Binary callable or numpy ufunc

        Returns:
            A freshly owned array; neither operand is modified.

        Raises:
            ShapeMismatchError: If neither side is a single value and the
                sample counts differ.
        """
        lhs = self
        rhs = lhs._coerce(rhs)
        lhs_unit = lhs.is_scalar and lhs.properties == 1
        rhs_unit = rhs.is_scalar and rhs.properties == 1

        if lhs_unit and rhs_unit:
            return lhs._new_scalar(float(_apply_binary(op, lhs.value, rhs.value)))

        if lhs_unit:
            ret = rhs.clone()
            out = ret._flat_view()
            out[:] = _apply_binary(op, lhs.value, out)
            return ret

        if rhs_unit:
            ret = lhs.clone()
            out = ret._flat_view()
            out[:] = _apply_binary(op, out, rhs.value)
            return ret

        if lhs.count != rhs.count:
            raise ShapeMismatchError(
                f"cannot pair {lhs.count} samples with {rhs.count} samples"
            )

        ret = lhs.clone()
        out = ret._flat_view()
        right = rhs._flat_values()
        if lhs.properties == rhs.properties:
            out[:] = _apply_binary(op, out, right)
        else:
            # independent strides: leading property of each sample only
            out[:: lhs.properties] = _apply_binary(
                op, out[:: lhs.properties], right[:: rhs.properties]
            )
        return ret

    binary_function = function

    def function_on_property(
        self, rhs: DoubleArray, property: int, op: BinaryFunction
    ) -> DoubleArray:
        """Apply ``op`` to a single property column.

        Properties other than ``property`` are copied unchanged from the
        non-scalar operand.
        """
        lhs = self
        rhs = lhs._coerce(rhs)
        if property < 0:
            raise IndexOutOfRangeError(f"property {property} is negative")

        lhs_has = lhs.properties > property
        rhs_has = rhs.properties > property

        if lhs.is_scalar and lhs_has and rhs.is_scalar and rhs_has:
            return lhs._new_scalar(
                float(_apply_binary(op, lhs.at(property), rhs.at(property)))
            )

        if lhs.is_scalar and lhs_has:
            if not rhs_has:
                raise IndexOutOfRangeError(
                    f"property {property} out of range for {rhs.properties} properties"
                )
            ret = rhs.clone()
            out = ret._flat_view()
            column = out[property :: rhs.properties]
            out[property :: rhs.properties] = _apply_binary(
                op, lhs.at(property), column
            )
            return ret

        if rhs.is_scalar and rhs_has:
            if not lhs_has:
                raise IndexOutOfRangeError(
                    f"property {property} out of range for {lhs.properties} properties"
                )
            ret = lhs.clone()
            out = ret._flat_view()
            column = out[property :: lhs.properties]
            out[property :: lhs.properties] = _apply_binary(
                op, column, rhs.at(property)
            )
            return ret

        if not (lhs_has and rhs_has):
            raise IndexOutOfRangeError(
                f"property {property} out of range "
                f"({lhs.properties} and {rhs.properties} properties)"
            )
        if lhs.count != rhs.count:
            raise ShapeMismatchError(
                f"cannot pair {lhs.count} samples with {rhs.count} samples"
            )

        ret = lhs.clone()
        out = ret._flat_view()
        right = rhs._flat_values()
        out[property :: lhs.properties] = _apply_binary(
            op, out[property :: lhs.properties], right[property :: rhs.properties]
        )
        return ret

    binary_function_on_property = function_on_property

    # -------------------------------------------------------------------------
    # Unary functions
    # -------------------------------------------------------------------------

    def unary_function(self, op: UnaryFunction, copy: bool = True) -> DoubleArray:
        """Apply ``op`` to every element.

        With ``copy=False`` the array is modified in place and ``self`` is
        returned, so every holder of this array observes the change.
        """
        target = self.clone() if copy else self
        if target._is_inline:
            target._scalar = float(_apply_unary(op, np.array([target._scalar]))[0])
            return target
        out = target._flat_view()
        out[:] = _apply_unary(op, out)
        return target

    def unary_function_on_property(
        self, property: int, op: UnaryFunction, copy: bool = True
    ) -> DoubleArray:
        """Apply ``op`` to one property column, optionally in place."""
        self._check_property(property)
        target = self.clone() if copy else self
        if target._is_inline:
            target._scalar = float(_apply_unary(op, np.array([target._scalar]))[0])
            return target
        out = target._flat_view()
        out[property :: target.properties] = _apply_unary(
            op, out[property :: target.properties]
        )
        return target

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[float]:
        for i in range(self.linear_length):
            yield self.at(i)

    def iter_property(self, property: int) -> Iterator[float]:
        """Yield every sample's value of one property."""
        self._check_property(property)
        for i in range(property, self.linear_length, self.properties):
            yield self.at(i)

    def for_each(self, function: Callable[[float], None], property: int | None = None) -> None:
        """Call ``function`` for every element, or for one property column."""
        values = iter(self) if property is None else self.iter_property(property)
        for value in values:
            function(value)

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def sum(self, property: int | None = None) -> float:
        if property is None:
            return float(np.sum(self._flat_values()))
        self._check_property(property)
        return float(np.sum(self._flat_values()[property :: self.properties]))

    def mean(self, property: int | None = None) -> float:
        return self.sum(property) / self.count

    def median(self, property: int | None = None) -> float:
        """Midpoint element at ``(count + 1) // 2``.

        Not a true median: for even counts it returns the upper-middle
        sample and for a single sample the index is past the end.
        """
        middle = (self.count + 1) // 2
        if property is None:
            return self.at(middle)
        self._check_property(property)
        return self.at(middle * self.properties + property)
