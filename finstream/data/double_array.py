"""Polymorphic numeric container.

A DoubleArray is ``count`` samples of ``properties`` float64 values each,
addressed as one flat row-major sequence:

    offset(index, property) = index * properties + property

The storage behind it is one of a closed set of kinds, selected by an
``ArrayKind`` tag rather than by subclassing:

- SCALAR:   a single value held inline
- VECTOR:   an owned 1-D float64 buffer
- MATRIX:   an owned 2-D float64 array (rows are samples)
- STRUCT:   a structured numpy array of float64 records, viewed zero-copy
- EXTERNAL: a caller-supplied buffer with an optional release callback

Every kind honours the same indexing, cloning and math contract, so code
that consumes a DoubleArray never needs to know which kind it holds.

Ownership: cloning is the only way to hand the same numbers to a second
holder. Clones are always owned and never share memory with the source.
An EXTERNAL array calls its release callback exactly once, from ``dispose()``
(or when leaving a ``with`` block); clones never carry the callback.
"""

from __future__ import annotations

import logging
import operator
from enum import Enum
from typing import Any, Callable, Iterable, Sequence

import numpy as np

from finstream.data.array_math import ArrayMathMixin
from finstream.data.constants import (
    BAR_PROPERTIES,
    CLOSE_IDX,
    HIGH_IDX,
    LOW_IDX,
    OPEN_IDX,
    TRADE_BAR_PROPERTIES,
    VOLUME_IDX,
    ZERO,
)
from finstream.data.structs import is_data_struct, struct_properties
from finstream.exceptions import DisposedError, IndexOutOfRangeError, ReshapeError

logger = logging.getLogger(__name__)


class ArrayKind(str, Enum):
    """Storage kind of a DoubleArray."""

    SCALAR = "scalar"
    VECTOR = "vector"
    MATRIX = "matrix"
    STRUCT = "struct"
    EXTERNAL = "external"


class DoubleArray(ArrayMathMixin):
    """Uniform view over scalar, vector, matrix, record and external storage."""

    __slots__ = (
        "_kind",
        "_scalar",
        "_data",
        "_flat",
        "_count",
        "_properties",
        "_owned",
        "_disposer",
        "_disposed",
    )

    def __init__(
        self,
        kind: ArrayKind = ArrayKind.SCALAR,
        *,
        scalar: float = ZERO,
        data: np.ndarray | None = None,
        flat: np.ndarray | None = None,
        count: int = 1,
        properties: int = 1,
        owned: bool = True,
        disposer: Callable[[], Any] | None = None,
    ):
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")
        if properties < 1:
            raise ValueError(f"properties must be >= 1, got {properties}")
        if kind is not ArrayKind.SCALAR and flat is None:
            raise ValueError(f"{kind.value} arrays need backing storage")
        if kind is ArrayKind.SCALAR and (count != 1 or properties != 1):
            raise ValueError("scalar arrays hold exactly one value")
        if flat is not None and flat.size != count * properties:
            raise ReshapeError(
                f"backing storage holds {flat.size} values, "
                f"expected {count} x {properties}"
            )

        self._kind = kind
        self._scalar = float(scalar)
        self._data = data
        self._flat = flat
        self._count = count
        self._properties = properties
        self._owned = owned
        self._disposer = disposer
        self._disposed = False

    # =========================================================================
    # Construction entry points
    # =========================================================================

    @classmethod
    def from_value(cls, value: float) -> DoubleArray:
        """Wrap a single number as a scalar."""
        return cls(ArrayKind.SCALAR, scalar=float(value))

    @classmethod
    def zeros(cls, count: int = 1, properties: int = 1) -> DoubleArray:
        """Create an owned zero-filled vector (a scalar for 1 x 1)."""
        if count == 1 and properties == 1:
            return cls.from_value(ZERO)
        flat = np.zeros(count * properties, dtype=np.float64)
        return cls(
            ArrayKind.VECTOR, data=flat, flat=flat, count=count, properties=properties
        )

    @classmethod
    def zeros_matrix(cls, rows: int, cols: int) -> DoubleArray:
        """Create an owned zero-filled matrix."""
        return cls.from_2d(np.zeros((rows, cols), dtype=np.float64))

    @classmethod
    def from_array(
        cls,
        array: Sequence[float] | np.ndarray,
        copy: bool = True,
        properties: int = 1,
    ) -> DoubleArray:
        """Wrap a flat sequence of ``count * properties`` values.

        Args:
            array: Flat values, row-major
            copy: Copy into an owned buffer; ``False`` wraps a float64
                numpy array zero-copy
            properties: Values per sample

        Returns:
            A VECTOR array
        """
        if copy or not isinstance(array, np.ndarray):
            flat = np.array(array, dtype=np.float64).reshape(-1)
            owned = True
        else:
            if array.dtype != np.float64 or not array.flags.c_contiguous:
                raise TypeError("zero-copy wrapping needs a contiguous float64 array")
            flat = array.reshape(-1)
            owned = False
        if flat.size == 0 or flat.size % properties != 0:
            raise ReshapeError(
                f"{flat.size} values cannot be split into samples of {properties} properties"
            )
        return cls(
            ArrayKind.VECTOR,
            data=flat,
            flat=flat,
            count=flat.size // properties,
            properties=properties,
            owned=owned,
        )

    @classmethod
    def from_2d(cls, array: np.ndarray | Sequence[Sequence[float]], copy: bool = True) -> DoubleArray:
        """Wrap a rows x cols matrix; rows are samples, columns properties."""
        if copy or not isinstance(array, np.ndarray):
            data = np.array(array, dtype=np.float64, order="C")
            owned = True
        else:
            if array.dtype != np.float64 or not array.flags.c_contiguous:
                raise TypeError("zero-copy wrapping needs a contiguous float64 array")
            data = array
            owned = False
        if data.ndim != 2 or data.size == 0:
            raise ReshapeError(f"expected a non-empty 2-D array, got shape {data.shape}")
        rows, cols = data.shape
        return cls(
            ArrayKind.MATRIX,
            data=data,
            flat=data.reshape(-1),
            count=rows,
            properties=cols,
            owned=owned,
        )

    @classmethod
    def from_jagged(cls, rows: Iterable[Sequence[float]]) -> DoubleArray:
        """Build a matrix from a sequence of equally sized rows."""
        rows = [list(row) for row in rows]
        widths = {len(row) for row in rows}
        if len(widths) != 1:
            raise ReshapeError(f"rows must share one length, got {sorted(widths)}")
        return cls.from_2d(rows)

    @classmethod
    def from_struct(cls, records: np.ndarray, copy: bool = True) -> DoubleArray:
        """View an array of data-struct records as a flat float64 sequence."""
        if not isinstance(records, np.ndarray) or not is_data_struct(records.dtype):
            raise TypeError("expected a numpy array of float64 records")
        data = records.copy() if copy else records
        data = data.reshape(-1)
        if data.size == 0:
            raise ReshapeError("cannot wrap an empty record array")
        return cls(
            ArrayKind.STRUCT,
            data=data,
            flat=data.view(np.float64),
            count=data.size,
            properties=struct_properties(data.dtype),
            owned=copy,
        )

    @classmethod
    def from_struct_scalar(cls, record: np.void) -> DoubleArray:
        """Wrap a single data-struct record."""
        if not is_data_struct(record.dtype):
            raise TypeError("expected a record of float64 fields")
        return cls.from_struct(np.array([record], dtype=record.dtype))

    @classmethod
    def from_buffer(
        cls,
        buffer: Any,
        count: int,
        properties: int,
        zero_values: bool = True,
        disposer: Callable[[], Any] | None = None,
    ) -> DoubleArray:
        """Wrap caller-owned memory without copying it.

        Args:
            buffer: Any writable object exposing the buffer protocol
                (bytearray, mmap, ctypes array, numpy array, ...)
            count: Number of samples
            properties: Values per sample
            zero_values: Zero the region before handing it out
            disposer: Release action called exactly once by ``dispose()``

        Returns:
            An EXTERNAL array; use it as a context manager to release it.
        """
        flat = np.frombuffer(buffer, dtype=np.float64, count=count * properties)
        if zero_values:
            flat[:] = ZERO
        return cls(
            ArrayKind.EXTERNAL,
            data=flat,
            flat=flat,
            count=count,
            properties=properties,
            owned=False,
            disposer=disposer,
        )

    # =========================================================================
    # Shape
    # =========================================================================

    @property
    def kind(self) -> ArrayKind:
        return self._kind

    @property
    def count(self) -> int:
        """Number of samples."""
        return self._count

    @property
    def properties(self) -> int:
        """Number of values per sample."""
        return self._properties

    @property
    def linear_length(self) -> int:
        return self._count * self._properties

    @property
    def shape(self) -> tuple[int, int]:
        return self._count, self._properties

    @property
    def is_scalar(self) -> bool:
        return self._count == 1

    @property
    def is_owned(self) -> bool:
        return self._owned

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def _is_inline(self) -> bool:
        return self._kind is ArrayKind.SCALAR

    def __len__(self) -> int:
        return self.linear_length

    # =========================================================================
    # Element access
    # =========================================================================

    def _flat_view(self) -> np.ndarray:
        if self._disposed:
            raise DisposedError("external array was released")
        return self._flat

    def _flat_values(self) -> np.ndarray:
        if self._is_inline:
            return np.array([self._scalar], dtype=np.float64)
        return self._flat_view()

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.linear_length:
            raise IndexOutOfRangeError(
                f"index {index} out of range for linear length {self.linear_length}"
            )

    def _check_property(self, property: int) -> None:
        if not 0 <= property < self._properties:
            raise IndexOutOfRangeError(
                f"property {property} out of range for {self._properties} properties"
            )

    def at(self, index: int) -> float:
        """Read the element at a linear index."""
        self._check_index(index)
        if self._is_inline:
            return self._scalar
        return float(self._flat_view()[index])

    def set(self, index: int, value: float) -> None:
        """Write the element at a linear index."""
        self._check_index(index)
        if self._is_inline:
            self._scalar = float(value)
        else:
            self._flat_view()[index] = value

    def _linear(self, key) -> int:
        if isinstance(key, tuple):
            index, property = key
            if not 0 <= index < self._count:
                raise IndexOutOfRangeError(
                    f"sample {index} out of range for count {self._count}"
                )
            self._check_property(property)
            return index * self._properties + property
        return operator.index(key)

    def __getitem__(self, key) -> float:
        return self.at(self._linear(key))

    def __setitem__(self, key, value: float) -> None:
        self.set(self._linear(key), value)

    # =========================================================================
    # Named accessors (bar layout with scalar fallback)
    # =========================================================================

    @property
    def value(self) -> float:
        return self.at(0)

    @value.setter
    def value(self, value: float) -> None:
        self.set(0, value)

    def _bar_field(self, index: int) -> float:
        if self._properties >= BAR_PROPERTIES:
            return self.at(index)
        return self.value

    def _set_bar_field(self, index: int, minimum: int, value: float) -> None:
        if self._properties < minimum:
            raise IndexOutOfRangeError(
                f"{self._properties} properties cannot hold a bar field "
                f"(needs {minimum})"
            )
        self.set(index, value)

    @property
    def close(self) -> float:
        return self.at(CLOSE_IDX)

    @close.setter
    def close(self, value: float) -> None:
        self.set(CLOSE_IDX, value)

    @property
    def open(self) -> float:
        return self._bar_field(OPEN_IDX)

    @open.setter
    def open(self, value: float) -> None:
        self._set_bar_field(OPEN_IDX, BAR_PROPERTIES, value)

    @property
    def high(self) -> float:
        return self._bar_field(HIGH_IDX)

    @high.setter
    def high(self, value: float) -> None:
        self._set_bar_field(HIGH_IDX, BAR_PROPERTIES, value)

    @property
    def low(self) -> float:
        return self._bar_field(LOW_IDX)

    @low.setter
    def low(self, value: float) -> None:
        self._set_bar_field(LOW_IDX, BAR_PROPERTIES, value)

    @property
    def volume(self) -> float:
        if self._properties >= TRADE_BAR_PROPERTIES:
            return self.at(VOLUME_IDX)
        return ZERO

    @volume.setter
    def volume(self, value: float) -> None:
        self._set_bar_field(VOLUME_IDX, TRADE_BAR_PROPERTIES, value)

    # =========================================================================
    # Copying and reshaping
    # =========================================================================

    def _new_scalar(self, value: float) -> DoubleArray:
        return DoubleArray.from_value(value)

    def _coerce(self, other: Any) -> DoubleArray:
        return as_double_array(other)

    def clone(self) -> DoubleArray:
        """Deep copy into owned storage of the same shape."""
        if self._is_inline:
            return DoubleArray.from_value(self._scalar)
        flat = self._flat_view()
        if self._kind is ArrayKind.MATRIX:
            return DoubleArray.from_2d(self._data, copy=True)
        if self._kind is ArrayKind.STRUCT:
            return DoubleArray.from_struct(self._data, copy=True)
        copied = flat.copy()
        return DoubleArray(
            ArrayKind.VECTOR,
            data=copied,
            flat=copied,
            count=self._count,
            properties=self._properties,
        )

    __copy__ = clone

    def __deepcopy__(self, memo) -> DoubleArray:
        return self.clone()

    def reshape(self, count: int, properties: int) -> DoubleArray:
        """Return an owned copy with a different sample/property split.

        Raises:
            ReshapeError: If ``count * properties`` differs from the
                current linear length.
        """
        if count < 1 or properties < 1 or count * properties != self.linear_length:
            raise ReshapeError(
                f"cannot reshape {self._count} x {self._properties} "
                f"into {count} x {properties}"
            )
        if count == 1 and properties == 1:
            return DoubleArray.from_value(self.value)
        return DoubleArray.from_array(self._flat_values(), copy=True, properties=properties)

    def to_numpy(self) -> np.ndarray:
        """Copy the values into a (count, properties) float64 array."""
        return self._flat_values().copy().reshape(self._count, self._properties)

    def tolist(self) -> list[float]:
        return self._flat_values().tolist()

    # =========================================================================
    # Disposal
    # =========================================================================

    def dispose(self) -> None:
        """Release external storage; a no-op for owned kinds.

        The disposer runs at most once, no matter how often this is called.
        """
        if self._disposed or self._kind is not ArrayKind.EXTERNAL:
            return
        self._disposed = True
        disposer, self._disposer = self._disposer, None
        self._data = None
        self._flat = None
        if disposer is not None:
            logger.debug("Releasing external array (%d x %d)", self._count, self._properties)
            disposer()

    def __enter__(self) -> DoubleArray:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # =========================================================================
    # Operators
    # =========================================================================

    def _arith(self, other: Any, op: np.ufunc, reflected: bool = False) -> DoubleArray:
        other = as_double_array(other)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            if reflected:
                return other.function(self, op)
            return self.function(other, op)

    def __add__(self, other):
        return self._arith(other, np.add)

    def __radd__(self, other):
        return self._arith(other, np.add, reflected=True)

    def __sub__(self, other):
        return self._arith(other, np.subtract)

    def __rsub__(self, other):
        return self._arith(other, np.subtract, reflected=True)

    def __mul__(self, other):
        return self._arith(other, np.multiply)

    def __rmul__(self, other):
        return self._arith(other, np.multiply, reflected=True)

    def __truediv__(self, other):
        return self._arith(other, np.true_divide)

    def __rtruediv__(self, other):
        return self._arith(other, np.true_divide, reflected=True)

    def __neg__(self):
        return self.unary_function(np.negative)

    def __abs__(self):
        return self.unary_function(np.abs)

    def __float__(self) -> float:
        return self.value

    def __eq__(self, other) -> bool:
        if isinstance(other, DoubleArray):
            return self.shape == other.shape and bool(
                np.array_equal(self._flat_values(), other._flat_values())
            )
        if isinstance(other, (int, float, np.number)):
            return self.value == float(other)
        return NotImplemented

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __lt__(self, other) -> bool:
        return self.value < float(other)

    def __le__(self, other) -> bool:
        return self.value <= float(other)

    def __gt__(self, other) -> bool:
        return self.value > float(other)

    def __ge__(self, other) -> bool:
        return self.value >= float(other)

    def __repr__(self) -> str:
        if self._is_inline:
            return f"DoubleArray({self._scalar!r})"
        if self._disposed:
            return f"DoubleArray(kind={self._kind.value}, disposed)"
        return (
            f"DoubleArray(kind={self._kind.value}, count={self._count}, "
            f"properties={self._properties}, values={self.tolist()!r})"
        )


def as_double_array(value: Any) -> DoubleArray:
    """Coerce numbers, records, numpy arrays and sequences to a DoubleArray.

    Args:
        value: DoubleArray (returned as is), number, numpy record,
            structured or plain numpy array, or a flat sequence of numbers

    Returns:
        A DoubleArray; anything that is not already one is copied.
    """
    if isinstance(value, DoubleArray):
        return value
    if isinstance(value, np.void):
        return DoubleArray.from_struct_scalar(value)
    if isinstance(value, (int, float, np.number)):
        return DoubleArray.from_value(float(value))
    if isinstance(value, np.ndarray):
        if value.dtype.names is not None:
            return DoubleArray.from_struct(value, copy=True)
        if value.ndim == 2:
            return DoubleArray.from_2d(value, copy=True)
        if value.size == 1:
            return DoubleArray.from_value(float(value.reshape(-1)[0]))
        return DoubleArray.from_array(value, copy=True)
    if isinstance(value, (list, tuple)):
        if len(value) == 1:
            return DoubleArray.from_value(float(value[0]))
        return DoubleArray.from_array(value, copy=True)
    raise TypeError(f"cannot convert {type(value).__name__} to DoubleArray")
