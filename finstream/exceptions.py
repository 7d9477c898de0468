"""Exception hierarchy.

Shape and index errors are programmer errors and propagate immediately.
Data-dependent math errors are never raised; they travel in-band as an
``IndicatorStatus`` next to a usable fallback value (see
``finstream.indicators.status``).
"""


class FinstreamError(Exception):
    """Base class for all errors raised by finstream."""


class ReshapeError(FinstreamError, ValueError):
    """Requested shape does not hold the same number of elements as the source."""


class ShapeMismatchError(ReshapeError):
    """Two operands of an elementwise operation cannot be paired."""


class IndexOutOfRangeError(FinstreamError, IndexError):
    """Linear index, property index or window lookback is out of range."""


class DisposedError(FinstreamError):
    """An externally-owned array was accessed after it was released."""
