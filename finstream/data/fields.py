"""Field selectors: map a sample to the single price an indicator consumes.

Each selector reads bar fields when the sample is at least bar-wide and
falls back to ``value`` otherwise (``volume`` falls back to zero).
"""

from typing import Callable

from finstream.data.constants import BAR_PROPERTIES, ZERO
from finstream.data.double_array import DoubleArray

Selector = Callable[[DoubleArray], float]


def _bar_or_value(selector: Selector, default: Selector | None = None) -> Selector:
    fallback = default or (lambda x: x.value)

    def select(x: DoubleArray) -> float:
        if x.properties >= BAR_PROPERTIES:
            return selector(x)
        return fallback(x)

    return select


class Field:
    """Namespace of price selectors."""

    open = staticmethod(_bar_or_value(lambda x: x.open))
    high = staticmethod(_bar_or_value(lambda x: x.high))
    low = staticmethod(_bar_or_value(lambda x: x.low))
    close = staticmethod(lambda x: x.value)
    average = staticmethod(_bar_or_value(lambda x: (x.open + x.high + x.low + x.close) / 4.0))
    median = staticmethod(_bar_or_value(lambda x: (x.high + x.low) / 2.0))
    typical = staticmethod(_bar_or_value(lambda x: (x.high + x.low + x.close) / 3.0))
    weighted = staticmethod(_bar_or_value(lambda x: (x.high + x.low + 2 * x.close) / 4.0))
    seven_bar = staticmethod(
        _bar_or_value(lambda x: (2 * x.open + x.high + x.low + 3 * x.close) / 7.0)
    )
    volume = staticmethod(_bar_or_value(lambda x: x.volume, lambda x: ZERO))
