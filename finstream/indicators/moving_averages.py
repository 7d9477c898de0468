"""Streaming moving averages."""

from __future__ import annotations

from enum import Enum
from typing import Any

from finstream.data.constants import ZERO
from finstream.data.double_array import DoubleArray
from finstream.data.rolling_window import TimeValueWindow
from finstream.indicators.base import IndicatorBase, WindowIndicator
from finstream.indicators.registry import register_indicator


@register_indicator("sma")
class SimpleMovingAverage(WindowIndicator):
    """Arithmetic mean of the last ``period`` values.

    Keeps a running sum, adding the new value and subtracting the one that
    fell out of the window, so each update is O(1).
    """

    def __init__(self, period: int, name: str | None = None):
        super().__init__(name or f"SMA({period})", period)
        self.rolling_sum = ZERO

    def forward_window(self, window: TimeValueWindow, time: int, input: DoubleArray) -> Any:
        self.rolling_sum += input.value
        if window.samples > window.size:
            self.rolling_sum -= window.most_recently_removed[1].value
        return self.rolling_sum / window.count

    def reset(self) -> None:
        self.rolling_sum = ZERO
        super().reset()


@register_indicator("ema")
class ExponentialMovingAverage(IndicatorBase):
    """Exponentially weighted average seeded with the first value.

    ``current = input * k + previous * (1 - k)`` with ``k = 2 / (period + 1)``
    unless a smoothing factor is given.
    """

    def __init__(
        self,
        period: int,
        smoothing_factor: float | None = None,
        name: str | None = None,
    ):
        super().__init__(name or f"EMA({period})")
        if period < 1:
            raise ValueError(f"period must be >= 1, got {period}")
        self.period = period
        self.k = (
            smoothing_factor
            if smoothing_factor is not None
            else self.smoothing_factor_default(period)
        )

    @staticmethod
    def smoothing_factor_default(period: int) -> float:
        return 2.0 / (period + 1)

    @property
    def is_ready(self) -> bool:
        return self.samples >= self.period

    @property
    def warm_up_period(self) -> int:
        return self.period

    def forward(self, time: int, input: DoubleArray) -> Any:
        if self.samples == 1:
            return input.value
        return input.value * self.k + self.current.value * (1 - self.k)


@register_indicator("wilders")
class WildersMovingAverage(WindowIndicator):
    """Wilder's smoothing: a simple mean during warm-up, then
    ``(input + previous * (period - 1)) / period``."""

    def __init__(self, period: int, name: str | None = None):
        super().__init__(name or f"WWMA({period})", period)

    def forward_window(self, window: TimeValueWindow, time: int, input: DoubleArray) -> Any:
        if self.samples <= self.period:
            return sum(value.value for value in window.values()) / window.count
        return (input.value + self.current.value * (self.period - 1)) / self.period


class MovingAverageType(str, Enum):
    """Selector for the smoothing used by composite indicators."""

    SIMPLE = "simple"
    EXPONENTIAL = "exponential"
    WILDERS = "wilders"

    def as_indicator(self, name: str | None = None, period: int = 14) -> IndicatorBase:
        """Create a moving average of this type."""
        if self is MovingAverageType.SIMPLE:
            return SimpleMovingAverage(period, name=name)
        if self is MovingAverageType.EXPONENTIAL:
            return ExponentialMovingAverage(period, name=name)
        return WildersMovingAverage(period, name=name)
