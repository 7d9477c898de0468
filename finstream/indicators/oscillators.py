"""Oscillators and volume-flow indicators."""

from __future__ import annotations

from typing import Any

from finstream.data.constants import ZERO, ZERO_EPSILON
from finstream.data.double_array import DoubleArray
from finstream.indicators.base import BarIndicator, IndicatorBase, TradeBarIndicator
from finstream.indicators.basic import Delay, Maximum, Minimum
from finstream.indicators.moving_averages import SimpleMovingAverage
from finstream.indicators.registry import register_indicator


@register_indicator("ad")
class AccumulationDistribution(TradeBarIndicator):
    """Cumulative money flow volume.

    Each bar adds ``((close - low) - (high - close)) / (high - low) * volume``;
    bars with no range add nothing.
    """

    def __init__(self, name: str = "AD"):
        super().__init__(name)

    @property
    def is_ready(self) -> bool:
        return self.samples > 0

    def forward(self, time: int, input: DoubleArray) -> Any:
        high, low, close = input.high, input.low, input.close
        bar_range = high - low
        flow = ((close - low) - (high - close)) / bar_range * input.volume if bar_range > 0 else ZERO
        return self.current.value + flow


@register_indicator("dpo")
class DetrendedPriceOscillator(IndicatorBase):
    """Price ``period // 2 + 1`` samples ago minus the simple moving average."""

    def __init__(self, period: int, name: str | None = None):
        super().__init__(name or f"DPO({period})")
        self.period = period
        self.price_lag = Delay(period // 2 + 1)
        self.moving_average = SimpleMovingAverage(period)

    @property
    def is_ready(self) -> bool:
        return self.moving_average.is_ready and self.price_lag.is_ready

    @property
    def warm_up_period(self) -> int:
        return self.period

    def forward(self, time: int, input: DoubleArray) -> Any:
        self.price_lag.update(time, input)
        self.moving_average.update(time, input)
        return self.price_lag.current - self.moving_average.current

    def reset(self) -> None:
        self.price_lag.reset()
        self.moving_average.reset()
        super().reset()


@register_indicator("wilr")
class WilliamsPercentR(BarIndicator):
    """Close relative to the high-low range of the last ``period`` bars, in [-100, 0]."""

    def __init__(self, period: int, name: str | None = None):
        name = name or f"WILR({period})"
        super().__init__(name)
        self.period = period
        self.price_maximum = Maximum(period, name=name + "_Max")
        self.price_minimum = Minimum(period, name=name + "_Min")

    @property
    def is_ready(self) -> bool:
        return self.price_maximum.is_ready and self.price_minimum.is_ready

    @property
    def warm_up_period(self) -> int:
        return self.period

    def forward(self, time: int, input: DoubleArray) -> Any:
        self.price_minimum.update(time, input.low)
        self.price_maximum.update(time, input.high)
        if not self.is_ready:
            return ZERO
        highest = self.price_maximum.current.value
        price_range = highest - self.price_minimum.current.value
        if abs(price_range) < ZERO_EPSILON:
            return ZERO
        return -100.0 * (highest - input.close) / price_range

    def reset(self) -> None:
        self.price_maximum.reset()
        self.price_minimum.reset()
        super().reset()
