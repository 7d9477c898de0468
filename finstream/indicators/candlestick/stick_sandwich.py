"""Stick sandwich: black, white, black with the outer candles closing level."""

from __future__ import annotations

from typing import Any

from finstream.data.constants import ONE, ZERO
from finstream.data.double_array import DoubleArray
from finstream.data.rolling_window import TimeValueWindow
from finstream.indicators.candlestick.base import CandleColor, CandlestickPattern, candle_color
from finstream.indicators.candlestick.settings import (
    DEFAULT_CANDLE_SETTINGS,
    CandleSettings,
    CandleSettingType,
)
from finstream.indicators.registry import register_indicator

EQUAL = CandleSettingType.EQUAL


@register_indicator("stick_sandwich")
class StickSandwich(CandlestickPattern):
    """+1 when the three-candle pattern matches, else 0 (always bullish)."""

    def __init__(self, name: str = "STICKSANDWICH", settings: CandleSettings | None = None):
        settings = settings or DEFAULT_CANDLE_SETTINGS
        self.equal_average_period = settings.get(EQUAL).average_period
        super().__init__(name, self.equal_average_period + 2 + 1, settings)
        self._equal_period_total = ZERO

    def forward_window(self, window: TimeValueWindow, time: int, input: DoubleArray) -> Any:
        if not self.is_ready:
            if self.samples >= self.period - self.equal_average_period:
                self._equal_period_total += self.candle_range(EQUAL, window.get(2))
            return ZERO

        first, second = window.get(2), window.get(1)
        equal = self.candle_average(EQUAL, self._equal_period_total, first)
        if (
            candle_color(first) is CandleColor.BLACK
            and candle_color(second) is CandleColor.WHITE
            and candle_color(input) is CandleColor.BLACK
            # 2nd low above the 1st close
            and second.low > first.close
            # 1st and 3rd close at the same level
            and first.close - equal <= input.close <= first.close + equal
        ):
            value = ONE
        else:
            value = ZERO

        self._equal_period_total += self.candle_range(EQUAL, first) - self.candle_range(
            EQUAL, window.get(self.equal_average_period + 2)
        )
        return value

    def reset(self) -> None:
        self._equal_period_total = ZERO
        super().reset()
