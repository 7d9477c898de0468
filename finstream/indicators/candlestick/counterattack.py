"""Counterattack: two long candles of opposite colour closing at the same level."""

from __future__ import annotations

from typing import Any

from finstream.data.constants import ZERO
from finstream.data.double_array import DoubleArray
from finstream.data.rolling_window import TimeValueWindow
from finstream.indicators.candlestick.base import (
    CandlestickPattern,
    candle_color,
    real_body,
)
from finstream.indicators.candlestick.settings import (
    DEFAULT_CANDLE_SETTINGS,
    CandleSettings,
    CandleSettingType,
)
from finstream.indicators.registry import register_indicator

BODY_LONG = CandleSettingType.BODY_LONG
EQUAL = CandleSettingType.EQUAL


@register_indicator("counterattack")
class Counterattack(CandlestickPattern):
    """+1 for a bullish counterattack, -1 for a bearish one, 0 otherwise."""

    def __init__(self, name: str = "COUNTERATTACK", settings: CandleSettings | None = None):
        settings = settings or DEFAULT_CANDLE_SETTINGS
        self.equal_average_period = settings.get(EQUAL).average_period
        self.body_long_average_period = settings.get(BODY_LONG).average_period
        super().__init__(
            name,
            max(self.equal_average_period, self.body_long_average_period) + 1 + 1,
            settings,
        )
        self._equal_period_total = ZERO
        # column 0 tracks the current candle, column 1 the previous one
        self._body_long_period_total = DoubleArray.zeros_matrix(1, 2)

    def forward_window(self, window: TimeValueWindow, time: int, input: DoubleArray) -> Any:
        if not self.is_ready:
            if self.samples >= self.period - self.equal_average_period:
                self._equal_period_total += self.candle_range(EQUAL, window.get(1))
            if self.samples >= self.period - self.body_long_average_period:
                self._body_long_period_total[1] += self.candle_range(BODY_LONG, window.get(1))
                self._body_long_period_total[0] += self.candle_range(BODY_LONG, input)
            return ZERO

        previous = window.get(1)
        equal = self.candle_average(EQUAL, self._equal_period_total, previous)
        if (
            # opposite candles
            candle_color(previous) == -candle_color(input)
            # 1st long
            and real_body(previous)
            > self.candle_average(BODY_LONG, self._body_long_period_total[1], previous)
            # 2nd long
            and real_body(input)
            > self.candle_average(BODY_LONG, self._body_long_period_total[0], input)
            # equal closes
            and previous.close - equal <= input.close <= previous.close + equal
        ):
            value = float(candle_color(input))
        else:
            value = ZERO

        # roll the totals after recognition so they exclude the current candle
        self._equal_period_total += self.candle_range(EQUAL, input) - self.candle_range(
            EQUAL, window.get(self.equal_average_period + 1)
        )
        for i in (1, 0):
            self._body_long_period_total[i] += self.candle_range(
                BODY_LONG, window.get(i)
            ) - self.candle_range(BODY_LONG, window.get(i + self.body_long_average_period))

        return value

    def reset(self) -> None:
        self._equal_period_total = ZERO
        self._body_long_period_total = DoubleArray.zeros_matrix(1, 2)
        super().reset()
