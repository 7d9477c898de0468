"""Spinning top: a small real body with shadows longer than the body."""

from __future__ import annotations

from typing import Any

from finstream.data.constants import ZERO
from finstream.data.double_array import DoubleArray
from finstream.data.rolling_window import TimeValueWindow
from finstream.indicators.candlestick.base import (
    CandlestickPattern,
    candle_color,
    lower_shadow,
    real_body,
    upper_shadow,
)
from finstream.indicators.candlestick.settings import (
    DEFAULT_CANDLE_SETTINGS,
    CandleSettings,
    CandleSettingType,
)
from finstream.indicators.registry import register_indicator

BODY_SHORT = CandleSettingType.BODY_SHORT


@register_indicator("spinning_top")
class SpinningTop(CandlestickPattern):
    def __init__(self, name: str = "SPINNINGTOP", settings: CandleSettings | None = None):
        settings = settings or DEFAULT_CANDLE_SETTINGS
        self.body_short_average_period = settings.get(BODY_SHORT).average_period
        super().__init__(name, self.body_short_average_period + 1, settings)
        self._body_short_period_total = ZERO

    def forward_window(self, window: TimeValueWindow, time: int, input: DoubleArray) -> Any:
        if not self.is_ready:
            if self.samples >= self.period - self.body_short_average_period:
                self._body_short_period_total += self.candle_range(BODY_SHORT, input)
            return ZERO

        body = real_body(input)
        if (
            body < self.candle_average(BODY_SHORT, self._body_short_period_total, input)
            and upper_shadow(input) > body
            and lower_shadow(input) > body
        ):
            value = float(candle_color(input))
        else:
            value = ZERO

        self._body_short_period_total += self.candle_range(BODY_SHORT, input) - self.candle_range(
            BODY_SHORT, window.get(self.body_short_average_period)
        )
        return value

    def reset(self) -> None:
        self._body_short_period_total = ZERO
        super().reset()
