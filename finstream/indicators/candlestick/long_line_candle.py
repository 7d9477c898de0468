"""Long line candle: a long real body with short shadows."""

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

BODY_LONG = CandleSettingType.BODY_LONG
SHADOW_SHORT = CandleSettingType.SHADOW_SHORT


@register_indicator("long_line_candle")
class LongLineCandle(CandlestickPattern):
    """Outputs the candle colour (+1/-1) when the pattern matches, else 0."""

    def __init__(self, name: str = "LONGLINECANDLE", settings: CandleSettings | None = None):
        settings = settings or DEFAULT_CANDLE_SETTINGS
        self.body_long_average_period = settings.get(BODY_LONG).average_period
        self.shadow_short_average_period = settings.get(SHADOW_SHORT).average_period
        super().__init__(
            name,
            max(self.body_long_average_period, self.shadow_short_average_period) + 1,
            settings,
        )
        self._body_long_period_total = ZERO
        self._shadow_short_period_total = ZERO

    def forward_window(self, window: TimeValueWindow, time: int, input: DoubleArray) -> Any:
        if not self.is_ready:
            if self.samples >= self.period - self.body_long_average_period:
                self._body_long_period_total += self.candle_range(BODY_LONG, input)
            if self.samples >= self.period - self.shadow_short_average_period:
                self._shadow_short_period_total += self.candle_range(SHADOW_SHORT, input)
            return ZERO

        shadow_short = self.candle_average(SHADOW_SHORT, self._shadow_short_period_total, input)
        if (
            real_body(input) > self.candle_average(BODY_LONG, self._body_long_period_total, input)
            and upper_shadow(input) < shadow_short
            and lower_shadow(input) < shadow_short
        ):
            value = float(candle_color(input))
        else:
            value = ZERO

        self._body_long_period_total += self.candle_range(BODY_LONG, input) - self.candle_range(
            BODY_LONG, window.get(self.body_long_average_period)
        )
        self._shadow_short_period_total += self.candle_range(
            SHADOW_SHORT, input
        ) - self.candle_range(SHADOW_SHORT, window.get(self.shadow_short_average_period))
        return value

    def reset(self) -> None:
        self._body_long_period_total = ZERO
        self._shadow_short_period_total = ZERO
        super().reset()
