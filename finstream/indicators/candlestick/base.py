"""Base class and candle geometry shared by candlestick patterns.

Patterns output ``+1`` (bullish), ``-1`` (bearish) or ``0`` (no pattern).
Averages of candle ranges are kept as running totals over the previous
``average_period`` candles, excluding the candle being evaluated.
"""

from __future__ import annotations

from enum import IntEnum

from finstream.data.constants import BAR_PROPERTIES
from finstream.data.double_array import DoubleArray
from finstream.indicators.base import WindowIndicator
from finstream.indicators.candlestick.settings import (
    DEFAULT_CANDLE_SETTINGS,
    CandleRangeType,
    CandleSettings,
    CandleSettingType,
)


class CandleColor(IntEnum):
    WHITE = 1
    BLACK = -1


def candle_color(bar: DoubleArray) -> CandleColor:
    """White when the candle closed at or above its open."""
    return CandleColor.WHITE if bar.close >= bar.open else CandleColor.BLACK


def real_body(bar: DoubleArray) -> float:
    return abs(bar.close - bar.open)


def upper_shadow(bar: DoubleArray) -> float:
    return bar.high - max(bar.open, bar.close)


def lower_shadow(bar: DoubleArray) -> float:
    return min(bar.open, bar.close) - bar.low


def high_low_range(bar: DoubleArray) -> float:
    return bar.high - bar.low


class CandlestickPattern(WindowIndicator):
    """Window indicator over OHLC bars with access to candle thresholds."""

    input_properties = BAR_PROPERTIES

    def __init__(self, name: str, period: int, settings: CandleSettings | None = None):
        super().__init__(name, period)
        self.settings = settings or DEFAULT_CANDLE_SETTINGS

    def average_period(self, setting_type: CandleSettingType) -> int:
        return self.settings.get(setting_type).average_period

    def candle_range(self, setting_type: CandleSettingType, bar: DoubleArray) -> float:
        """Measure ``bar`` the way ``setting_type`` measures candles."""
        range_type = self.settings.get(setting_type).range_type
        if range_type is CandleRangeType.REAL_BODY:
            return real_body(bar)
        if range_type is CandleRangeType.HIGH_LOW:
            return high_low_range(bar)
        return upper_shadow(bar) + lower_shadow(bar)

    def candle_average(self, setting_type: CandleSettingType, total: float, bar: DoubleArray) -> float:
        """Scaled average of a running total, or of ``bar`` itself when the
        setting averages over zero candles.

        Shadow ranges add two shadows, so they are halved.
        """
        setting = self.settings.get(setting_type)
        if setting.average_period != 0:
            base = total / setting.average_period
        else:
            base = self.candle_range(setting_type, bar)
        divisor = 2.0 if setting.range_type is CandleRangeType.SHADOWS else 1.0
        return setting.factor * base / divisor

    @property
    def is_ready(self) -> bool:
        return self.samples >= self.period
