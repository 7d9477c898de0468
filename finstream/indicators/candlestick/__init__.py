"""Candlestick pattern recognition.

Importing this package registers the built-in patterns.
"""

from finstream.indicators.candlestick.base import (
    CandleColor,
    CandlestickPattern,
    candle_color,
    lower_shadow,
    real_body,
    upper_shadow,
)
from finstream.indicators.candlestick.counterattack import Counterattack
from finstream.indicators.candlestick.long_line_candle import LongLineCandle
from finstream.indicators.candlestick.settings import (
    DEFAULT_CANDLE_SETTINGS,
    CandleRangeType,
    CandleSetting,
    CandleSettings,
    CandleSettingType,
)
from finstream.indicators.candlestick.spinning_top import SpinningTop
from finstream.indicators.candlestick.stick_sandwich import StickSandwich

__all__ = [
    "CandleColor",
    "CandlestickPattern",
    "candle_color",
    "lower_shadow",
    "real_body",
    "upper_shadow",
    "CandleRangeType",
    "CandleSetting",
    "CandleSettings",
    "CandleSettingType",
    "DEFAULT_CANDLE_SETTINGS",
    "Counterattack",
    "LongLineCandle",
    "SpinningTop",
    "StickSandwich",
]
