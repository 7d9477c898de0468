"""Thresholds used by candlestick pattern recognition.

Each setting says which candle range to average (real body, high-low or
shadows), over how many previous candles, and by which factor to scale the
average. Defaults follow TA-Lib.

Settings are passed explicitly to each pattern; there is no process-wide
instance to mutate.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CandleRangeType(str, Enum):
    """Part of the candle a setting measures."""

    REAL_BODY = "real_body"
    HIGH_LOW = "high_low"
    SHADOWS = "shadows"


class CandleSettingType(str, Enum):
    """Named thresholds."""

    BODY_LONG = "body_long"
    BODY_VERY_LONG = "body_very_long"
    BODY_SHORT = "body_short"
    BODY_DOJI = "body_doji"
    SHADOW_LONG = "shadow_long"
    SHADOW_VERY_LONG = "shadow_very_long"
    SHADOW_SHORT = "shadow_short"
    SHADOW_VERY_SHORT = "shadow_very_short"
    NEAR = "near"
    FAR = "far"
    EQUAL = "equal"


class CandleSetting(BaseModel):
    """One threshold definition."""

    model_config = ConfigDict(frozen=True)

    range_type: CandleRangeType
    average_period: int = Field(ge=0)
    factor: float


def _setting(range_type: CandleRangeType, average_period: int, factor: float) -> CandleSetting:
    return CandleSetting(range_type=range_type, average_period=average_period, factor=factor)


class CandleSettings(BaseModel):
    """The full set of thresholds, keyed by ``CandleSettingType`` value."""

    model_config = ConfigDict(frozen=True)

    body_long: CandleSetting = _setting(CandleRangeType.REAL_BODY, 10, 1.0)
    body_very_long: CandleSetting = _setting(CandleRangeType.REAL_BODY, 10, 3.0)
    body_short: CandleSetting = _setting(CandleRangeType.REAL_BODY, 10, 1.0)
    body_doji: CandleSetting = _setting(CandleRangeType.HIGH_LOW, 10, 0.1)
    shadow_long: CandleSetting = _setting(CandleRangeType.REAL_BODY, 0, 1.0)
    shadow_very_long: CandleSetting = _setting(CandleRangeType.REAL_BODY, 0, 2.0)
    shadow_short: CandleSetting = _setting(CandleRangeType.SHADOWS, 10, 1.0)
    shadow_very_short: CandleSetting = _setting(CandleRangeType.HIGH_LOW, 10, 0.1)
    near: CandleSetting = _setting(CandleRangeType.HIGH_LOW, 5, 0.2)
    far: CandleSetting = _setting(CandleRangeType.HIGH_LOW, 5, 0.6)
    equal: CandleSetting = _setting(CandleRangeType.HIGH_LOW, 5, 0.05)

    def get(self, setting_type: CandleSettingType) -> CandleSetting:
        return getattr(self, CandleSettingType(setting_type).value)

    def with_setting(self, setting_type: CandleSettingType, setting: CandleSetting) -> "CandleSettings":
        """Return a copy with one threshold replaced."""
        return self.model_copy(update={CandleSettingType(setting_type).value: setting})


DEFAULT_CANDLE_SETTINGS = CandleSettings()
