"""Range-based indicators: true range averages and price bands."""

from __future__ import annotations

from typing import Any

from finstream.data.constants import ZERO
from finstream.data.double_array import DoubleArray
from finstream.indicators.base import BarIndicator
from finstream.indicators.basic import FunctionalIndicator
from finstream.indicators.moving_averages import MovingAverageType
from finstream.indicators.registry import register_indicator


@register_indicator("atr")
class AverageTrueRange(BarIndicator):
    """Smoothed true range.

    The true range of the first bar is ``high - low``; afterwards it is the
    largest of ``high - low``, ``|high - previous close|`` and
    ``|low - previous close|``.

    Attributes:
        true_range: Per-bar true range
        average: Moving average of ``true_range``; its value is ``current``
    """

    def __init__(
        self,
        period: int,
        ma_type: MovingAverageType = MovingAverageType.WILDERS,
        name: str | None = None,
    ):
        name = name or f"ATR({period})"
        super().__init__(name)
        self.period = period
        self.ma_type = MovingAverageType(ma_type)
        self._previous: DoubleArray | None = None
        self.true_range = FunctionalIndicator(
            name + "_TrueRange",
            self._compute_true_range,
            lambda tr: tr.samples > 1,
        )
        self.average = self.ma_type.as_indicator(name + "_" + self.ma_type.value, period)

    @property
    def is_ready(self) -> bool:
        return self.average.is_ready

    @property
    def warm_up_period(self) -> int:
        return self.period

    def _compute_true_range(self, time: int, input: DoubleArray) -> float:
        previous, self._previous = self._previous, input.clone()
        if previous is None:
            return input.high - input.low
        previous_close = previous.close
        return max(
            input.high - input.low,
            abs(input.high - previous_close),
            abs(input.low - previous_close),
        )

    def forward(self, time: int, input: DoubleArray) -> Any:
        self.true_range.update(time, input)
        self.average.update(time, self.true_range.current)
        return self.average.current.clone()

    def reset(self) -> None:
        self._previous = None
        self.true_range.reset()
        self.average.reset()
        super().reset()


@register_indicator("abands")
class AccelerationBands(BarIndicator):
    """Headley acceleration bands around a moving average of the close."""

    def __init__(
        self,
        period: int,
        width: float = 4.0,
        ma_type: MovingAverageType = MovingAverageType.SIMPLE,
        name: str | None = None,
    ):
        name = name or f"ABANDS({period},{width})"
        super().__init__(name)
        self.period = period
        self.width = width
        self.ma_type = MovingAverageType(ma_type)
        self.middle_band = self.ma_type.as_indicator(name + "_MiddleBand", period)
        self.lower_band = self.ma_type.as_indicator(name + "_LowerBand", period)
        self.upper_band = self.ma_type.as_indicator(name + "_UpperBand", period)

    @property
    def is_ready(self) -> bool:
        return self.middle_band.is_ready and self.lower_band.is_ready and self.upper_band.is_ready

    @property
    def warm_up_period(self) -> int:
        return self.period

    def forward(self, time: int, input: DoubleArray) -> Any:
        high, low = input.high, input.low
        coeff = self.width * (high - low) / (high + low) if high + low else ZERO
        self.lower_band.update(time, low * (1 - coeff))
        self.upper_band.update(time, high * (1 + coeff))
        self.middle_band.update(time, input.close)
        return self.middle_band.current.clone()

    def reset(self) -> None:
        self.middle_band.reset()
        self.lower_band.reset()
        self.upper_band.reset()
        super().reset()


@register_indicator("kc")
class KeltnerChannels(BarIndicator):
    """Bands ``k`` average true ranges around a moving average of the typical price."""

    def __init__(
        self,
        period: int,
        k: float,
        ma_type: MovingAverageType = MovingAverageType.SIMPLE,
        name: str | None = None,
    ):
        name = name or f"KC({period},{k})"
        super().__init__(name)
        self.period = period
        self.k = k
        self.average_true_range = AverageTrueRange(
            period, MovingAverageType.SIMPLE, name=name + "_AverageTrueRange"
        )
        self.middle_band = MovingAverageType(ma_type).as_indicator(name + "_MiddleBand", period)
        self.lower_band = FunctionalIndicator(
            name + "_LowerBand",
            lambda time, input: self._band(-1),
            lambda band: self.middle_band.is_ready,
        )
        self.upper_band = FunctionalIndicator(
            name + "_UpperBand",
            lambda time, input: self._band(1),
            lambda band: self.middle_band.is_ready,
        )

    def _band(self, sign: int) -> float:
        if not self.middle_band.is_ready:
            return ZERO
        return self.middle_band.current.value + sign * self.average_true_range.current.value * self.k

    @property
    def is_ready(self) -> bool:
        return (
            self.middle_band.is_ready
            and self.upper_band.is_ready
            and self.lower_band.is_ready
            and self.average_true_range.is_ready
        )

    @property
    def warm_up_period(self) -> int:
        return self.period

    def forward(self, time: int, input: DoubleArray) -> Any:
        self.average_true_range.update(time, input)
        typical_price = (input.high + input.low + input.close) / 3.0
        self.middle_band.update(time, typical_price)
        # bands read the ATR and middle band, not the input
        self.lower_band.update(time, input)
        self.upper_band.update(time, input)
        return self.middle_band.current.clone()

    def reset(self) -> None:
        self.average_true_range.reset()
        self.middle_band.reset()
        self.upper_band.reset()
        self.lower_band.reset()
        super().reset()
