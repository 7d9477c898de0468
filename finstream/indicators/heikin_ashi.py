"""Heikin-Ashi candles."""

from __future__ import annotations

from typing import Any

import numpy as np

from finstream.data.double_array import DoubleArray
from finstream.data.structs import trade_bar_value
from finstream.indicators.base import BarIndicator
from finstream.indicators.basic import Identity
from finstream.indicators.registry import register_indicator


@register_indicator("heikin_ashi")
class HeikinAshi(BarIndicator):
    """Smoothed candles built from the previous Heikin-Ashi bar.

    ``current`` is the Heikin-Ashi close; the full candle is available from
    the ``open/high/low/close/volume`` sub-indicators or ``current_bar``.
    ``volume`` passes the input volume through unchanged.
    """

    def __init__(self, name: str = "HA"):
        super().__init__(name)
        self.open = Identity(name + "_Open")
        self.high = Identity(name + "_High")
        self.low = Identity(name + "_Low")
        self.close = Identity(name + "_Close")
        self.volume = Identity(name + "_Volume")

    @property
    def is_ready(self) -> bool:
        return self.samples > 1

    @property
    def warm_up_period(self) -> int:
        return 2

    @property
    def current_bar(self) -> np.void:
        """The latest candle as a trade bar record."""
        return trade_bar_value(
            self.open.current.value,
            self.high.current.value,
            self.low.current.value,
            self.close.current.value,
            self.volume.current.value,
        )

    def forward(self, time: int, input: DoubleArray) -> Any:
        o, h, l, c = input.open, input.high, input.low, input.close
        if not self.is_ready:
            self.open.update(time, (o + c) / 2)
            self.close.update(time, (o + h + l + c) / 4)
            self.high.update(time, h)
            self.low.update(time, l)
        else:
            self.open.update(time, (self.open.current.value + self.close.current.value) / 2)
            self.close.update(time, (o + h + l + c) / 4)
            ha_open, ha_close = self.open.current.value, self.close.current.value
            self.high.update(time, max(h, ha_open, ha_close))
            self.low.update(time, min(l, ha_open, ha_close))
        self.volume.update(time, input.volume)
        return self.close.current.value

    def reset(self) -> None:
        self.open.reset()
        self.high.reset()
        self.low.reset()
        self.close.reset()
        self.volume.reset()
        super().reset()
