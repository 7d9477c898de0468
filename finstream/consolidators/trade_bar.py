"""Consolidation of trade bars into larger trade bars."""

from __future__ import annotations

from datetime import timedelta

from finstream.data.constants import TRADE_BAR_PROPERTIES
from finstream.data.double_array import DoubleArray
from finstream.data.structs import trade_bar_value
from finstream.consolidators.base import DataConsolidator


class TradeBarConsolidator(DataConsolidator):
    """Aggregates OHLCV bars.

    - open: first bar's open
    - high / low: running extremes
    - close: latest bar's close
    - volume: sum of volumes
    """

    properties = TRADE_BAR_PROPERTIES
    input_properties = TRADE_BAR_PROPERTIES

    def __init__(
        self,
        max_count: int | None = None,
        period: int | timedelta | None = None,
        name: str | None = None,
    ):
        super().__init__(max_count=max_count, period=period, name=name)

    def aggregate_bar(
        self,
        working_time: int,
        working_bar: DoubleArray | None,
        time: int,
        data: DoubleArray,
    ) -> tuple[int, DoubleArray]:
        if working_bar is None:
            bar = DoubleArray.from_struct_scalar(
                trade_bar_value(data.open, data.high, data.low, data.close, data.volume)
            )
            return self.round_down(time), bar

        working_bar.close = data.close
        working_bar.volume += data.volume
        if data.low < working_bar.low:
            working_bar.low = data.low
        if data.high > working_bar.high:
            working_bar.high = data.high
        return working_time, working_bar
