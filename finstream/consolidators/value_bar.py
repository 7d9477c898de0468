"""Consolidation of a scalar stream into OHLC bars."""

from __future__ import annotations

from datetime import timedelta

from finstream.data.constants import BAR_PROPERTIES
from finstream.data.double_array import DoubleArray
from finstream.data.structs import bar_value
from finstream.consolidators.base import DataConsolidator


class ValueBarConsolidator(DataConsolidator):
    """Builds OHLC bars from single values (ticks, indicator outputs)."""

    properties = BAR_PROPERTIES
    input_properties = 1

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
        price = data.value
        if working_bar is None:
            return self.round_down(time), DoubleArray.from_struct_scalar(
                bar_value(price, price, price, price)
            )

        working_bar.close = price
        working_bar.high = max(working_bar.high, price)
        working_bar.low = min(working_bar.low, price)
        return working_time, working_bar
