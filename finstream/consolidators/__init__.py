"""Bar consolidators."""

from finstream.consolidators.base import DataConsolidator
from finstream.consolidators.trade_bar import TradeBarConsolidator
from finstream.consolidators.value_bar import ValueBarConsolidator

__all__ = [
    "DataConsolidator",
    "TradeBarConsolidator",
    "ValueBarConsolidator",
]
