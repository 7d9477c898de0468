"""Streaming technical-analysis core.

This package contains pure computation with no I/O beyond the optional
YAML engine configuration:

- data: DoubleArray numeric container, record layouts, rolling windows
- indicators: update-graph engine, chaining helpers and indicators
- consolidators: count/time based bar consolidation
- frames: pandas bridge for feeding and recording
"""

from finstream.consolidators import TradeBarConsolidator, ValueBarConsolidator
from finstream.data import DoubleArray, RollingWindow, TimeValueWindow, as_double_array
from finstream.exceptions import (
    DisposedError,
    FinstreamError,
    IndexOutOfRangeError,
    ReshapeError,
    ShapeMismatchError,
)
from finstream.indicators import IndicatorBase, IndicatorResult, IndicatorStatus, Updatable

__version__ = "0.1.0"

__all__ = [
    "DoubleArray",
    "as_double_array",
    "RollingWindow",
    "TimeValueWindow",
    "Updatable",
    "IndicatorBase",
    "IndicatorResult",
    "IndicatorStatus",
    "TradeBarConsolidator",
    "ValueBarConsolidator",
    "FinstreamError",
    "ReshapeError",
    "ShapeMismatchError",
    "IndexOutOfRangeError",
    "DisposedError",
]
