"""Numeric containers, record layouts and rolling windows (no I/O)."""

from finstream.data.constants import (
    BAR_PROPERTIES,
    CLOSE_IDX,
    HIGH_IDX,
    LOW_IDX,
    OPEN_IDX,
    TRADE_BAR_PROPERTIES,
    VOLUME_IDX,
    ZERO_EPSILON,
)
from finstream.data.converters import from_epoch_millis, to_epoch_millis, to_millis_span
from finstream.data.double_array import ArrayKind, DoubleArray, as_double_array
from finstream.data.fields import Field
from finstream.data.rolling_window import RollingWindow, TimeValueWindow
from finstream.data.structs import (
    BAR_VALUE,
    INDICATOR_VALUE,
    TRADE_BAR_VALUE,
    bar_value,
    indicator_value,
    trade_bar_value,
    trade_bars,
)

__all__ = [
    # Container
    "ArrayKind",
    "DoubleArray",
    "as_double_array",
    # Layout
    "BAR_PROPERTIES",
    "TRADE_BAR_PROPERTIES",
    "CLOSE_IDX",
    "HIGH_IDX",
    "LOW_IDX",
    "OPEN_IDX",
    "VOLUME_IDX",
    "ZERO_EPSILON",
    "BAR_VALUE",
    "INDICATOR_VALUE",
    "TRADE_BAR_VALUE",
    "bar_value",
    "indicator_value",
    "trade_bar_value",
    "trade_bars",
    "Field",
    # Windows
    "RollingWindow",
    "TimeValueWindow",
    # Time
    "to_epoch_millis",
    "from_epoch_millis",
    "to_millis_span",
]
