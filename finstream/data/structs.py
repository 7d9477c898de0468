"""Fixed-layout record types ("data structs").

Each record is a numpy structured dtype whose fields are all float64 and
laid out in a guaranteed order, so an array of records can be viewed as a
flat float64 sequence without copying:

    bars = trade_bars([(10, 12, 9, 11, 100), (11, 13, 10, 12, 50)])
    flat = bars.view(np.float64)   # close, high, low, open, volume, close, ...

Field order is close-first (see ``finstream.data.constants``).
"""

from typing import Iterable, Sequence

import numpy as np


INDICATOR_VALUE = np.dtype([("value", np.float64)])

BAR_VALUE = np.dtype(
    [
        ("close", np.float64),
        ("high", np.float64),
        ("low", np.float64),
        ("open", np.float64),
    ]
)

TRADE_BAR_VALUE = np.dtype(
    [
        ("close", np.float64),
        ("high", np.float64),
        ("low", np.float64),
        ("open", np.float64),
        ("volume", np.float64),
    ]
)


def is_data_struct(dtype: np.dtype) -> bool:
    """Check that a dtype is a record made only of float64 fields."""
    if dtype.names is None:
        return False
    return all(dtype.fields[name][0] == np.float64 for name in dtype.names)


def struct_properties(dtype: np.dtype) -> int:
    """Number of float64 fields in a data struct dtype."""
    if not is_data_struct(dtype):
        raise TypeError(f"{dtype} is not a float64 record dtype")
    return len(dtype.names)


# =============================================================================
# Record constructors
# =============================================================================

def indicator_value(value: float) -> np.void:
    """Create a single-field indicator record."""
    return np.array([(value,)], dtype=INDICATOR_VALUE)[0]


def bar_value(open: float, high: float, low: float, close: float) -> np.void:
    """Create an OHLC bar record."""
    return np.array([(close, high, low, open)], dtype=BAR_VALUE)[0]


def trade_bar_value(
    open: float,
    high: float,
    low: float,
    close: float,
    volume: float = 0.0,
) -> np.void:
    """Create an OHLCV trade bar record.

    Args:
        open: Open price
        high: High price
        low: Low price
        close: Close price
        volume: Traded volume

    Returns:
        A numpy structured scalar with TRADE_BAR_VALUE layout
    """
    return np.array([(close, high, low, open, volume)], dtype=TRADE_BAR_VALUE)[0]


def trade_bars(rows: Iterable[Sequence[float]]) -> np.ndarray:
    """Create an array of trade bars from (open, high, low, close, volume) rows."""
    records = [
        (row[3], row[1], row[2], row[0], row[4] if len(row) > 4 else 0.0)
        for row in rows
    ]
    return np.array(records, dtype=TRADE_BAR_VALUE)

