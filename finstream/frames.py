"""pandas bridge: feed DataFrames into update graphs and record their output.

Usage:
    sma = SimpleMovingAverage(20)
    recorder = collect(sma, wait_for_ready=True)
    feed_frame(sma, klines_df, columns="close")
    out = recorder.to_frame()
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd

from finstream.data.double_array import DoubleArray
from finstream.data.structs import BAR_VALUE, TRADE_BAR_VALUE
from finstream.indicators.base import Updatable

logger = logging.getLogger(__name__)

OHLC_COLUMNS = ("open", "high", "low", "close")
OHLCV_COLUMNS = ("open", "high", "low", "close", "volume")

_BAR_FIELD_NAMES = {
    4: ["close", "high", "low", "open"],
    5: ["close", "high", "low", "open", "volume"],
}


def _epoch_millis(index: pd.Index) -> np.ndarray:
    """Convert a DatetimeIndex (naive = UTC) or integer index to epoch ms."""
    if isinstance(index, pd.DatetimeIndex):
        if index.tz is None:
            index = index.tz_localize("UTC")
        delta = index - pd.Timestamp(0, tz="UTC")
        return np.asarray(delta // pd.Timedelta(milliseconds=1), dtype=np.int64)
    return index.to_numpy(dtype=np.int64)


def _resolve_columns(frame: pd.DataFrame, columns: str | Sequence[str] | None) -> list[str]:
    if isinstance(columns, str):
        return [columns]
    if columns is not None:
        return list(columns)
    lower = {str(c).lower(): c for c in frame.columns}
    if all(c in lower for c in OHLCV_COLUMNS):
        return [lower[c] for c in OHLCV_COLUMNS]
    if all(c in lower for c in OHLC_COLUMNS):
        return [lower[c] for c in OHLC_COLUMNS]
    if len(frame.columns) == 1:
        return [frame.columns[0]]
    raise ValueError(
        "cannot infer input columns; pass columns= (one column, "
        "or open/high/low/close[/volume] in that order)"
    )


def feed_frame(
    updatable: Updatable,
    frame: pd.DataFrame,
    columns: str | Sequence[str] | None = None,
) -> int:
    """Feed every row of ``frame`` to ``updatable`` in index order.

    Args:
        updatable: Indicator or consolidator to update
        frame: Rows indexed by a DatetimeIndex or integer epoch milliseconds
        columns: One column for scalar input, or four/five columns in
            open, high, low, close[, volume] order for bar input. Inferred
            from the column names when omitted.

    Returns:
        Number of rows fed
    """
    selected = _resolve_columns(frame, columns)
    times = _epoch_millis(frame.index)
    values = frame[selected].to_numpy(dtype=np.float64)

    if len(selected) == 1:
        for time, (value,) in zip(times, values):
            updatable.update(int(time), float(value))
    elif len(selected) in (4, 5):
        dtype = BAR_VALUE if len(selected) == 4 else TRADE_BAR_VALUE
        records = np.zeros(len(values), dtype=dtype)
        for position, name in enumerate(OHLCV_COLUMNS[: len(selected)]):
            records[name] = values[:, position]
        for time, record in zip(times, records):
            updatable.update(int(time), DoubleArray.from_struct_scalar(record))
    else:
        raise ValueError(f"expected 1, 4 or 5 columns, got {len(selected)}")

    logger.debug("Fed %d rows into %s", len(values), updatable.name)
    return len(values)


class Recorder:
    """Records ``(time, value)`` outputs of an updatable."""

    def __init__(self, updatable: Updatable, wait_for_ready: bool = False):
        self.updatable = updatable
        self.wait_for_ready = wait_for_ready
        self.times: list[int] = []
        self.values: list[DoubleArray] = []
        updatable.on_updated(self._on_updated)

    def _on_updated(self, time: int, value: DoubleArray) -> None:
        if self.wait_for_ready and not self.updatable.is_ready:
            return
        self.times.append(time)
        self.values.append(value.clone())

    def detach(self) -> None:
        """Stop recording."""
        self.updatable.off_updated(self._on_updated)

    def __len__(self) -> int:
        return len(self.times)

    def to_frame(self) -> pd.DataFrame:
        """Recorded outputs indexed by UTC time.

        Scalar outputs land in a ``value`` column, bars in named
        ``open/high/low/close[/volume]`` columns, anything else in
        ``p0..pN``.
        """
        index = pd.DatetimeIndex(pd.to_datetime(self.times, unit="ms", utc=True), name="time")
        if not self.values:
            return pd.DataFrame(index=index, columns=["value"], dtype=np.float64)

        width = max(v.linear_length for v in self.values)
        rows = np.full((len(self.values), width), np.nan)
        for i, value in enumerate(self.values):
            flat = value.tolist()
            rows[i, : len(flat)] = flat

        if width == 1:
            names = ["value"]
        elif width in _BAR_FIELD_NAMES:
            names = _BAR_FIELD_NAMES[width]
        else:
            names = [f"p{i}" for i in range(width)]

        frame = pd.DataFrame(rows, index=index, columns=names)
        if width in _BAR_FIELD_NAMES:
            frame = frame[list(OHLCV_COLUMNS[:width])]
        return frame


def collect(updatable: Updatable, wait_for_ready: bool = False) -> Recorder:
    """Start recording the outputs of ``updatable``."""
    return Recorder(updatable, wait_for_ready)
