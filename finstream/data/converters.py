"""Time conversion helpers.

Engine timestamps are integer epoch milliseconds. Callers may pass
datetimes, pandas Timestamps, or numeric epoch values; everything is
normalised here before it reaches an indicator.
"""

from datetime import date, datetime, timedelta, timezone

import numpy as np

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# =============================================================================
# Timestamp conversion helpers
# =============================================================================

def to_epoch_millis(value) -> int:
    """Convert a timestamp to epoch milliseconds.

    Args:
        value: datetime (naive values are taken as UTC), date,
            numpy datetime64, or an int/float already in milliseconds

    Returns:
        Integer milliseconds since the Unix epoch
    """
    if isinstance(value, bool):
        raise TypeError("bool is not a timestamp")
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        return int(round(float(value)))
    if isinstance(value, np.datetime64):
        return int(value.astype("datetime64[ms]").astype(np.int64))
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return (value - _EPOCH) // timedelta(milliseconds=1)
    if isinstance(value, date):
        return to_epoch_millis(datetime(value.year, value.month, value.day))
    raise TypeError(f"cannot convert {type(value).__name__} to epoch milliseconds")


def from_epoch_millis(ms: int) -> datetime:
    """Convert epoch milliseconds to a UTC datetime."""
    return _EPOCH + timedelta(milliseconds=int(ms))


def to_millis_span(span) -> int:
    """Convert a consolidation span (timedelta or milliseconds) to milliseconds."""
    if isinstance(span, timedelta):
        ms = span // timedelta(milliseconds=1)
    else:
        ms = int(span)
    if ms < 0:
        raise ValueError(f"span must not be negative, got {ms}")
    return ms
