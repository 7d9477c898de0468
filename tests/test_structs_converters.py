"""Tests for record layouts, field selectors, time converters and the registry."""

from datetime import date, datetime, timedelta, timezone

import numpy as np
import pytest

from finstream.data import (
    BAR_VALUE,
    CLOSE_IDX,
    OPEN_IDX,
    TRADE_BAR_VALUE,
    VOLUME_IDX,
    DoubleArray,
    Field,
    bar_value,
    from_epoch_millis,
    indicator_value,
    to_epoch_millis,
    to_millis_span,
    trade_bar_value,
    trade_bars,
)
from finstream.data.structs import is_data_struct, struct_properties
from finstream.indicators import SimpleMovingAverage
from finstream.indicators.registry import (
    create_indicator,
    get_indicator_class,
    list_indicators,
    register_indicator,
)


class TestStructs:
    """Tests for record dtypes."""

    def test_close_first_layout(self):
        record = trade_bar_value(10, 12, 9, 11, 100)
        flat = np.array([record]).view(np.float64)
        assert flat[CLOSE_IDX] == 11.0
        assert flat[OPEN_IDX] == 10.0
        assert flat[VOLUME_IDX] == 100.0

    def test_struct_properties(self):
        assert struct_properties(BAR_VALUE) == 4
        assert struct_properties(TRADE_BAR_VALUE) == 5
        assert is_data_struct(indicator_value(1.0).dtype)
        assert not is_data_struct(np.dtype([("a", np.int32)]))
        with pytest.raises(TypeError):
            struct_properties(np.dtype(np.float64))

    def test_trade_bars_rows(self):
        bars = trade_bars([(10, 12, 9, 11, 100), (11, 13, 10, 12)])
        assert bars["open"].tolist() == [10.0, 11.0]
        assert bars["volume"].tolist() == [100.0, 0.0]


class TestField:
    """Tests for price selectors."""

    def test_bar_selectors(self):
        bar = DoubleArray.from_struct_scalar(trade_bar_value(10, 14, 8, 12, 50))
        assert Field.open(bar) == 10.0
        assert Field.median(bar) == 11.0
        assert Field.typical(bar) == pytest.approx(34.0 / 3.0)
        assert Field.average(bar) == 11.0
        assert Field.weighted(bar) == 11.5
        assert Field.seven_bar(bar) == pytest.approx((20 + 14 + 8 + 36) / 7.0)
        assert Field.volume(bar) == 50.0

    def test_scalar_fallbacks(self):
        scalar = DoubleArray.from_value(3.0)
        assert Field.high(scalar) == 3.0
        assert Field.close(scalar) == 3.0
        assert Field.volume(scalar) == 0.0

    def test_ohlc_bar_has_no_volume(self):
        bar = DoubleArray.from_struct_scalar(bar_value(1, 2, 0, 1))
        assert Field.volume(bar) == 0.0


class TestConverters:
    """Tests for timestamp conversion."""

    def test_numeric(self):
        assert to_epoch_millis(1234) == 1234
        assert to_epoch_millis(np.int64(5)) == 5
        assert to_epoch_millis(1.6) == 2

    def test_datetimes(self):
        aware = datetime(2024, 1, 1, tzinfo=timezone.utc)
        naive = datetime(2024, 1, 1)
        assert to_epoch_millis(aware) == 1_704_067_200_000
        assert to_epoch_millis(naive) == 1_704_067_200_000
        assert to_epoch_millis(date(2024, 1, 1)) == 1_704_067_200_000
        assert to_epoch_millis(np.datetime64("2024-01-01T00:00:00")) == 1_704_067_200_000

    def test_non_utc_offset(self):
        plus_one = timezone(timedelta(hours=1))
        assert to_epoch_millis(datetime(1970, 1, 1, 1, tzinfo=plus_one)) == 0

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            to_epoch_millis("2024-01-01")
        with pytest.raises(TypeError):
            to_epoch_millis(True)

    def test_from_epoch_millis(self):
        assert from_epoch_millis(1_704_067_200_000) == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_spans(self):
        assert to_millis_span(timedelta(seconds=1.5)) == 1500
        assert to_millis_span(60_000) == 60_000
        with pytest.raises(ValueError):
            to_millis_span(timedelta(seconds=-1))


class TestRegistry:
    """Tests for the indicator registry."""

    def test_builtins_registered(self):
        names = list_indicators()
        for name in ("sma", "ema", "atr", "counterattack", "heikin_ashi"):
            assert name in names
        assert names == sorted(names)

    def test_create_by_name(self):
        sma = create_indicator("sma", period=3)
        assert isinstance(sma, SimpleMovingAverage)
        assert sma.period == 3

    def test_unknown_name(self):
        with pytest.raises(KeyError, match="Available"):
            get_indicator_class("does_not_exist")

    def test_duplicate_registration(self):
        with pytest.raises(ValueError, match="already registered"):
            register_indicator("sma")(type("Other", (), {}))
