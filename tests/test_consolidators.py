"""Tests for bar consolidators."""

from datetime import timedelta

import pytest

from finstream.consolidators import TradeBarConsolidator, ValueBarConsolidator
from finstream.data import trade_bar_value
from finstream.indicators import SimpleMovingAverage

MINUTE = 60_000


def make_bar(open_price, high, low, close, volume):
    """Helper to create a trade bar record."""
    return trade_bar_value(open_price, high, low, close, volume)


def capture(consolidator):
    """Collect (time, open, high, low, close, volume) of every emitted bar."""
    emitted = []

    def on_bar(time, bar):
        emitted.append((time, bar.open, bar.high, bar.low, bar.close, bar.volume))

    consolidator.on_updated(on_bar)
    return emitted


class TestConstruction:
    """Tests for consolidator arguments."""

    def test_requires_a_policy(self):
        with pytest.raises(ValueError):
            TradeBarConsolidator()

    def test_rejects_non_positive_count(self):
        with pytest.raises(ValueError):
            TradeBarConsolidator(max_count=0)

    def test_rejects_negative_period(self):
        with pytest.raises(ValueError):
            ValueBarConsolidator(period=-1)

    def test_timedelta_period(self):
        consolidator = ValueBarConsolidator(period=timedelta(minutes=5))
        assert consolidator.period == 5 * MINUTE

    def test_round_down(self):
        consolidator = ValueBarConsolidator(period=MINUTE)
        assert consolidator.round_down(MINUTE + 1234) == MINUTE
        assert ValueBarConsolidator(max_count=2).round_down(1234) == 1234


class TestCountConsolidation:
    """Tests for count-based consolidation."""

    def test_three_bars_per_output(self):
        """Seven 1-minute bars with max_count=3 produce two 3-minute bars; the
        seventh opens a new working bar without emitting."""
        consolidator = TradeBarConsolidator(max_count=3)
        emitted = capture(consolidator)
        bars = [
            make_bar(10, 12, 9, 11, 100),
            make_bar(11, 13, 10, 12, 50),
            make_bar(12, 14, 11, 13, 25),
            make_bar(13, 15, 12, 14, 10),
            make_bar(14, 16, 13, 15, 10),
            make_bar(15, 17, 14, 16, 10),
        ]
        ready = [consolidator.update(i * MINUTE, bar) for i, bar in enumerate(bars)]

        assert emitted == [
            (0, 10.0, 14.0, 9.0, 13.0, 175.0),
            (3 * MINUTE, 13.0, 17.0, 12.0, 16.0, 30.0),
        ]
        assert ready == [False, False, True, True, True, True]
        assert consolidator.consolidated_count == 2
        assert consolidator.working_bar is None

        consolidator.update(6 * MINUTE, make_bar(16, 18, 15, 17, 10))
        assert len(emitted) == 2
        assert consolidator.consolidated_count == 2
        assert consolidator.samples == 7
        assert consolidator.working_time == 6 * MINUTE
        assert consolidator.working_bar.open == 16.0
        assert consolidator.current.close == 16.0

    def test_no_partial_bar(self):
        """A bar is only emitted once the count is reached."""
        consolidator = TradeBarConsolidator(max_count=3)
        emitted = capture(consolidator)
        consolidator.update(0, make_bar(10, 12, 9, 11, 50))
        consolidator.update(MINUTE, make_bar(11, 14, 10, 12, 75))
        assert emitted == []
        assert consolidator.working_bar is not None
        assert consolidator.working_bar.volume == 125.0
        assert consolidator.is_ready is False

    def test_emitted_bar_is_not_mutated_later(self):
        consolidator = TradeBarConsolidator(max_count=1)
        consolidator.update(0, make_bar(10, 12, 9, 11, 50))
        first = consolidator.current
        consolidator.update(MINUTE, make_bar(20, 22, 19, 21, 5))
        assert first.close == 11.0
        assert consolidator.current.close == 21.0


class TestTimeConsolidation:
    """Tests for period-based consolidation."""

    def test_emit_on_period_boundary(self):
        """The sample that crosses a boundary opens the next bar."""
        consolidator = ValueBarConsolidator(period=timedelta(minutes=1))
        emitted = capture(consolidator)
        samples = [(0, 1.0), (30_000, 3.0), (MINUTE, 2.0), (90_000, 5.0), (90_500, 4.0), (150_000, 7.0)]
        for time, value in samples:
            consolidator.update(time, value)

        assert emitted == [
            (0, 1.0, 3.0, 1.0, 3.0, 0.0),
            (MINUTE, 2.0, 5.0, 2.0, 4.0, 0.0),
        ]
        assert consolidator.working_time == 2 * MINUTE
        assert consolidator.working_bar.close == 7.0

    def test_bar_time_is_rounded_down(self):
        consolidator = ValueBarConsolidator(period=MINUTE)
        emitted = capture(consolidator)
        consolidator.update(MINUTE + 500, 1.0)
        consolidator.update(2 * MINUTE + 10, 2.0)
        assert emitted[0][0] == MINUTE

    def test_zero_period_emits_every_sample(self):
        consolidator = ValueBarConsolidator(period=0)
        emitted = capture(consolidator)
        for i, value in enumerate([1.0, 2.0, 3.0]):
            assert consolidator.update(i, value) is True
        assert [bar[4] for bar in emitted] == [1.0, 2.0, 3.0]
        assert all(bar[1] == bar[2] == bar[3] == bar[4] for bar in emitted)

    def test_count_closes_before_period(self):
        """With both policies the first boundary reached closes the bar."""
        consolidator = ValueBarConsolidator(max_count=2, period=10 * MINUTE)
        emitted = capture(consolidator)
        for i, value in enumerate([1.0, 2.0, 3.0]):
            consolidator.update(i * MINUTE, value)
        assert len(emitted) == 1
        assert emitted[0][4] == 2.0


class TestValueBarConsolidator:
    """Tests for scalar-to-OHLC consolidation."""

    def test_ohlc(self):
        consolidator = ValueBarConsolidator(max_count=4)
        for i, value in enumerate([5.0, 8.0, 3.0, 6.0]):
            consolidator.update(i, value)
        bar = consolidator.current
        assert bar.properties == 4
        assert (bar.open, bar.high, bar.low, bar.close) == (5.0, 8.0, 3.0, 6.0)


class TestResetAndChaining:
    """Tests for reset and feeding indicators."""

    def test_reset_discards_working_bar(self):
        consolidator = TradeBarConsolidator(max_count=3)
        emitted = capture(consolidator)
        consolidator.update(0, make_bar(10, 12, 9, 11, 50))
        consolidator.reset()
        assert consolidator.working_bar is None
        assert consolidator.samples == 0
        for i in range(3):
            consolidator.update(i, make_bar(20, 21, 19, 20, 1))
        assert emitted == [(0, 20.0, 21.0, 19.0, 20.0, 3.0)]

    def test_reset_keeps_subscribers(self):
        consolidator = ValueBarConsolidator(max_count=1)
        emitted = capture(consolidator)
        consolidator.reset()
        consolidator.update(0, 1.0)
        assert len(emitted) == 1

    def test_consolidator_feeds_indicator(self):
        """An SMA chained after a consolidator averages bar closes."""
        consolidator = ValueBarConsolidator(max_count=2)
        sma = consolidator.then(SimpleMovingAverage(2))
        for i, value in enumerate([1.0, 2.0, 3.0, 4.0]):
            consolidator.update(i, value)
        assert sma.samples == 2
        assert sma.current.value == pytest.approx(3.0)
        assert sma.is_ready is True

        consolidator.reset()
        assert sma.samples == 0
