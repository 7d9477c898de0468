"""Count- and time-based bar consolidation.

A consolidator buffers incoming samples into a working bar and emits the
finished bar through ``updated`` when a boundary is crossed:

- count policy: after ``max_count`` samples (the last sample is part of
  the emitted bar)
- time policy: when a sample falls into a later period than the working
  bar (the working bar is emitted first, the sample opens the next bar);
  a zero period emits every sample as its own bar

With both policies set, whichever boundary comes first closes the bar.
Bars are never emitted partially; the working bar is discarded on reset.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from datetime import timedelta
from typing import Any

from finstream.data.converters import to_epoch_millis, to_millis_span
from finstream.data.double_array import DoubleArray, as_double_array
from finstream.indicators.base import Updatable

logger = logging.getLogger(__name__)


class DataConsolidator(Updatable):
    """Base class for consolidators.

    Parameters
    ----------
    max_count : int, optional
        Number of samples per bar.
    period : int or timedelta, optional
        Bar span in milliseconds. Bar times are rounded down to a multiple
        of the span.
    """

    def __init__(
        self,
        max_count: int | None = None,
        period: int | timedelta | None = None,
        name: str | None = None,
    ):
        if max_count is None and period is None:
            raise ValueError("a consolidator needs a max_count, a period, or both")
        if max_count is not None and max_count < 1:
            raise ValueError(f"max_count must be >= 1, got {max_count}")
        super().__init__(name or type(self).__name__)
        self.max_count = max_count
        self.period = to_millis_span(period) if period is not None else None
        self.working_time: int = 0
        self.working_bar: DoubleArray | None = None
        self.consolidated_count = 0
        self._current_count = 0

    @property
    def is_ready(self) -> bool:
        return self.consolidated_count > 0

    @property
    def warm_up_period(self) -> int:
        return self.max_count or 1

    def round_down(self, time: int) -> int:
        """Start of the period containing ``time``."""
        if not self.period:
            return time
        return time - time % self.period

    def update(self, time: Any, value: Any) -> bool:
        time = to_epoch_millis(time)
        value = as_double_array(value)
        self.samples += 1

        if (
            self.period
            and self.working_bar is not None
            and self.round_down(time) > self.working_time
        ):
            self._emit()

        self.working_time, self.working_bar = self.aggregate_bar(
            self.working_time, self.working_bar, time, value
        )

        if self.max_count is not None:
            self._current_count += 1
            if self._current_count >= self.max_count:
                self._emit()
                return self.is_ready

        if self.period == 0:
            self._emit()
        return self.is_ready

    def _emit(self) -> None:
        bar, time = self.working_bar, self.working_time
        self.current = bar
        self.current_time = time
        self.consolidated_count += 1
        logger.debug("%s emitted bar #%d at %d", self.name, self.consolidated_count, time)
        self._fire_updated(time, bar)
        self.working_bar = None
        self._current_count = 0

    @abstractmethod
    def aggregate_bar(
        self,
        working_time: int,
        working_bar: DoubleArray | None,
        time: int,
        data: DoubleArray,
    ) -> tuple[int, DoubleArray]:
        """Fold ``data`` into the working bar.

        ``working_bar`` is ``None`` when a new bar should be started.

        Returns:
            The new ``(working_time, working_bar)``.
        """
        ...

    def reset(self) -> None:
        self.working_time = 0
        self.working_bar = None
        self.consolidated_count = 0
        self._current_count = 0
        super().reset()
