"""Updatable contract and indicator base classes.

Every node in an update graph is an ``Updatable``: it accepts
``(time, value)`` samples, keeps the latest output in ``current`` and
notifies subscribers through its ``updated`` and ``resetted`` hooks.

``IndicatorBase`` implements the update protocol around a pluggable
``forward(time, input)`` transform:

1. coerce ``value`` to a DoubleArray and ``time`` to epoch milliseconds
2. increment ``samples``
3. ``current = forward(time, input)``; ``current_time = time``
4. fire ``updated(time, current)``

``reset()`` clears the state back to a freshly constructed node and fires
``resetted(node)``. Subclasses holding extra state clear it first and then
call ``super().reset()`` so subscribers observe a fully reset node.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

from finstream.data.constants import BAR_PROPERTIES, TRADE_BAR_PROPERTIES, ZERO
from finstream.data.converters import to_epoch_millis
from finstream.data.double_array import DoubleArray, as_double_array
from finstream.data.rolling_window import TimeValueWindow
from finstream.indicators.events import EventHook
from finstream.indicators.status import IndicatorResult, IndicatorStatus

logger = logging.getLogger(__name__)

UpdatedCallback = Callable[[int, DoubleArray], Any]
ResetCallback = Callable[["Updatable"], Any]


class Updatable(ABC):
    """Base of every node that can be fed samples and chained.

    Attributes:
        name: Display name.
        current: Latest output (a zero scalar until the first update).
        current_time: Epoch milliseconds of the latest output.
        samples: Number of updates since construction or the last reset.
        status: Status of the latest output.
        updated: Fired with ``(time, current)`` after every update.
        resetted: Fired with the node itself after every reset.
    """

    #: values per output sample
    properties: int = 1
    #: values per input sample this node expects
    input_properties: int = 1
    #: number of output samples per update
    output_count: int = 1

    def __init__(self, name: str):
        self.name = name
        self.current: DoubleArray = DoubleArray.from_value(ZERO)
        self.current_time: int = 0
        self.samples: int = 0
        self.status: IndicatorStatus = IndicatorStatus.SUCCESS
        self.updated = EventHook(f"{name}.updated")
        self.resetted = EventHook(f"{name}.resetted")

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        """Whether enough samples were seen for ``current`` to be meaningful."""
        ...

    @property
    def warm_up_period(self) -> int:
        """Advisory number of samples needed before the node is ready."""
        return 1

    @abstractmethod
    def update(self, time: Any, value: Any) -> bool:
        """Feed one sample; returns ``is_ready`` afterwards.

        The node takes ownership of a DoubleArray ``value``: callers that
        keep mutating or dispose it afterwards must pass a ``clone()``.
        """
        ...

    def reset(self) -> None:
        self.samples = 0
        self.current = DoubleArray.from_value(ZERO)
        self.current_time = 0
        self.status = IndicatorStatus.SUCCESS
        logger.debug("Reset %s", self.name)
        self.resetted.fire(self)

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def on_updated(self, callback: UpdatedCallback) -> None:
        """Register a callback for new values."""
        self.updated.subscribe(callback)

    def off_updated(self, callback: UpdatedCallback) -> None:
        """Unregister a callback for new values."""
        self.updated.unsubscribe(callback)

    def on_reset(self, callback: ResetCallback) -> None:
        """Register a callback for resets."""
        self.resetted.subscribe(callback)

    def off_reset(self, callback: ResetCallback) -> None:
        """Unregister a callback for resets."""
        self.resetted.unsubscribe(callback)

    def _fire_updated(self, time: int, value: DoubleArray) -> None:
        self.updated.fire(time, value)

    # -------------------------------------------------------------------------
    # Chaining (see finstream.indicators.extensions)
    # -------------------------------------------------------------------------

    def then(self, second: Updatable, wait_for_first_to_ready: bool = True) -> Updatable:
        from finstream.indicators import extensions

        return extensions.then(self, second, wait_for_first_to_ready)

    def of(self, first: Updatable, wait_for_first_to_ready: bool = True) -> Updatable:
        from finstream.indicators import extensions

        return extensions.of(self, first, wait_for_first_to_ready)

    def function(self, op, selector=None, wait_for_first_to_ready: bool = True, name: str | None = None):
        from finstream.indicators import extensions

        return extensions.function(self, op, selector, wait_for_first_to_ready, name)

    def then_to_list(self, wait_for_first_to_ready: bool = True, reset_list_on_reset: bool = False):
        from finstream.indicators import extensions

        return extensions.then_to_list(self, wait_for_first_to_ready, reset_list_on_reset)

    def plus(self, other, name: str | None = None):
        from finstream.indicators import extensions

        return extensions.plus(self, other, name)

    def minus(self, other, name: str | None = None):
        from finstream.indicators import extensions

        return extensions.minus(self, other, name)

    def times(self, other, name: str | None = None):
        from finstream.indicators import extensions

        return extensions.times(self, other, name)

    def over(self, other, name: str | None = None):
        from finstream.indicators import extensions

        return extensions.over(self, other, name)

    def weighted_by(self, weight: Updatable, period: int):
        from finstream.indicators import extensions

        return extensions.weighted_by(self, weight, period)

    def sma(self, period: int, wait_for_first_to_ready: bool = True):
        from finstream.indicators import extensions

        return extensions.sma(self, period, wait_for_first_to_ready)

    def ema(self, period: int, smoothing_factor: float | None = None, wait_for_first_to_ready: bool = True):
        from finstream.indicators import extensions

        return extensions.ema(self, period, smoothing_factor, wait_for_first_to_ready)

    def maximum(self, period: int, wait_for_first_to_ready: bool = True):
        from finstream.indicators import extensions

        return extensions.maximum(self, period, wait_for_first_to_ready)

    def minimum(self, period: int, wait_for_first_to_ready: bool = True):
        from finstream.indicators import extensions

        return extensions.minimum(self, period, wait_for_first_to_ready)

    # -------------------------------------------------------------------------

    def __float__(self) -> float:
        return self.current.value

    def __str__(self) -> str:
        return str(self.current.value)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, samples={self.samples}, "
            f"ready={self.is_ready}, current={self.current.value!r})"
        )


class IndicatorBase(Updatable):
    """Updatable whose output is computed by ``forward``."""

    def update(self, time: Any, value: Any) -> bool:
        time = to_epoch_millis(time)
        value = as_double_array(value)

        self.samples += 1
        result = IndicatorResult.of(self.forward(time, value))

        self.current = result.value
        self.status = result.status
        self.current_time = time

        self._fire_updated(time, self.current)
        return self.is_ready

    @abstractmethod
    def forward(self, time: int, input: DoubleArray) -> Any:
        """Compute the next value.

        Returns a DoubleArray, a number, or an ``IndicatorResult`` carrying
        a non-success status.
        """
        ...


class WindowIndicator(IndicatorBase):
    """Indicator computed over the last ``period`` ``(time, input)`` pairs.

    ``window[0]`` is the sample being processed when ``forward_window`` runs.
    The window holds its own copies, so running aggregates survive callers
    that reuse the array they fed.
    """

    def __init__(self, name: str, period: int):
        super().__init__(name)
        if period < 1:
            raise ValueError(f"period must be >= 1, got {period}")
        self.period = period
        self.window = TimeValueWindow(period)

    @property
    def is_ready(self) -> bool:
        return self.samples >= self.period

    @property
    def warm_up_period(self) -> int:
        return self.period

    def forward(self, time: int, input: DoubleArray) -> Any:
        self.window.push(time, input.clone())
        return self.forward_window(self.window, time, input)

    @abstractmethod
    def forward_window(self, window: TimeValueWindow, time: int, input: DoubleArray) -> Any:
        ...

    def reset(self) -> None:
        self.window.reset()
        super().reset()


class BarIndicator(IndicatorBase):
    """Indicator fed with OHLC bars."""

    input_properties = BAR_PROPERTIES


class TradeBarIndicator(IndicatorBase):
    """Indicator fed with OHLCV trade bars."""

    input_properties = TRADE_BAR_PROPERTIES
