"""Building-block indicators: pass-through, constants, lags and window extremes."""

from __future__ import annotations

from typing import Any, Callable

from finstream.data.constants import ZERO
from finstream.data.double_array import DoubleArray, as_double_array
from finstream.data.rolling_window import TimeValueWindow
from finstream.indicators.base import IndicatorBase, WindowIndicator
from finstream.indicators.registry import register_indicator


@register_indicator("identity")
class Identity(IndicatorBase):
    """Outputs its input unchanged (as an owned copy)."""

    def __init__(self, name: str = "IDENTITY"):
        super().__init__(name)

    @property
    def is_ready(self) -> bool:
        return self.samples > 0

    def forward(self, time: int, input: DoubleArray) -> DoubleArray:
        return input.clone()


@register_indicator("constant")
class ConstantIndicator(IndicatorBase):
    """Always outputs the same value and is always ready.

    Used as the fixed operand of composite arithmetic (``indicator.plus(2)``).
    """

    def __init__(self, value: Any = ZERO, name: str | None = None):
        self.value = as_double_array(value).clone()
        super().__init__(name or repr(self.value.value))
        self.current = self.value.clone()

    @property
    def is_ready(self) -> bool:
        return True

    def forward(self, time: int, input: DoubleArray) -> DoubleArray:
        return self.value.clone()

    def reset(self) -> None:
        super().reset()
        self.current = self.value.clone()


class FunctionalIndicator(IndicatorBase):
    """Indicator whose behaviour is supplied as callables.

    Args:
        name: Display name
        forward: ``(time, input) -> value`` transform
        is_ready: ``(indicator) -> bool`` readiness predicate
        reset: Optional extra action run on reset
    """

    def __init__(
        self,
        name: str,
        forward: Callable[[int, DoubleArray], Any],
        is_ready: Callable[[FunctionalIndicator], bool],
        reset: Callable[[], Any] | None = None,
    ):
        super().__init__(name)
        self._forward = forward
        self._is_ready = is_ready
        self._reset = reset

    @property
    def is_ready(self) -> bool:
        return self._is_ready(self)

    def forward(self, time: int, input: DoubleArray) -> Any:
        return self._forward(time, input)

    def reset(self) -> None:
        if self._reset is not None:
            self._reset()
        super().reset()


@register_indicator("delay")
class Delay(WindowIndicator):
    """Outputs the input seen ``period`` samples ago (zero until then)."""

    def __init__(self, period: int, name: str | None = None):
        super().__init__(name or f"DELAY({period})", period + 1)
        self.delay = period

    def forward_window(self, window: TimeValueWindow, time: int, input: DoubleArray) -> Any:
        if not window.is_ready:
            return ZERO
        return window.get(self.delay).clone()


@register_indicator("window_identity")
class WindowIdentity(WindowIndicator):
    """Pass-through that only becomes ready after ``period`` samples."""

    def __init__(self, period: int, name: str | None = None):
        super().__init__(name or f"WINDOW_IDENTITY({period})", period)

    def forward_window(self, window: TimeValueWindow, time: int, input: DoubleArray) -> Any:
        return input.clone()


@register_indicator("sum")
class Sum(WindowIndicator):
    """Running sum of the last ``period`` values."""

    def __init__(self, period: int, name: str | None = None):
        super().__init__(name or f"SUM({period})", period)
        self._rolling_sum = ZERO

    def forward_window(self, window: TimeValueWindow, time: int, input: DoubleArray) -> Any:
        self._rolling_sum += input.value
        if window.samples > window.size:
            self._rolling_sum -= window.most_recently_removed[1].value
        return self._rolling_sum

    def reset(self) -> None:
        self._rolling_sum = ZERO
        super().reset()


@register_indicator("max")
class Maximum(WindowIndicator):
    """Highest value over the last ``period`` samples."""

    def __init__(self, period: int, name: str | None = None):
        super().__init__(name or f"MAX({period})", period)
        self.periods_since_maximum = 0

    def forward_window(self, window: TimeValueWindow, time: int, input: DoubleArray) -> Any:
        best, since = window.get(0).value, 0
        for k in range(1, window.count):
            value = window.get(k).value
            if value > best:
                best, since = value, k
        self.periods_since_maximum = since
        return best

    def reset(self) -> None:
        self.periods_since_maximum = 0
        super().reset()


@register_indicator("min")
class Minimum(WindowIndicator):
    """Lowest value over the last ``period`` samples."""

    def __init__(self, period: int, name: str | None = None):
        super().__init__(name or f"MIN({period})", period)
        self.periods_since_minimum = 0

    def forward_window(self, window: TimeValueWindow, time: int, input: DoubleArray) -> Any:
        best, since = window.get(0).value, 0
        for k in range(1, window.count):
            value = window.get(k).value
            if value < best:
                best, since = value, k
        self.periods_since_minimum = since
        return best

    def reset(self) -> None:
        self.periods_since_minimum = 0
        super().reset()
