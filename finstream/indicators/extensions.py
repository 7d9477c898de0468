"""Wiring helpers that build update graphs out of indicators.

All helpers subscribe to ``first.updated`` and return the downstream node.
``wait_for_first_to_ready`` gates forwarding on ``first.is_ready``; a reset
of ``first`` cascades to the downstream node. Cycles are not detected.
"""

from __future__ import annotations

from typing import Any, Callable

import numpy as np

from finstream.data.constants import ZERO
from finstream.data.double_array import DoubleArray
from finstream.indicators.base import Updatable
from finstream.indicators.basic import (
    ConstantIndicator,
    Identity,
    Maximum,
    Minimum,
    Sum,
    WindowIdentity,
)
from finstream.indicators.composite import CompositeIndicator
from finstream.indicators.moving_averages import (
    ExponentialMovingAverage,
    SimpleMovingAverage,
)
from finstream.indicators.status import IndicatorResult, IndicatorStatus


def _forward(first: Updatable, handler: Callable[[int, DoubleArray], Any], wait: bool) -> None:
    if wait:
        def gated(time: int, value: DoubleArray) -> None:
            if first.is_ready:
                handler(time, value)

        first.on_updated(gated)
    else:
        first.on_updated(handler)


def then(first: Updatable, second: Updatable, wait_for_first_to_ready: bool = True) -> Updatable:
    """Feed every output of ``first`` into ``second``; returns ``second``."""
    _forward(first, second.update, wait_for_first_to_ready)
    first.on_reset(lambda sender: second.reset())
    return second


def of(second: Updatable, first: Updatable, wait_for_first_to_ready: bool = True) -> Updatable:
    """Make ``second`` an indicator *of* ``first``; returns ``second``."""
    return then(first, second, wait_for_first_to_ready)


def _resolve_name(first: Updatable, name: str | None) -> str:
    return name or f"function({first.name})"


def function(
    first: Updatable,
    op: Callable[[Any], Any],
    selector: Callable[[DoubleArray], Any] | None = None,
    wait_for_first_to_ready: bool = True,
    name: str | None = None,
) -> Identity:
    """Identity fed with ``op(selector(value))`` for every output of ``first``.

    Without a selector ``op`` receives the whole DoubleArray.
    """
    if op is None:
        raise ValueError("op is required")

    idn = Identity(_resolve_name(first, name))
    if selector is None:
        _forward(first, lambda time, value: idn.update(time, op(value)), wait_for_first_to_ready)
    else:
        _forward(
            first,
            lambda time, value: idn.update(time, op(selector(value))),
            wait_for_first_to_ready,
        )
    first.on_reset(lambda sender: idn.reset())
    return idn


def then_to_list(
    first: Updatable,
    wait_for_first_to_ready: bool = True,
    reset_list_on_reset: bool = False,
) -> list[DoubleArray]:
    """Collect every output of ``first`` into a list that keeps growing."""
    ret: list[DoubleArray] = []
    _forward(first, lambda time, value: ret.append(value), wait_for_first_to_ready)
    if reset_list_on_reset:
        first.on_reset(lambda sender: ret.clear())
    return ret


def weighted_by(value: Updatable, weight: Updatable, period: int) -> CompositeIndicator:
    """Weighted average of ``value`` by ``weight`` over ``period`` samples."""
    x = WindowIdentity(period)
    y = WindowIdentity(period)
    numerator = Sum(period, name="Sum_xy")
    denominator = Sum(period, name="Sum_y")

    def on_value(time: int, consolidated: DoubleArray) -> None:
        x.update(time, consolidated)
        if x.samples == y.samples:
            numerator.update(time, consolidated * y.current.value)

    def on_weight(time: int, consolidated: DoubleArray) -> None:
        y.update(time, consolidated)
        if x.samples == y.samples:
            numerator.update(time, consolidated * x.current.value)
        denominator.update(time, consolidated)

    value.on_updated(on_value)
    weight.on_updated(on_weight)
    value.on_reset(lambda sender: weight.reset())

    return over(numerator, denominator)


# =============================================================================
# Arithmetic composites
# =============================================================================

def _operand(other: Any) -> Updatable:
    if isinstance(other, Updatable):
        return other
    return ConstantIndicator(other)


def plus(left: Updatable, other: Any, name: str | None = None) -> CompositeIndicator:
    return CompositeIndicator(left, _operand(other), lambda l, r: l + r, name)


def minus(left: Updatable, other: Any, name: str | None = None) -> CompositeIndicator:
    return CompositeIndicator(left, _operand(other), lambda l, r: l - r, name)


def times(left: Updatable, other: Any, name: str | None = None) -> CompositeIndicator:
    return CompositeIndicator(left, _operand(other), lambda l, r: l * r, name)


def _divide(l: DoubleArray, r: DoubleArray) -> IndicatorResult:
    # any zero element of the denominator poisons the whole result
    if np.any(r.to_numpy() == ZERO):
        return IndicatorResult(ZERO, IndicatorStatus.MATH_ERROR)
    return IndicatorResult(l / r)


def over(left: Updatable, other: Any, name: str | None = None) -> CompositeIndicator:
    """Divide ``left`` by ``other``; a zero in any denominator element yields a
    MATH_ERROR zero."""
    return CompositeIndicator(left, _operand(other), _divide, name)


# =============================================================================
# Moving averages of another indicator
# =============================================================================

def sma(left: Updatable, period: int, wait_for_first_to_ready: bool = True) -> SimpleMovingAverage:
    return of(
        SimpleMovingAverage(period, name=f"SMA{period}_Of_{left.name}"),
        left,
        wait_for_first_to_ready,
    )


def ema(
    left: Updatable,
    period: int,
    smoothing_factor: float | None = None,
    wait_for_first_to_ready: bool = True,
) -> ExponentialMovingAverage:
    return of(
        ExponentialMovingAverage(period, smoothing_factor, name=f"EMA{period}_Of_{left.name}"),
        left,
        wait_for_first_to_ready,
    )


def maximum(left: Updatable, period: int, wait_for_first_to_ready: bool = True) -> Maximum:
    return of(Maximum(period, name=f"MAX{period}_Of_{left.name}"), left, wait_for_first_to_ready)


def minimum(left: Updatable, period: int, wait_for_first_to_ready: bool = True) -> Minimum:
    return of(Minimum(period, name=f"MIN{period}_Of_{left.name}"), left, wait_for_first_to_ready)
