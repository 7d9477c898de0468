"""Outcome of a single indicator computation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from finstream.data.double_array import DoubleArray, as_double_array


class IndicatorStatus(str, Enum):
    """Status attached to the value an indicator produced."""

    SUCCESS = "success"
    INVALID_INPUT = "invalid_input"
    MATH_ERROR = "math_error"
    VALUE_NOT_READY = "value_not_ready"


@dataclass
class IndicatorResult:
    """A computed value plus the status it was produced with.

    Math errors are reported in-band: the transform returns a fallback value
    with ``MATH_ERROR`` and the update still propagates downstream.

    Attributes:
        value: The produced value (coerced to a DoubleArray).
        status: How the value came about.
    """

    value: DoubleArray
    status: IndicatorStatus = IndicatorStatus.SUCCESS

    def __post_init__(self) -> None:
        self.value = as_double_array(self.value)

    @classmethod
    def of(cls, result: Any) -> IndicatorResult:
        """Normalise whatever a transform returned into a result."""
        if isinstance(result, IndicatorResult):
            return result
        return cls(as_double_array(result))
