"""Indicator combining the outputs of two others."""

from __future__ import annotations

from typing import Any, Callable

from finstream.data.double_array import DoubleArray
from finstream.indicators.base import IndicatorBase, Updatable
from finstream.indicators.basic import ConstantIndicator

Composer = Callable[[DoubleArray, DoubleArray], Any]


class CompositeIndicator(IndicatorBase):
    """Applies ``composer(left.current, right.current)`` whenever both sides
    have produced new data.

    An update from one side is held until the other side also updates; a
    ``ConstantIndicator`` side always counts as having new data. Resetting
    the composite resets both sides.
    """

    def __init__(
        self,
        left: Updatable,
        right: Updatable,
        composer: Composer,
        name: str | None = None,
    ):
        super().__init__(name or f"COMPOSE({left.name},{right.name})")
        self.left = left
        self.right = right
        self.composer = composer
        self._new_left_data = False
        self._new_right_data = False
        left.on_updated(self._on_left_updated)
        right.on_updated(self._on_right_updated)

    @property
    def is_ready(self) -> bool:
        return self.left.is_ready and self.right.is_ready

    @property
    def warm_up_period(self) -> int:
        return max(self.left.warm_up_period, self.right.warm_up_period)

    def _on_left_updated(self, time: int, value: DoubleArray) -> None:
        if self._new_right_data or isinstance(self.right, ConstantIndicator):
            self._compose(time)
        else:
            self._new_left_data = True

    def _on_right_updated(self, time: int, value: DoubleArray) -> None:
        if self._new_left_data or isinstance(self.left, ConstantIndicator):
            self._compose(time)
        else:
            self._new_right_data = True

    def _compose(self, time: int) -> None:
        self._new_left_data = False
        self._new_right_data = False
        self.update(time, self.left.current)

    def forward(self, time: int, input: DoubleArray) -> Any:
        return self.composer(self.left.current, self.right.current)

    def reset(self) -> None:
        self._new_left_data = False
        self._new_right_data = False
        self.left.reset()
        self.right.reset()
        super().reset()
