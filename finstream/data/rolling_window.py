"""Fixed-capacity rolling windows.

``window[0]`` is always the most recent item and ``window[k]`` the k-th
most recent. Pushing into a full window evicts the oldest item, which is
kept as ``most_recently_removed`` so running aggregates can subtract it.
"""

from __future__ import annotations

from typing import Generic, Iterator, TypeVar

from finstream.data.double_array import DoubleArray
from finstream.exceptions import IndexOutOfRangeError

T = TypeVar("T")


class RollingWindow(Generic[T]):
    """Ring buffer indexed newest-first.

    Parameters
    ----------
    size : int
        Capacity; must be positive.
    """

    def __init__(self, size: int):
        if size <= 0:
            raise ValueError(f"window size must be positive, got {size}")
        self._size = size
        self._items: list[T | None] = [None] * size
        self._head = 0  # slot of the next write
        self._count = 0
        self._samples = 0
        self._most_recently_removed: T | None = None

    @property
    def size(self) -> int:
        return self._size

    @property
    def count(self) -> int:
        """Number of items currently held."""
        return self._count

    @property
    def samples(self) -> int:
        """Total number of pushes since construction or the last reset."""
        return self._samples

    @property
    def is_ready(self) -> bool:
        return self._samples >= self._size

    @property
    def most_recently_removed(self) -> T:
        """The item evicted by the last push into a full window."""
        if self._samples <= self._size:
            raise IndexOutOfRangeError("no item has been removed from the window yet")
        return self._most_recently_removed

    def push(self, item: T) -> None:
        if self._count == self._size:
            self._most_recently_removed = self._items[self._head]
        else:
            self._count += 1
        self._items[self._head] = item
        self._head = (self._head + 1) % self._size
        self._samples += 1

    add = push

    def __getitem__(self, k: int) -> T:
        if not 0 <= k < self._count:
            raise IndexOutOfRangeError(
                f"index {k} out of range for a window holding {self._count} items"
            )
        return self._items[(self._head - 1 - k) % self._size]

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[T]:
        for k in range(self._count):
            yield self[k]

    def reset(self) -> None:
        self._items = [None] * self._size
        self._head = 0
        self._count = 0
        self._samples = 0
        self._most_recently_removed = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self._size}, count={self._count})"


class TimeValueWindow(RollingWindow[tuple[int, DoubleArray]]):
    """Rolling window of ``(time, value)`` pairs."""

    def push(self, time: int, value: DoubleArray) -> None:  # type: ignore[override]
        super().push((time, value))

    add = push

    def get(self, k: int) -> DoubleArray:
        """Value of the k-th most recent pair."""
        return self[k][1]

    def get_time(self, k: int) -> int:
        """Time of the k-th most recent pair."""
        return self[k][0]

    def values(self) -> Iterator[DoubleArray]:
        for _, value in self:
            yield value
