"""Synchronous multicast callbacks.

Handlers run in subscription order on the caller's stack. An exception
raised by a handler propagates out of ``fire`` and the handlers after it
are not called.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator

logger = logging.getLogger(__name__)


class EventHook:
    """Ordered registry of callbacks."""

    def __init__(self, name: str = "event"):
        self.name = name
        self._handlers: list[Callable[..., Any]] = []

    def subscribe(self, handler: Callable[..., Any]) -> Callable[..., Any]:
        """Register a handler; returns it so this can be used as a decorator."""
        self._handlers.append(handler)
        return handler

    def unsubscribe(self, handler: Callable[..., Any]) -> None:
        """Remove the first registration of ``handler`` (no-op if absent)."""
        try:
            self._handlers.remove(handler)
        except ValueError:
            logger.debug("Handler %r was not subscribed to %s", handler, self.name)

    def fire(self, *args: Any) -> None:
        # snapshot: handlers may (un)subscribe while firing
        for handler in tuple(self._handlers):
            handler(*args)

    __call__ = fire

    def clear(self) -> None:
        self._handlers.clear()

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[Callable[..., Any]]:
        return iter(tuple(self._handlers))

    def __contains__(self, handler: Callable[..., Any]) -> bool:
        return handler in self._handlers

    def __iadd__(self, handler: Callable[..., Any]) -> EventHook:
        self.subscribe(handler)
        return self

    def __isub__(self, handler: Callable[..., Any]) -> EventHook:
        self.unsubscribe(handler)
        return self

    def __repr__(self) -> str:
        return f"EventHook({self.name!r}, handlers={len(self._handlers)})"
