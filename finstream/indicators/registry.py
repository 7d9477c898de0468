"""Name -> class lookup for the indicator catalogue.

Catalogue classes register themselves at import time, which lets
``engine.yaml`` refer to indicators by a short type name:

    @register_indicator("wilr")
    class WilliamsPercentR(BarIndicator):
        ...

    wilr = create_indicator("wilr", period=14)
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

_INDICATORS: dict[str, type] = {}


def register_indicator(name: str):
    """Class decorator adding an indicator to the catalogue under ``name``.

    Raises:
        ValueError: ``name`` already belongs to another indicator class.
    """

    def decorator(cls):
        existing = _INDICATORS.get(name)
        if existing is not None:
            raise ValueError(
                f"Indicator type '{name}' is already registered by {existing.__name__}"
            )
        _INDICATORS[name] = cls
        logger.debug("Indicator type %s -> %s", name, cls.__name__)
        return cls

    return decorator


def get_indicator_class(name: str) -> type:
    """Resolve an indicator type name to its class.

    Raises:
        KeyError: No indicator type of that name; the message lists the
            available types.
    """
    try:
        return _INDICATORS[name]
    except KeyError:
        available = ", ".join(list_indicators()) or "(none)"
        raise KeyError(f"Unknown indicator type '{name}'. Available: {available}") from None


def create_indicator(name: str, **kwargs: Any):
    """Construct the indicator registered as ``name`` with ``kwargs``."""
    return get_indicator_class(name)(**kwargs)


def list_indicators() -> list[str]:
    """Registered indicator type names, sorted."""
    return sorted(_INDICATORS)
