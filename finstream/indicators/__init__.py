"""Streaming indicators and the update-graph engine (pure math, no I/O).

Public API:
- Updatable / IndicatorBase / WindowIndicator: node contracts
- IndicatorResult / IndicatorStatus: in-band computation status
- EventHook: ordered synchronous callbacks
- register_indicator / create_indicator / list_indicators: registry

Importing this package registers all built-in indicators.
"""

from finstream.indicators.base import (
    BarIndicator,
    IndicatorBase,
    TradeBarIndicator,
    Updatable,
    WindowIndicator,
)
from finstream.indicators.basic import (
    ConstantIndicator,
    Delay,
    FunctionalIndicator,
    Identity,
    Maximum,
    Minimum,
    Sum,
    WindowIdentity,
)
from finstream.indicators.composite import CompositeIndicator
from finstream.indicators.events import EventHook
from finstream.indicators.heikin_ashi import HeikinAshi
from finstream.indicators.moving_averages import (
    ExponentialMovingAverage,
    MovingAverageType,
    SimpleMovingAverage,
    WildersMovingAverage,
)
from finstream.indicators.oscillators import (
    AccumulationDistribution,
    DetrendedPriceOscillator,
    WilliamsPercentR,
)
from finstream.indicators.registry import (
    create_indicator,
    get_indicator_class,
    list_indicators,
    register_indicator,
)
from finstream.indicators.status import IndicatorResult, IndicatorStatus
from finstream.indicators.volatility import (
    AccelerationBands,
    AverageTrueRange,
    KeltnerChannels,
)

# Import built-in patterns to trigger auto-registration
import finstream.indicators.candlestick  # noqa: F401

__all__ = [
    # Contracts
    "Updatable",
    "IndicatorBase",
    "WindowIndicator",
    "BarIndicator",
    "TradeBarIndicator",
    "IndicatorResult",
    "IndicatorStatus",
    "EventHook",
    "CompositeIndicator",
    # Registry
    "register_indicator",
    "create_indicator",
    "get_indicator_class",
    "list_indicators",
    # Catalogue
    "Identity",
    "ConstantIndicator",
    "FunctionalIndicator",
    "Delay",
    "WindowIdentity",
    "Sum",
    "Maximum",
    "Minimum",
    "SimpleMovingAverage",
    "ExponentialMovingAverage",
    "WildersMovingAverage",
    "MovingAverageType",
    "AverageTrueRange",
    "AccelerationBands",
    "KeltnerChannels",
    "AccumulationDistribution",
    "DetrendedPriceOscillator",
    "WilliamsPercentR",
    "HeikinAshi",
]
