"""Layout constants shared by bar-shaped values.

Bars are stored close-first so that the scalar fallback of a bar
(property 0) is its close price.
"""

CLOSE_IDX = 0
HIGH_IDX = 1
LOW_IDX = 2
OPEN_IDX = 3
VOLUME_IDX = 4

# Properties of an OHLC bar and of an OHLCV trade bar
BAR_PROPERTIES = 4
TRADE_BAR_PROPERTIES = 5

ZERO = 0.0
ONE = 1.0
ZERO_EPSILON = 1e-20
