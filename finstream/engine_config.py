"""Engine configuration loaded from engine.yaml.

Supports:
- Overriding candlestick thresholds (partial entries keep the defaults)
- Declaring indicators by registry type with constructor params
- An optional consolidator in front of the indicators
- Backward compatible: no YAML file = defaults, no indicators
"""

import inspect
import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

import finstream.indicators  # noqa: F401  (registers built-in indicators)
from finstream.config import get_settings
from finstream.consolidators import DataConsolidator, TradeBarConsolidator, ValueBarConsolidator
from finstream.indicators.base import Updatable
from finstream.indicators.candlestick import (
    CandlestickPattern,
    CandleRangeType,
    CandleSettings,
    CandleSettingType,
)
from finstream.indicators.registry import get_indicator_class, list_indicators

logger = logging.getLogger(__name__)


class CandleSettingModel(BaseModel):
    """Override for one candle threshold; unset fields keep the default."""

    range_type: CandleRangeType | None = None
    average_period: int | None = Field(default=None, ge=0)
    factor: float | None = None


class IndicatorEntry(BaseModel):
    """A single indicator entry in the YAML config."""

    type: str
    name: str | None = None
    params: dict[str, Any] = {}

    @property
    def key(self) -> str:
        return self.name or self.type

    def build(self, candle_settings: CandleSettings, default_period: int) -> Updatable:
        cls = get_indicator_class(self.type)
        kwargs = dict(self.params)
        accepted = inspect.signature(cls).parameters
        if "period" in accepted and "period" not in kwargs:
            kwargs["period"] = default_period
        if self.name is not None and "name" in accepted:
            kwargs.setdefault("name", self.name)
        if issubclass(cls, CandlestickPattern):
            kwargs.setdefault("settings", candle_settings)
        return cls(**kwargs)


class ConsolidatorEntry(BaseModel):
    """Consolidator placed in front of the configured indicators."""

    kind: Literal["trade_bar", "value_bar"] = "trade_bar"
    max_count: int | None = Field(default=None, ge=1)
    period_ms: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _validate(self):
        if self.max_count is None and self.period_ms is None:
            raise ValueError("consolidator requires max_count, period_ms, or both")
        return self

    def build(self) -> DataConsolidator:
        cls = TradeBarConsolidator if self.kind == "trade_bar" else ValueBarConsolidator
        return cls(max_count=self.max_count, period=self.period_ms)


class EngineConfig(BaseModel):
    """Top-level engine.yaml configuration."""

    candle_settings: dict[CandleSettingType, CandleSettingModel] = {}
    indicators: list[IndicatorEntry] = []
    consolidator: ConsolidatorEntry | None = None
    default_period: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _validate(self):
        known = set(list_indicators())
        for entry in self.indicators:
            if entry.type not in known:
                raise ValueError(
                    f"unknown indicator type '{entry.type}', "
                    f"available: {', '.join(sorted(known))}"
                )
        keys = [entry.key for entry in self.indicators]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise ValueError(f"duplicate indicator names: {duplicates}")
        return self

    def get_candle_settings(self) -> CandleSettings:
        """Resolve overrides on top of the default thresholds."""
        settings = CandleSettings()
        for setting_type, override in self.candle_settings.items():
            current = settings.get(setting_type)
            updated = current.model_copy(update=override.model_dump(exclude_none=True))
            settings = settings.with_setting(setting_type, updated)
        return settings

    def build_indicators(self) -> dict[str, Updatable]:
        """Instantiate the configured indicators, keyed by name."""
        candle_settings = self.get_candle_settings()
        default_period = self.default_period or get_settings().default_period
        return {
            entry.key: entry.build(candle_settings, default_period)
            for entry in self.indicators
        }

    def build_consolidator(self) -> DataConsolidator | None:
        return self.consolidator.build() if self.consolidator else None


_DEFAULT_PATH = Path("engine.yaml")


def load_engine_config(path: Path | str | None = None) -> EngineConfig:
    """Load engine config from YAML file.

    Falls back to defaults (no indicators) if the file doesn't exist.
    """
    if path is None:
        configured = get_settings().engine_config_path
        path = configured or _DEFAULT_PATH
    config_path = Path(path)

    # .env next to the YAML may carry FINSTREAM_* overrides
    load_dotenv(config_path.parent / ".env", override=False)

    if not config_path.exists():
        logger.info("No engine config found at %s, using defaults", config_path)
        return EngineConfig()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    config = EngineConfig(**raw)
    logger.info(
        "Loaded engine config: %d indicators, %d candle overrides, consolidator=%s",
        len(config.indicators),
        len(config.candle_settings),
        config.consolidator.kind if config.consolidator else None,
    )
    return config
