"""Pydantic schemas for analysis inputs and outputs.

This module exports all Pydantic schemas used throughout the engine.
"""

from crypto_sensei.schemas.analysis import (
    DetailedAnalysis,
    MarketOutlook,
    MarketStructure,
    PositionBias,
    PositionSummary,
    NarrativePredictions,
    NarrativeSignal,
    NarrativeStrategy,
    ParsedNarrative,
)
from crypto_sensei.schemas.base import StrictBaseModel
from crypto_sensei.schemas.indicators import (
    IndicatorReading,
    KeyLevels,
    MACDSnapshot,
    MarketPhase,
    MarketPhaseLabel,
    MomentumSignals,
    OBVTrend,
    Signal,
    TechnicalIndicators,
    TechnicalSignals,
    TrendDirection,
    TrendSignal,
    VolatilitySignal,
    VolumeSignal,
)
from crypto_sensei.schemas.market import (
    HeadlineSentiment,
    HistoricalSeries,
    MarketMood,
    NewsHeadline,
    NewsSentiment,
)
from crypto_sensei.schemas.predictions import (
    PriceTarget,
    PriceTargets,
    Timeframe,
    TimeframeConfidence,
)
from crypto_sensei.schemas.strategy import (
    EntryLevels,
    HoldingTimeframe,
    Recommendation,
    StopLossLevels,
    TargetLevels,
    TradingStrategy,
)

__all__ = [
    "StrictBaseModel",
    "HistoricalSeries",
    "NewsSentiment",
    "NewsHeadline",
    "MarketMood",
    "HeadlineSentiment",
    "MACDSnapshot",
    "TechnicalIndicators",
    "MarketPhaseLabel",
    "MarketPhase",
    "KeyLevels",
    "TrendDirection",
    "OBVTrend",
    "TrendSignal",
    "IndicatorReading",
    "MomentumSignals",
    "VolatilitySignal",
    "VolumeSignal",
    "TechnicalSignals",
    "Signal",
    "Timeframe",
    "PriceTarget",
    "PriceTargets",
    "TimeframeConfidence",
    "Recommendation",
    "HoldingTimeframe",
    "EntryLevels",
    "StopLossLevels",
    "TargetLevels",
    "TradingStrategy",
    "NarrativeSignal",
    "NarrativePredictions",
    "NarrativeStrategy",
    "ParsedNarrative",
    "MarketOutlook",
    "MarketStructure",
    "PositionBias",
    "PositionSummary",
    "DetailedAnalysis",
]
