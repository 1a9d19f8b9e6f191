"""Schemas for the assembled detailed analysis."""

from enum import Enum

from pydantic import Field

from crypto_sensei.schemas.base import StrictBaseModel
from crypto_sensei.schemas.indicators import (
    MarketPhase,
    Signal,
    TechnicalIndicators,
    TechnicalSignals,
)
from crypto_sensei.schemas.market import NewsHeadline, NewsSentiment
from crypto_sensei.schemas.predictions import PriceTargets, TimeframeConfidence
from crypto_sensei.schemas.strategy import TradingStrategy


class NarrativeSignal(StrictBaseModel):
    text: str
    type: str = Field("neutral", description="'positive', 'negative' or 'neutral'")


class NarrativePredictions(StrictBaseModel):
    short_term: str = ""
    mid_term: str = ""
    long_term: str = ""


class NarrativeStrategy(StrictBaseModel):
    position: str = "N/A"
    entry: str = "N/A"
    stop: str = "N/A"
    target: str = "N/A"


class ParsedNarrative(StrictBaseModel):
    """Sections recovered from the AI narrative reply."""

    summary: str | None = None
    predictions: NarrativePredictions = Field(default_factory=NarrativePredictions)
    signals: list[NarrativeSignal] = Field(default_factory=list)
    strategy: NarrativeStrategy | None = None
    reasoning: list[str] = Field(default_factory=list)


class MarketOutlook(StrictBaseModel):
    """Directional bias per horizon read from the narrative predictions."""

    short_term: str = "Neutral"
    mid_term: str = "Neutral"
    long_term: str = "Neutral"


class MarketStructure(StrictBaseModel):
    trend: str
    support: float
    resistance: float
    breakout_potential: str
    distance_to_resistance_pct: float
    distance_to_support_pct: float


class PositionBias(str, Enum):
    """Directional bias of the position summary, from the market phase."""
    LONG = "Long"
    SHORT = "Short"
    NEUTRAL = "Neutral"


class PositionSummary(StrictBaseModel):
    """Range-based position levels: entry near the lower range, stop below support."""

    position: PositionBias
    entry: float
    stop: float
    target: float


class DetailedAnalysis(StrictBaseModel):
    """Complete analysis for one coin."""

    symbol: str
    summary: str
    narrative: ParsedNarrative | None = None
    indicators: TechnicalIndicators
    technical_signals: TechnicalSignals
    market_phase: MarketPhase
    signals: list[Signal]
    sentiment: NewsSentiment
    recent_news: list[NewsHeadline] = Field(default_factory=list)
    confidence: TimeframeConfidence
    prediction_confidence: float = Field(..., ge=0, le=100)
    price_targets: PriceTargets
    outlook: MarketOutlook = Field(default_factory=MarketOutlook)
    market_structure: MarketStructure
    position: PositionSummary
    strategy: TradingStrategy
