"""Schemas for trading strategy recommendations."""

from enum import Enum

from pydantic import Field

from crypto_sensei.schemas.base import StrictBaseModel


class Recommendation(str, Enum):
    """Recommended action."""
    BUY = "Buy"
    SELL = "Sell"
    HOLD = "Hold"
    TAKE_PROFIT = "Take Profit"


class HoldingTimeframe(str, Enum):
    """Suggested holding period for the strategy."""
    SHORT_TERM = "Short-term"
    MEDIUM_TERM = "Medium-term"
    LONG_TERM = "Long-term"


class EntryLevels(StrictBaseModel):
    conservative: float
    moderate: float
    aggressive: float


class StopLossLevels(StrictBaseModel):
    tight: float
    normal: float
    wide: float


class TargetLevels(StrictBaseModel):
    primary: float
    secondary: float
    final: float


class TradingStrategy(StrictBaseModel):
    """Recommended strategy with entry, stop-loss and target levels."""

    recommendation: Recommendation
    confidence: float = Field(..., ge=0, le=100, description="Rounded to 2 decimals")
    entries: EntryLevels
    stop_loss: StopLossLevels
    targets: TargetLevels
    timeframe: HoldingTimeframe
    rationale: list[str] = Field(default_factory=list)
    is_default: bool = Field(
        False, description="True when generation failed and placeholder levels are returned"
    )

    @property
    def label(self) -> str:
        """Recommendation with its confidence, e.g. 'Buy (72.5%)'."""
        return f"{self.recommendation.value} ({self.confidence:g}%)"
