"""Type definitions for strategy generation."""

from dataclasses import dataclass

from crypto_sensei.schemas.indicators import MarketPhase, TechnicalSignals


@dataclass(frozen=True)
class StrategySnapshot:
    """Inputs for one strategy generation.

    Attributes:
        current_price: Latest price; None, zero, negative or non-finite is rejected
        market_phase: Phase classification with strength and key levels
        signals: Trend, momentum, volatility and volume readings
    """

    current_price: float | None
    market_phase: MarketPhase
    signals: TechnicalSignals
