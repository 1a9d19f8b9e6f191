"""Multi-horizon price target ranges.

Each horizon widens a volatility range and a support/resistance range around
the current price, shifts both by SMA momentum and bounds them by loosened
support/resistance levels. Longer horizons are wider, more momentum-sensitive
and less confident.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from crypto_sensei.core.constants import ConfidenceThresholds, IndicatorPeriods
from crypto_sensei.indicators.technical import annualized_volatility, simple_moving_average
from crypto_sensei.schemas.predictions import PriceTarget, PriceTargets


@dataclass(frozen=True)
class HorizonProfile:
    """Scaling factors for one prediction horizon."""

    volatility_multiplier: float
    level_multiplier: float  # scales |price - support| and |resistance - price|
    momentum_multiplier: float
    support_ratio: float  # low never undercuts support * ratio
    resistance_ratio: float  # high never exceeds resistance * ratio
    confidence_decay: float


SHORT_TERM_PROFILE = HorizonProfile(0.1, 0.2, 1.0, 1.0, 1.0, 1.0)
MID_TERM_PROFILE = HorizonProfile(0.2, 0.4, 2.0, 0.95, 1.05, ConfidenceThresholds.MID_TERM_DECAY)
LONG_TERM_PROFILE = HorizonProfile(0.3, 0.6, 3.0, 0.9, 1.1, ConfidenceThresholds.LONG_TERM_DECAY)

MOMENTUM_BIAS_SCALE = 0.1
BULLISH_CONDITION = 1.1
BEARISH_CONDITION = 0.9


def sma_momentum(prices: list[float] | NDArray[np.float64]) -> float:
    """(SMA20 - SMA50) / SMA50, or 0 when SMA50 is 0."""
    sma20 = simple_moving_average(prices, IndicatorPeriods.MA_SHORT)
    sma50 = simple_moving_average(prices, IndicatorPeriods.MA_MEDIUM)
    if sma50 == 0:
        return 0.0
    return (sma20 - sma50) / sma50


def _market_condition(momentum: float) -> float:
    if momentum > 0:
        return BULLISH_CONDITION
    if momentum < 0:
        return BEARISH_CONDITION
    return 1.0


def price_target(
    price: float,
    volatility: float,
    support: float,
    resistance: float,
    momentum: float,
    base_confidence: float,
    profile: HorizonProfile,
) -> PriceTarget:
    """Compute the range and confidence for a single horizon.

    Args:
        price: Current price
        volatility: Annualized volatility as a fraction (0.45 for 45%)
        support: Support level
        resistance: Resistance level
        momentum: SMA momentum ratio
        base_confidence: Short-term analysis confidence
        profile: Horizon scaling factors

    Returns:
        PriceTarget with low <= price <= high
    """
    volatility_range = price * volatility * profile.volatility_multiplier
    support_range = abs(price - support) * profile.level_multiplier
    resistance_range = abs(resistance - price) * profile.level_multiplier
    bias = momentum * price * MOMENTUM_BIAS_SCALE * profile.momentum_multiplier

    low = max(
        support * profile.support_ratio,
        price - volatility_range - support_range + bias,
    )
    high = min(
        resistance * profile.resistance_ratio,
        price + volatility_range + resistance_range + bias,
    )

    confidence = base_confidence * _market_condition(momentum) * profile.confidence_decay
    confidence = min(
        ConfidenceThresholds.MAX_CONFIDENCE, max(ConfidenceThresholds.MIN_CONFIDENCE, confidence)
    )

    return PriceTarget(low=min(low, price), high=max(high, price), confidence=confidence)


def compute_price_targets(
    current_price: float,
    prices: list[float] | NDArray[np.float64],
    support: float,
    resistance: float,
    base_confidence: float,
) -> PriceTargets:
    """Compute short, mid and long horizon price targets.

    Volatility is measured over the whole price window; momentum is the
    SMA20/SMA50 spread.

    Args:
        current_price: Current price
        prices: Price window, oldest first
        support: Support level
        resistance: Resistance level
        base_confidence: Short-term analysis confidence (30-95)

    Returns:
        PriceTargets for 24H, 7D and 30D
    """
    volatility = annualized_volatility(prices, period=None) / 100
    momentum = sma_momentum(prices)

    def target(profile: HorizonProfile) -> PriceTarget:
        return price_target(
            current_price, volatility, support, resistance, momentum, base_confidence, profile
        )

    return PriceTargets(
        short_term=target(SHORT_TERM_PROFILE),
        mid_term=target(MID_TERM_PROFILE),
        long_term=target(LONG_TERM_PROFILE),
    )
