"""Market phase classification from price vs moving average relationships."""
import numpy as np
from numpy.typing import NDArray

from crypto_sensei.core.constants import ConfidenceThresholds, MarketPhaseThresholds
from crypto_sensei.indicators.technical import support_resistance
from crypto_sensei.schemas.indicators import KeyLevels, MarketPhase, MarketPhaseLabel


def determine_market_phase(price: float, ma50: float, ma200: float) -> MarketPhaseLabel:
    """Classify the market phase from three price/MA comparisons.

    | price>MA50 | price>MA200 | MA50>MA200 | Phase        |
    |------------|-------------|------------|--------------|
    | T          | T           | T          | Bull Market  |
    | F          | F           | F          | Bear Market  |
    | F          | T           | any        | Correction   |
    | otherwise  |             |            | Accumulation |

    The table is total: the five combinations not listed above all map to
    Accumulation.
    """
    above_ma50 = price > ma50
    above_ma200 = price > ma200
    ma50_above_ma200 = ma50 > ma200

    if above_ma50 and above_ma200 and ma50_above_ma200:
        return MarketPhaseLabel.BULL_MARKET
    elif not above_ma50 and not above_ma200 and not ma50_above_ma200:
        return MarketPhaseLabel.BEAR_MARKET
    elif above_ma200 and not above_ma50:
        return MarketPhaseLabel.CORRECTION
    else:
        return MarketPhaseLabel.ACCUMULATION


def phase_strength(price: float, ma50: float, ma200: float) -> float:
    """Strength of the phase reading in [0, 1].

    Blends how unanimous the three comparisons are (1 when all agree,
    1/3 otherwise) with how far price sits from MA200 (saturating at 20%).
    """
    votes = sum([price > ma50, price > ma200, ma50 > ma200])
    alignment = 1.0 if votes in (0, 3) else 1.0 / 3.0

    if ma200 > 0:
        distance = min(1.0, abs(price - ma200) / ma200 * MarketPhaseThresholds.DISTANCE_SCALE)
    else:
        distance = 0.0

    return (
        MarketPhaseThresholds.ALIGNMENT_WEIGHT * alignment
        + MarketPhaseThresholds.DISTANCE_WEIGHT * distance
    )


def key_levels(prices: list[float] | NDArray[np.float64], price: float) -> KeyLevels:
    """Derive pivot and extended levels around the quantile support/resistance."""
    levels = support_resistance(prices)
    support = levels.support
    resistance = levels.resistance
    pivot = (support + resistance + price) / 3
    spread = resistance - support

    return KeyLevels(
        strong_support=min(support, pivot - spread),
        support=support,
        pivot=pivot,
        resistance=resistance,
        strong_resistance=max(resistance, pivot + spread),
    )


def classify_market_phase(
    prices: list[float] | NDArray[np.float64],
    ma50: float,
    ma200: float,
    current_price: float | None = None,
) -> MarketPhase:
    """Classify the market phase with strength, confidence and key levels.

    Args:
        prices: Price window, oldest first
        ma50: 50-period simple moving average
        ma200: 200-period simple moving average
        current_price: Price to classify; defaults to the last price

    Returns:
        MarketPhase with confidence = clamp(50 + strength * 45, 30, 95)

    Raises:
        ValueError: If prices is empty
    """
    prices_array = np.asarray(prices, dtype=float)
    if len(prices_array) == 0:
        raise ValueError("Prices array cannot be empty")

    price = float(prices_array[-1]) if current_price is None else float(current_price)

    strength = phase_strength(price, ma50, ma200)
    confidence = MarketPhaseThresholds.BASE_CONFIDENCE + strength * MarketPhaseThresholds.CONFIDENCE_SPAN
    confidence = min(
        ConfidenceThresholds.MAX_CONFIDENCE, max(ConfidenceThresholds.MIN_CONFIDENCE, confidence)
    )

    return MarketPhase(
        phase=determine_market_phase(price, ma50, ma200),
        strength=strength,
        confidence=confidence,
        key_levels=key_levels(prices_array, price),
    )
