"""Analysis confidence scoring.

Combines RSI, MACD, volume and sentiment sub-scores into a single 0-100
confidence value. Volatility dampens the weighted sum as a multiplier.
"""

from crypto_sensei.core.constants import ConfidenceThresholds, RSIThresholds
from crypto_sensei.schemas.indicators import MACDSnapshot, TechnicalIndicators
from crypto_sensei.schemas.market import NewsSentiment
from crypto_sensei.schemas.predictions import TimeframeConfidence


def _clamp(value: float) -> float:
    return min(
        ConfidenceThresholds.MAX_CONFIDENCE, max(ConfidenceThresholds.MIN_CONFIDENCE, value)
    )


def rsi_confidence(rsi: float) -> float:
    """90 at the extremes, 75 in the moderate bands, else 50."""
    if rsi > RSIThresholds.OVERBOUGHT or rsi < RSIThresholds.OVERSOLD:
        return ConfidenceThresholds.RSI_EXTREME_SCORE
    if rsi > RSIThresholds.BULLISH or rsi < RSIThresholds.BEARISH:
        return ConfidenceThresholds.RSI_MODERATE_SCORE
    return ConfidenceThresholds.RSI_NEUTRAL_SCORE


def macd_confidence(macd: MACDSnapshot) -> float:
    """Histogram size relative to the signal line, capped at 100."""
    return min(100.0, abs(macd.histogram) / max(0.01, abs(macd.signal)) * 100)


def volume_confidence(ratio: float) -> float:
    for threshold, score in ConfidenceThresholds.VOLUME_STEPS:
        if ratio > threshold:
            return score
    return ConfidenceThresholds.VOLUME_FLOOR_SCORE


def sentiment_confidence(sentiment: NewsSentiment | None) -> float:
    if sentiment is None:
        return ConfidenceThresholds.NEUTRAL_SENTIMENT_SCORE
    return (sentiment.news_score + sentiment.social_score) / 2


def volatility_factor(volatility: float) -> float:
    return max(ConfidenceThresholds.MIN_VOLATILITY_FACTOR, 1 - volatility / 100)


def score_confidence(
    indicators: TechnicalIndicators, sentiment: NewsSentiment | None = None
) -> float:
    """Score the confidence of an analysis.

    Weighted sum (RSI 0.25, MACD 0.25, volume 0.20, sentiment 0.20) times
    the volatility factor max(0.5, 1 - volatility / 100), clamped to [30, 95].

    Args:
        indicators: Indicator snapshot
        sentiment: News sentiment; neutral 50/50 when absent

    Returns:
        Confidence in [30, 95]
    """
    weighted = (
        rsi_confidence(indicators.rsi) * ConfidenceThresholds.RSI_WEIGHT
        + macd_confidence(indicators.macd) * ConfidenceThresholds.MACD_WEIGHT
        + volume_confidence(indicators.volume_change) * ConfidenceThresholds.VOLUME_WEIGHT
        + sentiment_confidence(sentiment) * ConfidenceThresholds.SENTIMENT_WEIGHT
    )
    return _clamp(weighted * volatility_factor(indicators.volatility))


def timeframe_confidence(base: float) -> TimeframeConfidence:
    """Decay a short-term confidence across the mid and long horizons."""
    return TimeframeConfidence(
        short_term=base,
        mid_term=max(ConfidenceThresholds.MIN_CONFIDENCE, base * ConfidenceThresholds.MID_TERM_DECAY),
        long_term=max(
            ConfidenceThresholds.MIN_CONFIDENCE, base * ConfidenceThresholds.LONG_TERM_DECAY
        ),
    )


def prediction_confidence(volatility: float) -> float:
    """Confidence attached to the narrative predictions.

    85 minus half the annualized volatility, clamped to [30, 95] and rounded
    to 2 decimals.
    """
    raw = (
        ConfidenceThresholds.PREDICTION_BASE
        - volatility / ConfidenceThresholds.PREDICTION_VOLATILITY_DIVISOR
    )
    return round(_clamp(raw), 2)
