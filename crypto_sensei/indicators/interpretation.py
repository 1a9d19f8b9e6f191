"""Text interpretations of indicator values.

The wording is part of the output contract: strategy rules search these
strings for "bullish"/"bearish", and the same strings appear in signals and
rationale lines.
"""
from crypto_sensei.core.constants import MACDThresholds, RSIThresholds, StochRSIThresholds


def interpret_rsi(rsi: float) -> str:
    """Interpret an RSI value.

    | RSI       | Interpretation                          |
    |-----------|-----------------------------------------|
    | >= 70     | Overbought - Consider taking profits    |
    | <= 30     | Oversold - Potential buying opportunity |
    | >= 60     | Bullish momentum building               |
    | <= 40     | Bearish pressure present                |
    | otherwise | Neutral momentum                        |
    """
    if rsi >= RSIThresholds.OVERBOUGHT:
        return "Overbought - Consider taking profits"
    elif rsi <= RSIThresholds.OVERSOLD:
        return "Oversold - Potential buying opportunity"
    elif rsi >= RSIThresholds.BULLISH:
        return "Bullish momentum building"
    elif rsi <= RSIThresholds.BEARISH:
        return "Bearish pressure present"
    else:
        return "Neutral momentum"


def interpret_stoch_rsi(stoch_rsi: float) -> str:
    """Interpret a Stochastic RSI value (0-100)."""
    if stoch_rsi > StochRSIThresholds.EXTREME_OVERBOUGHT:
        return "Extremely overbought"
    elif stoch_rsi > StochRSIThresholds.OVERBOUGHT:
        return "Overbought"
    elif stoch_rsi < StochRSIThresholds.EXTREME_OVERSOLD:
        return "Extremely oversold"
    elif stoch_rsi < StochRSIThresholds.OVERSOLD:
        return "Oversold"
    else:
        return "Neutral"


def interpret_macd(value: float, signal: float, histogram: float) -> str:
    """Interpret MACD line, signal line and histogram.

    Momentum is strong when the histogram exceeds max(0.01, |MACD| * 0.1) in
    its direction. A same-sign MACD and signal line appends the trend
    direction, and a gap below 0.1 between them flags a potential reversal.

    Example:
        >>> interpret_macd(2.0, 1.0, 1.0)
        'Strong bullish momentum, upward trend'
    """
    threshold = max(MACDThresholds.MIN_STRENGTH_THRESHOLD, abs(value) * MACDThresholds.STRENGTH_RATIO)

    if histogram > 0:
        text = "Strong bullish momentum" if histogram > threshold else "Bullish momentum"
    else:
        text = "Strong bearish momentum" if histogram < -threshold else "Bearish momentum"

    if value > 0 and signal > 0:
        text += ", upward trend"
    elif value < 0 and signal < 0:
        text += ", downward trend"

    if abs(value - signal) < MACDThresholds.REVERSAL_GAP:
        text += ", potential trend reversal"

    return text
