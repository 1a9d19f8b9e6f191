"""Application-wide constants and thresholds.

All magic numbers should be defined here with clear documentation about their
purpose and rationale. The thresholds below are fixed design constants chosen
for the advisory output, not statistically derived values.
"""


class IndicatorPeriods:
    """Lookback periods used by the indicator library."""

    RSI = 14
    STOCH_RSI = 14
    """
    Wilder's default 14-period lookback for RSI and the RSI windows
    feeding Stochastic RSI.
    """

    MACD_FAST = 12
    MACD_SLOW = 26
    MACD_SIGNAL = 9
    """
    Classic Appel MACD configuration (12/26 EMA, 9 EMA signal line).
    """

    MA_SHORT = 20
    MA_MEDIUM = 50
    MA_LONG = 200
    """
    Simple moving average windows reported in the indicator snapshot.
    MA200 needs 200 daily points; shorter histories fall back to the
    mean of the available values.
    """

    VOLUME_RATIO = 20
    """
    Window for the average volume the latest volume is compared against.
    """

    VOLATILITY = 20
    VOLATILITY_SHORT = 10
    """
    Log-return windows for annualized volatility. The short window is only
    used to label volatility as expanding or contracting.
    """

    OBV_TREND_WINDOW = 5
    """
    Number of most recent OBV values compared to label the volume trend.
    """

    DAYS_PER_YEAR = 365
    """
    Crypto markets trade every day, so daily volatility annualizes by sqrt(365).
    """

    SUPPORT_QUANTILE = 0.25
    RESISTANCE_QUANTILE = 0.75
    """
    Static quantiles of the sorted price window used as support/resistance.
    """


class RSIThresholds:
    """RSI levels used by interpretation, confidence and strategy rules."""

    OVERBOUGHT = 70
    OVERSOLD = 30
    BULLISH = 60
    BEARISH = 40

    STRATEGY_BULLISH = 55
    STRATEGY_BEARISH = 45
    """
    Momentum confirmation levels for trend-following Buy/Sell rules.
    """

    NEUTRAL = 50.0
    """
    Substituted when RSI is undefined (flat window, no deltas).
    """


class StochRSIThresholds:
    """Stochastic RSI interpretation levels."""

    EXTREME_OVERBOUGHT = 80
    OVERBOUGHT = 60
    OVERSOLD = 40
    EXTREME_OVERSOLD = 20

    NEUTRAL = 50.0
    """
    Returned when the rolling RSI range is zero or not finite.
    """


class MACDThresholds:
    """MACD interpretation constants."""

    MIN_STRENGTH_THRESHOLD = 0.01
    STRENGTH_RATIO = 0.1
    """
    A histogram beyond max(0.01, |MACD| * 0.1) reads as strong momentum.
    """

    REVERSAL_GAP = 0.1
    """
    |MACD - signal| below this absolute gap flags a potential reversal.
    """


class ConfidenceThresholds:
    """Weights and bounds for the analysis confidence score."""

    MIN_CONFIDENCE = 30.0
    MAX_CONFIDENCE = 95.0
    """
    Confidence never reads as fully certain or fully worthless.
    """

    RSI_WEIGHT = 0.25
    MACD_WEIGHT = 0.25
    VOLUME_WEIGHT = 0.20
    SENTIMENT_WEIGHT = 0.20
    """
    Additive sub-score weights. Volatility is applied as a multiplier, not summed.
    """

    RSI_EXTREME_SCORE = 90
    RSI_MODERATE_SCORE = 75
    RSI_NEUTRAL_SCORE = 50

    VOLUME_STEPS = ((2.0, 90), (1.5, 80), (1.0, 70), (0.7, 50))
    VOLUME_FLOOR_SCORE = 30
    """
    (ratio threshold, score) pairs checked in order; below all steps scores 30.
    """

    MIN_VOLATILITY_FACTOR = 0.5

    NEUTRAL_SENTIMENT_SCORE = 50.0

    MID_TERM_DECAY = 0.9
    LONG_TERM_DECAY = 0.8

    PREDICTION_BASE = 85.0
    PREDICTION_VOLATILITY_DIVISOR = 2
    """
    Narrative prediction confidence: 85 minus half the annualized volatility.
    """


class MarketPhaseThresholds:
    """Constants for market phase strength and confidence."""

    ALIGNMENT_WEIGHT = 0.6
    DISTANCE_WEIGHT = 0.4
    DISTANCE_SCALE = 5.0
    """
    A 20% distance between price and MA200 saturates the distance component.
    """

    BASE_CONFIDENCE = 50.0
    CONFIDENCE_SPAN = 45.0


class StrategyThresholds:
    """Constants for the trading strategy generator."""

    TREND_WEIGHT = 0.4
    MARKET_WEIGHT = 0.3
    MOMENTUM_WEIGHT = 0.3

    MOMENTUM_BULLISH_SCORE = 60
    MOMENTUM_BEARISH_SCORE = 40
    MACD_SIGN_ADJUSTMENT = 10

    EXTREME_RSI_CONFIDENCE_CAP = 90
    TREND_RULE_CONFIDENCE = 65
    PHASE_RULE_CONFIDENCE = 60
    MACD_AGREEMENT_BONUS = 8

    STRONG_STRENGTH = 0.7
    """
    Market or trend strength above this reads as a strong move.
    """

    HIGH_VOLATILITY = 50
    LOW_VOLATILITY = 20

    DEFAULT_STRENGTH = 0.5
    """
    Used for level distances when the market phase reports zero strength.
    """

    MAX_CONSERVATIVE_DISCOUNT = 0.05
    MAX_AGGRESSIVE_PREMIUM = 0.03
    FALLBACK_SUPPORT_RATIO = 0.95
    FALLBACK_RESISTANCE_RATIO = 1.05
    FALLBACK_AGGRESSIVE_RATIO = 1.02

    STOP_LOSS_MULTIPLIERS = {"tight": 2, "normal": 3, "wide": 5}
    TARGET_MULTIPLIERS = {"primary": 3, "secondary": 5, "final": 8}
    BULL_TARGET_MULTIPLIER = 1.5
    BEAR_TARGET_MULTIPLIER = 0.5


class StrategyDefaults:
    """Fixed fallback strategy returned when generation fails unexpectedly."""

    REFERENCE_PRICE = 76000.0
    """
    Placeholder reference level. The default strategy is deliberately not
    derived from the current price; its is_default flag marks it as a placeholder.
    """

    CONFIDENCE = 50.0
    RATIONALE = "Using default strategy due to insufficient data"


class VolatilityRiskThresholds:
    """Annualized volatility (%) bands for the risk label."""

    HIGH = 80
    MEDIUM = 40


class VolumeSignificanceThresholds:
    """Volume ratio bands for the significance label."""

    STRONG = 1.5
    MODERATE = 1.0


class PositionLevels:
    """Range-based levels for the position summary."""

    ENTRY_RETRACEMENT = 0.382
    """
    Entry sits 38.2% of the way from support to resistance.
    """

    STOP_SUPPORT_RATIO = 0.95
