"""Indicator snapshot and signal assembly.

Runs the indicator library over a prepared series and derives the views
consumed downstream: the TechnicalIndicators snapshot, the strategy-facing
TechnicalSignals, the ordered display signal list, the deterministic market
summary, the market structure block and the position summary.
"""

import logging
import math

from crypto_sensei.core.constants import (
    IndicatorPeriods,
    PositionLevels,
    RSIThresholds,
    VolatilityRiskThresholds,
    VolumeSignificanceThresholds,
)
from crypto_sensei.indicators.interpretation import (
    interpret_macd,
    interpret_rsi,
    interpret_stoch_rsi,
)
from crypto_sensei.indicators.market_phase import determine_market_phase
from crypto_sensei.indicators.series import PreparedSeries, prepare_series
from crypto_sensei.indicators.technical import (
    annualized_volatility,
    macd,
    obv_trend,
    relative_strength_index,
    simple_moving_average,
    stochastic_rsi,
    support_resistance,
    volume_ratio,
)
from crypto_sensei.schemas.analysis import MarketStructure, PositionBias, PositionSummary
from crypto_sensei.schemas.indicators import (
    IndicatorReading,
    MACDSnapshot,
    MarketPhase,
    MarketPhaseLabel,
    MomentumSignals,
    Signal,
    TechnicalIndicators,
    TechnicalSignals,
    TrendDirection,
    TrendSignal,
    VolatilitySignal,
    VolumeSignal,
)
from crypto_sensei.schemas.market import HistoricalSeries

logger = logging.getLogger(__name__)


def compute_indicators(series: HistoricalSeries | PreparedSeries) -> TechnicalIndicators:
    """Compute the indicator snapshot for one analysis.

    Args:
        series: Raw history (validated here) or an already prepared series

    Returns:
        TechnicalIndicators snapshot

    Raises:
        DataValidationError: If a raw series fails validation
    """
    prepared = series if isinstance(series, PreparedSeries) else prepare_series(series)
    prices = prepared.prices
    price = prepared.current_price

    rsi = relative_strength_index(prices, IndicatorPeriods.RSI)
    if not math.isfinite(rsi):
        logger.warning(
            f"RSI undefined for {len(prices)} prices without movement, using {RSIThresholds.NEUTRAL}"
        )
        rsi = RSIThresholds.NEUTRAL

    macd_result = macd(prices)
    ma20 = simple_moving_average(prices, IndicatorPeriods.MA_SHORT)
    ma50 = simple_moving_average(prices, IndicatorPeriods.MA_MEDIUM)
    ma200 = simple_moving_average(prices, IndicatorPeriods.MA_LONG)
    levels = support_resistance(prices)

    return TechnicalIndicators(
        current_price=price,
        price_change_24h=prepared.price_change_24h,
        rsi=rsi,
        macd=MACDSnapshot(
            value=macd_result.value,
            signal=macd_result.signal,
            histogram=macd_result.histogram,
            interpretation=interpret_macd(
                macd_result.value, macd_result.signal, macd_result.histogram
            ),
        ),
        ma20=ma20,
        ma50=ma50,
        ma200=ma200,
        volume_change=volume_ratio(prepared.volumes, IndicatorPeriods.VOLUME_RATIO),
        market_phase=determine_market_phase(price, ma50, ma200),
        volatility=annualized_volatility(prices, IndicatorPeriods.VOLATILITY),
        support=levels.support,
        resistance=levels.resistance,
        stoch_rsi=stochastic_rsi(prices, IndicatorPeriods.STOCH_RSI),
        obv_trend=obv_trend(prices, prepared.volumes, IndicatorPeriods.OBV_TREND_WINDOW),
        volatility_short=annualized_volatility(prices, IndicatorPeriods.VOLATILITY_SHORT),
    )


def _primary_trend(price: float, ma20: float, ma50: float) -> TrendDirection:
    if price > ma20 > ma50:
        return TrendDirection.BULLISH
    if price < ma20 < ma50:
        return TrendDirection.BEARISH
    return TrendDirection.NEUTRAL


def _secondary_trend(ma50: float, ma200: float) -> TrendDirection:
    if ma50 > ma200:
        return TrendDirection.BULLISH
    if ma50 < ma200:
        return TrendDirection.BEARISH
    return TrendDirection.NEUTRAL


def _trend_strength(price: float, ma50: float) -> float:
    if ma50 <= 0:
        return 0.0
    return min(1.0, 2 * abs(price - ma50) / ma50)


def _volatility_risk(volatility: float) -> str:
    if volatility > VolatilityRiskThresholds.HIGH:
        return "high"
    if volatility > VolatilityRiskThresholds.MEDIUM:
        return "medium"
    return "low"


def _volume_significance(ratio: float) -> str:
    if ratio > VolumeSignificanceThresholds.STRONG:
        return "strong"
    if ratio > VolumeSignificanceThresholds.MODERATE:
        return "moderate"
    return "weak"


def build_technical_signals(indicators: TechnicalIndicators) -> TechnicalSignals:
    """Build the strategy generator's view of an indicator snapshot.

    Trend comes from moving average alignment, volatility is labelled
    expanding when the 10-return volatility exceeds the 20-return one.
    """
    price = indicators.current_price
    short_volatility = indicators.volatility_short
    expanding = short_volatility is not None and short_volatility > indicators.volatility

    return TechnicalSignals(
        trend=TrendSignal(
            primary=_primary_trend(price, indicators.ma20, indicators.ma50),
            secondary=_secondary_trend(indicators.ma50, indicators.ma200),
            strength=_trend_strength(price, indicators.ma50),
        ),
        momentum=MomentumSignals(
            rsi=IndicatorReading(value=indicators.rsi, signal=interpret_rsi(indicators.rsi)),
            macd=IndicatorReading(
                value=indicators.macd.value, signal=indicators.macd.interpretation
            ),
            stoch_rsi=IndicatorReading(
                value=indicators.stoch_rsi, signal=interpret_stoch_rsi(indicators.stoch_rsi)
            ),
        ),
        volatility=VolatilitySignal(
            current=indicators.volatility,
            trend="expanding" if expanding else "contracting",
            risk=_volatility_risk(indicators.volatility),
        ),
        volume=VolumeSignal(
            change=indicators.volume_change,
            trend=indicators.obv_trend,
            significance=_volume_significance(indicators.volume_change),
        ),
    )


def generate_signals(indicators: TechnicalIndicators, market_phase: MarketPhase) -> list[Signal]:
    """Ordered display signals: RSI, StochRSI, MACD, OBV, Market Phase."""
    macd_snapshot = indicators.macd
    macd_strength = min(
        1.0, abs(macd_snapshot.histogram) / max(0.01, abs(macd_snapshot.signal))
    )

    return [
        Signal(
            indicator="RSI",
            value=indicators.rsi,
            interpretation=interpret_rsi(indicators.rsi),
            strength=min(1.0, abs(indicators.rsi - 50) / 50),
        ),
        Signal(
            indicator="StochRSI",
            value=indicators.stoch_rsi,
            interpretation=interpret_stoch_rsi(indicators.stoch_rsi),
            strength=min(1.0, abs(indicators.stoch_rsi - 50) / 50),
        ),
        Signal(
            indicator="MACD",
            value=macd_snapshot.value,
            interpretation=macd_snapshot.interpretation,
            strength=macd_strength,
        ),
        Signal(
            indicator="OBV Trend",
            value=indicators.obv_trend.value,
            interpretation=indicators.obv_trend.value,
            strength=min(1.0, indicators.volume_change / 2),
            importance="medium",
        ),
        Signal(
            indicator="Market Phase",
            value=market_phase.phase.value,
            interpretation=market_phase.phase.value,
            strength=market_phase.strength,
        ),
    ]


def build_market_summary(symbol: str, indicators: TechnicalIndicators) -> str:
    """Deterministic one-paragraph summary used when no narrative is available.

    Example:
        "Bitcoin is currently in a Bull Market, trading at $64000.00. RSI at
        62.10 Bullish momentum building, with Bullish momentum. Volume trend
        is Bullish with 1.20x average volume."
    """
    name = symbol[:1].upper() + symbol[1:]
    return (
        f"{name} is currently in a {indicators.market_phase.value}, "
        f"trading at ${indicators.current_price:.2f}. "
        f"RSI at {indicators.rsi:.2f} {interpret_rsi(indicators.rsi)}, "
        f"with {indicators.macd.interpretation}. "
        f"Volume trend is {indicators.obv_trend.value} "
        f"with {indicators.volume_change:.2f}x average volume."
    )


def build_market_structure(indicators: TechnicalIndicators) -> MarketStructure:
    """Support/resistance context relative to the current price."""
    price = indicators.current_price
    support = indicators.support
    resistance = indicators.resistance

    if price > resistance:
        breakout = "Bullish Breakout Potential"
    elif price < support:
        breakout = "Bearish Breakdown Risk"
    else:
        breakout = "Range Bound"

    return MarketStructure(
        trend=indicators.market_phase.value,
        support=round(support, 2),
        resistance=round(resistance, 2),
        breakout_potential=breakout,
        distance_to_resistance_pct=round((resistance - price) / price * 100, 2),
        distance_to_support_pct=round((price - support) / price * 100, 2),
    )


def build_position_summary(indicators: TechnicalIndicators) -> PositionSummary:
    """Long/short/neutral position with range-based entry, stop and target.

    Bias follows the market phase (Bull Market -> Long, Bear Market -> Short).
    Entry is the 38.2% point of the support/resistance range, the stop sits 5%
    below support and the target is resistance.
    """
    support = indicators.support
    resistance = indicators.resistance

    if indicators.market_phase == MarketPhaseLabel.BULL_MARKET:
        position = PositionBias.LONG
    elif indicators.market_phase == MarketPhaseLabel.BEAR_MARKET:
        position = PositionBias.SHORT
    else:
        position = PositionBias.NEUTRAL

    return PositionSummary(
        position=position,
        entry=round(support + (resistance - support) * PositionLevels.ENTRY_RETRACEMENT, 2),
        stop=round(support * PositionLevels.STOP_SUPPORT_RATIO, 2),
        target=round(resistance, 2),
    )
