"""Trading strategy generator.

Turns a market phase and technical signals into a recommendation with entry,
stop-loss and target levels, a holding timeframe and a rationale.
"""

import logging
import math

from crypto_sensei.core.constants import (
    RSIThresholds,
    StrategyDefaults,
    StrategyThresholds,
)
from crypto_sensei.core.exceptions import InvalidPriceError
from crypto_sensei.indicators.series import validate_current_price
from crypto_sensei.schemas.indicators import (
    KeyLevels,
    MarketPhase,
    MarketPhaseLabel,
    TechnicalSignals,
)
from crypto_sensei.schemas.strategy import (
    EntryLevels,
    HoldingTimeframe,
    Recommendation,
    StopLossLevels,
    TargetLevels,
    TradingStrategy,
)

from .types import StrategySnapshot

logger = logging.getLogger(__name__)


def default_strategy() -> TradingStrategy:
    """Placeholder strategy returned when generation fails.

    Levels sit around a fixed reference price rather than the current price;
    is_default marks them as placeholders.
    """
    reference = StrategyDefaults.REFERENCE_PRICE
    return TradingStrategy(
        recommendation=Recommendation.HOLD,
        confidence=StrategyDefaults.CONFIDENCE,
        entries=EntryLevels(
            conservative=reference * 0.98, moderate=reference, aggressive=reference * 1.02
        ),
        stop_loss=StopLossLevels(
            tight=reference * 0.95, normal=reference * 0.97, wide=reference * 0.93
        ),
        targets=TargetLevels(
            primary=reference * 1.03, secondary=reference * 1.05, final=reference * 1.08
        ),
        timeframe=HoldingTimeframe.MEDIUM_TERM,
        rationale=[StrategyDefaults.RATIONALE],
        is_default=True,
    )


class StrategyGenerator:
    """Generator for trading strategy recommendations.

    The recommendation comes from an ordered rule list where the first match
    wins:
    - RSI > 70 in a bullish trend: Take Profit
    - RSI < 30 in a bearish trend: Buy
    - Bullish trend confirmed by MACD or RSI > 55: Buy
    - Bearish trend confirmed by MACD or RSI < 45: Sell
    - Accumulation phase: Buy
    - Distribution phase: Sell
    - Otherwise: Hold
    """

    def generate(self, snapshot: StrategySnapshot) -> TradingStrategy:
        """Generate a trading strategy.

        Args:
            snapshot: Current price, market phase and technical signals

        Returns:
            TradingStrategy with levels rounded to 2 decimals, or the default
            strategy if generation fails unexpectedly

        Raises:
            InvalidPriceError: If the current price is missing or invalid
        """
        price = validate_current_price(snapshot.current_price)

        try:
            return self._build(price, snapshot.market_phase, snapshot.signals)
        except InvalidPriceError:
            raise
        except Exception:
            logger.exception("Strategy generation failed, returning default strategy")
            return default_strategy()

    def _build(
        self, price: float, market_phase: MarketPhase, signals: TechnicalSignals
    ) -> TradingStrategy:
        levels = market_phase.key_levels
        recommendation, confidence = self._recommend(signals, market_phase)

        return TradingStrategy(
            recommendation=recommendation,
            confidence=confidence,
            entries=self._entries(price, signals, levels),
            stop_loss=StopLossLevels(
                **{
                    tier: round(price * (1 - self._stop_loss_distance(market_phase, tier)), 2)
                    for tier in StrategyThresholds.STOP_LOSS_MULTIPLIERS
                }
            ),
            targets=TargetLevels(
                **{
                    tier: round(price * (1 + self._target_distance(market_phase, tier)), 2)
                    for tier in StrategyThresholds.TARGET_MULTIPLIERS
                }
            ),
            timeframe=self._timeframe(signals, market_phase),
            rationale=self._rationale(signals, market_phase),
        )

    def _recommend(
        self, signals: TechnicalSignals, market_phase: MarketPhase
    ) -> tuple[Recommendation, float]:
        """Pick a recommendation and its confidence.

        Confidence starts from the weighted strength blend and is raised to
        the floor of the matching rule. A matching MACD direction adds a
        bonus to Buy and Sell.
        """
        rsi = signals.momentum.rsi.value
        macd_signal = signals.momentum.macd.signal.lower()
        trend = signals.trend.primary.value.lower()
        phase = market_phase.phase.value.lower()

        confidence = self._base_confidence(signals, market_phase)
        recommendation = Recommendation.HOLD

        if rsi > RSIThresholds.OVERBOUGHT and "bullish" in trend:
            recommendation = Recommendation.TAKE_PROFIT
            confidence = max(confidence, min(StrategyThresholds.EXTREME_RSI_CONFIDENCE_CAP, rsi))
        elif rsi < RSIThresholds.OVERSOLD and "bearish" in trend:
            recommendation = Recommendation.BUY
            confidence = max(
                confidence, min(StrategyThresholds.EXTREME_RSI_CONFIDENCE_CAP, 100 - rsi)
            )
        elif "bullish" in trend and (
            "bullish" in macd_signal or rsi > RSIThresholds.STRATEGY_BULLISH
        ):
            recommendation = Recommendation.BUY
            confidence = max(confidence, StrategyThresholds.TREND_RULE_CONFIDENCE)
        elif "bearish" in trend and (
            "bearish" in macd_signal or rsi < RSIThresholds.STRATEGY_BEARISH
        ):
            recommendation = Recommendation.SELL
            confidence = max(confidence, StrategyThresholds.TREND_RULE_CONFIDENCE)
        elif "accumulation" in phase:
            recommendation = Recommendation.BUY
            confidence = max(confidence, StrategyThresholds.PHASE_RULE_CONFIDENCE)
        elif "distribution" in phase:
            recommendation = Recommendation.SELL
            confidence = max(confidence, StrategyThresholds.PHASE_RULE_CONFIDENCE)

        if (recommendation == Recommendation.BUY and "bullish" in macd_signal) or (
            recommendation == Recommendation.SELL and "bearish" in macd_signal
        ):
            confidence += StrategyThresholds.MACD_AGREEMENT_BONUS

        return recommendation, min(95.0, round(confidence, 2))

    def _base_confidence(self, signals: TechnicalSignals, market_phase: MarketPhase) -> float:
        """trend*0.4 + market*0.3 + momentum*0.3 on a 0-100 scale, clamped to [30, 95]."""
        trend_strength = signals.trend.strength * 100
        market_strength = market_phase.strength * 100
        momentum_strength = (
            StrategyThresholds.MOMENTUM_BULLISH_SCORE
            if signals.momentum.rsi.value > RSIThresholds.NEUTRAL
            else StrategyThresholds.MOMENTUM_BEARISH_SCORE
        )
        if signals.momentum.macd.value > 0:
            momentum_strength += StrategyThresholds.MACD_SIGN_ADJUSTMENT
        else:
            momentum_strength -= StrategyThresholds.MACD_SIGN_ADJUSTMENT

        blend = (
            trend_strength * StrategyThresholds.TREND_WEIGHT
            + market_strength * StrategyThresholds.MARKET_WEIGHT
            + momentum_strength * StrategyThresholds.MOMENTUM_WEIGHT
        )
        return min(95.0, max(30.0, blend))

    def _entries(self, price: float, signals: TechnicalSignals, levels: KeyLevels) -> EntryLevels:
        volatility = signals.volatility.current / 100
        support = levels.support or price * StrategyThresholds.FALLBACK_SUPPORT_RATIO
        resistance = levels.resistance or price * StrategyThresholds.FALLBACK_RESISTANCE_RATIO

        conservative = max(
            support, price * (1 - min(StrategyThresholds.MAX_CONSERVATIVE_DISCOUNT, volatility))
        )
        aggressive = round(
            min(price * (1 + min(StrategyThresholds.MAX_AGGRESSIVE_PREMIUM, volatility)), resistance),
            2,
        )
        if aggressive == 0 or math.isnan(aggressive):
            aggressive = round(price * StrategyThresholds.FALLBACK_AGGRESSIVE_RATIO, 2)

        return EntryLevels(
            conservative=round(conservative, 2),
            moderate=round(price, 2),
            aggressive=aggressive,
        )

    def _strength(self, market_phase: MarketPhase) -> float:
        return market_phase.strength or StrategyThresholds.DEFAULT_STRENGTH

    def _stop_loss_distance(self, market_phase: MarketPhase, tier: str) -> float:
        return self._strength(market_phase) * StrategyThresholds.STOP_LOSS_MULTIPLIERS[tier] / 100

    def _target_distance(self, market_phase: MarketPhase, tier: str) -> float:
        if market_phase.phase == MarketPhaseLabel.BULL_MARKET:
            trend_multiplier = StrategyThresholds.BULL_TARGET_MULTIPLIER
        elif market_phase.phase == MarketPhaseLabel.BEAR_MARKET:
            trend_multiplier = StrategyThresholds.BEAR_TARGET_MULTIPLIER
        else:
            trend_multiplier = 1.0

        return (
            StrategyThresholds.TARGET_MULTIPLIERS[tier]
            * self._strength(market_phase)
            * trend_multiplier
            / 100
        )

    def _timeframe(self, signals: TechnicalSignals, market_phase: MarketPhase) -> HoldingTimeframe:
        volatility = signals.volatility.current
        phase = market_phase.phase.value.lower()
        strength = self._strength(market_phase)

        if phase == "bull market" and strength > StrategyThresholds.STRONG_STRENGTH:
            if volatility > StrategyThresholds.HIGH_VOLATILITY:
                return HoldingTimeframe.SHORT_TERM
            return HoldingTimeframe.MEDIUM_TERM
        elif phase == "bear market" and strength > StrategyThresholds.STRONG_STRENGTH:
            return HoldingTimeframe.LONG_TERM
        elif phase == "accumulation":
            return HoldingTimeframe.MEDIUM_TERM
        elif phase == "distribution":
            return HoldingTimeframe.SHORT_TERM

        if volatility > StrategyThresholds.HIGH_VOLATILITY:
            return HoldingTimeframe.SHORT_TERM
        if volatility < StrategyThresholds.LOW_VOLATILITY:
            return HoldingTimeframe.LONG_TERM
        return HoldingTimeframe.MEDIUM_TERM

    def _rationale(self, signals: TechnicalSignals, market_phase: MarketPhase) -> list[str]:
        levels = market_phase.key_levels
        rationale = [
            f"Market Phase: {market_phase.phase.value} with {market_phase.strength * 100:.1f}% strength",
            f"RSI: {signals.momentum.rsi.signal}",
            f"MACD: {signals.momentum.macd.signal}",
            f"Support at ${levels.support:.2f}",
            f"Resistance at ${levels.resistance:.2f}",
        ]

        if signals.trend.strength > StrategyThresholds.STRONG_STRENGTH:
            rationale.append(f"Strong {signals.trend.primary.value} trend")

        return rationale


def generate_strategy(snapshot: StrategySnapshot) -> TradingStrategy:
    """Generate a trading strategy with the default generator."""
    return StrategyGenerator().generate(snapshot)
