"""Schemas for indicator snapshots, market phase and technical signals."""

from enum import Enum

from pydantic import Field

from crypto_sensei.schemas.base import StrictBaseModel


class MarketPhaseLabel(str, Enum):
    """Market phase derived from price vs moving average relationships."""
    BULL_MARKET = "Bull Market"
    BEAR_MARKET = "Bear Market"
    CORRECTION = "Correction"
    ACCUMULATION = "Accumulation"


class TrendDirection(str, Enum):
    """Trend direction classification."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class OBVTrend(str, Enum):
    """On-Balance-Volume trend label."""
    BULLISH = "Bullish"
    BEARISH = "Bearish"


class MACDSnapshot(StrictBaseModel):
    """Latest MACD values with their textual interpretation."""

    value: float = Field(..., description="Latest MACD line value (EMA12 - EMA26)")
    signal: float = Field(..., description="Latest signal line value (EMA9 of MACD line)")
    histogram: float = Field(..., description="MACD value minus signal value")
    interpretation: str = Field("", description="Momentum reading, e.g. 'Bullish momentum'")


class TechnicalIndicators(StrictBaseModel):
    """Indicator snapshot for one analysis invocation."""

    current_price: float
    price_change_24h: float = Field(..., description="24h change in percent")
    rsi: float = Field(..., ge=0, le=100, description="RSI(14), 0-100")
    macd: MACDSnapshot
    ma20: float
    ma50: float
    ma200: float
    volume_change: float = Field(..., description="Latest volume / 20-period average volume")
    market_phase: MarketPhaseLabel
    volatility: float = Field(..., description="Annualized volatility in percent")
    support: float
    resistance: float
    stoch_rsi: float = Field(50.0, ge=0, le=100, description="Stochastic RSI, 0-100")
    obv_trend: OBVTrend = OBVTrend.BEARISH
    volatility_short: float | None = Field(
        None, description="Annualized volatility of the 10 most recent returns, in percent"
    )


class KeyLevels(StrictBaseModel):
    """Key price levels around the current price."""

    strong_support: float
    support: float
    pivot: float
    resistance: float
    strong_resistance: float


class MarketPhase(StrictBaseModel):
    """Market phase classification with strength, confidence and key levels."""

    phase: MarketPhaseLabel
    strength: float = Field(..., ge=0, le=1)
    confidence: float = Field(..., ge=0, le=100)
    key_levels: KeyLevels


class TrendSignal(StrictBaseModel):
    """Trend reading from moving average alignment."""

    primary: TrendDirection
    secondary: TrendDirection
    strength: float = Field(..., ge=0, le=1)


class IndicatorReading(StrictBaseModel):
    """Value of one momentum indicator with its interpretation."""

    value: float
    signal: str


class MomentumSignals(StrictBaseModel):
    """Momentum oscillator readings."""

    rsi: IndicatorReading
    macd: IndicatorReading
    stoch_rsi: IndicatorReading


class VolatilitySignal(StrictBaseModel):
    """Volatility level, direction and risk band."""

    current: float
    trend: str = Field(..., description="'expanding' or 'contracting'")
    risk: str = Field(..., description="'low', 'medium' or 'high'")


class VolumeSignal(StrictBaseModel):
    """Volume ratio with OBV trend and significance band."""

    change: float
    trend: OBVTrend
    significance: str = Field(..., description="'weak', 'moderate' or 'strong'")


class TechnicalSignals(StrictBaseModel):
    """Strategy-facing view of the indicator snapshot."""

    trend: TrendSignal
    momentum: MomentumSignals
    volatility: VolatilitySignal
    volume: VolumeSignal


class Signal(StrictBaseModel):
    """One display/rationale signal."""

    indicator: str
    value: float | str
    interpretation: str
    strength: float = Field(..., ge=0, le=1)
    importance: str = Field("high", description="'high' or 'medium'")

    @property
    def text(self) -> str:
        """Human-readable signal line."""
        if isinstance(self.value, float):
            return f"{self.indicator} ({self.value:.2f}) {self.interpretation}"
        return f"{self.indicator}: {self.interpretation}"
