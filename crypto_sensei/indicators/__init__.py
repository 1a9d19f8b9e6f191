"""Technical indicators package for Crypto Sensei.

Pure NumPy implementations of the indicators behind every analysis.

Available indicators:
- Simple Moving Average (SMA)
- Exponential Moving Average (EMA)
- Relative Strength Index (RSI)
- MACD
- Stochastic RSI
- On-Balance Volume (OBV) trend
- Volume ratio
- Annualized volatility
- Support/Resistance
- Market phase classification
"""

from .technical import (
    MACDResult,
    SupportResistance,
    annualized_volatility,
    exponential_moving_average,
    log_returns,
    macd,
    obv_trend,
    on_balance_volume,
    relative_strength_index,
    simple_moving_average,
    stochastic_rsi,
    support_resistance,
    volume_ratio,
)
from .interpretation import interpret_macd, interpret_rsi, interpret_stoch_rsi
from .market_phase import classify_market_phase, determine_market_phase
from .series import PreparedSeries, prepare_series

__all__ = [
    "MACDResult",
    "SupportResistance",
    "annualized_volatility",
    "exponential_moving_average",
    "log_returns",
    "macd",
    "obv_trend",
    "on_balance_volume",
    "relative_strength_index",
    "simple_moving_average",
    "stochastic_rsi",
    "support_resistance",
    "volume_ratio",
    "interpret_macd",
    "interpret_rsi",
    "interpret_stoch_rsi",
    "classify_market_phase",
    "determine_market_phase",
    "PreparedSeries",
    "prepare_series",
]
