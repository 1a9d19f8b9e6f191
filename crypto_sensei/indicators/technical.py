"""Technical indicators implementation for Crypto Sensei.

This module provides NumPy-based implementations of the indicators feeding the
analysis pipeline. Every function is pure and returns a best-effort value when
the series is shorter than the indicator's nominal window.

Degenerate cases have explicit fallbacks instead of propagating NaN:
- SMA of an empty series is 0
- Stochastic RSI with a zero or non-finite RSI range is 50
- Volume ratio with a zero average volume is 1.0
RSI is the exception: a window without any price movement has no defined
RSI and returns NaN, which callers must guard.
"""

import math
import warnings
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from crypto_sensei.core.constants import IndicatorPeriods, StochRSIThresholds
from crypto_sensei.schemas.indicators import OBVTrend


@dataclass(frozen=True)
class MACDResult:
    """Latest MACD values plus the full MACD and signal line series."""

    value: float
    signal: float
    histogram: float
    macd_line: NDArray[np.float64]
    signal_line: NDArray[np.float64]


@dataclass(frozen=True)
class SupportResistance:
    """Quantile-derived support and resistance levels."""

    support: float
    resistance: float


def simple_moving_average(
    prices: list[float] | NDArray[np.float64], period: int
) -> float:
    """Calculate the Simple Moving Average (SMA) of the most recent values.

    Formula: SMA = (P1 + P2 + ... + Pn) / n over the last n = min(period, len) values.

    Args:
        prices: Price data as list or numpy array
        period: Number of periods for the average (must be > 0)

    Returns:
        Mean of the last `period` values, or 0.0 for an empty series.

    Raises:
        ValueError: If period <= 0

    Example:
        >>> simple_moving_average([1, 2, 3, 4, 5], 3)
        4.0
    """
    if period <= 0:
        raise ValueError("Period must be greater than 0")

    prices_array = np.asarray(prices, dtype=float)

    if len(prices_array) == 0:
        return 0.0

    return float(np.mean(prices_array[-period:]))


def exponential_moving_average(
    prices: list[float] | NDArray[np.float64], period: int
) -> NDArray[np.float64]:
    """Calculate Exponential Moving Average (EMA).

    The first value seeds the average, then
    EMA[i] = (Price[i] - EMA[i-1]) * multiplier + EMA[i-1]
    where multiplier = 2 / (period + 1).

    Args:
        prices: Price data as list or numpy array
        period: Number of periods for the average (must be > 0)

    Returns:
        Array of EMA values with the same length as the input.

    Raises:
        ValueError: If period <= 0 or prices is empty
    """
    if period <= 0:
        raise ValueError("Period must be greater than 0")

    prices_array = np.asarray(prices, dtype=float)

    if len(prices_array) == 0:
        raise ValueError("Prices array cannot be empty")

    multiplier = 2.0 / (period + 1)
    ema = np.empty(len(prices_array))
    ema[0] = prices_array[0]

    for i in range(1, len(prices_array)):
        ema[i] = (prices_array[i] - ema[i - 1]) * multiplier + ema[i - 1]

    return ema


def relative_strength_index(
    prices: list[float] | NDArray[np.float64], period: int = IndicatorPeriods.RSI
) -> float:
    """Calculate Wilder's smoothed Relative Strength Index (RSI).

    The average gain and loss are seeded from the first `period` price
    changes (sum of ups / period, sum of downs / period). Each later change
    updates them with Wilder smoothing:
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period
    RSI = 100 - 100 / (1 + avg_gain / avg_loss)

    With fewer than period + 1 prices the period shrinks to the number of
    available changes.

    Args:
        prices: Price data as list or numpy array
        period: RSI calculation period (default 14, must be > 0)

    Returns:
        Latest RSI value (0-100). When avg_loss is 0 the relative strength is
        infinite and RSI is 100. NaN when there are fewer than 2 prices or
        the prices never move.

    Raises:
        ValueError: If period <= 0

    Example:
        >>> relative_strength_index([100, 102, 101, 105, 107, 103, 108, 110, 106, 112], 9)
        70.0
    """
    if period <= 0:
        raise ValueError("Period must be greater than 0")

    prices_array = np.asarray(prices, dtype=float)

    if len(prices_array) < 2:
        return math.nan

    delta = np.diff(prices_array)
    gains = np.where(delta > 0, delta, 0.0)
    losses = np.where(delta < 0, -delta, 0.0)

    period = min(period, len(delta))

    avg_gain = float(np.sum(gains[:period])) / period
    avg_loss = float(np.sum(losses[:period])) / period

    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        return 100.0 if avg_gain > 0 else math.nan

    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


def macd(
    prices: list[float] | NDArray[np.float64],
    fast_period: int = IndicatorPeriods.MACD_FAST,
    slow_period: int = IndicatorPeriods.MACD_SLOW,
    signal_period: int = IndicatorPeriods.MACD_SIGNAL,
) -> MACDResult:
    """Calculate Moving Average Convergence Divergence (MACD).

    MACD Line = EMA(fast_period) - EMA(slow_period) over the whole series
    Signal Line = EMA(MACD Line, signal_period) over the whole MACD series
    Histogram = last MACD value - last signal value

    Args:
        prices: Price data as list or numpy array
        fast_period: Fast EMA period (default 12)
        slow_period: Slow EMA period (default 26)
        signal_period: Signal line EMA period (default 9)

    Returns:
        MACDResult with the latest values and both line series

    Raises:
        ValueError: If periods are invalid or prices is empty
    """
    if fast_period <= 0 or slow_period <= 0 or signal_period <= 0:
        raise ValueError("All periods must be greater than 0")
    if fast_period >= slow_period:
        raise ValueError("Fast period must be less than slow period")

    prices_array = np.asarray(prices, dtype=float)

    if len(prices_array) == 0:
        raise ValueError("Prices array cannot be empty")

    macd_line = exponential_moving_average(prices_array, fast_period) - exponential_moving_average(
        prices_array, slow_period
    )
    signal_line = exponential_moving_average(macd_line, signal_period)

    value = float(macd_line[-1])
    signal = float(signal_line[-1])

    return MACDResult(
        value=value,
        signal=signal,
        histogram=value - signal,
        macd_line=macd_line,
        signal_line=signal_line,
    )


def support_resistance(
    prices: list[float] | NDArray[np.float64],
) -> SupportResistance:
    """Estimate support and resistance as static quantiles of the price window.

    Sorts the whole window ascending and picks the values at indices
    floor(n * 0.25) and floor(n * 0.75). This is a quantile estimate, not a
    peak/trough detector.

    Args:
        prices: Price data as list or numpy array

    Returns:
        SupportResistance levels

    Raises:
        ValueError: If prices is empty
    """
    prices_array = np.asarray(prices, dtype=float)
    n = len(prices_array)

    if n == 0:
        raise ValueError("Prices array cannot be empty")

    sorted_prices = np.sort(prices_array)
    support_index = math.floor(n * IndicatorPeriods.SUPPORT_QUANTILE)
    resistance_index = math.floor(n * IndicatorPeriods.RESISTANCE_QUANTILE)

    return SupportResistance(
        support=float(sorted_prices[support_index]),
        resistance=float(sorted_prices[resistance_index]),
    )


def stochastic_rsi(
    prices: list[float] | NDArray[np.float64], period: int = IndicatorPeriods.STOCH_RSI
) -> float:
    """Calculate Stochastic RSI for the latest price.

    Computes RSI for every window of length period + 1, then places the
    latest RSI inside the min-max range of those values:
        StochRSI = (RSI_last - RSI_min) / (RSI_max - RSI_min) * 100

    Args:
        prices: Price data as list or numpy array
        period: RSI period for each rolling window (default 14)

    Returns:
        Stochastic RSI (0-100). 50 when no window fits, the latest RSI is
        undefined, or the RSI range is zero or not finite.
    """
    if period <= 0:
        raise ValueError("Period must be greater than 0")

    prices_array = np.asarray(prices, dtype=float)

    rsi_values = np.array(
        [
            relative_strength_index(prices_array[i - period : i + 1], period)
            for i in range(period, len(prices_array))
        ],
        dtype=float,
    )

    if len(rsi_values) == 0 or not np.isfinite(rsi_values[-1]):
        return StochRSIThresholds.NEUTRAL

    finite_values = rsi_values[np.isfinite(rsi_values)]
    min_rsi = float(np.min(finite_values))
    max_rsi = float(np.max(finite_values))
    rsi_range = max_rsi - min_rsi

    if not math.isfinite(rsi_range) or rsi_range == 0:
        return StochRSIThresholds.NEUTRAL

    return (float(rsi_values[-1]) - min_rsi) / rsi_range * 100


def on_balance_volume(
    prices: list[float] | NDArray[np.float64],
    volumes: list[float] | NDArray[np.float64],
) -> NDArray[np.float64]:
    """Calculate cumulative On-Balance Volume (OBV).

    Adds the volume on an up-tick, subtracts it on a down-tick and holds on
    no change. The first value is 0.

    Args:
        prices: Price data as list or numpy array
        volumes: Volume data aligned with prices

    Returns:
        Array of cumulative OBV values with the same length as prices

    Raises:
        ValueError: If arrays have different lengths
    """
    prices_array = np.asarray(prices, dtype=float)
    volumes_array = np.asarray(volumes, dtype=float)

    if len(prices_array) != len(volumes_array):
        raise ValueError("Prices and volumes arrays must have same length")

    if len(prices_array) == 0:
        return np.zeros(0)

    direction = np.sign(np.diff(prices_array))
    flow = direction * volumes_array[1:]
    return np.concatenate([[0.0], np.cumsum(flow)])


def obv_trend(
    prices: list[float] | NDArray[np.float64],
    volumes: list[float] | NDArray[np.float64],
    window: int = IndicatorPeriods.OBV_TREND_WINDOW,
) -> OBVTrend:
    """Label the On-Balance Volume trend.

    Bullish if the last of the most recent `window` OBV values exceeds the
    first of that window, else Bearish.
    """
    obv = on_balance_volume(prices, volumes)
    recent = obv[-window:]

    if len(recent) > 0 and recent[-1] > recent[0]:
        return OBVTrend.BULLISH
    return OBVTrend.BEARISH


def volume_ratio(
    volumes: list[float] | NDArray[np.float64], period: int = IndicatorPeriods.VOLUME_RATIO
) -> float:
    """Calculate the latest volume relative to the recent average volume.

    Args:
        volumes: Volume data as list or numpy array
        period: Averaging window (default 20); shorter series use all values

    Returns:
        Latest volume / mean of the last `period` volumes. 1.0 when the
        series is empty or the average is zero.
    """
    if period <= 0:
        raise ValueError("Period must be greater than 0")

    volumes_array = np.asarray(volumes, dtype=float)

    if len(volumes_array) == 0:
        return 1.0

    average = float(np.mean(volumes_array[-period:]))
    if average == 0:
        return 1.0

    return float(volumes_array[-1]) / average


def log_returns(prices: list[float] | NDArray[np.float64]) -> NDArray[np.float64]:
    """Calculate log returns ln(p[i] / p[i-1]).

    Returns:
        Array one element shorter than prices (empty for fewer than 2 prices)
    """
    prices_array = np.asarray(prices, dtype=float)

    if len(prices_array) < 2:
        return np.zeros(0)

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        return np.log(prices_array[1:] / prices_array[:-1])


def annualized_volatility(
    prices: list[float] | NDArray[np.float64],
    period: int | None = IndicatorPeriods.VOLATILITY,
) -> float:
    """Calculate annualized volatility from daily log returns.

    Formula: stddev(ln(p[i] / p[i-1])) * sqrt(365) * 100
    using the population standard deviation of the most recent `period`
    returns.

    Args:
        prices: Price data as list or numpy array
        period: Number of recent returns to use (default 20). None uses the
            whole window.

    Returns:
        Annualized volatility in percent. 0.0 with fewer than 2 prices.
    """
    returns = log_returns(prices)

    if period is not None:
        if period <= 0:
            raise ValueError("Period must be greater than 0")
        returns = returns[-period:]

    if len(returns) == 0:
        return 0.0

    return float(np.std(returns) * math.sqrt(IndicatorPeriods.DAYS_PER_YEAR) * 100)
