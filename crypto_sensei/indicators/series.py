"""Validation and preparation of raw price/volume history.

Turns a HistoricalSeries into aligned numpy arrays plus the derived values
every indicator needs (current price, 24h change, log returns).
"""
import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from crypto_sensei.core.exceptions import DataValidationError, InvalidPriceError
from crypto_sensei.indicators.technical import log_returns
from crypto_sensei.schemas.market import HistoricalSeries


@dataclass(frozen=True)
class PreparedSeries:
    """Validated series ready for indicator computation."""

    prices: NDArray[np.float64]
    volumes: NDArray[np.float64]
    returns: NDArray[np.float64]  # ln(p[i] / p[i-1]), one shorter than prices
    current_price: float
    price_change_24h: float  # percent

    def __len__(self) -> int:
        return len(self.prices)


def price_change_percent(prices: NDArray[np.float64]) -> float:
    """Percent change between the last two prices, rounded to 2 decimals.

    Returns 0.0 with fewer than two prices.
    """
    if len(prices) < 2 or prices[-2] == 0:
        return 0.0
    return round(float((prices[-1] - prices[-2]) / prices[-2] * 100), 2)


def validate_current_price(price: float | None) -> float:
    """Return the price as float or raise InvalidPriceError.

    None, zero, negative, NaN and infinite prices are all rejected.
    """
    if price is None:
        raise InvalidPriceError("Current price is missing")
    price = float(price)
    if not math.isfinite(price) or price <= 0:
        raise InvalidPriceError(f"Invalid current price: {price}")
    return price


def prepare_series(series: HistoricalSeries) -> PreparedSeries:
    """Validate a historical series and derive log returns.

    Args:
        series: Chronological price/volume history

    Returns:
        PreparedSeries with numpy arrays and derived values

    Raises:
        DataValidationError: If the series is empty, misaligned, contains
            non-finite or non-positive prices, negative volumes, or
            timestamps that are not strictly increasing
        InvalidPriceError: If an explicit current price is invalid
    """
    prices = np.asarray(series.prices, dtype=float)
    volumes = np.asarray(series.volumes, dtype=float)

    if len(prices) == 0:
        raise DataValidationError("Price series cannot be empty")

    if len(prices) != len(volumes):
        raise DataValidationError(
            f"Prices and volumes must be aligned: {len(prices)} prices, {len(volumes)} volumes"
        )

    if not np.all(np.isfinite(prices)) or np.any(prices <= 0):
        raise DataValidationError("Prices must be finite and positive")

    if not np.all(np.isfinite(volumes)) or np.any(volumes < 0):
        raise DataValidationError("Volumes must be finite and non-negative")

    if series.timestamps is not None:
        if len(series.timestamps) != len(prices):
            raise DataValidationError("Timestamps must be aligned with prices")
        if np.any(np.diff(np.asarray(series.timestamps, dtype=np.int64)) <= 0):
            raise DataValidationError("Timestamps must be strictly increasing")

    if series.current_price is None:
        current_price = float(prices[-1])
    else:
        current_price = validate_current_price(series.current_price)

    if series.price_change_24h is None:
        change = price_change_percent(prices)
    else:
        change = float(series.price_change_24h)

    return PreparedSeries(
        prices=prices,
        volumes=volumes,
        returns=log_returns(prices),
        current_price=current_price,
        price_change_24h=change,
    )
