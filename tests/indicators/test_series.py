"""Tests for series validation and preparation."""

import math

import numpy as np
import pytest

from crypto_sensei.core.exceptions import DataValidationError, InvalidPriceError
from crypto_sensei.indicators.series import prepare_series, validate_current_price
from crypto_sensei.schemas.market import HistoricalSeries


class TestPrepareSeries:
    """Tests for prepare_series."""

    def test_defaults_derived_from_prices(self, reference_series):
        prepared = prepare_series(reference_series)

        assert prepared.current_price == 112.0
        # (112 - 106) / 106 * 100
        assert prepared.price_change_24h == 5.66
        assert len(prepared) == 10
        assert len(prepared.returns) == 9
        assert prepared.returns[-1] == pytest.approx(math.log(112.0 / 106.0))

    def test_explicit_values_kept(self):
        series = HistoricalSeries(
            prices=[100.0, 101.0],
            volumes=[1.0, 1.0],
            current_price=101.5,
            price_change_24h=-2.5,
        )

        prepared = prepare_series(series)

        assert prepared.current_price == 101.5
        assert prepared.price_change_24h == -2.5

    def test_single_point_has_no_change(self):
        prepared = prepare_series(HistoricalSeries(prices=[100.0], volumes=[5.0]))

        assert prepared.price_change_24h == 0.0
        assert len(prepared.returns) == 0

    def test_arrays_are_numpy(self, reference_series):
        prepared = prepare_series(reference_series)

        assert isinstance(prepared.prices, np.ndarray)
        assert isinstance(prepared.volumes, np.ndarray)

    def test_empty_prices_rejected(self):
        with pytest.raises(DataValidationError, match="cannot be empty"):
            prepare_series(HistoricalSeries(prices=[], volumes=[]))

    def test_misaligned_volumes_rejected(self):
        with pytest.raises(DataValidationError, match="aligned"):
            prepare_series(HistoricalSeries(prices=[1.0, 2.0], volumes=[1.0]))

    @pytest.mark.parametrize("bad_price", [0.0, -1.0, math.nan, math.inf])
    def test_invalid_prices_rejected(self, bad_price):
        with pytest.raises(DataValidationError, match="finite and positive"):
            prepare_series(HistoricalSeries(prices=[1.0, bad_price], volumes=[1.0, 1.0]))

    @pytest.mark.parametrize("bad_volume", [-1.0, math.nan])
    def test_invalid_volumes_rejected(self, bad_volume):
        with pytest.raises(DataValidationError, match="non-negative"):
            prepare_series(HistoricalSeries(prices=[1.0, 2.0], volumes=[1.0, bad_volume]))

    def test_duplicate_timestamps_rejected(self):
        series = HistoricalSeries(prices=[1.0, 2.0], volumes=[1.0, 1.0], timestamps=[10, 10])

        with pytest.raises(DataValidationError, match="strictly increasing"):
            prepare_series(series)

    def test_misaligned_timestamps_rejected(self):
        series = HistoricalSeries(prices=[1.0, 2.0], volumes=[1.0, 1.0], timestamps=[10])

        with pytest.raises(DataValidationError, match="aligned"):
            prepare_series(series)

    def test_invalid_explicit_current_price(self):
        series = HistoricalSeries(prices=[1.0, 2.0], volumes=[1.0, 1.0], current_price=0.0)

        with pytest.raises(InvalidPriceError):
            prepare_series(series)


class TestValidateCurrentPrice:
    """Tests for validate_current_price."""

    @pytest.mark.parametrize("price", [None, 0, -5.0, math.nan, math.inf])
    def test_invalid(self, price):
        with pytest.raises(InvalidPriceError):
            validate_current_price(price)

    def test_invalid_price_is_validation_error(self):
        with pytest.raises(DataValidationError):
            validate_current_price(None)

    def test_valid(self):
        assert validate_current_price(64000) == 64000.0
