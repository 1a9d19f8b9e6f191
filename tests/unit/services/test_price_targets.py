"""Unit tests for multi-horizon price targets."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from crypto_sensei.services.price_targets import (
    LONG_TERM_PROFILE,
    MID_TERM_PROFILE,
    SHORT_TERM_PROFILE,
    compute_price_targets,
    price_target,
    sma_momentum,
)


class TestSMAMomentum:
    """Tests for SMA20/SMA50 momentum."""

    def test_rising_series_is_positive(self):
        prices = [float(p) for p in range(1, 61)]
        # (50.5 - 35.5) / 35.5
        assert sma_momentum(prices) == pytest.approx(15.0 / 35.5)

    def test_flat_series_is_zero(self):
        assert sma_momentum([100.0] * 60) == 0.0

    def test_empty_series_is_zero(self):
        assert sma_momentum([]) == 0.0


class TestPriceTarget:
    """Tests for a single horizon."""

    def test_short_term_ranges(self):
        """Volatility 10%, support 90, resistance 120, no momentum."""
        target = price_target(100.0, 0.1, 90.0, 120.0, 0.0, 80.0, SHORT_TERM_PROFILE)

        # low: max(90, 100 - 1 - 2), high: min(120, 100 + 1 + 4)
        assert target.low == pytest.approx(97.0)
        assert target.high == pytest.approx(105.0)
        assert target.confidence == pytest.approx(80.0)

    def test_bounded_by_loosened_levels(self):
        target = price_target(100.0, 2.0, 90.0, 120.0, 0.0, 80.0, LONG_TERM_PROFILE)

        assert target.low == pytest.approx(81.0)
        assert target.high == pytest.approx(132.0)

    def test_bearish_momentum_lowers_confidence(self):
        target = price_target(100.0, 0.1, 90.0, 120.0, -0.2, 50.0, MID_TERM_PROFILE)
        # 50 * 0.9 * 0.9
        assert target.confidence == pytest.approx(40.5)

    def test_price_inside_range_when_levels_cross(self):
        """Support above price would otherwise push the low above the price."""
        target = price_target(100.0, 0.0, 110.0, 130.0, 0.0, 80.0, SHORT_TERM_PROFILE)

        assert target.low == 100.0
        assert target.high >= 100.0


class TestComputePriceTargets:
    """Tests for the three-horizon computation."""

    def test_constant_series_collapses_to_price(self):
        targets = compute_price_targets(100.0, [100.0] * 30, 100.0, 100.0, 80.0)

        for target in (targets.short_term, targets.mid_term, targets.long_term):
            assert target.low == pytest.approx(100.0)
            assert target.high == pytest.approx(100.0)
        assert targets.short_term.confidence == pytest.approx(80.0)
        assert targets.mid_term.confidence == pytest.approx(72.0)
        assert targets.long_term.confidence == pytest.approx(64.0)

    def test_rising_series_boosts_confidence(self):
        prices = [float(p) for p in range(1, 61)]

        targets = compute_price_targets(60.0, prices, 40.0, 70.0, 80.0)

        assert targets.short_term.confidence == pytest.approx(88.0)
        assert targets.mid_term.confidence == pytest.approx(79.2)
        assert targets.long_term.confidence == pytest.approx(70.4)

    def test_longer_horizons_are_wider(self):
        prices = [100.0, 104.0, 99.0, 103.0, 98.0, 105.0, 101.0, 100.0]

        targets = compute_price_targets(100.0, prices, 80.0, 130.0, 60.0)

        short_width = targets.short_term.high - targets.short_term.low
        long_width = targets.long_term.high - targets.long_term.low
        assert long_width > short_width

    def test_lookup_by_label(self):
        targets = compute_price_targets(100.0, [100.0] * 5, 100.0, 100.0, 80.0)

        assert targets.for_timeframe("24H") == targets.short_term
        assert targets.for_timeframe("mid-term") == targets.mid_term

    @given(
        prices=st.lists(st.floats(min_value=1.0, max_value=1e5), min_size=2, max_size=60),
        support_ratio=st.floats(min_value=0.5, max_value=1.5),
        resistance_ratio=st.floats(min_value=0.5, max_value=1.5),
        base=st.floats(min_value=30.0, max_value=95.0),
    )
    @settings(max_examples=100, deadline=2000)
    def test_ranges_contain_price(self, prices, support_ratio, resistance_ratio, base):
        price = prices[-1]

        targets = compute_price_targets(
            price, prices, price * support_ratio, price * resistance_ratio, base
        )

        for target in (targets.short_term, targets.mid_term, targets.long_term):
            assert target.low <= price <= target.high
            assert 30.0 <= target.confidence <= 95.0
