"""Tests for market phase classification."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from crypto_sensei.indicators.market_phase import (
    classify_market_phase,
    determine_market_phase,
    phase_strength,
)
from crypto_sensei.schemas.indicators import MarketPhaseLabel

# (price > MA50, price > MA200, MA50 > MA200) -> phase
PHASE_TABLE = {
    (True, True, True): MarketPhaseLabel.BULL_MARKET,
    (False, False, False): MarketPhaseLabel.BEAR_MARKET,
    (False, True, True): MarketPhaseLabel.CORRECTION,
    (False, True, False): MarketPhaseLabel.CORRECTION,
    (True, True, False): MarketPhaseLabel.ACCUMULATION,
    (True, False, True): MarketPhaseLabel.ACCUMULATION,
    (True, False, False): MarketPhaseLabel.ACCUMULATION,
    (False, False, True): MarketPhaseLabel.ACCUMULATION,
}


class TestDetermineMarketPhase:
    """Tests for the phase decision table."""

    @pytest.mark.parametrize(
        "price,ma50,ma200,expected",
        [
            (120.0, 110.0, 100.0, MarketPhaseLabel.BULL_MARKET),
            (80.0, 90.0, 100.0, MarketPhaseLabel.BEAR_MARKET),
            (105.0, 110.0, 100.0, MarketPhaseLabel.CORRECTION),
            (110.0, 100.0, 105.0, MarketPhaseLabel.ACCUMULATION),
            (95.0, 90.0, 100.0, MarketPhaseLabel.ACCUMULATION),
            (100.0, 100.0, 100.0, MarketPhaseLabel.BEAR_MARKET),
        ],
    )
    def test_known_cases(self, price, ma50, ma200, expected):
        assert determine_market_phase(price, ma50, ma200) == expected

    @given(
        st.floats(min_value=1.0, max_value=1e6),
        st.floats(min_value=1.0, max_value=1e6),
        st.floats(min_value=1.0, max_value=1e6),
    )
    @settings(max_examples=200, deadline=2000)
    def test_total_over_all_combinations(self, price, ma50, ma200):
        """Every input maps to the label its boolean combination dictates."""
        key = (price > ma50, price > ma200, ma50 > ma200)
        assert determine_market_phase(price, ma50, ma200) == PHASE_TABLE[key]

    def test_table_covers_eight_combinations(self):
        assert len(PHASE_TABLE) == 8
        accumulation = [k for k, v in PHASE_TABLE.items() if v == MarketPhaseLabel.ACCUMULATION]
        assert len(accumulation) == 4


class TestPhaseStrength:
    """Tests for phase strength."""

    def test_aligned_and_far_from_ma200(self):
        """All comparisons agree and price is 20% above MA200."""
        assert phase_strength(120.0, 110.0, 100.0) == pytest.approx(1.0)

    def test_mixed_and_close_to_ma200(self):
        """Two bullish votes: 0.6 / 3 + 0.4 * min(1, 0.01 * 5)."""
        assert phase_strength(101.0, 105.0, 100.0) == pytest.approx(0.22)

    def test_zero_ma200_has_no_distance_component(self):
        assert phase_strength(10.0, 5.0, 0.0) == pytest.approx(0.6)


class TestClassifyMarketPhase:
    """Tests for the full market phase classification."""

    def test_confidence_from_strength(self):
        prices = [float(p) for p in range(1, 9)]
        phase = classify_market_phase(prices, ma50=105.0, ma200=100.0, current_price=101.0)

        assert phase.phase == MarketPhaseLabel.CORRECTION
        assert phase.strength == pytest.approx(0.22)
        assert phase.confidence == pytest.approx(50 + 0.22 * 45)

    def test_confidence_capped(self):
        phase = classify_market_phase([100.0, 120.0], ma50=110.0, ma200=100.0)

        assert phase.strength == pytest.approx(1.0)
        assert phase.confidence == 95.0

    def test_key_levels(self):
        """Support 3, resistance 7, price 8: pivot 6, spread 4."""
        prices = [float(p) for p in range(1, 9)]
        levels = classify_market_phase(prices, ma50=5.0, ma200=4.0).key_levels

        assert levels.support == 3.0
        assert levels.resistance == 7.0
        assert levels.pivot == pytest.approx(6.0)
        assert levels.strong_support == pytest.approx(2.0)
        assert levels.strong_resistance == pytest.approx(10.0)

    def test_defaults_to_last_price(self):
        phase = classify_market_phase([90.0, 120.0], ma50=110.0, ma200=100.0)
        assert phase.phase == MarketPhaseLabel.BULL_MARKET

    def test_empty_prices(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            classify_market_phase([], ma50=1.0, ma200=1.0)

    @given(
        st.lists(st.floats(min_value=1.0, max_value=1e5), min_size=1, max_size=60),
        st.floats(min_value=1.0, max_value=1e5),
        st.floats(min_value=1.0, max_value=1e5),
    )
    @settings(max_examples=50, deadline=2000)
    def test_ranges(self, prices, ma50, ma200):
        phase = classify_market_phase(prices, ma50, ma200)

        assert 0.0 <= phase.strength <= 1.0
        assert 30.0 <= phase.confidence <= 95.0
        assert phase.key_levels.strong_support <= phase.key_levels.support
        assert phase.key_levels.strong_resistance >= phase.key_levels.resistance
