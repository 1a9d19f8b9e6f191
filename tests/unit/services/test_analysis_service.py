"""
Unit tests for the analysis service.

Tests cover the full pipeline on mock providers and the degradation policy
for each failing collaborator.
"""
import asyncio

import pytest

from crypto_sensei.core.config import Settings
from crypto_sensei.core.exceptions import APIError, DataValidationError, UpstreamDataError
from crypto_sensei.providers.base import NarrativeGeneratorInterface, SentimentProviderInterface
from crypto_sensei.providers.mock import (
    MockMarketDataProvider,
    MockNarrativeGenerator,
    MockNewsProvider,
)
from crypto_sensei.schemas.analysis import PositionBias
from crypto_sensei.schemas.indicators import MarketPhaseLabel
from crypto_sensei.schemas.market import HistoricalSeries, MarketMood
from crypto_sensei.services.analysis_service import (
    AnalysisService,
    AnalysisServiceConfig,
    build_analysis_service,
)


class FailingMarketData(MockMarketDataProvider):
    async def fetch_history(self, symbol, days):
        raise APIError("rate limited")


class EmptyMarketData(MockMarketDataProvider):
    async def fetch_history(self, symbol, days):
        return HistoricalSeries(prices=[], volumes=[])


class FailingNews(MockNewsProvider):
    async def fetch_headlines(self, symbol, limit):
        raise APIError("news down")


class FailingSentiment(SentimentProviderInterface):
    async def fetch_sentiment(self, symbol):
        raise APIError("sentiment down")


class FailingNarrative(NarrativeGeneratorInterface):
    async def generate(self, prompt):
        raise APIError("model unavailable")


class CountingMarketData(MockMarketDataProvider):
    def __init__(self):
        super().__init__()
        self.calls = 0

    async def fetch_history(self, symbol, days):
        self.calls += 1
        return await super().fetch_history(symbol, days)


class CountingNews(MockNewsProvider):
    def __init__(self):
        super().__init__()
        self.calls = 0

    async def fetch_headlines(self, symbol, limit):
        self.calls += 1
        return await super().fetch_headlines(symbol, limit)


class TestAnalysisServiceConfig:
    """Test configuration wiring."""

    def test_defaults(self):
        config = AnalysisServiceConfig()

        assert config.history_days == 200
        assert config.news_limit == 5
        assert config.narrative_enabled is True

    def test_from_settings(self, test_settings):
        config = AnalysisServiceConfig.from_settings(test_settings)

        assert config.history_days == test_settings.history_days
        assert config.news_limit == test_settings.news_limit


class TestGetDetailedAnalysis:
    """Test the full analysis pipeline."""

    async def test_full_analysis_with_narrative(self, mock_market_data, mock_news, mock_narrative):
        service = AnalysisService(mock_market_data, mock_news, narrative=mock_narrative)

        analysis = await service.get_detailed_analysis("bitcoin")

        assert analysis.symbol == "bitcoin"
        assert analysis.narrative is not None
        assert analysis.summary == "Momentum is constructive while price holds above support."
        assert analysis.sentiment.news_score == pytest.approx(40.0)
        assert analysis.sentiment.market_mood == MarketMood.BULLISH
        assert len(analysis.recent_news) == 3
        assert [s.indicator for s in analysis.signals] == [
            "RSI",
            "StochRSI",
            "MACD",
            "OBV Trend",
            "Market Phase",
        ]
        assert analysis.strategy.is_default is False
        assert analysis.outlook.short_term == "Neutral"

    async def test_position_and_prediction_confidence(self, mock_market_data, mock_news):
        analysis = await AnalysisService(mock_market_data, mock_news).get_detailed_analysis(
            "bitcoin"
        )

        indicators = analysis.indicators
        support, resistance = indicators.support, indicators.resistance
        expected_bias = {
            MarketPhaseLabel.BULL_MARKET: PositionBias.LONG,
            MarketPhaseLabel.BEAR_MARKET: PositionBias.SHORT,
        }.get(indicators.market_phase, PositionBias.NEUTRAL)
        assert analysis.position.position == expected_bias
        assert analysis.position.entry == round(support + (resistance - support) * 0.382, 2)
        assert analysis.position.stop == round(support * 0.95, 2)
        assert analysis.position.target == round(resistance, 2)
        assert analysis.prediction_confidence == round(
            min(95.0, max(30.0, 85 - indicators.volatility / 2)), 2
        )

    async def test_prompt_sent_to_generator(self, mock_market_data, mock_news, mock_narrative):
        service = AnalysisService(mock_market_data, mock_news, narrative=mock_narrative)

        await service.get_detailed_analysis("bitcoin")

        assert len(mock_narrative.prompts) == 1
        assert "Analyze bitcoin market data" in mock_narrative.prompts[0]
        assert "Bitcoin rally continues" in mock_narrative.prompts[0]

    async def test_consistent_outputs(self, mock_market_data, mock_news):
        analysis = await AnalysisService(mock_market_data, mock_news).get_detailed_analysis(
            "bitcoin"
        )

        price = analysis.indicators.current_price
        assert analysis.market_phase.phase == analysis.indicators.market_phase
        assert analysis.strategy.entries.moderate == round(price, 2)
        for horizon in ("24H", "7D", "30D"):
            target = analysis.price_targets.for_timeframe(horizon)
            assert target.low <= price <= target.high
            assert 30.0 <= analysis.confidence.for_timeframe(horizon) <= 95.0
        assert (
            analysis.confidence.short_term
            >= analysis.confidence.mid_term
            >= analysis.confidence.long_term
        )

    async def test_without_narrative_uses_summary(self, mock_market_data, mock_news):
        service = AnalysisService(mock_market_data, mock_news)

        analysis = await service.get_detailed_analysis("bitcoin")

        assert analysis.narrative is None
        assert analysis.summary.startswith("Bitcoin is currently in a")

    async def test_narrative_disabled(self, mock_market_data, mock_news, mock_narrative):
        service = AnalysisService(
            mock_market_data,
            mock_news,
            narrative=mock_narrative,
            config=AnalysisServiceConfig(narrative_enabled=False),
        )

        analysis = await service.get_detailed_analysis("bitcoin")

        assert analysis.narrative is None
        assert mock_narrative.prompts == []

    async def test_unparseable_narrative(self, mock_market_data, mock_news):
        service = AnalysisService(
            mock_market_data, mock_news, narrative=MockNarrativeGenerator("No HTML here.")
        )

        analysis = await service.get_detailed_analysis("bitcoin")

        assert analysis.narrative is None
        assert analysis.summary.startswith("Bitcoin is currently in a")

    async def test_narrative_failure(self, mock_market_data, mock_news):
        service = AnalysisService(mock_market_data, mock_news, narrative=FailingNarrative())

        analysis = await service.get_detailed_analysis("bitcoin")

        assert analysis.narrative is None
        assert analysis.summary.startswith("Bitcoin is currently in a")


class TestDegradation:
    """Test failure handling per collaborator."""

    async def test_sentiment_failure_is_neutral(self, mock_market_data, mock_news):
        service = AnalysisService(mock_market_data, mock_news, sentiment=FailingSentiment())

        analysis = await service.get_detailed_analysis("bitcoin")

        assert analysis.sentiment.news_score == 50.0
        assert analysis.sentiment.social_score == 50.0
        assert analysis.sentiment.market_mood == MarketMood.NEUTRAL
        assert len(analysis.recent_news) == 3

    async def test_headline_failure_is_empty(self, mock_market_data):
        service = AnalysisService(mock_market_data, FailingNews())

        analysis = await service.get_detailed_analysis("bitcoin")

        assert analysis.recent_news == []
        assert analysis.sentiment.market_mood == MarketMood.NEUTRAL

    async def test_history_failure_raises(self, mock_news):
        service = AnalysisService(FailingMarketData(), mock_news)

        with pytest.raises(UpstreamDataError, match="bitcoin") as exc_info:
            await service.get_detailed_analysis("bitcoin")

        assert isinstance(exc_info.value.__cause__, APIError)

    async def test_empty_history_raises(self, mock_news):
        service = AnalysisService(EmptyMarketData(), mock_news)

        with pytest.raises(DataValidationError):
            await service.get_detailed_analysis("bitcoin")

    async def test_empty_history_logged(self, mock_news, log_capture):
        service = AnalysisService(EmptyMarketData(), mock_news)

        with pytest.raises(DataValidationError):
            await service.get_detailed_analysis("bitcoin")

        [event] = [e for e in log_capture.entries if e["event"] == "history_invalid"]
        assert event["log_level"] == "error"
        assert event["symbol"] == "bitcoin"
        assert event["stage"] == "history"
        assert event["points"] == 0

    async def test_history_failure_logged(self, mock_news, log_capture):
        service = AnalysisService(FailingMarketData(), mock_news)

        with pytest.raises(UpstreamDataError):
            await service.get_detailed_analysis("bitcoin")

        [event] = [e for e in log_capture.entries if e["event"] == "history_fetch_failed"]
        assert event["error"] == "rate limited"
        assert event["symbol"] == "bitcoin"


class TestAnalysisLogging:
    """Test stage context on pipeline events."""

    async def test_events_carry_symbol_and_stage(self, mock_market_data, log_capture):
        service = AnalysisService(mock_market_data, FailingNews())

        await service.get_detailed_analysis("solana")

        stages = {e["event"]: e["stage"] for e in log_capture.entries}
        assert stages["headline_fetch_failed"] == "sentiment"
        assert stages["sentiment_fetch_failed"] == "sentiment"
        assert stages["analysis_completed"] == "strategy"
        assert {e["symbol"] for e in log_capture.entries} == {"solana"}

    async def test_narrative_failure_logged_in_narrative_stage(
        self, mock_market_data, mock_news, log_capture
    ):
        service = AnalysisService(mock_market_data, mock_news, narrative=FailingNarrative())

        await service.get_detailed_analysis("bitcoin")

        [event] = [e for e in log_capture.entries if e["event"] == "narrative_generation_failed"]
        assert event["stage"] == "narrative"
        assert event["log_level"] == "error"


class TestBuildAnalysisService:
    """Test service wiring with caches."""

    async def test_repeated_analysis_served_from_cache(self, test_settings):
        market_data = CountingMarketData()
        news = CountingNews()
        service = build_analysis_service(market_data, news, settings=test_settings)

        first = await service.get_detailed_analysis("bitcoin")
        second = await service.get_detailed_analysis("bitcoin")

        assert first.indicators == second.indicators
        assert market_data.calls == 1
        # Sentiment and headlines share one cached news call
        assert news.calls == 1

    def test_config_from_settings(self, test_settings):
        service = build_analysis_service(
            MockMarketDataProvider(), MockNewsProvider(), settings=test_settings
        )

        assert service.config.news_limit == test_settings.news_limit
        assert service.narrative is None

    async def test_throttled_news_degrades_without_waiting(self):
        settings = Settings(_env_file=None, market_data_min_interval=0.0, news_min_interval=60.0)
        news = CountingNews()
        service = build_analysis_service(CountingMarketData(), news, settings=settings)

        first = await service.get_detailed_analysis("bitcoin")
        second = await asyncio.wait_for(service.get_detailed_analysis("ethereum"), timeout=5)

        assert news.calls == 1
        assert len(first.recent_news) == 3
        assert second.recent_news == []
        assert second.sentiment.news_score == 50.0
        assert second.sentiment.market_mood == MarketMood.NEUTRAL

    async def test_throttled_news_serves_cached_headlines(self):
        settings = Settings(_env_file=None, market_data_min_interval=0.0, news_min_interval=60.0)
        news = CountingNews()
        service = build_analysis_service(CountingMarketData(), news, settings=settings)

        first = await service.get_detailed_analysis("bitcoin")
        service.news.cache.fresh.clear()
        second = await asyncio.wait_for(service.get_detailed_analysis("bitcoin"), timeout=5)

        assert news.calls == 1
        assert second.recent_news == first.recent_news
        assert second.sentiment == first.sentiment
