"""Analysis service orchestrating one detailed analysis per coin.

Fetches the history, runs the indicator pipeline, gathers sentiment and
headlines concurrently, asks the narrative generator for free text and
assembles a DetailedAnalysis.

Failure policy:
- History fetch failure is fatal (UpstreamDataError)
- Invalid history is fatal (DataValidationError)
- Sentiment failure degrades to neutral 50/50/Neutral
- Headline failure, including a throttled news call, degrades to no headlines
- Narrative failure or an unparseable reply degrades to the deterministic summary

Every event logged during a run carries the coin and the pipeline stage.
"""

import asyncio
from dataclasses import dataclass

from crypto_sensei.core.config import Settings, get_settings
from crypto_sensei.core.exceptions import DataValidationError, UpstreamDataError
from crypto_sensei.indicators.market_phase import classify_market_phase
from crypto_sensei.indicators.series import prepare_series
from crypto_sensei.providers.base import (
    MarketDataProviderInterface,
    NarrativeGeneratorInterface,
    NewsProviderInterface,
    SentimentProviderInterface,
)
from crypto_sensei.schemas.analysis import DetailedAnalysis, MarketOutlook, ParsedNarrative
from crypto_sensei.schemas.indicators import TechnicalIndicators
from crypto_sensei.schemas.market import NewsHeadline, NewsSentiment
from crypto_sensei.services.cache_service import (
    CacheTTLConfig,
    CachingMarketDataProvider,
    CachingNewsProvider,
    ProviderCache,
)
from crypto_sensei.services.confidence import (
    prediction_confidence,
    score_confidence,
    timeframe_confidence,
)
from crypto_sensei.services.indicator_service import (
    build_market_structure,
    build_market_summary,
    build_position_summary,
    build_technical_signals,
    compute_indicators,
    generate_signals,
)
from crypto_sensei.services.narrative import (
    build_narrative_prompt,
    extract_prediction_bias,
    parse_narrative,
)
from crypto_sensei.services.price_targets import compute_price_targets
from crypto_sensei.services.sentiment import HeadlineSentimentProvider, neutral_sentiment
from crypto_sensei.services.strategy import StrategySnapshot, generate_strategy
from crypto_sensei.utils.structured_logging import (
    analysis_context,
    configure_structured_logging,
    enter_stage,
    get_logger,
)

logger = get_logger(__name__)

RECENT_NEWS_LIMIT = 3


@dataclass
class AnalysisServiceConfig:
    """Configuration for the analysis service.

    Attributes:
        history_days: Days of daily history requested (MA200 needs 200)
        news_limit: Headlines requested per analysis
        narrative_enabled: Whether to call the narrative generator
    """

    history_days: int = 200
    news_limit: int = 5
    narrative_enabled: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisServiceConfig":
        return cls(
            history_days=settings.history_days,
            news_limit=settings.news_limit,
            narrative_enabled=settings.narrative_enabled,
        )


class AnalysisService:
    """Service producing DetailedAnalysis records.

    Providers are injected; when no sentiment provider is given, sentiment is
    aggregated from the news provider's scored headlines.
    """

    def __init__(
        self,
        market_data: MarketDataProviderInterface,
        news: NewsProviderInterface,
        sentiment: SentimentProviderInterface | None = None,
        narrative: NarrativeGeneratorInterface | None = None,
        config: AnalysisServiceConfig | None = None,
    ) -> None:
        self.market_data = market_data
        self.news = news
        self.narrative = narrative
        self.config = config or AnalysisServiceConfig()
        self.sentiment = sentiment or HeadlineSentimentProvider(news, limit=self.config.news_limit)

    async def get_detailed_analysis(self, symbol: str) -> DetailedAnalysis:
        """Run the full analysis for one coin.

        Args:
            symbol: Coin id (e.g., 'bitcoin')

        Returns:
            DetailedAnalysis

        Raises:
            UpstreamDataError: If the price history cannot be fetched
            DataValidationError: If the fetched history is invalid
        """
        with analysis_context(symbol):
            return await self._analyze(symbol)

    async def _analyze(self, symbol: str) -> DetailedAnalysis:
        try:
            series = await self.market_data.fetch_history(symbol, self.config.history_days)
        except Exception as e:
            logger.error("history_fetch_failed", error=str(e))
            raise UpstreamDataError(f"Failed to fetch price history for {symbol}: {e}") from e

        try:
            prepared = prepare_series(series)
        except DataValidationError as e:
            logger.error("history_invalid", points=len(series.prices), error=str(e))
            raise

        enter_stage("indicators")
        indicators = compute_indicators(prepared)
        market_phase = classify_market_phase(
            prepared.prices, indicators.ma50, indicators.ma200, prepared.current_price
        )

        enter_stage("sentiment")
        sentiment, headlines = await asyncio.gather(
            self._fetch_sentiment(symbol), self._fetch_headlines(symbol)
        )

        base_confidence = score_confidence(indicators, sentiment)
        price_targets = compute_price_targets(
            prepared.current_price,
            prepared.prices,
            indicators.support,
            indicators.resistance,
            base_confidence,
        )

        enter_stage("narrative")
        narrative = await self._generate_narrative(symbol, indicators, sentiment, headlines)
        summary = (narrative.summary if narrative else None) or build_market_summary(
            symbol, indicators
        )

        enter_stage("strategy")
        technical_signals = build_technical_signals(indicators)
        strategy = generate_strategy(
            StrategySnapshot(
                current_price=prepared.current_price,
                market_phase=market_phase,
                signals=technical_signals,
            )
        )

        logger.info(
            "analysis_completed",
            phase=market_phase.phase.value,
            confidence=round(base_confidence, 2),
            recommendation=strategy.recommendation.value,
            narrative=narrative is not None,
            headlines=len(headlines),
        )

        return DetailedAnalysis(
            symbol=symbol,
            summary=summary,
            narrative=narrative,
            indicators=indicators,
            technical_signals=technical_signals,
            market_phase=market_phase,
            signals=generate_signals(indicators, market_phase),
            sentiment=sentiment,
            recent_news=headlines[:RECENT_NEWS_LIMIT],
            confidence=timeframe_confidence(base_confidence),
            prediction_confidence=prediction_confidence(indicators.volatility),
            price_targets=price_targets,
            outlook=self._outlook(narrative),
            market_structure=build_market_structure(indicators),
            position=build_position_summary(indicators),
            strategy=strategy,
        )

    async def _fetch_sentiment(self, symbol: str) -> NewsSentiment:
        try:
            return await self.sentiment.fetch_sentiment(symbol)
        except Exception as e:
            logger.warning("sentiment_fetch_failed", error=str(e))
            return neutral_sentiment()

    async def _fetch_headlines(self, symbol: str) -> list[NewsHeadline]:
        try:
            return await self.news.fetch_headlines(symbol, self.config.news_limit)
        except Exception as e:
            logger.warning("headline_fetch_failed", error=str(e))
            return []

    async def _generate_narrative(
        self,
        symbol: str,
        indicators: TechnicalIndicators,
        sentiment: NewsSentiment,
        headlines: list[NewsHeadline],
    ) -> ParsedNarrative | None:
        if self.narrative is None or not self.config.narrative_enabled:
            return None

        prompt = build_narrative_prompt(symbol, indicators, sentiment, headlines)
        try:
            reply = await self.narrative.generate(prompt)
        except Exception:
            logger.exception("narrative_generation_failed")
            return None

        parsed = parse_narrative(reply)
        if parsed is None:
            logger.warning("narrative_unparseable", length=len(reply or ""))
        return parsed

    @staticmethod
    def _outlook(narrative: ParsedNarrative | None) -> MarketOutlook:
        if narrative is None:
            return MarketOutlook()
        predictions = narrative.predictions
        return MarketOutlook(
            short_term=extract_prediction_bias(predictions.short_term),
            mid_term=extract_prediction_bias(predictions.mid_term),
            long_term=extract_prediction_bias(predictions.long_term),
        )


def build_analysis_service(
    market_data: MarketDataProviderInterface,
    news: NewsProviderInterface,
    narrative: NarrativeGeneratorInterface | None = None,
    settings: Settings | None = None,
) -> AnalysisService:
    """Wire an AnalysisService from settings.

    Configures structured logging and wraps both providers with their own
    throttled caches. Sentiment is aggregated from the cached headlines.
    """
    settings = settings or get_settings()
    configure_structured_logging(settings.log_level, json_output=settings.log_json)

    cached_market_data = CachingMarketDataProvider(
        market_data,
        ProviderCache(CacheTTLConfig.for_history(settings), name="history"),
    )
    cached_news = CachingNewsProvider(
        news,
        ProviderCache(CacheTTLConfig.for_news(settings), name="news"),
    )

    logger.info(
        "analysis_service_configured",
        app=settings.app_name,
        environment=settings.environment,
        market_data=market_data.provider_name,
        news=news.provider_name,
    )

    return AnalysisService(
        market_data=cached_market_data,
        news=cached_news,
        narrative=narrative,
        config=AnalysisServiceConfig.from_settings(settings),
    )
