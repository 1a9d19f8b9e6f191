"""Provider abstractions and mock implementations.

This package provides provider-agnostic interfaces for the external inputs of
an analysis: price history, news headlines, aggregated sentiment and the AI
narrative generator.

Available providers:
- MockMarketDataProvider: Deterministic price history for testing
- MockNewsProvider: Fixed headlines for testing
- MockNarrativeGenerator: Canned template reply for testing
"""

from crypto_sensei.providers.base import (
    MarketDataProviderInterface,
    NarrativeGeneratorInterface,
    NewsProviderInterface,
    SentimentProviderInterface,
)
from crypto_sensei.providers.mock import (
    MockMarketDataProvider,
    MockNarrativeGenerator,
    MockNewsProvider,
)

__all__ = [
    "MarketDataProviderInterface",
    "NarrativeGeneratorInterface",
    "NewsProviderInterface",
    "SentimentProviderInterface",
    "MockMarketDataProvider",
    "MockNarrativeGenerator",
    "MockNewsProvider",
]
