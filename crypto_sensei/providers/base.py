"""Base provider interfaces for the external collaborators of an analysis.

Concrete market data, news and AI clients live outside this package; the
analysis service only depends on these contracts.
"""
from abc import ABC, abstractmethod

from crypto_sensei.schemas.market import HistoricalSeries, NewsHeadline, NewsSentiment


class MarketDataProviderInterface(ABC):
    """
    Abstract interface for market data providers.

    Implementations return daily price/volume history for a coin id
    (e.g., 'bitcoin').
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider (e.g., 'coingecko')."""
        pass

    @abstractmethod
    async def fetch_history(self, symbol: str, days: int) -> HistoricalSeries:
        """
        Fetch daily price and volume history.

        Args:
            symbol: Coin id (e.g., 'bitcoin')
            days: Number of days of history to fetch

        Returns:
            HistoricalSeries, oldest point first

        Raises:
            APIError: If provider API fails
        """
        pass


class NewsProviderInterface(ABC):
    """Abstract interface for news headline providers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider (e.g., 'newsdata')."""
        pass

    @abstractmethod
    async def fetch_headlines(self, symbol: str, limit: int) -> list[NewsHeadline]:
        """
        Fetch recent headlines about a coin.

        Args:
            symbol: Coin id (e.g., 'bitcoin')
            limit: Maximum number of headlines

        Returns:
            Headlines, most recent first

        Raises:
            APIError: If provider API fails
        """
        pass


class SentimentProviderInterface(ABC):
    """Abstract interface for aggregated market sentiment."""

    @abstractmethod
    async def fetch_sentiment(self, symbol: str) -> NewsSentiment:
        """
        Fetch the aggregated sentiment for a coin.

        Raises:
            APIError: If provider API fails
        """
        pass


class NarrativeGeneratorInterface(ABC):
    """Abstract interface for the AI text generator producing the narrative."""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """
        Generate free text for a rendered prompt.

        Args:
            prompt: Prompt containing indicators, sentiment and the reply template

        Returns:
            Generated text, expected to follow the template in the prompt

        Raises:
            APIError: If the generator fails
        """
        pass
