"""Schemas for the external inputs of an analysis: price history, news and sentiment."""

from enum import Enum

from pydantic import Field

from crypto_sensei.schemas.base import StrictBaseModel


class MarketMood(str, Enum):
    """Overall mood derived from news sentiment."""
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"


class HeadlineSentiment(str, Enum):
    """Sentiment of a single headline."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class HistoricalSeries(StrictBaseModel):
    """Chronological daily price/volume history for one coin.

    Prices and volumes are aligned index-for-index. Timestamps, when given,
    are epoch milliseconds in the same order.
    """

    prices: list[float] = Field(..., description="Prices, oldest first")
    volumes: list[float] = Field(..., description="Traded volume per price point")
    timestamps: list[int] | None = Field(None, description="Epoch milliseconds per point")
    current_price: float | None = Field(
        None, description="Latest price; defaults to the last price of the series"
    )
    price_change_24h: float | None = Field(
        None, description="24h change in percent; derived from the last two prices if absent"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "prices": [100.0, 102.0, 101.0, 105.0],
                    "volumes": [1000.0, 1200.0, 900.0, 1500.0],
                    "timestamps": None,
                    "current_price": 105.0,
                    "price_change_24h": 3.96,
                }
            ]
        }
    }


class NewsSentiment(StrictBaseModel):
    """Aggregated sentiment signal supplied alongside the price history."""

    news_score: float = Field(50.0, ge=0, le=100, description="Share of positive news (0-100)")
    social_score: float = Field(50.0, ge=0, le=100, description="Social sentiment score (0-100)")
    market_mood: MarketMood = Field(MarketMood.NEUTRAL, description="Overall market mood")


class NewsHeadline(StrictBaseModel):
    """Headline used for sentiment aggregation and rationale text."""

    title: str
    sentiment: HeadlineSentiment = HeadlineSentiment.NEUTRAL
    source: str | None = None
    url: str | None = None
    timestamp: int | None = Field(None, description="Publication time, epoch milliseconds")
