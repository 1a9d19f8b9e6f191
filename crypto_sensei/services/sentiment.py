"""Headline sentiment heuristic and sentiment aggregation.

Headlines are scored with a bag-of-words heuristic; the scored headlines are
then aggregated into the NewsSentiment consumed by the confidence scorer.
"""

import logging
import re

from crypto_sensei.core.constants import ConfidenceThresholds
from crypto_sensei.providers.base import NewsProviderInterface, SentimentProviderInterface
from crypto_sensei.schemas.market import HeadlineSentiment, MarketMood, NewsHeadline, NewsSentiment

logger = logging.getLogger(__name__)

POSITIVE_WORDS = frozenset(
    {"bullish", "surge", "gain", "up", "high", "rise", "growth", "boost", "rally"}
)
NEGATIVE_WORDS = frozenset(
    {"bearish", "drop", "fall", "down", "low", "crash", "decline", "plunge", "risk"}
)
INTENSITY_WORDS = {
    "very": 2.0,
    "significant": 1.5,
    "massive": 2.0,
    "slight": 0.5,
    "minor": 0.5,
}
SENTIMENT_THRESHOLD = 0.2

_WORD_SPLIT = re.compile(r"\W+")


def headline_score(text: str) -> float:
    """Average polarity of the scored words in a text, in [-2, 2].

    An intensity word scales the next scored word, however far away it is.
    """
    score = 0.0
    scored_words = 0
    multiplier = 1.0

    for word in _WORD_SPLIT.split(text.lower()):
        if word in INTENSITY_WORDS:
            multiplier = INTENSITY_WORDS[word]
            continue

        if word in POSITIVE_WORDS:
            score += multiplier
        elif word in NEGATIVE_WORDS:
            score -= multiplier
        else:
            continue

        scored_words += 1
        multiplier = 1.0

    if scored_words == 0:
        return 0.0
    return score / scored_words


def analyze_headline_sentiment(text: str) -> HeadlineSentiment:
    """Classify a headline (title plus optional description).

    Example:
        >>> analyze_headline_sentiment("Bitcoin rally continues as ETF inflows surge")
        <HeadlineSentiment.POSITIVE: 'positive'>
    """
    score = headline_score(text)
    if score > SENTIMENT_THRESHOLD:
        return HeadlineSentiment.POSITIVE
    if score < -SENTIMENT_THRESHOLD:
        return HeadlineSentiment.NEGATIVE
    return HeadlineSentiment.NEUTRAL


def neutral_sentiment() -> NewsSentiment:
    """Neutral 50/50 sentiment used when sentiment is unavailable."""
    return NewsSentiment(
        news_score=ConfidenceThresholds.NEUTRAL_SENTIMENT_SCORE,
        social_score=ConfidenceThresholds.NEUTRAL_SENTIMENT_SCORE,
        market_mood=MarketMood.NEUTRAL,
    )


def aggregate_sentiment(headlines: list[NewsHeadline]) -> NewsSentiment:
    """Aggregate scored headlines into a NewsSentiment.

    The news score is the positive share of all headlines. There is no
    social feed, so the social score stays neutral.
    """
    positive = sum(1 for h in headlines if h.sentiment == HeadlineSentiment.POSITIVE)
    negative = sum(1 for h in headlines if h.sentiment == HeadlineSentiment.NEGATIVE)
    total = len(headlines) or 1

    if positive > negative:
        mood = MarketMood.BULLISH
    elif negative > positive:
        mood = MarketMood.BEARISH
    else:
        mood = MarketMood.NEUTRAL

    return NewsSentiment(
        news_score=positive / total * 100,
        social_score=ConfidenceThresholds.NEUTRAL_SENTIMENT_SCORE,
        market_mood=mood,
    )


class HeadlineSentimentProvider(SentimentProviderInterface):
    """Sentiment provider deriving sentiment from a news provider's headlines."""

    def __init__(self, news_provider: NewsProviderInterface, limit: int = 10):
        self.news_provider = news_provider
        self.limit = limit

    async def fetch_sentiment(self, symbol: str) -> NewsSentiment:
        headlines = await self.news_provider.fetch_headlines(symbol, self.limit)
        logger.debug(f"Aggregating sentiment for {symbol} from {len(headlines)} headlines")
        return aggregate_sentiment(headlines)
