"""Mock providers for testing.

Generate deterministic data without hitting external APIs.
Useful for unit tests, integration tests, and development environments.
"""
import logging
import math

from crypto_sensei.providers.base import (
    MarketDataProviderInterface,
    NarrativeGeneratorInterface,
    NewsProviderInterface,
)
from crypto_sensei.schemas.market import HeadlineSentiment, HistoricalSeries, NewsHeadline

logger = logging.getLogger(__name__)

DAY_MS = 86_400_000
MOCK_START_MS = 1_704_067_200_000  # 2024-01-01T00:00:00Z


class MockMarketDataProvider(MarketDataProviderInterface):
    """
    Mock market data provider for testing.

    Generates a trending price path with a deterministic oscillation:
        price[i] = base_price * (1 + daily_trend) ** i * (1 + amplitude * sin(i / 3))
    """

    def __init__(
        self,
        base_price: float = 100.0,
        daily_trend: float = 0.002,
        amplitude: float = 0.02,
        base_volume: float = 1_000_000.0,
    ):
        self.base_price = base_price
        self.daily_trend = daily_trend
        self.amplitude = amplitude
        self.base_volume = base_volume

    @property
    def provider_name(self) -> str:
        return "mock"

    async def fetch_history(self, symbol: str, days: int) -> HistoricalSeries:
        """Generate fake daily history."""
        prices = [
            self.base_price
            * (1 + self.daily_trend) ** i
            * (1 + self.amplitude * math.sin(i / 3))
            for i in range(days)
        ]
        volumes = [self.base_volume * (1 + 0.25 * math.cos(i / 2)) for i in range(days)]
        timestamps = [MOCK_START_MS + i * DAY_MS for i in range(days)]

        logger.debug(f"Generated {days} mock price points for {symbol}")

        return HistoricalSeries(prices=prices, volumes=volumes, timestamps=timestamps)


class MockNewsProvider(NewsProviderInterface):
    """Mock news provider returning fixed headlines."""

    DEFAULT_HEADLINES = [
        ("{name} rally continues as institutional inflows surge", HeadlineSentiment.POSITIVE),
        ("Analysts see growth ahead for {name} after network upgrade", HeadlineSentiment.POSITIVE),
        ("{name} faces risk of decline amid regulatory pressure", HeadlineSentiment.NEGATIVE),
        ("{name} trading volume steady ahead of macro data", HeadlineSentiment.NEUTRAL),
        ("Developers publish {name} roadmap update", HeadlineSentiment.NEUTRAL),
    ]

    def __init__(self, headlines: list[NewsHeadline] | None = None):
        self.headlines = headlines

    @property
    def provider_name(self) -> str:
        return "mock"

    async def fetch_headlines(self, symbol: str, limit: int) -> list[NewsHeadline]:
        if self.headlines is not None:
            return self.headlines[:limit]

        name = symbol.capitalize()
        return [
            NewsHeadline(
                title=title.format(name=name),
                sentiment=sentiment,
                source="mock",
                url=f"https://example.com/news/{symbol.lower()}/{i}",
                timestamp=MOCK_START_MS - i * DAY_MS,
            )
            for i, (title, sentiment) in enumerate(self.DEFAULT_HEADLINES[:limit])
        ]


MOCK_NARRATIVE = """
<div class="analysis">
  <div class="summary">
    <h3>Executive Summary</h3>
    <p class="highlight">Momentum is constructive while price holds above support.</p>
  </div>
  <div class="predictions">
    <h3>Price Targets</h3>
    <div class="prediction short">
      <span class="timeframe">24H:</span>
      <span class="price">$98 - $104</span>
      <span class="confidence">Medium</span>
      <span class="reason">Range trading near the pivot</span>
    </div>
    <div class="prediction medium">
      <span class="timeframe">7D:</span>
      <span class="price">$95 - $110</span>
      <span class="confidence">Medium</span>
      <span class="reason">Trend intact above MA50</span>
    </div>
    <div class="prediction long">
      <span class="timeframe">30D:</span>
      <span class="price">$90 - $120</span>
      <span class="confidence">Low</span>
      <span class="reason">Macro uncertainty</span>
    </div>
  </div>
  <div class="signals">
    <h3>Key Signals</h3>
    <ul>
      <li class="signal-item positive">Price above MA50 and MA200</li>
      <li class="signal-item neutral">RSI in neutral territory</li>
      <li class="signal-item negative">Volume below average</li>
    </ul>
  </div>
  <div class="strategy">
    <h3>Trading Strategy</h3>
    <div class="position long">
      <span class="label">Position:</span>
      <span class="value">Long</span>
    </div>
    <div class="levels">
      <div class="entry">Entry: $100.00</div>
      <div class="stop">Stop Loss: $95.00</div>
      <div class="target">Target: $110.00</div>
    </div>
  </div>
</div>
"""


class MockNarrativeGenerator(NarrativeGeneratorInterface):
    """Mock narrative generator returning a canned reply that follows the template."""

    def __init__(self, reply: str = MOCK_NARRATIVE):
        self.reply = reply
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply
