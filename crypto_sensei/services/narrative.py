"""AI narrative prompt rendering and reply parsing.

The prompt asks the generator to answer in a fixed HTML template. The reply
is parsed back by matching the template's class markers only; anything that
does not follow the template yields no parsed narrative, and callers fall back
to the deterministic market summary.
"""

import html
import json
import re

from crypto_sensei.schemas.analysis import (
    NarrativePredictions,
    NarrativeSignal,
    NarrativeStrategy,
    ParsedNarrative,
)
from crypto_sensei.schemas.indicators import TechnicalIndicators
from crypto_sensei.schemas.market import NewsHeadline, NewsSentiment

PROMPT_TEMPLATE = """
Analyze {symbol} market data and provide a structured analysis in HTML format:

TECHNICAL METRICS:
- Price: {price} USD
- RSI(14): {rsi}
- MACD: {macd}
- Moving Averages: MA20={ma20}, MA50={ma50}, MA200={ma200}
- Volume Change: {volume_change}x average

MARKET CONTEXT:
- Current Phase: {phase}
- Volatility: {volatility}%
- Support: {support}
- Resistance: {resistance}

SENTIMENT:
- News Sentiment: {news_score}% positive
- Market Mood: {mood}
- News: {news}

Format your response in this exact HTML structure:

<div class="analysis">
  <div class="summary">
    <h3>Executive Summary</h3>
    <p class="highlight">[2-line market summary]</p>
  </div>

  <div class="predictions">
    <h3>Price Targets</h3>
    <div class="prediction short">
      <span class="timeframe">24H:</span>
      <span class="price">[range]</span>
      <span class="confidence">[High/Medium/Low]</span>
      <span class="reason">[one-line reason]</span>
    </div>
    [Similar divs with classes "prediction medium" for 7D and "prediction long" for 30D]
  </div>

  <div class="signals">
    <h3>Key Signals</h3>
    <ul>
      <li class="signal-item [positive/negative/neutral]">[Signal 1]</li>
      <li class="signal-item [positive/negative/neutral]">[Signal 2]</li>
      <li class="signal-item [positive/negative/neutral]">[Signal 3]</li>
    </ul>
  </div>

  <div class="strategy">
    <h3>Trading Strategy</h3>
    <div class="position [long/short/neutral]">
      <span class="label">Position:</span>
      <span class="value">[Long/Short/Neutral]</span>
    </div>
    <div class="levels">
      <div class="entry">Entry: $[price]</div>
      <div class="stop">Stop Loss: $[price]</div>
      <div class="target">Target: $[price]</div>
    </div>
  </div>
</div>

Keep all explanations brief and focused. Use appropriate class names (positive/negative/neutral) based on the nature of each signal.
Remove any markdown formatting (**) from the output.
Ensure all price levels are properly formatted with $ symbol.
"""

_FLAGS = re.IGNORECASE | re.DOTALL
_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def _class_attr(*names: str, capture: bool = False) -> str:
    """Class attribute in either quote style containing every name, in order."""
    value = r"[^\"']*" + r"[^\"']*".join(rf"\b{name}\b" for name in names) + r"[^\"']*"
    if capture:
        value = f"({value})"
    return rf"""class=["']{value}["']"""


_SUMMARY = re.compile(rf"<p\b[^>]*{_class_attr('highlight')}[^>]*>(.*?)</p>", _FLAGS)
_SIGNAL_ITEM = re.compile(
    rf"<li\b[^>]*{_class_attr('signal-item', capture=True)}[^>]*>(.*?)</li>", _FLAGS
)
_LEVEL_LABEL = re.compile(r"^[A-Za-z ]+:\s*")
_STRATEGY_START = re.compile(_class_attr("strategy"), _FLAGS)
_POSITION_VALUE = re.compile(
    rf"{_class_attr('position')}.*?<span\b[^>]*{_class_attr('value')}[^>]*>(.*?)</span>",
    _FLAGS,
)

_PREDICTION_CLASSES = {"short_term": "short", "mid_term": "medium", "long_term": "long"}


def _text(fragment: str) -> str:
    """Strip tags, unescape entities and collapse whitespace."""
    return _WHITESPACE.sub(" ", html.unescape(_TAG.sub(" ", fragment))).strip()


def _prediction_price(text: str, css_class: str) -> str:
    block = re.search(
        rf"<div\b[^>]*{_class_attr('prediction', css_class)}[^>]*>(.*?)</div>", text, _FLAGS
    )
    if not block:
        return ""
    price = re.search(
        rf"<span\b[^>]*{_class_attr('price')}[^>]*>(.*?)</span>", block.group(1), _FLAGS
    )
    return _text(price.group(1)) if price else ""


def _level(segment: str, css_class: str) -> str | None:
    match = re.search(rf"<(\w+)\b[^>]*{_class_attr(css_class)}[^>]*>(.*?)</\1>", segment, _FLAGS)
    if not match:
        return None
    # "Stop Loss: $95.00" -> "$95.00"
    return _LEVEL_LABEL.sub("", _text(match.group(2))) or None


def _signal_type(classes: str) -> str:
    tokens = classes.lower().split()
    if "positive" in tokens:
        return "positive"
    if "negative" in tokens:
        return "negative"
    return "neutral"


def _parse_strategy(text: str) -> NarrativeStrategy | None:
    start = _STRATEGY_START.search(text)
    if not start:
        return None
    segment = text[start.start():]

    position_match = _POSITION_VALUE.search(segment)
    position = _text(position_match.group(1)) if position_match else None
    entry = _level(segment, "entry")
    stop = _level(segment, "stop")
    target = _level(segment, "target")

    if not any([position, entry, stop, target]):
        return None

    return NarrativeStrategy(
        position=position or "N/A",
        entry=entry or "N/A",
        stop=stop or "N/A",
        target=target or "N/A",
    )


def parse_narrative(text: str | None) -> ParsedNarrative | None:
    """Parse an AI reply that follows the prompt template.

    Args:
        text: Generated reply

    Returns:
        ParsedNarrative, or None when no template section is recognized
    """
    if not text:
        return None

    summary_match = _SUMMARY.search(text)
    summary = _text(summary_match.group(1)) if summary_match else None

    predictions = NarrativePredictions(
        **{field: _prediction_price(text, css) for field, css in _PREDICTION_CLASSES.items()}
    )

    signals = [
        NarrativeSignal(text=_text(body), type=_signal_type(classes))
        for classes, body in _SIGNAL_ITEM.findall(text)
    ]
    signals = [signal for signal in signals if signal.text]

    strategy = _parse_strategy(text)

    has_predictions = any([predictions.short_term, predictions.mid_term, predictions.long_term])
    if not (summary or has_predictions or signals or strategy):
        return None

    reasoning = ([summary] if summary else []) + [signal.text for signal in signals]
    if strategy:
        reasoning += [
            f"Position: {strategy.position}",
            f"Entry: {strategy.entry}",
            f"Stop: {strategy.stop}",
            f"Target: {strategy.target}",
        ]

    return ParsedNarrative(
        summary=summary or None,
        predictions=predictions,
        signals=signals,
        strategy=strategy,
        reasoning=reasoning,
    )


def extract_prediction_bias(line: str) -> str:
    """Read a directional bias from a prediction line.

    Range wording decides first ('price range: ... higher'), then the
    confidence wording ('confidence: high').

    Returns:
        'Bullish', 'Bearish' or 'Neutral'
    """
    lower = line.lower()

    if "price range:" in lower:
        if any(word in lower for word in ("upward", "higher", "increase")):
            return "Bullish"
        if any(word in lower for word in ("downward", "lower", "decrease")):
            return "Bearish"

    if "confidence:" in lower:
        if "high" in lower:
            return "Bullish"
        if "low" in lower:
            return "Bearish"

    return "Neutral"


def build_narrative_prompt(
    symbol: str,
    indicators: TechnicalIndicators,
    sentiment: NewsSentiment,
    headlines: list[NewsHeadline],
) -> str:
    """Render the narrative prompt for one analysis."""
    news = json.dumps(
        [{"title": h.title, "sentiment": h.sentiment.value} for h in headlines]
    )
    return PROMPT_TEMPLATE.format(
        symbol=symbol,
        price=indicators.current_price,
        rsi=round(indicators.rsi, 2),
        macd=indicators.macd.model_dump_json(),
        ma20=round(indicators.ma20, 2),
        ma50=round(indicators.ma50, 2),
        ma200=round(indicators.ma200, 2),
        volume_change=round(indicators.volume_change, 2),
        phase=indicators.market_phase.value,
        volatility=round(indicators.volatility, 2),
        support=indicators.support,
        resistance=indicators.resistance,
        news_score=round(sentiment.news_score, 2),
        mood=sentiment.market_mood.value,
        news=news,
    )
