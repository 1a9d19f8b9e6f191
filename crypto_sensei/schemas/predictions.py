"""Schemas for price targets and per-timeframe confidence."""

from enum import Enum

from pydantic import Field, model_validator

from crypto_sensei.schemas.base import StrictBaseModel


class Timeframe(str, Enum):
    """Analysis horizons.

    Callers use two label sets interchangeably: 24H/7D/30D and Short/Mid/Long.
    """
    SHORT_TERM = "24H"
    MID_TERM = "7D"
    LONG_TERM = "30D"

    @classmethod
    def from_label(cls, label: str) -> "Timeframe":
        """Resolve either label set ('7D', 'Mid', 'mid-term', 'mid_term') to a timeframe."""
        normalized = label.strip().lower().replace("-", "_").replace(" ", "_")
        aliases = {
            "24h": cls.SHORT_TERM,
            "short": cls.SHORT_TERM,
            "short_term": cls.SHORT_TERM,
            "7d": cls.MID_TERM,
            "mid": cls.MID_TERM,
            "mid_term": cls.MID_TERM,
            "medium": cls.MID_TERM,
            "30d": cls.LONG_TERM,
            "long": cls.LONG_TERM,
            "long_term": cls.LONG_TERM,
        }
        if normalized not in aliases:
            raise ValueError(f"Unknown timeframe label: {label!r}")
        return aliases[normalized]

    @property
    def field_name(self) -> str:
        return {
            Timeframe.SHORT_TERM: "short_term",
            Timeframe.MID_TERM: "mid_term",
            Timeframe.LONG_TERM: "long_term",
        }[self]


class PriceTarget(StrictBaseModel):
    """Predicted price range for one horizon."""

    low: float
    high: float
    confidence: float = Field(..., ge=0, le=100)

    @model_validator(mode="after")
    def check_range(self) -> "PriceTarget":
        if self.low > self.high:
            raise ValueError(f"Price target low ({self.low}) exceeds high ({self.high})")
        return self

    @property
    def range_text(self) -> str:
        return f"${self.low:.2f} - ${self.high:.2f}"


class _ByTimeframe(StrictBaseModel):
    def for_timeframe(self, label: "str | Timeframe"):
        """Look up a horizon by either label set."""
        timeframe = label if isinstance(label, Timeframe) else Timeframe.from_label(label)
        return getattr(self, timeframe.field_name)


class PriceTargets(_ByTimeframe):
    """Price targets for the short, mid and long horizons."""

    short_term: PriceTarget
    mid_term: PriceTarget
    long_term: PriceTarget


class TimeframeConfidence(_ByTimeframe):
    """Analysis confidence decayed across horizons."""

    short_term: float = Field(..., ge=0, le=100)
    mid_term: float = Field(..., ge=0, le=100)
    long_term: float = Field(..., ge=0, le=100)
