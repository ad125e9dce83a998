"""
Domain models for forest activity, carbon aggregates and scene markers.

These models represent the core domain entities and should be independent
of any infrastructure concerns (HTTP, databases, rendering).
"""
import datetime as dt
from enum import Enum
from pydantic import BaseModel, Field

from app.domain.exceptions import InvalidPeriodError


class EventAction(str, Enum):
    """What happened to the trees in an event."""
    PLANTED = "planted"
    CUT = "cut"


class Period(str, Enum):
    """Granularity of temporal aggregation."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @classmethod
    def parse(cls, value) -> "Period":
        """Coerce a string or Period into a Period, raising InvalidPeriodError."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidPeriodError(value)


class MarkerKind(str, Enum):
    """Kind of marker drawn in the forest scene."""
    TREE = "tree"
    STUMP = "stump"


class ImpactTier(str, Enum):
    """Ordered carbon impact scale, worst first."""
    CRITICAL = "critical"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    POSITIVE = "positive"
    EXCELLENT = "excellent"


class Event(BaseModel):
    """A single recorded planting or cutting action."""
    date: dt.date
    action: EventAction
    quantity: int = Field(ge=1, description="Number of trees")

    class Config:
        frozen = True


class DailyTotal(BaseModel):
    """One date's net activity."""
    date: dt.date
    planted: int = Field(default=0, ge=0)
    cut: int = Field(default=0, ge=0)

    class Config:
        frozen = True


class PeriodBucket(BaseModel):
    """Aggregated totals for one day, week, month or year."""
    period_label: str = Field(
        description=(
            "YYYY-MM-DD, YYYY-Www, YYYY-MM or YYYY. Weeks are counted from "
            "January 1st with Sunday as the first day, not ISO-8601 weeks, "
            "so 2024-12-31 is 2024-W53 rather than ISO 2025-W01"
        )
    )
    start_date: dt.date = Field(
        description="Earliest date present in the bucket"
    )
    planted: int
    cut: int
    co2_impact_tons: float = Field(
        description="Net CO₂ balance in tons, positive = absorption"
    )

    class Config:
        frozen = True


class PeriodSummary(BaseModel):
    """Totals over the most recent window of daily records."""
    period: Period
    planted: int
    cut: int
    balance: int
    co2_impact_tons: float

    class Config:
        frozen = True


class CarbonStatus(BaseModel):
    """Classification of a CO₂ balance."""
    tier: ImpactTier
    message_key: str
    message: str
    color: str
    meter_percentage: float = Field(
        description="Position on a -10..+10 ton meter, 0-100"
    )

    class Config:
        frozen = True


class MarkerPoint(BaseModel):
    """A tree or stump placed in the scene."""
    x: float
    y: float
    kind: MarkerKind

    class Config:
        frozen = True
