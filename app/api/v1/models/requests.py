"""
API request models using Pydantic.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from app.domain.models import Event


class DailyRecord(BaseModel):
    """One day of activity as sent by the client."""
    date: str = Field(
        description="Calendar date as YYYY-MM-DD",
        examples=["2024-01-15"]
    )
    planted: int = Field(default=0, ge=0, description="Trees planted that day")
    cut: int = Field(default=0, ge=0, description="Trees cut that day")


class RecordsRequest(BaseModel):
    """Request body for aggregation and summary endpoints."""
    period: str = Field(
        default="day",
        description="Aggregation period: day, week, month or year"
    )
    records: List[DailyRecord] = Field(
        description="Daily records in any order"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "period": "week",
                "records": [
                    {"date": "2024-01-01", "planted": 10, "cut": 0},
                    {"date": "2024-01-02", "planted": 0, "cut": 5},
                ]
            }
        }


class EventsRequest(BaseModel):
    """Request body for folding events into daily totals."""
    events: List[Event] = Field(
        description="Recorded planting and cutting events"
    )


class LayoutRequest(BaseModel):
    """Request body for the scene layout endpoint."""
    total_slots: Optional[int] = Field(
        default=None, ge=0,
        description="Number of markers; defaults to the configured scene size"
    )
    tree_fraction: Optional[float] = Field(
        default=None, ge=0.0, le=1.0,
        description="Share of markers drawn as trees"
    )
    planted: Optional[int] = Field(
        default=None, ge=0,
        description="Total planted, used to derive tree_fraction when omitted"
    )
    cut: Optional[int] = Field(
        default=None, ge=0,
        description="Total cut, used to derive tree_fraction when omitted"
    )
    width: Optional[float] = Field(default=None, gt=0, description="Scene width")
    height: Optional[float] = Field(default=None, gt=0, description="Scene height")
    min_separation: Optional[float] = Field(
        default=None, gt=0,
        description="Minimum distance between markers"
    )
    seed: Optional[int] = Field(
        default=None, ge=0,
        description="Seed for a reproducible layout"
    )
