"""
API response models using Pydantic.
"""
from typing import List
from pydantic import BaseModel, Field

from app.domain.models import (
    CarbonStatus,
    DailyTotal,
    MarkerPoint,
    PeriodBucket,
    PeriodSummary,
)


class AggregationResponse(BaseModel):
    """Response model for the aggregation endpoint."""
    period: str = Field(description="Aggregation period")
    buckets: List[PeriodBucket] = Field(
        description="Per-period totals in chronological order"
    )
    total_planted: int
    total_cut: int
    total_co2_impact_tons: float = Field(
        description="Sum of the bucket impacts"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "period": "day",
                "buckets": [
                    {
                        "period_label": "2024-01-01",
                        "start_date": "2024-01-01",
                        "planted": 10,
                        "cut": 0,
                        "co2_impact_tons": 0.000597,
                    },
                    {
                        "period_label": "2024-01-02",
                        "start_date": "2024-01-02",
                        "planted": 0,
                        "cut": 5,
                        "co2_impact_tons": -0.75,
                    },
                ],
                "total_planted": 10,
                "total_cut": 5,
                "total_co2_impact_tons": -0.749403,
            }
        }


class SummaryResponse(BaseModel):
    """Response model for the recent-activity summary endpoint."""
    summary: PeriodSummary
    status: CarbonStatus


class ImpactResponse(BaseModel):
    """Response model for the point-in-time impact endpoint."""
    co2_impact_tons: float
    status: CarbonStatus


class DailyTotalsResponse(BaseModel):
    """Response model for folding events into daily totals."""
    daily_totals: List[DailyTotal]


class LayoutResponse(BaseModel):
    """Response model for the scene layout endpoint."""
    tree_count: int = Field(description="Markers labelled as trees")
    stump_count: int = Field(description="Markers labelled as stumps")
    markers: List[MarkerPoint] = Field(
        description="Marker coordinates, trees first"
    )
