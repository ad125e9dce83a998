"""
API router for carbon accounting endpoints.
"""
from fastapi import APIRouter, HTTPException, Query
from typing import Annotated

from app.api.dependencies import DashboardServiceDep
from app.api.v1.models.requests import EventsRequest, RecordsRequest
from app.api.v1.models.responses import (
    AggregationResponse,
    DailyTotalsResponse,
    ImpactResponse,
    SummaryResponse,
)
from app.domain.exceptions import CarbonMonitoringError
from app.domain.models import CarbonStatus, Period


router = APIRouter(
    prefix="/carbon",
    tags=["carbon"],
)

COMMON_RESPONSES = {
    400: {"description": "Malformed date, unknown period or invalid argument"},
    429: {"description": "Rate limit exceeded"},
}


@router.post(
    "/aggregate",
    response_model=AggregationResponse,
    summary="Aggregate daily records by period",
    description="""
    Group daily planting/cutting records into day, week, month or year
    buckets and estimate the CO₂ balance of each bucket.

    - Absorption is prorated from the annual per-tree rate (1/365, 1/52, 1/12, 1)
    - Cut trees release their CO₂ once, regardless of the period
    - Weeks are numbered from January 1st, not ISO-8601
    """,
    responses=COMMON_RESPONSES,
)
async def aggregate(
    request: RecordsRequest,
    dashboard_service: DashboardServiceDep,
) -> AggregationResponse:
    """
    Aggregate daily records.

    Args:
        request: Period and daily records
        dashboard_service: Dashboard service (injected dependency)

    Returns:
        AggregationResponse with chronological buckets and totals
    """
    try:
        buckets = dashboard_service.aggregate_records(
            [record.model_dump() for record in request.records],
            request.period,
        )
    except CarbonMonitoringError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return AggregationResponse(
        period=Period.parse(request.period).value,
        buckets=buckets,
        total_planted=sum(b.planted for b in buckets),
        total_cut=sum(b.cut for b in buckets),
        total_co2_impact_tons=sum(b.co2_impact_tons for b in buckets),
    )


@router.post(
    "/summary",
    response_model=SummaryResponse,
    summary="Summarize the most recent activity",
    description="""
    Totals over the latest records: the last record for day, the last 7
    for week, the last 30 for month and every record for year, with the
    resulting CO₂ balance and its status tier.
    """,
    responses=COMMON_RESPONSES,
)
async def summarize(
    request: RecordsRequest,
    dashboard_service: DashboardServiceDep,
) -> SummaryResponse:
    """Summarize recent records."""
    try:
        summary, status = dashboard_service.summarize_records(
            [record.model_dump() for record in request.records],
            request.period,
        )
    except CarbonMonitoringError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SummaryResponse(summary=summary, status=status)


@router.get(
    "/impact",
    response_model=ImpactResponse,
    summary="Estimate CO₂ impact for given counts",
    responses=COMMON_RESPONSES,
)
async def impact(
    dashboard_service: DashboardServiceDep,
    planted: Annotated[int, Query(ge=0, description="Trees planted")] = 0,
    cut: Annotated[int, Query(ge=0, description="Trees cut")] = 0,
    period: Annotated[str, Query(description="day, week, month or year")] = "year",
) -> ImpactResponse:
    """Point-in-time CO₂ estimate for one bucket."""
    try:
        co2_impact_tons, status = dashboard_service.estimate_impact(planted, cut, period)
    except CarbonMonitoringError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ImpactResponse(co2_impact_tons=co2_impact_tons, status=status)


@router.get(
    "/status",
    response_model=CarbonStatus,
    summary="Classify a CO₂ balance",
    description="""
    Map a CO₂ balance in tons onto the five-tier scale:
    critical (<= -5), negative (< 0), neutral (exactly 0),
    positive (<= 5) and excellent (> 5).
    """,
    responses=COMMON_RESPONSES,
)
async def status(
    co2_impact_tons: Annotated[float, Query(description="Net CO₂ balance in tons")],
    dashboard_service: DashboardServiceDep,
) -> CarbonStatus:
    """Classify a CO₂ balance."""
    try:
        return dashboard_service.classify(co2_impact_tons)
    except CarbonMonitoringError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/daily-totals",
    response_model=DailyTotalsResponse,
    summary="Fold events into daily totals",
    responses=COMMON_RESPONSES,
)
async def daily_totals(
    request: EventsRequest,
    dashboard_service: DashboardServiceDep,
) -> DailyTotalsResponse:
    """Sum same-day events by action."""
    return DailyTotalsResponse(
        daily_totals=dashboard_service.daily_totals(request.events)
    )
