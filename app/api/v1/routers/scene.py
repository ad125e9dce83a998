"""
API router for the forest scene endpoints.
"""
from fastapi import APIRouter, HTTPException

from app.api.dependencies import DashboardServiceDep
from app.api.v1.models.requests import LayoutRequest
from app.api.v1.models.responses import LayoutResponse
from app.domain.exceptions import CarbonMonitoringError
from app.domain.models import MarkerKind


router = APIRouter(
    prefix="/scene",
    tags=["scene"],
)


@router.post(
    "/layout",
    response_model=LayoutResponse,
    summary="Lay out tree and stump markers",
    description="""
    Scatter markers inside the diamond inscribed in a width x height
    rectangle.

    The layout:
    1. Labels the first round(total_slots * tree_fraction) markers as trees
    2. Samples each marker uniformly over the rectangle
    3. Keeps samples inside the diamond and at least min_separation apart
    4. Gives up after a bounded number of attempts and accepts an overlap

    When tree_fraction is omitted it is derived from planted and cut totals
    as 1 - cut / planted. A seed makes the layout reproducible.
    """,
    responses={
        400: {"description": "Invalid layout arguments"},
        429: {"description": "Rate limit exceeded"},
    },
)
async def layout(
    request: LayoutRequest,
    dashboard_service: DashboardServiceDep,
) -> LayoutResponse:
    """
    Build the forest scene layout.

    Args:
        request: Layout parameters
        dashboard_service: Dashboard service (injected dependency)

    Returns:
        LayoutResponse with marker coordinates
    """
    try:
        markers = dashboard_service.build_scene(
            total_slots=request.total_slots,
            tree_fraction=request.tree_fraction,
            planted=request.planted,
            cut=request.cut,
            width=request.width,
            height=request.height,
            min_separation=request.min_separation,
            rng=request.seed,
        )
    except CarbonMonitoringError as e:
        raise HTTPException(status_code=400, detail=str(e))

    tree_count = sum(1 for m in markers if m.kind is MarkerKind.TREE)
    return LayoutResponse(
        tree_count=tree_count,
        stump_count=len(markers) - tree_count,
        markers=markers,
    )
