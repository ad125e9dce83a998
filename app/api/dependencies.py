"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from fastapi import Depends

from app.services.domain.carbon_aggregator import CarbonAggregator
from app.services.domain.diamond_layout import DiamondLayoutGenerator
from app.services.application.dashboard_service import DashboardService


def get_carbon_aggregator() -> CarbonAggregator:
    """
    Dependency factory for CarbonAggregator.

    Returns:
        CarbonAggregator instance
    """
    return CarbonAggregator()


def get_layout_generator() -> DiamondLayoutGenerator:
    """
    Dependency factory for DiamondLayoutGenerator.

    Returns:
        DiamondLayoutGenerator instance
    """
    return DiamondLayoutGenerator()


def get_dashboard_service(
    aggregator: Annotated[CarbonAggregator, Depends(get_carbon_aggregator)],
    layout_generator: Annotated[DiamondLayoutGenerator, Depends(get_layout_generator)],
) -> DashboardService:
    """
    Dependency factory for DashboardService.

    Args:
        aggregator: Carbon aggregator (injected)
        layout_generator: Layout generator (injected)

    Returns:
        DashboardService instance
    """
    return DashboardService(aggregator=aggregator, layout_generator=layout_generator)


# Type aliases for cleaner route signatures
DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]
