"""
Application service: Orchestration layer for dashboard operations.
"""
from typing import Any, Iterable, Mapping, Optional

from app.config import settings
from app.domain.models import (
    CarbonStatus,
    DailyTotal,
    Event,
    MarkerPoint,
    PeriodBucket,
    PeriodSummary,
)
from app.services.domain.carbon_aggregator import (
    CarbonAggregator,
    PeriodLike,
    daily_totals_from_events,
    parse_daily_totals,
)
from app.services.domain.diamond_layout import (
    DiamondLayoutGenerator,
    RandomSource,
    tree_fraction_from_totals,
)


class DashboardService:
    """
    Application service for the forest monitoring dashboard.

    Coordinates record parsing with the carbon and layout domain services.
    Follows the application layer pattern - no business logic here,
    only coordination between the boundary format and the domain layer.
    """

    def __init__(
        self,
        aggregator: CarbonAggregator,
        layout_generator: DiamondLayoutGenerator,
    ):
        """
        Initialize the service with dependencies.

        Args:
            aggregator: Carbon aggregation engine
            layout_generator: Scene marker layout generator
        """
        self.aggregator = aggregator
        self.layout_generator = layout_generator

    def aggregate_records(
        self,
        records: Iterable[Mapping[str, Any]],
        period: PeriodLike,
    ) -> list[PeriodBucket]:
        """
        Parse raw daily records and group them by period.

        Args:
            records: {date, planted, cut} mappings
            period: day, week, month or year

        Returns:
            Chronological period buckets

        Raises:
            MalformedDateError: If a record date is invalid
            InvalidPeriodError: If the period is not recognized
        """
        daily_totals = parse_daily_totals(records)
        return self.aggregator.aggregate(daily_totals, period)

    def summarize_records(
        self,
        records: Iterable[Mapping[str, Any]],
        period: PeriodLike,
    ) -> tuple[PeriodSummary, CarbonStatus]:
        """
        Summarize the latest window of records and classify its impact.

        Args:
            records: {date, planted, cut} mappings
            period: Window selector

        Returns:
            Tuple of (summary, status)
        """
        daily_totals = parse_daily_totals(records)
        summary = self.aggregator.summarize_recent(daily_totals, period)
        return summary, self.aggregator.status_of(summary.co2_impact_tons)

    def estimate_impact(
        self,
        planted: int,
        cut: int,
        period: PeriodLike,
    ) -> tuple[float, CarbonStatus]:
        """
        Point-in-time CO₂ estimate for a single bucket.

        Args:
            planted: Trees planted
            cut: Trees cut
            period: Length of the bucket

        Returns:
            Tuple of (impact in tons, status)
        """
        impact = self.aggregator.total_impact(planted, cut, period)
        return impact, self.aggregator.status_of(impact)

    def classify(self, co2_impact_tons: float) -> CarbonStatus:
        """Classify a CO₂ balance."""
        return self.aggregator.status_of(co2_impact_tons)

    def daily_totals(self, events: Iterable[Event]) -> list[DailyTotal]:
        """Fold recorded events into daily totals."""
        return daily_totals_from_events(events)

    def build_scene(
        self,
        total_slots: Optional[int] = None,
        tree_fraction: Optional[float] = None,
        planted: Optional[int] = None,
        cut: Optional[int] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        min_separation: Optional[float] = None,
        rng: RandomSource = None,
    ) -> list[MarkerPoint]:
        """
        Lay out the forest scene markers.

        The tree fraction is taken as given, or derived from planted and
        cut totals when it is omitted. Missing dimensions fall back to the
        configured scene defaults.

        Args:
            total_slots: Number of markers
            tree_fraction: Share of markers drawn as trees
            planted: Total planted, used when tree_fraction is None
            cut: Total cut, used when tree_fraction is None
            width: Scene width
            height: Scene height
            min_separation: Minimum marker distance
            rng: numpy Generator or seed

        Returns:
            Placed markers, trees first
        """
        if tree_fraction is None:
            tree_fraction = tree_fraction_from_totals(
                0 if planted is None else planted,
                0 if cut is None else cut,
            )

        return self.layout_generator.place(
            total_slots=settings.scene_total_slots if total_slots is None else total_slots,
            tree_fraction=tree_fraction,
            width=settings.scene_width if width is None else width,
            height=settings.scene_height if height is None else height,
            min_separation=settings.scene_min_separation if min_separation is None else min_separation,
            rng=rng,
        )
