"""
Domain service: Temporal aggregation and carbon accounting of forest activity.

Turns a log of daily planting/cutting totals into per-period buckets
(day, week, month, year) and estimates the net CO₂ balance of each:
- Absorption is an annual per-tree rate prorated to the bucket length
- Cutting is a one-time release, never prorated
"""
import datetime as dt
import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from app.config import settings
from app.domain.exceptions import InvalidArgumentError, MalformedDateError
from app.domain.models import (
    CarbonStatus,
    DailyTotal,
    Event,
    EventAction,
    ImpactTier,
    Period,
    PeriodBucket,
    PeriodSummary,
)
from app.utils.period_helpers import (
    PERIOD_YEAR_FRACTION,
    SUMMARY_WINDOW_DAYS,
    SUMMARY_WINDOW_RECORDS,
    format_period_label,
    parse_iso_date,
    period_key,
)

logger = logging.getLogger(__name__)

KG_PER_TON = 1000.0

# Upper bounds (inclusive) of the critical and positive tiers, in tons
CRITICAL_THRESHOLD = -5.0
EXCELLENT_THRESHOLD = 5.0

# The impact meter spans -METER_RANGE..+METER_RANGE tons
METER_RANGE = 10.0

_STATUS_TEMPLATES: dict[ImpactTier, tuple[str, str]] = {
    ImpactTier.CRITICAL: ("#c62828", "Critical: releasing {tons:.2f} tons of CO₂"),
    ImpactTier.NEGATIVE: ("#f57c00", "Negative: releasing {tons:.2f} tons of CO₂"),
    ImpactTier.NEUTRAL: ("#ffb300", "Neutral: zero carbon impact"),
    ImpactTier.POSITIVE: ("#4caf50", "Positive: absorbing {tons:.2f} tons of CO₂"),
    ImpactTier.EXCELLENT: ("#2e7d32", "Excellent: absorbing {tons:.2f} tons of CO₂"),
}

PeriodLike = Union[Period, str]


@dataclass
class CarbonConfig:
    """Carbon accounting constants."""

    co2_absorbed_per_tree_per_year: float = 21.8
    """kg of CO2 absorbed by one tree in a year"""

    co2_released_per_cut_tree: float = 150.0
    """kg of CO2 released once when a tree is cut"""


class CarbonAggregator:
    """
    Domain service for grouping daily activity and estimating CO₂ impact.

    Stateless: every method is a pure function of its arguments and the
    configured constants, so one instance can be shared freely.
    """

    def __init__(self, config: Optional[CarbonConfig] = None):
        """
        Initialize the aggregator.

        Args:
            config: Carbon constants; defaults come from application settings
        """
        self.config = config or CarbonConfig(
            co2_absorbed_per_tree_per_year=settings.co2_absorbed_per_tree_per_year,
            co2_released_per_cut_tree=settings.co2_released_per_cut_tree,
        )

    def aggregate(
        self,
        daily_totals: Iterable[DailyTotal],
        period: PeriodLike,
    ) -> list[PeriodBucket]:
        """
        Group daily totals into period buckets.

        Args:
            daily_totals: Daily records in any order
            period: day, week, month or year

        Returns:
            Buckets in ascending order of their earliest date

        Raises:
            InvalidPeriodError: If the period is not recognized
        """
        period = Period.parse(period)

        planted: dict[Any, int] = defaultdict(int)
        cut: dict[Any, int] = defaultdict(int)
        start: dict[Any, dt.date] = {}
        record_count = 0

        for total in daily_totals:
            key = period_key(total.date, period)
            planted[key] += total.planted
            cut[key] += total.cut
            if key not in start or total.date < start[key]:
                start[key] = total.date
            record_count += 1

        ordered_keys = sorted(start, key=lambda k: (start[k], k))

        buckets = [
            PeriodBucket(
                period_label=format_period_label(key, period),
                start_date=start[key],
                planted=planted[key],
                cut=cut[key],
                co2_impact_tons=self.total_impact(planted[key], cut[key], period),
            )
            for key in ordered_keys
        ]

        logger.debug(f"Aggregated {record_count} daily records into "
                     f"{len(buckets)} {period.value} buckets")
        return buckets

    def total_impact(
        self,
        planted_count: int,
        cut_count: int,
        period: PeriodLike = Period.YEAR,
    ) -> float:
        """
        Net CO₂ impact of one bucket, in tons.

        Args:
            planted_count: Trees planted in the bucket
            cut_count: Trees cut in the bucket
            period: Length of the bucket

        Returns:
            Signed impact, positive when absorption exceeds release
        """
        period = Period.parse(period)
        return self._impact_tons(planted_count, cut_count, PERIOD_YEAR_FRACTION[period])

    def status_of(self, co2_impact_tons: float) -> CarbonStatus:
        """
        Classify a CO₂ balance on the five-tier scale.

        Tiers: (-inf, -5] critical, (-5, 0) negative, exactly 0 neutral,
        (0, 5] positive, (5, inf) excellent.

        Args:
            co2_impact_tons: Net impact in tons

        Returns:
            CarbonStatus with tier, message and meter position
        """
        try:
            impact = float(co2_impact_tons)
        except (TypeError, ValueError):
            raise InvalidArgumentError(f"CO2 impact must be a number, got {co2_impact_tons!r}") from None
        if math.isnan(impact):
            raise InvalidArgumentError("CO2 impact must be a number")

        if impact <= CRITICAL_THRESHOLD:
            tier = ImpactTier.CRITICAL
        elif impact < 0:
            tier = ImpactTier.NEGATIVE
        elif impact == 0:
            tier = ImpactTier.NEUTRAL
        elif impact <= EXCELLENT_THRESHOLD:
            tier = ImpactTier.POSITIVE
        else:
            tier = ImpactTier.EXCELLENT

        color, template = _STATUS_TEMPLATES[tier]
        percentage = (impact + METER_RANGE) / (METER_RANGE * 2) * 100

        return CarbonStatus(
            tier=tier,
            message_key=f"carbon.status.{tier.value}",
            message=template.format(tons=abs(impact)),
            color=color,
            meter_percentage=min(max(percentage, 0.0), 100.0),
        )

    def summarize_recent(
        self,
        daily_totals: Iterable[DailyTotal],
        period: PeriodLike,
    ) -> PeriodSummary:
        """
        Summarize the most recent window of daily records.

        Day covers the last record, week the last 7, month the last 30
        and year every record. Absorption is prorated by window length
        in days over 365.

        Args:
            daily_totals: Daily records in any order
            period: Window size selector

        Returns:
            PeriodSummary with totals, balance and impact
        """
        period = Period.parse(period)
        ordered = sorted(daily_totals, key=lambda t: t.date)

        window_size = SUMMARY_WINDOW_RECORDS[period]
        window = ordered if window_size is None else ordered[-window_size:]

        planted = sum(t.planted for t in window)
        cut = sum(t.cut for t in window)
        fraction = SUMMARY_WINDOW_DAYS[period] / 365

        logger.debug(f"Summarized last {len(window)} of {len(ordered)} records for {period.value}")

        return PeriodSummary(
            period=period,
            planted=planted,
            cut=cut,
            balance=planted - cut,
            co2_impact_tons=self._impact_tons(planted, cut, fraction),
        )

    def _impact_tons(self, planted: int, cut: int, year_fraction: float) -> float:
        absorbed = planted * self.config.co2_absorbed_per_tree_per_year * year_fraction
        released = cut * self.config.co2_released_per_cut_tree
        return (absorbed - released) / KG_PER_TON


def daily_totals_from_events(events: Iterable[Event]) -> list[DailyTotal]:
    """
    Fold events into one DailyTotal per date.

    Args:
        events: Recorded events in any order

    Returns:
        Daily totals sorted by date
    """
    planted: dict[dt.date, int] = defaultdict(int)
    cut: dict[dt.date, int] = defaultdict(int)

    for event in events:
        if event.action is EventAction.PLANTED:
            planted[event.date] += event.quantity
        else:
            cut[event.date] += event.quantity

    dates = sorted(set(planted) | set(cut))
    return [
        DailyTotal(date=day, planted=planted.get(day, 0), cut=cut.get(day, 0))
        for day in dates
    ]


def parse_daily_totals(records: Iterable[Mapping[str, Any]]) -> list[DailyTotal]:
    """
    Convert raw {date, planted, cut} records into DailyTotals.

    Args:
        records: Mappings with an ISO date string and optional counts

    Returns:
        DailyTotals in input order

    Raises:
        MalformedDateError: If a date is missing or not YYYY-MM-DD
        InvalidArgumentError: If a count is negative or not an integer
    """
    totals = []

    for index, record in enumerate(records):
        raw_date = record.get("date")

        if isinstance(raw_date, dt.date) and not isinstance(raw_date, dt.datetime):
            day = raw_date
        elif isinstance(raw_date, str):
            try:
                day = parse_iso_date(raw_date)
            except ValueError:
                raise MalformedDateError(index, raw_date) from None
        else:
            raise MalformedDateError(index, raw_date)

        try:
            totals.append(DailyTotal(
                date=day,
                planted=record.get("planted") or 0,
                cut=record.get("cut") or 0,
            ))
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid counts in record {index}: {e}") from e

    return totals
