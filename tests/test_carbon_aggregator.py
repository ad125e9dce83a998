"""
Unit tests for the carbon aggregation engine.

Tests cover:
- Period grouping keys and January-1st week numbering
- Bucket ordering and partitioning
- CO₂ impact formula
- Status tiers
- Recent-activity summaries
- Record parsing and event folding
"""
import datetime as dt

import pytest

from app.domain.exceptions import (
    InvalidArgumentError,
    InvalidPeriodError,
    MalformedDateError,
)
from app.domain.models import DailyTotal, ImpactTier, Period, PeriodBucket
from app.services.domain.carbon_aggregator import (
    CarbonAggregator,
    CarbonConfig,
    daily_totals_from_events,
    parse_daily_totals,
)
from app.utils.period_helpers import (
    format_period_label,
    period_key,
    week_of_year,
)


# ============================================================
# Week Numbering Tests
# ============================================================

class TestWeekNumbering:
    """Tests for the January-1st anchored week number."""

    def test_first_day_of_year_is_week_one(self):
        """January 1st always falls in week 1."""
        for year in range(2018, 2030):
            assert week_of_year(dt.date(year, 1, 1)) == 1

    def test_weeks_start_on_sunday(self):
        """2024-01-01 is a Monday, so Sunday 2024-01-07 opens week 2."""
        assert week_of_year(dt.date(2024, 1, 6)) == 1
        assert week_of_year(dt.date(2024, 1, 7)) == 2

    def test_year_starting_on_sunday(self):
        """2023-01-01 is a Sunday, so week 1 is a full week."""
        assert week_of_year(dt.date(2023, 1, 7)) == 1
        assert week_of_year(dt.date(2023, 1, 8)) == 2

    def test_differs_from_iso_week(self):
        """2024-12-31 is ISO week 1 of 2025 but week 53 of 2024 here."""
        day = dt.date(2024, 12, 31)

        assert day.isocalendar()[1] == 1
        assert week_of_year(day) == 53
        assert period_key(day, Period.WEEK) == (2024, 53)

    def test_week_numbering_documented_on_bucket(self):
        """The bucket label description warns that weeks are not ISO weeks."""
        description = PeriodBucket.model_json_schema()["properties"]["period_label"]["description"]

        assert "not ISO-8601" in description
        assert "2024-W53" in description

    def test_labels(self):
        """Labels use ISO-like formats."""
        day = dt.date(2024, 3, 5)

        assert format_period_label(period_key(day, Period.DAY), Period.DAY) == "2024-03-05"
        assert format_period_label(period_key(day, Period.WEEK), Period.WEEK) == "2024-W10"
        assert format_period_label(period_key(day, Period.MONTH), Period.MONTH) == "2024-03"
        assert format_period_label(period_key(day, Period.YEAR), Period.YEAR) == "2024"


# ============================================================
# Aggregation Tests
# ============================================================

class TestAggregate:
    """Tests for period aggregation."""

    def test_daily_scenario(self, aggregator):
        """Planting accrues a day of absorption, cutting releases at once."""
        totals = [
            DailyTotal(date=dt.date(2024, 1, 1), planted=10, cut=0),
            DailyTotal(date=dt.date(2024, 1, 2), planted=0, cut=5),
        ]

        buckets = aggregator.aggregate(totals, Period.DAY)

        assert [b.period_label for b in buckets] == ["2024-01-01", "2024-01-02"]
        assert buckets[0].co2_impact_tons == pytest.approx(10 * 21.8 / 365 / 1000)
        assert buckets[0].co2_impact_tons == pytest.approx(0.000597, abs=1e-6)
        assert buckets[1].co2_impact_tons == pytest.approx(-0.75)

    def test_empty_input(self, aggregator):
        """Empty input produces no buckets for every period."""
        for period in Period:
            assert aggregator.aggregate([], period) == []

    def test_unknown_period_raises(self, aggregator, sample_daily_totals):
        """Unknown periods fail instead of returning nothing."""
        with pytest.raises(InvalidPeriodError) as exc_info:
            aggregator.aggregate(sample_daily_totals, "fortnight")

        assert exc_info.value.period == "fortnight"

    def test_unknown_period_raises_on_empty_input(self, aggregator):
        """The period is checked even when there is nothing to group."""
        with pytest.raises(InvalidPeriodError):
            aggregator.aggregate([], "quarter")

    def test_period_strings_accepted(self, aggregator, sample_daily_totals):
        """Period may be passed as a case-insensitive string."""
        assert aggregator.aggregate(sample_daily_totals, "Month") == \
            aggregator.aggregate(sample_daily_totals, Period.MONTH)

    def test_output_is_chronological(self, aggregator, sample_daily_totals):
        """Unsorted input comes back in ascending date order."""
        buckets = aggregator.aggregate(sample_daily_totals, Period.DAY)
        dates = [b.start_date for b in buckets]

        assert dates == sorted(dates)
        assert buckets[0].period_label == "2023-12-30"

    def test_week_buckets(self, aggregator, sample_daily_totals):
        """Weeks split at the year boundary and at Sundays."""
        buckets = aggregator.aggregate(sample_daily_totals, Period.WEEK)

        assert [b.period_label for b in buckets] == [
            "2023-W52",  # Sat 30 Dec 2023
            "2023-W53",  # Sun 31 Dec 2023 opens a new week
            "2024-W01",  # 1-2 Jan 2024
            "2024-W02",  # 7 Jan 2024
            "2024-W07",  # 14 Feb 2024
        ]
        assert buckets[2].planted == 10
        assert buckets[2].cut == 5
        assert buckets[2].start_date == dt.date(2024, 1, 1)

    def test_month_buckets(self, aggregator, sample_daily_totals):
        """Months group by (year, month)."""
        buckets = aggregator.aggregate(sample_daily_totals, Period.MONTH)

        assert [(b.period_label, b.planted, b.cut) for b in buckets] == [
            ("2023-12", 9, 1),
            ("2024-01", 14, 5),
            ("2024-02", 3, 2),
        ]
        assert buckets[1].co2_impact_tons == pytest.approx((14 * 21.8 / 12 - 5 * 150) / 1000)

    def test_year_buckets(self, aggregator, sample_daily_totals):
        """Years group by calendar year."""
        buckets = aggregator.aggregate(sample_daily_totals, Period.YEAR)

        assert [(b.period_label, b.planted, b.cut) for b in buckets] == [
            ("2023", 9, 1),
            ("2024", 17, 7),
        ]
        assert buckets[0].co2_impact_tons == pytest.approx((9 * 21.8 - 150) / 1000)

    def test_duplicate_dates_are_summed(self, aggregator):
        """Two records for the same date land in one day bucket."""
        totals = [
            DailyTotal(date=dt.date(2024, 5, 1), planted=1, cut=0),
            DailyTotal(date=dt.date(2024, 5, 1), planted=2, cut=3),
        ]

        buckets = aggregator.aggregate(totals, Period.DAY)

        assert len(buckets) == 1
        assert (buckets[0].planted, buckets[0].cut) == (3, 3)

    @pytest.mark.parametrize("period", list(Period))
    def test_partition_law(self, aggregator, sample_daily_totals, period):
        """Bucket sums equal input sums at every granularity."""
        buckets = aggregator.aggregate(sample_daily_totals, period)

        assert sum(b.planted for b in buckets) == sum(t.planted for t in sample_daily_totals)
        assert sum(b.cut for b in buckets) == sum(t.cut for t in sample_daily_totals)

    def test_monotonic_coarsening(self, aggregator, sample_daily_totals):
        """Coarser periods never produce more buckets."""
        counts = [
            len(aggregator.aggregate(sample_daily_totals, period))
            for period in (Period.YEAR, Period.MONTH, Period.WEEK, Period.DAY)
        ]

        assert counts == sorted(counts)

    def test_accepts_generator_input(self, aggregator, sample_daily_totals):
        """Any iterable is accepted, not just lists."""
        buckets = aggregator.aggregate((t for t in sample_daily_totals), Period.YEAR)

        assert len(buckets) == 2


# ============================================================
# Impact Formula Tests
# ============================================================

class TestTotalImpact:
    """Tests for the single-bucket impact formula."""

    def test_yearly_planting(self, aggregator):
        """100 trees absorb 2.18 tons in a year."""
        assert aggregator.total_impact(100, 0, "year") == pytest.approx(2.18)

    def test_cut_release_is_not_prorated(self, aggregator):
        """Cutting releases the same amount whatever the period."""
        for period in Period:
            assert aggregator.total_impact(0, 2, period) == pytest.approx(-0.3)

    @pytest.mark.parametrize("period,fraction", [
        (Period.DAY, 1 / 365),
        (Period.WEEK, 1 / 52),
        (Period.MONTH, 1 / 12),
        (Period.YEAR, 1.0),
    ])
    def test_absorption_is_prorated(self, aggregator, period, fraction):
        """Absorption scales with the period's share of a year."""
        assert aggregator.total_impact(50, 0, period) == pytest.approx(50 * 21.8 * fraction / 1000)

    def test_sign_convention(self, aggregator):
        """Planting alone is never negative, cutting alone never positive."""
        for count in (0, 1, 17, 1000):
            assert aggregator.total_impact(count, 0, "year") >= 0
            for period in Period:
                assert aggregator.total_impact(0, count, period) <= 0

    def test_constants_are_injectable(self):
        """Custom constants flow through the formula."""
        aggregator = CarbonAggregator(config=CarbonConfig(
            co2_absorbed_per_tree_per_year=10.0,
            co2_released_per_cut_tree=100.0,
        ))

        assert aggregator.total_impact(100, 1, "year") == pytest.approx((1000 - 100) / 1000)

    def test_defaults_from_settings(self):
        """Without a config the aggregator uses the configured constants."""
        aggregator = CarbonAggregator()

        assert aggregator.config.co2_absorbed_per_tree_per_year == 21.8
        assert aggregator.config.co2_released_per_cut_tree == 150.0

    def test_invalid_period(self, aggregator):
        """Unknown periods are rejected."""
        with pytest.raises(InvalidPeriodError):
            aggregator.total_impact(1, 1, "decade")


# ============================================================
# Status Tests
# ============================================================

class TestStatusOf:
    """Tests for the five-tier impact classification."""

    @pytest.mark.parametrize("impact,tier", [
        (-100.0, ImpactTier.CRITICAL),
        (-6.0, ImpactTier.CRITICAL),
        (-5.0, ImpactTier.CRITICAL),
        (-4.99, ImpactTier.NEGATIVE),
        (-0.001, ImpactTier.NEGATIVE),
        (0.0, ImpactTier.NEUTRAL),
        (0.001, ImpactTier.POSITIVE),
        (5.0, ImpactTier.POSITIVE),
        (5.01, ImpactTier.EXCELLENT),
        (6.0, ImpactTier.EXCELLENT),
    ])
    def test_tier_boundaries(self, aggregator, impact, tier):
        """Each half-open interval maps to its tier."""
        assert aggregator.status_of(impact).tier is tier

    def test_message_key_and_text(self, aggregator):
        """Messages carry the absolute tonnage."""
        status = aggregator.status_of(-6.0)

        assert status.message_key == "carbon.status.critical"
        assert "6.00" in status.message
        assert status.color == "#c62828"

    def test_neutral_message(self, aggregator):
        """Neutral has a fixed message."""
        status = aggregator.status_of(0.0)

        assert status.message_key == "carbon.status.neutral"
        assert status.message == "Neutral: zero carbon impact"

    @pytest.mark.parametrize("impact,percentage", [
        (0.0, 50.0),
        (5.0, 75.0),
        (-10.0, 0.0),
        (42.0, 100.0),
        (-42.0, 0.0),
    ])
    def test_meter_percentage(self, aggregator, impact, percentage):
        """The meter maps -10..+10 tons onto 0..100 and clamps."""
        assert aggregator.status_of(impact).meter_percentage == pytest.approx(percentage)

    def test_nan_rejected(self, aggregator):
        """NaN has no tier."""
        with pytest.raises(InvalidArgumentError):
            aggregator.status_of(float("nan"))

    @pytest.mark.parametrize("impact", ["abc", None, [1.0]])
    def test_non_numeric_rejected(self, aggregator, impact):
        """Values that are not numbers raise the domain error."""
        with pytest.raises(InvalidArgumentError):
            aggregator.status_of(impact)


# ============================================================
# Recent Summary Tests
# ============================================================

class TestSummarizeRecent:
    """Tests for the trailing-window summary."""

    @pytest.fixture
    def forty_days(self) -> list[DailyTotal]:
        start = dt.date(2024, 1, 1)
        return [
            DailyTotal(date=start + dt.timedelta(days=i), planted=i + 1, cut=1)
            for i in reversed(range(40))
        ]

    def test_day_uses_latest_record(self, aggregator, forty_days):
        """Day covers only the most recent record."""
        summary = aggregator.summarize_recent(forty_days, "day")

        assert (summary.planted, summary.cut, summary.balance) == (40, 1, 39)
        assert summary.co2_impact_tons == pytest.approx((40 * 21.8 / 365 - 150) / 1000)

    def test_week_uses_last_seven_records(self, aggregator, forty_days):
        """Week covers the last 7 records, prorated over 7 days."""
        summary = aggregator.summarize_recent(forty_days, Period.WEEK)

        assert summary.planted == sum(range(34, 41))
        assert summary.cut == 7
        assert summary.co2_impact_tons == pytest.approx(
            (summary.planted * 21.8 * 7 / 365 - 7 * 150) / 1000
        )

    def test_month_uses_last_thirty_records(self, aggregator, forty_days):
        """Month covers the last 30 records."""
        summary = aggregator.summarize_recent(forty_days, Period.MONTH)

        assert summary.planted == sum(range(11, 41))
        assert summary.cut == 30

    def test_year_uses_everything(self, aggregator, forty_days):
        """Year covers every record with a full year of absorption."""
        summary = aggregator.summarize_recent(forty_days, Period.YEAR)

        assert summary.planted == sum(range(1, 41))
        assert summary.co2_impact_tons == pytest.approx((summary.planted * 21.8 - 40 * 150) / 1000)

    def test_empty(self, aggregator):
        """No records summarize to zeros."""
        summary = aggregator.summarize_recent([], Period.WEEK)

        assert (summary.planted, summary.cut, summary.balance) == (0, 0, 0)
        assert summary.co2_impact_tons == 0.0


# ============================================================
# Parsing and Folding Tests
# ============================================================

class TestParseDailyTotals:
    """Tests for converting boundary records."""

    def test_parses_records(self, sample_records):
        """Valid records become DailyTotals in input order."""
        totals = parse_daily_totals(sample_records)

        assert totals == [
            DailyTotal(date=dt.date(2024, 1, 1), planted=10, cut=0),
            DailyTotal(date=dt.date(2024, 1, 2), planted=0, cut=5),
        ]

    def test_missing_counts_default_to_zero(self):
        """Absent planted/cut are zero."""
        totals = parse_daily_totals([{"date": "2024-06-01"}])

        assert totals[0].planted == 0
        assert totals[0].cut == 0

    def test_accepts_date_objects(self):
        """Already-parsed dates pass through."""
        totals = parse_daily_totals([{"date": dt.date(2024, 6, 1), "planted": 1}])

        assert totals[0].date == dt.date(2024, 6, 1)

    @pytest.mark.parametrize("bad_date", [
        "2024-13-01", "2024-02-30", "yesterday", "", None, 20240101,
        "2024-1-5", "2024-01-5", " 2024-01-05", "2024-01-05\n", "2024-01-05T00:00",
    ])
    def test_malformed_date(self, bad_date):
        """Bad dates identify the offending record."""
        records = [
            {"date": "2024-01-01", "planted": 1},
            {"date": bad_date, "planted": 1},
        ]

        with pytest.raises(MalformedDateError) as exc_info:
            parse_daily_totals(records)

        assert exc_info.value.index == 1
        assert exc_info.value.value == bad_date

    def test_negative_count(self):
        """Negative counts are rejected."""
        with pytest.raises(InvalidArgumentError):
            parse_daily_totals([{"date": "2024-01-01", "planted": -1}])


class TestDailyTotalsFromEvents:
    """Tests for folding events into daily totals."""

    def test_folds_same_day_events(self, sample_events):
        """Events are summed per date and action, sorted by date."""
        totals = daily_totals_from_events(sample_events)

        assert totals == [
            DailyTotal(date=dt.date(2024, 3, 1), planted=8, cut=1),
            DailyTotal(date=dt.date(2024, 3, 2), planted=0, cut=2),
        ]

    def test_no_events(self):
        """No events, no totals."""
        assert daily_totals_from_events([]) == []
