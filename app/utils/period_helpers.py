"""
Calendar utilities for grouping daily records into periods.
"""
import datetime as dt
import math
import re
from typing import Optional, Union

from app.domain.models import Period


PeriodKey = Union[dt.date, tuple[int, int], int]

ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)

# Share of a year used to prorate annual CO2 absorption for one bucket
PERIOD_YEAR_FRACTION: dict[Period, float] = {
    Period.DAY: 1 / 365,
    Period.WEEK: 1 / 52,
    Period.MONTH: 1 / 12,
    Period.YEAR: 1.0,
}

# Number of trailing daily records covered by a recent-activity summary.
# None means every record.
SUMMARY_WINDOW_RECORDS: dict[Period, Optional[int]] = {
    Period.DAY: 1,
    Period.WEEK: 7,
    Period.MONTH: 30,
    Period.YEAR: None,
}

SUMMARY_WINDOW_DAYS: dict[Period, int] = {
    Period.DAY: 1,
    Period.WEEK: 7,
    Period.MONTH: 30,
    Period.YEAR: 365,
}


def parse_iso_date(value: str) -> dt.date:
    """
    Parse a YYYY-MM-DD calendar date.

    Args:
        value: Date string

    Returns:
        Parsed date

    Raises:
        ValueError: If the string is not a valid calendar date
    """
    if not ISO_DATE_PATTERN.fullmatch(value):
        raise ValueError(f"Not a YYYY-MM-DD date: {value!r}")
    return dt.datetime.strptime(value, "%Y-%m-%d").date()


def jan1_weekday_offset(year: int) -> int:
    """Weekday of January 1st counted Sunday = 0 ... Saturday = 6."""
    return (dt.date(year, 1, 1).weekday() + 1) % 7


def week_of_year(day: dt.date) -> int:
    """
    Week number anchored to January 1st.

    Week 1 is the (possibly partial) Sunday-to-Saturday week holding
    January 1st. This is NOT the ISO-8601 week number; existing chart
    data was produced with this numbering.

    Args:
        day: Calendar date

    Returns:
        Week number, 1 to 54
    """
    day_of_year = day.timetuple().tm_yday
    return math.ceil((day_of_year + jan1_weekday_offset(day.year)) / 7)


def period_key(day: dt.date, period: Period) -> PeriodKey:
    """
    Grouping key of a date for the given period.

    Args:
        day: Calendar date
        period: Aggregation period

    Returns:
        The date, a (year, week) or (year, month) pair, or the year
    """
    if period is Period.DAY:
        return day
    if period is Period.WEEK:
        return (day.year, week_of_year(day))
    if period is Period.MONTH:
        return (day.year, day.month)
    return day.year


def format_period_label(key: PeriodKey, period: Period) -> str:
    """Render a period key as a label string."""
    if period is Period.DAY:
        return key.isoformat()
    if period is Period.WEEK:
        year, week = key
        return f"{year}-W{week:02d}"
    if period is Period.MONTH:
        year, month = key
        return f"{year}-{month:02d}"
    return str(key)
