"""
Domain exceptions raised by the carbon engine and the scene layout generator.

All of them derive from ValueError so callers that only care about
"bad input" can catch a single type.
"""
from typing import Any


class CarbonMonitoringError(ValueError):
    """Base class for domain errors."""
    pass


class InvalidPeriodError(CarbonMonitoringError):
    """Raised when an aggregation period is not day, week, month or year."""

    def __init__(self, period: Any):
        self.period = period
        super().__init__(
            f"Invalid period '{period}': expected one of day, week, month, year"
        )


class MalformedDateError(CarbonMonitoringError):
    """Raised when a daily record carries a date that is not YYYY-MM-DD."""

    def __init__(self, index: int, value: Any):
        self.index = index
        self.value = value
        super().__init__(f"Malformed date {value!r} in record {index}")


class InvalidArgumentError(CarbonMonitoringError):
    """Raised for out-of-range numeric inputs."""
    pass


class LayoutConfigurationError(CarbonMonitoringError):
    """Raised when the layout generator is built with unusable settings."""
    pass
