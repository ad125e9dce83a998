"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample daily records and events
- Domain services with fixed constants
- Seeded random generators
- FastAPI test client
"""
import datetime as dt
import os

# Keep the shared in-memory rate limiter out of the way of the test suite
os.environ.setdefault("RATE_LIMIT_REQUESTS", "10000")

import numpy as np
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.domain.models import DailyTotal, Event, EventAction
from app.services.domain.carbon_aggregator import CarbonAggregator, CarbonConfig
from app.services.domain.diamond_layout import DiamondLayoutGenerator, LayoutConfig


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def sample_daily_totals() -> list[DailyTotal]:
    """Three months of activity spanning a year boundary, deliberately unsorted."""
    return [
        DailyTotal(date=dt.date(2024, 1, 2), planted=0, cut=5),
        DailyTotal(date=dt.date(2023, 12, 30), planted=7, cut=1),
        DailyTotal(date=dt.date(2024, 1, 1), planted=10, cut=0),
        DailyTotal(date=dt.date(2024, 2, 14), planted=3, cut=2),
        DailyTotal(date=dt.date(2024, 1, 7), planted=4, cut=0),
        DailyTotal(date=dt.date(2023, 12, 31), planted=2, cut=0),
    ]


@pytest.fixture
def sample_records() -> list[dict]:
    """Daily records in the boundary format."""
    return [
        {"date": "2024-01-01", "planted": 10, "cut": 0},
        {"date": "2024-01-02", "planted": 0, "cut": 5},
    ]


@pytest.fixture
def sample_events() -> list[Event]:
    """Events with several entries on the same day."""
    return [
        Event(date=dt.date(2024, 3, 2), action=EventAction.CUT, quantity=2),
        Event(date=dt.date(2024, 3, 1), action=EventAction.PLANTED, quantity=5),
        Event(date=dt.date(2024, 3, 1), action=EventAction.PLANTED, quantity=3),
        Event(date=dt.date(2024, 3, 1), action=EventAction.CUT, quantity=1),
    ]


# ============================================================
# Domain Service Fixtures
# ============================================================

@pytest.fixture
def aggregator() -> CarbonAggregator:
    """Aggregator with the reference carbon constants."""
    return CarbonAggregator(config=CarbonConfig(
        co2_absorbed_per_tree_per_year=21.8,
        co2_released_per_cut_tree=150.0,
    ))


@pytest.fixture
def layout_generator() -> DiamondLayoutGenerator:
    """Layout generator with Euclidean separation and 100 attempts."""
    return DiamondLayoutGenerator(config=LayoutConfig(
        max_attempts=100,
        separation_metric="euclidean",
    ))


@pytest.fixture
def seeded_rng() -> np.random.Generator:
    """Deterministic random source."""
    return np.random.default_rng(20240101)


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> TestClient:
    """Create a synchronous test client for FastAPI."""
    return TestClient(app)
