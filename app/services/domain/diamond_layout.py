"""
Domain service: Procedural placement of tree and stump markers.

Scatters a fixed number of markers inside the diamond inscribed in a
rectangle using rejection sampling:
- Uniform samples over the bounding rectangle
- Rejection of samples outside the diamond or too close to placed markers
- A bounded number of attempts per marker, then best-effort acceptance
"""
import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from app.config import settings
from app.domain.exceptions import InvalidArgumentError, LayoutConfigurationError
from app.domain.models import MarkerKind, MarkerPoint
from app.utils.spatial_helpers import (
    SEPARATION_METRICS,
    estimate_capacity,
    nearest_clearance,
    point_in_diamond,
    project_into_diamond,
)

logger = logging.getLogger(__name__)

RandomSource = Union[np.random.Generator, int, None]


@dataclass
class LayoutConfig:
    """Configuration for the marker placement algorithm."""

    max_attempts: int = 100
    """Samples drawn per marker before accepting a collision"""

    separation_metric: str = "euclidean"
    """'euclidean' or 'chebyshev' (per-axis) distance between markers"""


def tree_fraction_from_totals(planted: int, cut: int) -> float:
    """
    Share of scene markers drawn as standing trees.

    Computed as 1 - cut / planted (planted floored at 1), clamped to [0, 1].

    Args:
        planted: Total trees planted
        cut: Total trees cut

    Returns:
        Fraction in [0, 1]
    """
    if planted < 0 or cut < 0:
        raise InvalidArgumentError("Planted and cut totals must be non-negative")
    cut_ratio = cut / max(planted, 1)
    return min(max(1.0 - cut_ratio, 0.0), 1.0)


class DiamondLayoutGenerator:
    """
    Domain service for laying out forest scene markers.

    Holds only configuration; randomness is supplied per call so layouts
    can be reproduced from a seed.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        """
        Initialize the generator.

        Args:
            config: Placement configuration; defaults come from application settings
        """
        self.config = config or LayoutConfig(
            max_attempts=settings.layout_max_attempts,
            separation_metric=settings.layout_separation_metric,
        )

        if self.config.max_attempts < 1:
            raise LayoutConfigurationError("max_attempts must be at least 1")
        if self.config.separation_metric not in SEPARATION_METRICS:
            raise LayoutConfigurationError(
                f"Unknown separation metric '{self.config.separation_metric}', "
                f"expected one of {', '.join(SEPARATION_METRICS)}"
            )

    def place(
        self,
        total_slots: int,
        tree_fraction: float,
        width: float,
        height: float,
        min_separation: float,
        rng: RandomSource = None,
    ) -> list[MarkerPoint]:
        """
        Place markers inside the diamond inscribed in a width x height rectangle.

        The first round(total_slots * tree_fraction) markers are trees and
        the rest are stumps. Each marker gets up to max_attempts samples to
        find a spot inside the diamond and at least min_separation away from
        earlier markers; when none qualifies the last sample that fell inside
        the diamond is kept anyway, so markers may overlap in crowded scenes.

        Args:
            total_slots: Number of markers to place
            tree_fraction: Share of markers labelled as trees, in [0, 1]
            width: Rectangle width
            height: Rectangle height
            min_separation: Minimum distance between markers
            rng: numpy Generator or integer seed; a fresh unseeded
                 generator is used when omitted

        Returns:
            Exactly total_slots MarkerPoints

        Raises:
            InvalidArgumentError: If any numeric input is out of range
        """
        tree_fraction, width, height, min_separation = self._validate(
            total_slots, tree_fraction, width, height, min_separation
        )

        generator = np.random.default_rng(rng)
        metric = self.config.separation_metric

        tree_count = min(max(math.floor(total_slots * tree_fraction + 0.5), 0), total_slots)
        half_width, half_height = width / 2, height / 2
        center = (half_width, half_height)

        capacity = estimate_capacity(width, height, min_separation, metric)
        if total_slots > capacity:
            logger.warning(f"Requested {total_slots} markers but only ~{capacity} fit "
                           f"at separation {min_separation}; overlaps are likely")

        placed = np.empty((total_slots, 2), dtype=float)
        fallbacks = 0

        for slot in range(total_slots):
            accepted = None
            last_inside = None
            x = y = 0.0

            for _ in range(self.config.max_attempts):
                dx, dy = generator.uniform(-1.0, 1.0, size=2)
                x = center[0] + dx * half_width
                y = center[1] + dy * half_height

                if not point_in_diamond(x, y, center, half_width, half_height):
                    continue
                last_inside = (x, y)

                if nearest_clearance((x, y), placed[:slot], metric) >= min_separation:
                    accepted = (x, y)
                    break

            if accepted is None:
                fallbacks += 1
                accepted = last_inside or project_into_diamond(
                    x, y, center, half_width, half_height
                )

            placed[slot] = accepted

        if fallbacks:
            logger.info(f"{fallbacks}/{total_slots} markers placed without full separation")

        logger.debug(f"Placed {total_slots} markers ({tree_count} trees, "
                     f"{total_slots - tree_count} stumps) in {width}x{height}")

        return [
            MarkerPoint(
                x=float(px),
                y=float(py),
                kind=MarkerKind.TREE if i < tree_count else MarkerKind.STUMP,
            )
            for i, (px, py) in enumerate(placed)
        ]

    def _validate(
        self,
        total_slots: int,
        tree_fraction: float,
        width: float,
        height: float,
        min_separation: float,
    ) -> tuple[float, float, float, float]:
        """Reject out-of-range inputs before any sampling and return the float values."""
        if isinstance(total_slots, bool) or not isinstance(total_slots, (int, np.integer)):
            raise InvalidArgumentError(f"total_slots must be an integer, got {total_slots!r}")
        if total_slots < 0:
            raise InvalidArgumentError(f"total_slots must be >= 0, got {total_slots}")
        values = {}
        for name, value in (
            ("tree_fraction", tree_fraction),
            ("width", width),
            ("height", height),
            ("min_separation", min_separation),
        ):
            try:
                values[name] = float(value)
            except (TypeError, ValueError):
                raise InvalidArgumentError(f"{name} must be a number, got {value!r}") from None

        if not (0.0 <= values["tree_fraction"] <= 1.0):
            raise InvalidArgumentError(f"tree_fraction must be in [0, 1], got {tree_fraction}")

        for name in ("width", "height", "min_separation"):
            if not math.isfinite(values[name]) or values[name] <= 0:
                raise InvalidArgumentError(f"{name} must be a positive number, got {values[name]}")

        return values["tree_fraction"], values["width"], values["height"], values["min_separation"]
