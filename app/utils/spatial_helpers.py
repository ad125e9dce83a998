"""
Spatial helper functions for the forest scene.

Provides utilities for:
- Diamond (rotated square) region geometry
- Separation checks against already placed markers
- Capacity estimation for a layout request
"""
import math
import numpy as np
from scipy.spatial.distance import cdist
from shapely.geometry import Polygon
import logging

logger = logging.getLogger(__name__)

SEPARATION_METRICS = ("euclidean", "chebyshev")

# Keeps projected points strictly on the inner side of the diamond edge
_EDGE_SHRINK = 1e-9


def diamond_polygon(width: float, height: float) -> Polygon:
    """
    Build the diamond inscribed in a width x height rectangle at the origin.

    Args:
        width: Rectangle width
        height: Rectangle height

    Returns:
        Polygon with vertices at the midpoints of the rectangle edges
    """
    cx, cy = width / 2, height / 2
    return Polygon([(cx, 0.0), (width, cy), (cx, height), (0.0, cy)])


def diamond_norm(
    x: float,
    y: float,
    center: tuple[float, float],
    half_width: float,
    half_height: float,
) -> float:
    """
    Normalized L1 distance from the diamond center.

    Values <= 1 lie inside the diamond (boundary included).
    """
    cx, cy = center
    return abs(x - cx) / half_width + abs(y - cy) / half_height


def point_in_diamond(
    x: float,
    y: float,
    center: tuple[float, float],
    half_width: float,
    half_height: float,
) -> bool:
    """
    Check if a point lies inside the diamond (boundary included).

    Args:
        x: Point x coordinate
        y: Point y coordinate
        center: Diamond center (cx, cy)
        half_width: Half of the bounding rectangle width
        half_height: Half of the bounding rectangle height

    Returns:
        True if |x-cx|/half_width + |y-cy|/half_height <= 1
    """
    return diamond_norm(x, y, center, half_width, half_height) <= 1.0


def project_into_diamond(
    x: float,
    y: float,
    center: tuple[float, float],
    half_width: float,
    half_height: float,
) -> tuple[float, float]:
    """
    Pull a point toward the center until it lies inside the diamond.

    Points already inside are returned unchanged.

    Args:
        x: Point x coordinate
        y: Point y coordinate
        center: Diamond center (cx, cy)
        half_width: Half of the bounding rectangle width
        half_height: Half of the bounding rectangle height

    Returns:
        (x, y) inside the diamond
    """
    norm = diamond_norm(x, y, center, half_width, half_height)
    if norm <= 1.0:
        return (x, y)

    cx, cy = center
    scale = (1.0 - _EDGE_SHRINK) / norm
    return (cx + (x - cx) * scale, cy + (y - cy) * scale)


def nearest_clearance(
    point: tuple[float, float],
    placed: np.ndarray,
    metric: str = "euclidean",
) -> float:
    """
    Distance from a point to the closest already placed marker.

    With the 'chebyshev' metric, two markers are closer than d when both
    their x gap and their y gap are below d (per-axis rule).

    Args:
        point: (x, y) candidate
        placed: Array of shape (n, 2) with placed markers
        metric: 'euclidean' or 'chebyshev'

    Returns:
        Minimum distance, or inf when nothing is placed yet
    """
    if len(placed) == 0:
        return math.inf
    distances = cdist(np.asarray([point]), placed, metric=metric)
    return float(distances.min())


def estimate_capacity(
    width: float,
    height: float,
    min_separation: float,
    metric: str = "euclidean",
) -> int:
    """
    Estimate how many markers fit in the diamond without overlap.

    Divides the diamond area by the footprint each marker claims: a disc of
    diameter min_separation for 'euclidean', a square of side min_separation
    for 'chebyshev'.

    Args:
        width: Rectangle width
        height: Rectangle height
        min_separation: Minimum marker distance
        metric: 'euclidean' or 'chebyshev'

    Returns:
        Estimated capacity, at least 1
    """
    area = diamond_polygon(width, height).area

    if metric == "chebyshev":
        footprint = min_separation ** 2
    else:
        footprint = math.pi * (min_separation / 2) ** 2

    capacity = max(int(area // footprint), 1)
    logger.debug(f"Diamond area {area:.1f}, marker footprint {footprint:.1f}, capacity ~{capacity}")
    return capacity
