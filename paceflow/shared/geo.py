"""
Geographic utility functions.

This is the SINGLE SOURCE OF TRUTH for geographic calculations.
DO NOT duplicate these functions elsewhere.

All distances are in meters.
"""
import math
from typing import Optional, Protocol, Sequence, TypeVar

# Earth radius in meters
EARTH_RADIUS_M = 6371e3


class LatLon(Protocol):
    lat: float
    lon: float


class TrackPoint(LatLon, Protocol):
    ele: Optional[float]


P = TypeVar("P", bound=LatLon)


def haversine(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate great-circle distance between two points.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in meters
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def haversine_distance(p1: LatLon, p2: LatLon) -> float:
    """Great-circle distance in meters between two points with lat/lon."""
    return haversine(p1.lat, p1.lon, p2.lat, p2.lon)


def track_distance(points: Sequence[LatLon]) -> float:
    """
    Calculate total distance along a polyline.

    Args:
        points: Ordered track points

    Returns:
        Total distance in meters (0 for fewer than two points)
    """
    total = 0.0

    for i in range(1, len(points)):
        total += haversine_distance(points[i - 1], points[i])

    return total


def elevation_gain(points: Sequence[TrackPoint]) -> float:
    """
    Sum of positive elevation deltas between consecutive points.

    Descents never reduce the total. A point without elevation counts as 0 m.
    """
    gain = 0.0

    for i in range(1, len(points)):
        prev = points[i - 1].ele or 0.0
        curr = points[i].ele or 0.0
        diff = curr - prev
        if diff > 0:
            gain += diff

    return gain


def _perpendicular_offset(point: LatLon, start: LatLon, end: LatLon) -> float:
    """Distance from point to the start-end line, in raw degree space."""
    dx = end.lon - start.lon
    dy = end.lat - start.lat

    if dx == 0 and dy == 0:
        return math.hypot(point.lon - start.lon, point.lat - start.lat)

    numerator = abs(dy * point.lon - dx * point.lat + end.lon * start.lat - end.lat * start.lon)
    return numerator / math.hypot(dx, dy)


def simplify_track(points: Sequence[P], tolerance: float = 0.0001) -> list[P]:
    """
    Simplify a polyline with the Douglas-Peucker algorithm.

    Offsets are measured in lat/lon degrees, not meters, so the tolerance is
    only an approximation of ground distance. First and last points are
    always kept.

    Args:
        points: Ordered track points
        tolerance: Maximum allowed offset in degrees

    Returns:
        The original sequence when it has two points or fewer,
        otherwise a new list with the retained points
    """
    if len(points) <= 2:
        return points

    keep = [False] * len(points)
    keep[0] = keep[-1] = True
    stack = [(0, len(points) - 1)]

    while stack:
        start_idx, end_idx = stack.pop()
        max_offset = 0.0
        max_idx = start_idx

        for i in range(start_idx + 1, end_idx):
            offset = _perpendicular_offset(points[i], points[start_idx], points[end_idx])
            if offset > max_offset:
                max_offset = offset
                max_idx = i

        if max_offset > tolerance:
            keep[max_idx] = True
            stack.append((start_idx, max_idx))
            stack.append((max_idx, end_idx))

    return [point for point, kept in zip(points, keep) if kept]
