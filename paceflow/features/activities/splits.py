"""
Kilometer split generation.

Two strategies:
- GPS: walk the track and close a split each time the cumulative
  distance crosses the next 1000 m boundary. The trailing partial
  kilometer is dropped.
- Synthetic: when only totals are known, emit floor(distance / 1000)
  identical splits at the activity's average pace.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from paceflow.features.gpx.schemas import GPXPoint
from paceflow.shared.constants import METERS_PER_KM
from paceflow.shared.geo import elevation_gain, haversine_distance, track_distance
from paceflow.shared.pace import calculate_pace

# Absorbs floating point drift so a track of exactly N km yields N splits
BOUNDARY_TOLERANCE_M = 1e-3


@dataclass
class SplitData:
    """A split before it is persisted."""
    kilometer: int
    duration: int  # seconds
    pace: float  # s/km
    distance: float  # meters
    elevation_gain: Optional[float] = None
    average_heart_rate: Optional[int] = None


def _summarize(kilometer: int, points: Sequence[GPXPoint]) -> SplitData:
    """Build a split from the exact points between two boundaries."""
    start, end = points[0].time, points[-1].time
    duration = (end - start).total_seconds() if start and end else 0.0

    distance = track_distance(points)
    pace = calculate_pace(distance, duration) if distance > 0 else 0.0
    gain = elevation_gain(points)

    heart_rates = [p.hr for p in points if p.hr is not None]
    avg_hr = round(sum(heart_rates) / len(heart_rates)) if heart_rates else None

    return SplitData(
        kilometer=kilometer,
        duration=round(duration),
        pace=pace,
        distance=distance,
        elevation_gain=gain if gain > 0 else None,
        average_heart_rate=avg_hr,
    )


def generate_splits(points: Sequence[GPXPoint]) -> list[SplitData]:
    """
    Generate GPS splits from an ordered list of track points.

    Adjacent splits share their boundary point. Returns [] for fewer than
    two points or tracks shorter than one kilometer.
    """
    if len(points) < 2:
        return []

    splits: list[SplitData] = []
    km_start = 0
    cumulative = 0.0

    for i in range(1, len(points)):
        cumulative += haversine_distance(points[i - 1], points[i])

        if cumulative + BOUNDARY_TOLERANCE_M >= (len(splits) + 1) * METERS_PER_KM:
            splits.append(_summarize(len(splits) + 1, points[km_start:i + 1]))
            km_start = i

    return splits


def generate_average_splits(
    total_distance: float,
    total_duration: float,
    average_pace: float,
) -> list[SplitData]:
    """
    Generate uniform splits from totals.

    Every split gets the same duration (total_duration / total_km, rounded)
    and the same pace, so zero variance marks this path.
    """
    km_count = math.floor(total_distance / METERS_PER_KM) if total_distance > 0 else 0
    if km_count == 0:
        return []

    split_duration = round(total_duration / (total_distance / METERS_PER_KM))

    return [
        SplitData(
            kilometer=km,
            duration=split_duration,
            pace=average_pace,
            distance=float(METERS_PER_KM),
        )
        for km in range(1, km_count + 1)
    ]


def best_pace(splits: Sequence[SplitData]) -> Optional[float]:
    """Fastest split pace, ignoring zero paces."""
    paces = [split.pace for split in splits if split.pace > 0]
    return min(paces) if paces else None
