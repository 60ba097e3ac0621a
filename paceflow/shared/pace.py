"""
Pace calculations.

Pace is always expressed in seconds per kilometer, speed in m/s or km/h
as noted on each function.
"""

import math
from typing import Sequence


def calculate_pace(distance_m: float, duration_s: float) -> float:
    """
    Calculate pace in seconds per km.

    Returns 0 when distance is not positive.
    """
    if distance_m <= 0:
        return 0.0
    return (duration_s / distance_m) * 1000


def speed_to_pace(speed_mps: float | None) -> float | None:
    """Invert a speed in m/s into seconds per km. None for missing/zero speed."""
    if not speed_mps or speed_mps <= 0:
        return None
    return 1000 / speed_mps


def calculate_speed_kmh(distance_m: float, duration_s: float) -> float:
    """Average speed in km/h."""
    if duration_s <= 0:
        return 0.0
    return (distance_m / 1000 / duration_s) * 3600


def pace_to_speed_kmh(pace_s_per_km: float) -> float:
    if pace_s_per_km <= 0:
        return 0.0
    return 3600 / pace_s_per_km


def pace_consistency(paces: Sequence[float]) -> float:
    """
    Population standard deviation of a set of paces.

    Lower is steadier. Synthetic splits always score 0.
    """
    if not paces:
        return 0.0

    mean = sum(paces) / len(paces)
    variance = sum((pace - mean) ** 2 for pace in paces) / len(paces)
    return math.sqrt(variance)
