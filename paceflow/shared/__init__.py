"""
Shared utilities used across features.

- geo: great-circle distance and polyline helpers
- pace: pace/speed arithmetic
- formatters: display strings
- repository: generic async CRUD base
"""

from .geo import (
    haversine,
    haversine_distance,
    track_distance,
    elevation_gain,
    simplify_track,
)
from .pace import calculate_pace, speed_to_pace, pace_consistency
from .formatters import format_pace, format_duration, format_distance_km
from .repository import BaseRepository

__all__ = [
    "haversine",
    "haversine_distance",
    "track_distance",
    "elevation_gain",
    "simplify_track",
    "calculate_pace",
    "speed_to_pace",
    "pace_consistency",
    "format_pace",
    "format_duration",
    "format_distance_km",
    "BaseRepository",
]
