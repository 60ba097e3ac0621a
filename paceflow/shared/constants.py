"""
Unified constants for activity sources and types.

This module provides a single source of truth for source and activity
type naming across the pipeline.
"""

from enum import Enum


class SourceKind(str, Enum):
    """Fitness platforms an activity can be ingested from."""
    STRAVA = "strava"
    NIKE = "nike"
    GARMIN = "garmin"


class ActivityType(str, Enum):
    """Our canonical activity types."""
    RUNNING = "running"
    CYCLING = "cycling"
    WALKING = "walking"
    SWIMMING = "swimming"
    OTHER = "other"


class StravaActivityType(str, Enum):
    """
    Activity types from Strava API.

    These are Strava's naming conventions, not ours.
    Use STRAVA_TO_ACTIVITY_TYPE to map to our types.
    """
    RUN = "Run"
    TRAIL_RUN = "TrailRun"
    VIRTUAL_RUN = "VirtualRun"
    RIDE = "Ride"
    VIRTUAL_RIDE = "VirtualRide"
    WALK = "Walk"
    HIKE = "Hike"
    SWIM = "Swim"
    TREADMILL = "Treadmill"


# Mapping: Strava type -> our ActivityType
STRAVA_TO_ACTIVITY_TYPE: dict[str, ActivityType] = {
    StravaActivityType.RUN.value: ActivityType.RUNNING,
    StravaActivityType.TRAIL_RUN.value: ActivityType.RUNNING,
    StravaActivityType.VIRTUAL_RUN.value: ActivityType.RUNNING,
    StravaActivityType.RIDE.value: ActivityType.CYCLING,
    StravaActivityType.VIRTUAL_RIDE.value: ActivityType.CYCLING,
    StravaActivityType.WALK.value: ActivityType.WALKING,
    StravaActivityType.HIKE.value: ActivityType.WALKING,
    StravaActivityType.SWIM.value: ActivityType.SWIMMING,
}

# Only these Strava types are ingested
STRAVA_RUNNING_TYPES: frozenset[str] = frozenset({
    StravaActivityType.RUN.value,
    StravaActivityType.TRAIL_RUN.value,
    StravaActivityType.VIRTUAL_RUN.value,
})

# Treadmill / trainer sessions: no meaningful outdoor location
STRAVA_INDOOR_TYPES: frozenset[str] = frozenset({
    StravaActivityType.VIRTUAL_RUN.value,
    StravaActivityType.VIRTUAL_RIDE.value,
    StravaActivityType.TREADMILL.value,
})


# =============================================================================
# Distance thresholds (meters)
# =============================================================================

METERS_PER_KM = 1000
