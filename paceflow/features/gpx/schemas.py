"""GPX data structures."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Coordinates:
    """A bare lat/lon pair in degrees."""
    lat: float
    lon: float


@dataclass
class GPXPoint:
    """A single track point."""
    lat: float
    lon: float
    ele: Optional[float] = None
    time: Optional[datetime] = None
    hr: Optional[int] = None


@dataclass
class GPXTrack:
    """An ordered, non-empty run of points (all segments of one <trk>)."""
    points: list[GPXPoint]
    name: Optional[str] = None
    type: Optional[str] = None


@dataclass
class GPXData:
    """
    Parse result.

    An empty `tracks` list means "no GPX available", never an error.
    """
    tracks: list[GPXTrack] = field(default_factory=list)
    total_distance: float = 0.0  # meters
    total_duration: float = 0.0  # seconds
    elevation_gain: float = 0.0  # meters
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    @property
    def points(self) -> list[GPXPoint]:
        """All points across all tracks, in document order."""
        return [point for track in self.tracks for point in track.points]
