"""
GPX parsing.

Turns vendor GPX documents into ordered track points for split
generation and enrichment lookups.
"""

from .schemas import Coordinates, GPXData, GPXPoint, GPXTrack
from .parser import extract_first_coordinate, parse_gpx

__all__ = [
    "Coordinates",
    "GPXData",
    "GPXPoint",
    "GPXTrack",
    "extract_first_coordinate",
    "parse_gpx",
]
