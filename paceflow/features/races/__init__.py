"""
Race identification.

Scrapes a public race calendar and matches long activities to events
by date and host-city proximity.
"""

from .models import Race
from .scraper import (
    RaceScrapeError,
    RaceSource,
    ZuicoolRaceSource,
    extract_city,
    is_real_marathon,
    parse_events_page,
)
from .matcher import RaceMatcher, select_race

__all__ = [
    "Race",
    "RaceMatcher",
    "RaceScrapeError",
    "RaceSource",
    "ZuicoolRaceSource",
    "extract_city",
    "is_real_marathon",
    "parse_events_page",
    "select_race",
]
