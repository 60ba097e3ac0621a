"""Race matching: attach a race name to a long activity.

An activity is matched against the race calendar for its year by date
(within one day) and, when a start coordinate is known, by distance from
the race's host city. Scores: 1 for a date match, +3 when the start is
within 50 km of the city.

A date-only candidate (score 1) is accepted only when it is the sole
race on that date; otherwise geography must confirm the match.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable

from paceflow.config import settings
from paceflow.features.gpx.schemas import Coordinates
from paceflow.shared.geo import haversine_distance
from .models import Race
from .scraper import RaceSource, ZuicoolRaceSource

logger = logging.getLogger(__name__)

DATE_TOLERANCE_S = 24 * 3600
GEO_MATCH_RADIUS_M = 50_000
DATE_MATCH_SCORE = 1
GEO_MATCH_BONUS = 3


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def dates_match(activity_time: datetime, race: Race) -> bool:
    """Activity start within one day of the race date (midnight UTC)."""
    race_midnight = datetime.combine(race.event_date, datetime.min.time(), tzinfo=timezone.utc)
    return abs((_as_utc(activity_time) - race_midnight).total_seconds()) <= DATE_TOLERANCE_S


def score_race(race: Race, coordinates: Coordinates | None) -> int:
    score = DATE_MATCH_SCORE
    if coordinates is not None and race.coordinates is not None:
        if haversine_distance(coordinates, race.coordinates) < GEO_MATCH_RADIUS_M:
            score += GEO_MATCH_BONUS
    return score


def with_year(name: str, year: int) -> str:
    """Prefix the race name with the year unless it already starts with it."""
    year_str = str(year)
    return name if name.startswith(year_str) else f"{year_str} {name}"


def select_race(
    races: list[Race],
    activity_time: datetime,
    coordinates: Coordinates | None = None,
) -> Race | None:
    """Pick the best-scoring race for an activity, or None when unsure."""
    candidates = [
        (race, score_race(race, coordinates))
        for race in races
        if dates_match(activity_time, race)
    ]
    if not candidates:
        return None

    candidates.sort(key=lambda c: c[1], reverse=True)
    best_race, best_score = candidates[0]

    if best_score <= DATE_MATCH_SCORE and len(candidates) > 1:
        # Several same-day races and no geographic confirmation
        return None

    return best_race


class RaceMatcher:
    """Session-scoped race matcher.

    Owns one race source (a headless browser) and a year -> races cache.
    Both live from start() to close(); use it as an async context manager
    so the browser is released on every path:

        async with RaceMatcher() as matcher:
            name = await matcher.match_race_for_activity(start, distance, coords)

    Blocking browser calls run in a worker thread, one at a time.
    """

    def __init__(
        self,
        source: RaceSource | None = None,
        source_factory: Callable[[], RaceSource] = ZuicoolRaceSource,
        min_distance: float | None = None,
    ):
        self._source = source
        self._source_factory = source_factory
        self.min_distance = (
            min_distance if min_distance is not None else settings.race_match_min_distance_m
        )
        self._cache: dict[int, list[Race]] = {}
        self._lock = asyncio.Lock()

    async def start(self) -> "RaceMatcher":
        if self._source is None:
            self._source = self._source_factory()
            logger.info("Race matcher initialized")
        return self

    async def close(self) -> None:
        source, self._source = self._source, None
        self._cache.clear()
        if source is not None:
            await asyncio.to_thread(source.close)
            logger.info("Race matcher closed")

    async def __aenter__(self) -> "RaceMatcher":
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def cached_years(self) -> list[int]:
        return sorted(self._cache)

    async def get_races_for_year(self, year: int) -> list[Race]:
        """Races for a year, scraped once per session."""
        async with self._lock:
            if year in self._cache:
                logger.debug(f"Using cached races for {year}")
                return self._cache[year]

            if self._source is None:
                await self.start()

            races = await asyncio.to_thread(self._source.fetch_races, year)
            self._cache[year] = races
            return races

    async def match_race_for_activity(
        self,
        activity_time: datetime,
        distance_m: float,
        coordinates: Coordinates | None = None,
    ) -> str | None:
        """Match an activity to a race.

        Args:
            activity_time: Activity start (naive values are UTC)
            distance_m: Activity distance in meters
            coordinates: Activity start point, if known

        Returns:
            "<year> <race name>", or None when there is no confident match
            or anything goes wrong
        """
        if distance_m < self.min_distance:
            return None

        year = _as_utc(activity_time).year

        try:
            races = await self.get_races_for_year(year)
            race = select_race(races, activity_time, coordinates)
        except Exception as e:
            logger.warning(f"Race matching failed: {e}")
            return None

        if race is None:
            return None

        name = with_year(race.name, year)
        logger.info(f"Matched activity on {activity_time:%Y-%m-%d} to race: {name}")
        return name
