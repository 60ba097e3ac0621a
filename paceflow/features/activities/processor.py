"""
Activity processor.

Turns RawActivity records into persisted Activity rows with splits,
attaching a matched race name and start weather on the way.

Processing of one activity:
1. Skip if (source, source_id) is already stored
2. Parse GPX (an unusable document just means "no GPX")
3. Race match for long activities, weather for outdoor ones
4. Insert the activity, then its splits
5. With GPS splits, best pace is recomputed from them
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from paceflow.config import settings
from paceflow.features.gpx import GPXData, extract_first_coordinate, parse_gpx
from paceflow.features.races.matcher import RaceMatcher
from paceflow.features.sync.adapters.base import RawActivity
from paceflow.features.weather import WeatherData, fetch_weather_for_activity
from paceflow.shared.pace import calculate_pace
from .repository import ActivityRepository, SplitRepository
from .splits import best_pace, generate_average_splits, generate_splits

logger = logging.getLogger(__name__)

WeatherFetcher = Callable[[float, float, datetime], Awaitable[Optional[WeatherData]]]


def to_naive_utc(moment: datetime) -> datetime:
    """Normalize to the naive-UTC form used in the database."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


class ActivityProcessor:
    """
    Persists raw activities.

    Usage:
        async with RaceMatcher() as matcher:
            processor = ActivityProcessor(db, race_matcher=matcher)
            ids = await processor.sync_activities(raw_activities)

    Each activity is committed on its own, so a failure rolls back only
    that activity.
    """

    def __init__(
        self,
        db: AsyncSession,
        race_matcher: Optional[RaceMatcher] = None,
        fetch_weather: WeatherFetcher = fetch_weather_for_activity,
    ):
        """
        Args:
            db: Async database session
            race_matcher: Started matcher; without one, race matching is skipped
            fetch_weather: Weather lookup (lat, lon, start_time) -> WeatherData | None
        """
        self.db = db
        self.race_matcher = race_matcher
        self.fetch_weather = fetch_weather
        self.activities = ActivityRepository(db)
        self.splits = SplitRepository(db)

    # -------------------------------------------------------------------------
    # Sync
    # -------------------------------------------------------------------------

    async def _lookup_weather(self, lat: float, lon: float, start_time: datetime) -> Optional[WeatherData]:
        try:
            return await self.fetch_weather(lat, lon, start_time)
        except Exception as e:
            logger.warning(f"Weather lookup failed, continuing without it: {e}")
            return None

    async def sync_activity(self, raw: RawActivity) -> str:
        """
        Store one raw activity.

        Idempotent: an activity already stored for (source, id) is left
        untouched and its ID returned.

        Returns:
            Activity ID
        """
        source = raw.source.value
        existing = await self.activities.get_by_source(source, raw.id)
        if existing:
            logger.info(f"Activity {source}:{raw.id} already exists, skipping")
            return existing.id

        parsed = parse_gpx(raw.gpx_data) if raw.gpx_data else GPXData()
        if raw.gpx_data and parsed.is_empty:
            logger.warning(f"No usable GPX track for activity {source}:{raw.id}")

        distance = raw.distance or 0.0
        duration = raw.duration or 0
        average_pace = raw.average_pace or (
            calculate_pace(distance, duration) if distance > 0 else 0.0
        )

        coordinates = extract_first_coordinate(raw.gpx_data)

        race_name = None
        if self.race_matcher is not None and distance >= self.race_matcher.min_distance:
            race_name = await self.race_matcher.match_race_for_activity(
                raw.start_time, distance, coordinates
            )

        weather = None
        if not raw.is_indoor and coordinates is not None:
            weather = await self._lookup_weather(coordinates.lat, coordinates.lon, raw.start_time)

        start_time = to_naive_utc(raw.start_time)
        activity = await self.activities.create(
            title=race_name or raw.title,
            type=raw.type.value,
            source=source,
            source_id=raw.id,
            start_time=start_time,
            end_time=start_time + timedelta(seconds=duration),
            duration=round(duration),
            distance=distance,
            average_pace=average_pace,
            best_pace=raw.best_pace,
            elevation_gain=raw.elevation_gain,
            average_heart_rate=raw.average_heart_rate,
            max_heart_rate=raw.max_heart_rate,
            calories=raw.calories,
            gpx_data=raw.gpx_data,
            is_indoor=raw.is_indoor,
            race_name=race_name,
            weather_data=weather.to_json() if weather else None,
        )

        if not parsed.is_empty:
            split_data = generate_splits(parsed.tracks[0].points)
            created = await self.splits.create_many(activity.id, split_data)

            fastest = best_pace(split_data)
            if fastest is not None:
                await self.activities.update(activity, best_pace=fastest)

            logger.info(f"Generated {created} GPS splits for activity {activity.id}")
        elif distance > 0 and duration > 0:
            split_data = generate_average_splits(distance, duration, average_pace)
            created = await self.splits.create_many(activity.id, split_data)
            logger.info(f"Generated {created} average splits for activity {activity.id}")

        await self.db.commit()

        logger.info(f"Synced activity {activity.id} (source: {source})")
        return activity.id

    async def sync_activities(self, raw_activities: list[RawActivity]) -> list[str]:
        """
        Store activities one by one.

        A failing activity is logged and skipped; the rest continue.

        Returns:
            IDs of activities stored or already present
        """
        activity_ids: list[str] = []

        for raw in raw_activities:
            try:
                activity_ids.append(await self.sync_activity(raw))
            except Exception as e:
                await self.db.rollback()
                logger.error(f"Failed to sync activity {raw.source.value}:{raw.id}, continuing: {e}")

        return activity_ids

    async def delete_activity(self, activity_id: str) -> bool:
        """Delete an activity and its splits. Returns False if it did not exist."""
        deleted = await self.activities.delete_by_id(activity_id)
        await self.db.commit()

        if deleted:
            logger.info(f"Deleted activity {activity_id}")
        return deleted

    # -------------------------------------------------------------------------
    # Backfill
    # -------------------------------------------------------------------------

    async def backfill_missing_weather(self, delay_ms: Optional[int] = None) -> dict:
        """
        Fetch weather for outdoor GPX activities that have none.

        Args:
            delay_ms: Minimum pause between weather API calls

        Returns:
            {"total", "success", "failed", "skipped"}; skipped activities
            have no extractable start coordinate
        """
        delay_s = (delay_ms if delay_ms is not None else settings.weather_backfill_delay_ms) / 1000
        pending = await self.activities.get_missing_weather()

        result = {"total": len(pending), "success": 0, "failed": 0, "skipped": 0}
        if not pending:
            logger.info("No activities need weather backfill")
            return result

        logger.info(f"Backfilling weather for {len(pending)} activities")
        called = False

        for activity in pending:
            coordinates = extract_first_coordinate(activity.gpx_data)
            if coordinates is None:
                result["skipped"] += 1
                continue

            if called and delay_s > 0:
                await asyncio.sleep(delay_s)
            called = True

            weather = await self._lookup_weather(coordinates.lat, coordinates.lon, activity.start_time)
            if weather is None:
                result["failed"] += 1
                continue

            await self.activities.update(activity, weather_data=weather.to_json())
            await self.db.commit()
            result["success"] += 1
            logger.debug(f"Weather for {activity.id}: {weather.description}, {weather.temperature}°C")

        logger.info(
            f"Weather backfill done: {result['success']} ok, "
            f"{result['failed']} failed, {result['skipped']} skipped"
        )
        return result

    async def backfill_race_names(self, race_matcher: Optional[RaceMatcher] = None) -> dict:
        """
        Match long activities without a race name.

        Uses the given matcher, else this processor's, else a new one
        scoped to this call.

        Returns:
            {"processed", "matched"}
        """
        matcher = race_matcher or self.race_matcher
        if matcher is None:
            async with RaceMatcher() as scoped:
                return await self._backfill_race_names(scoped)
        return await self._backfill_race_names(matcher)

    async def _backfill_race_names(self, matcher: RaceMatcher) -> dict:
        pending = await self.activities.get_missing_race_name(matcher.min_distance)
        logger.info(f"Found {len(pending)} long activities without race names")

        result = {"processed": 0, "matched": 0}
        for activity in pending:
            result["processed"] += 1

            coordinates = extract_first_coordinate(activity.gpx_data)
            race_name = await matcher.match_race_for_activity(
                activity.start_time, activity.distance, coordinates
            )
            if not race_name:
                continue

            await self.activities.update(activity, race_name=race_name, title=race_name)
            await self.db.commit()
            result["matched"] += 1

        return result
