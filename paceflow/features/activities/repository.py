"""
Activity repositories.

Data access layer for activities and their splits.
"""

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from paceflow.shared.repository import BaseRepository
from .models import Activity, Split
from .splits import SplitData


class ActivityRepository(BaseRepository[Activity]):
    """Repository for activities."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Activity)

    async def get_by_source(self, source: str, source_id: str) -> Activity | None:
        """Look up an activity by its natural key."""
        return await self.get_by(source=source, source_id=source_id)

    async def get_latest_start_time(self) -> Optional[datetime]:
        """Start time of the most recent activity, for incremental sync."""
        result = await self.db.execute(
            select(Activity.start_time).order_by(desc(Activity.start_time)).limit(1)
        )
        return result.scalar_one_or_none()

    async def get_missing_weather(self) -> list[Activity]:
        """Outdoor activities with GPX but no weather yet."""
        result = await self.db.execute(
            select(Activity).where(
                Activity.weather_data.is_(None),
                Activity.is_indoor.is_(False),
                Activity.gpx_data.is_not(None),
            ).order_by(Activity.start_time)
        )
        return list(result.scalars().all())

    async def get_missing_race_name(self, min_distance: float) -> list[Activity]:
        """Long activities that were never matched to a race."""
        result = await self.db.execute(
            select(Activity).where(
                Activity.race_name.is_(None),
                Activity.distance >= min_distance,
            ).order_by(Activity.start_time)
        )
        return list(result.scalars().all())

    async def delete_by_id(self, activity_id: str) -> bool:
        """
        Delete an activity together with its splits.

        Returns True if an activity was deleted.
        """
        await self.db.execute(delete(Split).where(Split.activity_id == activity_id))
        result = await self.db.execute(delete(Activity).where(Activity.id == activity_id))
        return result.rowcount > 0


class SplitRepository(BaseRepository[Split]):
    """Repository for kilometer splits."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Split)

    async def get_for_activity(self, activity_id: str) -> list[Split]:
        result = await self.db.execute(
            select(Split)
            .where(Split.activity_id == activity_id)
            .order_by(Split.kilometer)
        )
        return list(result.scalars().all())

    async def create_many(self, activity_id: str, splits: Iterable[SplitData]) -> int:
        """Insert splits for an activity. Returns the number inserted."""
        records = [
            Split(
                activity_id=activity_id,
                kilometer=split.kilometer,
                duration=split.duration,
                pace=split.pace,
                distance=split.distance,
                elevation_gain=split.elevation_gain,
                average_heart_rate=split.average_heart_rate,
            )
            for split in splits
        ]
        if not records:
            return 0

        self.db.add_all(records)
        await self.db.flush()
        return len(records)

    async def count_for_activity(self, activity_id: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Split).where(Split.activity_id == activity_id)
        )
        return result.scalar() or 0
