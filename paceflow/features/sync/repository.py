"""
Sync repositories.
"""

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from paceflow.shared.repository import BaseRepository
from .models import SyncLog, UserProfile


class SyncLogRepository(BaseRepository[SyncLog]):

    def __init__(self, db: AsyncSession):
        super().__init__(db, SyncLog)

    async def get_recent(self, limit: int = 10) -> list[SyncLog]:
        """Most recent sync sessions, newest first."""
        result = await self.db.execute(
            select(SyncLog).order_by(desc(SyncLog.started_at)).limit(limit)
        )
        return list(result.scalars().all())


class UserProfileRepository(BaseRepository[UserProfile]):

    def __init__(self, db: AsyncSession):
        super().__init__(db, UserProfile)

    async def get_first(self) -> UserProfile | None:
        result = await self.db.execute(
            select(UserProfile).order_by(UserProfile.created_at).limit(1)
        )
        return result.scalar_one_or_none()
