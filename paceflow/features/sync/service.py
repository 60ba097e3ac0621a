"""
Sync session orchestration.

Main entry point for pulling activities from a source platform.

Session Flow:
1. Open a SyncLog row (status=running)
2. Start a race matcher for the whole session
3. Resolve credentials (profile first, then environment)
4. Build the adapter, authenticate, health-check
5. Fetch raw activities and hand them to ActivityProcessor
6. Close the SyncLog as success or failed; the matcher is always released

Per-activity failures never fail the session; only the preconditions
in steps 3-4 (and failures fetching the list itself) do.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from paceflow.config import settings
from paceflow.features.activities.processor import ActivityProcessor, WeatherFetcher
from paceflow.features.races.matcher import RaceMatcher
from paceflow.features.sync.adapters import (
    AdapterCredentials,
    SyncAdapter,
    create_adapter,
)
from paceflow.features.weather import fetch_weather_for_activity
from paceflow.shared.constants import SourceKind
from .models import SyncLog, SyncStatus, UserProfile
from .repository import SyncLogRepository, UserProfileRepository

logger = logging.getLogger(__name__)


class SyncSessionError(Exception):
    """Session-level precondition failed (token, auth, health)."""
    pass


@dataclass
class SyncOptions:
    source: SourceKind
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: Optional[int] = None
    after: Optional[int] = None  # unix seconds, wins over start_date


@dataclass
class SyncResult:
    success: bool
    activities_count: int
    error_message: Optional[str] = None
    log_id: Optional[str] = None


class SyncService:
    """
    Runs sync sessions and keeps their bookkeeping.

    Usage:
        service = SyncService(db)
        result = await service.perform_sync(SyncOptions(source=SourceKind.STRAVA))
    """

    def __init__(
        self,
        db: AsyncSession,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        race_matcher_factory: Callable[[], RaceMatcher] = RaceMatcher,
        fetch_weather: WeatherFetcher = fetch_weather_for_activity,
    ):
        """
        Args:
            db: Async database session
            transport: httpx transport for source adapters (tests)
            race_matcher_factory: Builds the per-session race matcher
            fetch_weather: Weather lookup passed to the processor
        """
        self.db = db
        self.transport = transport
        self.race_matcher_factory = race_matcher_factory
        self.fetch_weather = fetch_weather
        self.logs = SyncLogRepository(db)
        self.profiles = UserProfileRepository(db)

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------

    async def get_or_create_profile(self) -> UserProfile:
        """Return the single local profile, creating a default one."""
        profile = await self.profiles.get_first()
        if profile:
            return profile

        profile = await self.profiles.create(name="Runner")
        await self.db.commit()
        logger.info(f"Created default profile {profile.id}")
        return profile

    async def resolve_credentials(self, source: SourceKind) -> AdapterCredentials:
        """Credentials for a source: profile tokens first, then settings."""
        profile = await self.profiles.get_first()

        if source == SourceKind.STRAVA:
            return AdapterCredentials(
                access_token=(profile and profile.strava_access_token) or settings.strava_access_token,
                refresh_token=(profile and profile.strava_refresh_token) or settings.strava_refresh_token,
                client_id=settings.strava_client_id,
                client_secret=settings.strava_client_secret,
            )
        if source == SourceKind.NIKE:
            return AdapterCredentials(
                access_token=(profile and profile.nike_access_token) or settings.nike_access_token,
                refresh_token=settings.nike_refresh_token,
            )
        return AdapterCredentials(access_token=profile.garmin_secret_string if profile else None)

    async def _connect(self, source: SourceKind) -> SyncAdapter:
        """
        Build an authenticated, healthy adapter.

        Raises:
            SyncSessionError: Missing token, failed authentication or health check
            AdapterNotImplementedError: For sources without an adapter
        """
        credentials = await self.resolve_credentials(source)
        if not credentials.has_token:
            raise SyncSessionError(f"No access token configured for {source.value}")

        adapter = create_adapter(source, credentials, transport=self.transport)

        if not await adapter.authenticate():
            raise SyncSessionError(f"Authentication with {source.value} failed")
        if not await adapter.health_check():
            raise SyncSessionError(f"{source.value} health check failed")

        return adapter

    # -------------------------------------------------------------------------
    # Sync
    # -------------------------------------------------------------------------

    async def perform_sync(self, options: SyncOptions) -> SyncResult:
        """
        Run one sync session.

        Never raises for session failures; they are reported in the
        result and on the SyncLog row.
        """
        source = SourceKind(options.source)

        log = await self.logs.create(source=source.value, status=SyncStatus.RUNNING.value)
        await self.db.commit()
        log_id = log.id
        logger.info(f"Starting {source.value} sync (log {log_id})")

        try:
            async with self.race_matcher_factory() as matcher:
                adapter = await self._connect(source)

                raw_activities = await adapter.get_activities(
                    start_date=options.start_date,
                    end_date=options.end_date,
                    limit=options.limit or settings.sync_default_limit,
                    after=options.after,
                )
                logger.info(f"Fetched {len(raw_activities)} activities from {source.value}")

                processor = ActivityProcessor(
                    self.db, race_matcher=matcher, fetch_weather=self.fetch_weather
                )
                activity_ids = await processor.sync_activities(raw_activities)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"{source.value} sync failed: {e}")
            await self._finish_log(log_id, SyncStatus.FAILED, error_message=str(e))
            return SyncResult(
                success=False,
                activities_count=0,
                error_message=str(e),
                log_id=log_id,
            )

        await self._finish_log(log_id, SyncStatus.SUCCESS, activities_count=len(activity_ids))

        profile = await self.get_or_create_profile()
        await self.profiles.update(profile, last_sync_at=datetime.utcnow(), sync_source=source.value)
        await self.db.commit()

        logger.info(f"{source.value} sync complete: {len(activity_ids)} activities")
        return SyncResult(success=True, activities_count=len(activity_ids), log_id=log_id)

    async def _finish_log(
        self,
        log_id: str,
        status: SyncStatus,
        activities_count: int = 0,
        error_message: Optional[str] = None,
    ) -> None:
        # rollback expires loaded rows, so reload before writing
        log = await self.logs.get_by_id(log_id)
        await self.logs.update(
            log,
            status=status.value,
            activities_count=activities_count,
            error_message=error_message,
            completed_at=datetime.utcnow(),
        )
        await self.db.commit()

    async def get_sync_history(self, limit: int = 10) -> list[SyncLog]:
        return await self.logs.get_recent(limit)

    async def test_connection(self, source: SourceKind) -> bool:
        """Check that a source is reachable with the configured credentials."""
        source = SourceKind(source)
        try:
            await self._connect(source)
            return True
        except Exception as e:
            logger.warning(f"{source.value} connection test failed: {e}")
            return False
