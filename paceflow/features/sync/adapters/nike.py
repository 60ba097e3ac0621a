"""
Nike Run Club adapter.

Placeholder that satisfies the SyncAdapter interface. Nike exposes no
public API; until an integration is wired this adapter yields nothing.
"""

import logging
from datetime import datetime
from typing import Optional

from paceflow.shared.constants import SourceKind
from .base import (
    AdapterCredentials,
    AdapterNotImplementedError,
    RawActivity,
    SyncAdapter,
)

logger = logging.getLogger(__name__)


class NikeAdapter(SyncAdapter):
    source = SourceKind.NIKE

    def __init__(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None):
        self.access_token = access_token
        self.refresh_token = refresh_token

    @classmethod
    def from_credentials(cls, credentials: AdapterCredentials) -> "NikeAdapter":
        return cls(credentials.access_token, credentials.refresh_token)

    async def authenticate(self, credentials: Optional[AdapterCredentials] = None) -> bool:
        token = (credentials.access_token if credentials else None) or self.access_token
        return bool(token)

    async def get_activities(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: Optional[int] = None,
        after: Optional[int] = None,
    ) -> list[RawActivity]:
        logger.info("Nike sync is not available yet, returning no activities")
        return []

    async def get_activity_detail(self, activity_id: str) -> RawActivity:
        raise AdapterNotImplementedError("Nike activity detail is not implemented")

    async def download_gpx(self, activity_id: str) -> str:
        raise AdapterNotImplementedError("Nike GPX download is not implemented")

    async def health_check(self) -> bool:
        return True
