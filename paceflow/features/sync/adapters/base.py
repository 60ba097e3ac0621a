"""
Source adapter interface.

Every fitness platform is wrapped in a SyncAdapter that turns its
provider-specific payloads into RawActivity records.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from paceflow.shared.constants import ActivityType, SourceKind


# =============================================================================
# Exceptions
# =============================================================================

class SyncAdapterError(Exception):
    """Base adapter error."""
    pass


class AdapterAuthError(SyncAdapterError):
    """Authentication/authorization error."""
    pass


class AdapterAPIError(SyncAdapterError):
    """Provider API returned an error."""
    pass


class AdapterNotImplementedError(SyncAdapterError):
    """Operation not supported by this adapter yet."""
    pass


# =============================================================================
# Data
# =============================================================================

@dataclass
class RawActivity:
    """
    Adapter output, independent of the source platform.

    `id` is the source-native identifier. Paces are seconds per km,
    distances meters, durations seconds (moving time).
    """
    id: str
    source: SourceKind
    title: str
    type: ActivityType
    start_time: datetime
    duration: float
    distance: float
    is_indoor: bool = False
    average_pace: Optional[float] = None
    best_pace: Optional[float] = None
    elevation_gain: Optional[float] = None
    average_heart_rate: Optional[int] = None
    max_heart_rate: Optional[int] = None
    calories: Optional[int] = None
    gpx_data: Optional[str] = None


@dataclass
class AdapterCredentials:
    """Whatever a source needs to authenticate; unused fields stay None."""
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    @property
    def has_token(self) -> bool:
        return bool(self.access_token or self.refresh_token)


# =============================================================================
# Interface
# =============================================================================

class SyncAdapter(ABC):
    """Capability set every source implements."""

    source: SourceKind

    @abstractmethod
    async def authenticate(self, credentials: Optional[AdapterCredentials] = None) -> bool:
        """Validate (and if needed refresh) credentials. False on failure."""

    @abstractmethod
    async def get_activities(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: Optional[int] = None,
        after: Optional[int] = None,
    ) -> list[RawActivity]:
        """
        Fetch running activities with detail.

        Args:
            start_date: Only activities after this time
            end_date: Only activities before this time
            limit: Maximum number of activities returned
            after: Unix seconds; takes precedence over start_date
        """

    @abstractmethod
    async def get_activity_detail(self, activity_id: str) -> RawActivity:
        ...

    @abstractmethod
    async def download_gpx(self, activity_id: str) -> str:
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        ...
