"""
Sync bookkeeping models.

Models:
- SyncLog: audit row for one sync session
- UserProfile: single-row store for source tokens and last sync
"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, Integer, String, Text

from paceflow.models.base import Base


class SyncStatus(str, Enum):
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class SyncLog(Base):
    """
    One sync session.

    Created as `running`, then closed exactly once as `success` or `failed`.
    """

    __tablename__ = "sync_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    source = Column(String(20), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=SyncStatus.RUNNING.value)
    activities_count = Column(Integer, nullable=False, default=0)
    error_message = Column(Text, nullable=True)

    started_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    completed_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<SyncLog {self.source} {self.status} ({self.activities_count})>"


class UserProfile(Base):
    """
    Local owner profile.

    The pipeline is single-user: there is at most one row, created with
    defaults on first use. Tokens stored here win over the environment.
    """

    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=True)

    sync_source = Column(String(20), nullable=True)  # last source synced successfully

    nike_access_token = Column(Text, nullable=True)
    strava_access_token = Column(Text, nullable=True)
    strava_refresh_token = Column(Text, nullable=True)
    garmin_secret_string = Column(Text, nullable=True)

    last_sync_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<UserProfile {self.id} source={self.sync_source}>"
