"""
Activity database models.

Models:
- Activity: one ingested workout, unique per (source, source_id)
- Split: per-kilometer summary owned by an Activity

All datetimes are stored as naive UTC.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from paceflow.models.base import Base


class Activity(Base):
    """
    Canonical activity record.

    `id` is our opaque primary key; `source_id` is the platform's own ID.
    `race_name` and `weather_data` are enrichments set once at sync time
    (or by a backfill job) and never re-evaluated.
    """

    __tablename__ = "activities"
    __table_args__ = (
        UniqueConstraint("source", "source_id", name="uq_activities_source_source_id"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    title = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)  # running, cycling, walking, swimming, other
    source = Column(String(20), nullable=False, index=True)  # strava, nike, garmin
    source_id = Column(String(64), nullable=False)

    # Time
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    duration = Column(Integer, nullable=False)  # seconds

    # Distance and pace
    distance = Column(Float, nullable=False)  # meters
    average_pace = Column(Float, nullable=True)  # s/km
    best_pace = Column(Float, nullable=True)  # s/km

    # Other metrics
    elevation_gain = Column(Float, nullable=True)
    average_heart_rate = Column(Integer, nullable=True)
    max_heart_rate = Column(Integer, nullable=True)
    calories = Column(Integer, nullable=True)

    gpx_data = Column(Text, nullable=True)  # full GPX XML
    is_indoor = Column(Boolean, nullable=False, default=False)

    # Enrichments
    race_name = Column(String(255), nullable=True)
    weather_data = Column(Text, nullable=True)  # JSON-encoded WeatherData

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    splits = relationship(
        "Split",
        back_populates="activity",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Split.kilometer",
    )

    def __repr__(self):
        return f"<Activity {self.source}:{self.source_id} {self.type} {self.distance}m>"

    @property
    def distance_km(self) -> float:
        return round(self.distance / 1000, 2) if self.distance else 0


class Split(Base):
    """
    Kilometer split.

    Created once at sync time and never mutated; removed with its Activity.
    """

    __tablename__ = "splits"
    __table_args__ = (
        UniqueConstraint("activity_id", "kilometer", name="uq_splits_activity_kilometer"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    activity_id = Column(
        String(36),
        ForeignKey("activities.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    kilometer = Column(Integer, nullable=False)  # 1, 2, 3...
    duration = Column(Integer, nullable=False)  # seconds
    pace = Column(Float, nullable=False)  # s/km
    distance = Column(Float, nullable=False)  # meters, ~1000
    elevation_gain = Column(Float, nullable=True)
    average_heart_rate = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    activity = relationship("Activity", back_populates="splits")

    def __repr__(self):
        return f"<Split #{self.kilometer} {self.distance}m {self.pace}s/km>"
