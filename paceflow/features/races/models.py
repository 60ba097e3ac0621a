"""Race calendar data (dataclasses, no DB dependency)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from paceflow.features.gpx.schemas import Coordinates


@dataclass(frozen=True)
class Race:
    """One event from a public race calendar."""

    name: str  # "北京马拉松"
    date: str  # "2024-11-03"
    city: str  # "北京", or "未知" when unresolved
    coordinates: Coordinates | None = None  # city reference point

    @property
    def event_date(self) -> date:
        return date.fromisoformat(self.date)
