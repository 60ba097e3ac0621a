"""
Shared fixtures.

- db: async session on a fresh in-memory SQLite schema
- make_raw_activity: RawActivity factory with sensible running defaults
- make_gpx: GPX document builder for a straight northward track
"""

import math
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from paceflow.db.session import enable_sqlite_foreign_keys, init_db
from paceflow.features.sync.adapters.base import RawActivity
from paceflow.shared.constants import ActivityType, SourceKind
from paceflow.shared.geo import EARTH_RADIUS_M

# Along a meridian one degree of latitude is exactly this many meters
METERS_PER_DEGREE_LAT = math.pi * EARTH_RADIUS_M / 180

BEIJING = (39.9042, 116.4074)
DEFAULT_START = datetime(2024, 3, 10, 0, 30, tzinfo=timezone.utc)

GPX_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<gpx version="1.1" creator="tests" '
    'xmlns="http://www.topografix.com/GPX/1/1" '
    'xmlns:gpxtpx="http://www.garmin.com/xmlschemas/TrackPointExtension/v1">\n'
)


@pytest.fixture
async def db():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    enable_sqlite_foreign_keys(engine)
    await init_db(engine)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def make_raw_activity():
    def _make(**overrides) -> RawActivity:
        fields = dict(
            id="1001",
            source=SourceKind.STRAVA,
            title="Morning Run",
            type=ActivityType.RUNNING,
            start_time=DEFAULT_START,
            duration=1500,
            distance=5000.0,
            average_pace=300.0,
        )
        fields.update(overrides)
        return RawActivity(**fields)

    return _make


@pytest.fixture
def make_gpx():
    """
    Build a single-track GPX heading due north.

    Args:
        steps: Number of legs (points = steps + 1)
        step_m: Leg length in meters
        step_s: Seconds per leg, or a list with one value per leg
        lat, lon: Start coordinate
        start: Time of the first point
        hr: Heart rate written on every point, if given
    """
    def _make(
        steps: int,
        step_m: float = 100.0,
        step_s=30,
        lat: float = BEIJING[0],
        lon: float = BEIJING[1],
        start: datetime = DEFAULT_START,
        hr: int | None = None,
    ) -> str:
        leg_seconds = step_s if isinstance(step_s, list) else [step_s] * steps
        elapsed = 0
        points = []

        for i in range(steps + 1):
            if i > 0:
                elapsed += leg_seconds[i - 1]
            point_lat = lat + i * step_m / METERS_PER_DEGREE_LAT
            time_str = (start + timedelta(seconds=elapsed)).strftime("%Y-%m-%dT%H:%M:%SZ")
            extensions = (
                "<extensions><gpxtpx:TrackPointExtension>"
                f"<gpxtpx:hr>{hr}</gpxtpx:hr>"
                "</gpxtpx:TrackPointExtension></extensions>"
                if hr is not None else ""
            )
            points.append(
                f'<trkpt lat="{point_lat!r}" lon="{lon!r}">'
                f"<ele>100</ele><time>{time_str}</time>{extensions}</trkpt>"
            )

        return (
            GPX_HEADER
            + "<trk><name>Test</name><trkseg>\n"
            + "\n".join(points)
            + "\n</trkseg></trk>\n</gpx>\n"
        )

    return _make
