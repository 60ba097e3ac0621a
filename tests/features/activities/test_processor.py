"""
Tests for ActivityProcessor against an in-memory database.

Weather and race lookups are replaced with in-process fakes.
"""

from datetime import datetime, timedelta, timezone

import pytest

from paceflow.features.activities.processor import ActivityProcessor, to_naive_utc
from paceflow.features.activities.repository import ActivityRepository, SplitRepository
from paceflow.features.races import Race, RaceMatcher
from paceflow.features.races.cities import city_coordinates
from paceflow.features.weather import WeatherData
from paceflow.shared.constants import SourceKind


# =============================================================================
# Fakes
# =============================================================================

CLEAR = WeatherData(temperature=12.3, humidity=55, wind_speed=10.2, weather_code=1,
                    description="mainly clear")


class FakeWeather:
    """Async weather lookup that records calls; southern hemisphere fails."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple[float, float, datetime]] = []

    async def __call__(self, lat: float, lon: float, start_time: datetime):
        self.calls.append((lat, lon, start_time))
        if self.error:
            raise self.error
        if lat < 0:
            return None
        return CLEAR


class FakeRaceSource:

    def __init__(self, races: list[Race]):
        self.races = races
        self.closed = False

    def fetch_races(self, year: int) -> list[Race]:
        return [r for r in self.races if r.date.startswith(str(year))]

    def close(self) -> None:
        self.closed = True


BEIJING_MARATHON = Race("北京马拉松", "2024-03-10", "北京", city_coordinates("北京"))


# =============================================================================
# Test sync_activity
# =============================================================================

class TestSyncActivity:

    async def test_idempotent(self, db, make_raw_activity):
        processor = ActivityProcessor(db, fetch_weather=FakeWeather())
        raw = make_raw_activity()

        first = await processor.sync_activity(raw)
        second = await processor.sync_activity(raw)

        assert first == second
        assert await ActivityRepository(db).count() == 1
        assert await SplitRepository(db).count_for_activity(first) == 5

    async def test_fields_persisted(self, db, make_raw_activity):
        processor = ActivityProcessor(db, fetch_weather=FakeWeather())
        activity_id = await processor.sync_activity(make_raw_activity(
            title="5K", elevation_gain=12.0, average_heart_rate=150, calories=320,
        ))

        activity = await ActivityRepository(db).get_by_id(activity_id)
        assert activity.source == "strava"
        assert activity.source_id == "1001"
        assert activity.type == "running"
        assert activity.title == "5K"
        assert activity.start_time == datetime(2024, 3, 10, 0, 30)
        assert activity.end_time == datetime(2024, 3, 10, 0, 55)
        assert activity.duration == 1500
        assert activity.calories == 320
        assert activity.race_name is None
        assert activity.distance_km == 5.0

    async def test_synthetic_splits_without_gpx(self, db, make_raw_activity):
        processor = ActivityProcessor(db, fetch_weather=FakeWeather())
        activity_id = await processor.sync_activity(make_raw_activity(distance=5300, duration=1590))

        splits = await SplitRepository(db).get_for_activity(activity_id)
        assert [s.kilometer for s in splits] == [1, 2, 3, 4, 5]
        assert {s.duration for s in splits} == {300}
        assert {s.pace for s in splits} == {300.0}

    async def test_average_pace_computed_when_missing(self, db, make_raw_activity):
        processor = ActivityProcessor(db, fetch_weather=FakeWeather())
        activity_id = await processor.sync_activity(make_raw_activity(average_pace=None))

        activity = await ActivityRepository(db).get_by_id(activity_id)
        assert activity.average_pace == pytest.approx(300)

    async def test_gps_splits_set_best_pace(self, db, make_raw_activity, make_gpx):
        step_s = [30] * 10 + [24] * 10 + [36] * 10
        raw = make_raw_activity(
            gpx_data=make_gpx(steps=30, step_s=step_s),
            distance=3000,
            duration=900,
            best_pace=200.0,
        )
        weather = FakeWeather()
        processor = ActivityProcessor(db, fetch_weather=weather)

        activity_id = await processor.sync_activity(raw)

        activity = await ActivityRepository(db).get_by_id(activity_id)
        splits = await SplitRepository(db).get_for_activity(activity_id)
        assert [s.duration for s in splits] == [300, 240, 360]
        assert activity.best_pace == pytest.approx(240, rel=1e-4)
        assert WeatherData.from_json(activity.weather_data) == CLEAR
        assert weather.calls[0][:2] == (39.9042, 116.4074)

    async def test_weather_failure_is_soft(self, db, make_raw_activity, make_gpx):
        processor = ActivityProcessor(db, fetch_weather=FakeWeather(error=RuntimeError("boom")))

        activity_id = await processor.sync_activity(make_raw_activity(gpx_data=make_gpx(steps=10)))

        activity = await ActivityRepository(db).get_by_id(activity_id)
        assert activity is not None
        assert activity.weather_data is None

    async def test_indoor_skips_weather(self, db, make_raw_activity, make_gpx):
        weather = FakeWeather()
        processor = ActivityProcessor(db, fetch_weather=weather)

        await processor.sync_activity(make_raw_activity(gpx_data=make_gpx(steps=10), is_indoor=True))

        assert weather.calls == []

    async def test_unparseable_gpx_falls_back_to_synthetic_splits(self, db, make_raw_activity):
        processor = ActivityProcessor(db, fetch_weather=FakeWeather())
        activity_id = await processor.sync_activity(make_raw_activity(gpx_data="<gpx><trk>"))

        assert await SplitRepository(db).count_for_activity(activity_id) == 5

    async def test_race_name_becomes_title(self, db, make_raw_activity, make_gpx):
        source = FakeRaceSource([BEIJING_MARATHON])
        async with RaceMatcher(source=source) as matcher:
            processor = ActivityProcessor(db, race_matcher=matcher, fetch_weather=FakeWeather())
            activity_id = await processor.sync_activity(make_raw_activity(
                title="Full Marathon",
                distance=42195,
                duration=12600,
                average_pace=298.6,
                gpx_data=make_gpx(steps=5),
            ))

        activity = await ActivityRepository(db).get_by_id(activity_id)
        assert activity.race_name == "2024 北京马拉松"
        assert activity.title == "2024 北京马拉松"
        assert source.closed

    async def test_short_run_not_matched(self, db, make_raw_activity, make_gpx):
        source = FakeRaceSource([BEIJING_MARATHON])
        async with RaceMatcher(source=source) as matcher:
            processor = ActivityProcessor(db, race_matcher=matcher, fetch_weather=FakeWeather())
            activity_id = await processor.sync_activity(make_raw_activity(gpx_data=make_gpx(steps=5)))

        activity = await ActivityRepository(db).get_by_id(activity_id)
        assert activity.race_name is None
        assert matcher.cached_years == []


# =============================================================================
# Test sync_activities / delete
# =============================================================================

class TestBatch:

    async def test_failure_does_not_abort_batch(self, db, make_raw_activity):
        processor = ActivityProcessor(db, fetch_weather=FakeWeather())
        broken = make_raw_activity(id="2", start_time=None)

        ids = await processor.sync_activities([
            make_raw_activity(id="1"),
            broken,
            make_raw_activity(id="3"),
        ])

        assert len(ids) == 2
        assert await ActivityRepository(db).count() == 2

    async def test_replay_returns_existing_ids(self, db, make_raw_activity):
        processor = ActivityProcessor(db, fetch_weather=FakeWeather())
        batch = [make_raw_activity(id="1"), make_raw_activity(id="2")]

        first = await processor.sync_activities(batch)
        second = await processor.sync_activities(batch)

        assert first == second

    async def test_delete_cascades_to_splits(self, db, make_raw_activity):
        processor = ActivityProcessor(db, fetch_weather=FakeWeather())
        activity_id = await processor.sync_activity(make_raw_activity())
        assert await SplitRepository(db).count_for_activity(activity_id) == 5

        assert await processor.delete_activity(activity_id)

        assert await ActivityRepository(db).get_by_id(activity_id) is None
        assert await SplitRepository(db).count_for_activity(activity_id) == 0

    async def test_delete_missing(self, db):
        processor = ActivityProcessor(db, fetch_weather=FakeWeather())
        assert not await processor.delete_activity("does-not-exist")

    async def test_same_id_from_other_source_is_distinct(self, db, make_raw_activity):
        processor = ActivityProcessor(db, fetch_weather=FakeWeather())

        a = await processor.sync_activity(make_raw_activity(source=SourceKind.STRAVA))
        b = await processor.sync_activity(make_raw_activity(source=SourceKind.NIKE))

        assert a != b


# =============================================================================
# Test Backfills
# =============================================================================

class TestBackfillWeather:

    async def test_counts(self, db, make_raw_activity, make_gpx):
        no_weather = ActivityProcessor(db, fetch_weather=FakeWeather(error=RuntimeError("down")))
        await no_weather.sync_activities([
            make_raw_activity(id="ok", gpx_data=make_gpx(steps=5)),
            make_raw_activity(id="no-coords", gpx_data="<gpx></gpx>"),
            make_raw_activity(id="south", gpx_data=make_gpx(steps=5, lat=-33.8688, lon=151.2093)),
            make_raw_activity(id="indoor", gpx_data=make_gpx(steps=5), is_indoor=True),
            make_raw_activity(id="no-gpx"),
        ])

        weather = FakeWeather()
        result = await ActivityProcessor(db, fetch_weather=weather).backfill_missing_weather(delay_ms=0)

        assert result == {"total": 3, "success": 1, "failed": 1, "skipped": 1}
        assert len(weather.calls) == 2

        stored = await ActivityRepository(db).get_by_source("strava", "ok")
        assert WeatherData.from_json(stored.weather_data) == CLEAR

    async def test_nothing_to_do(self, db):
        result = await ActivityProcessor(db, fetch_weather=FakeWeather()).backfill_missing_weather(delay_ms=0)
        assert result == {"total": 0, "success": 0, "failed": 0, "skipped": 0}


class TestBackfillRaceNames:

    async def test_matches_long_activities(self, db, make_raw_activity, make_gpx):
        processor = ActivityProcessor(db, fetch_weather=FakeWeather())
        await processor.sync_activities([
            make_raw_activity(id="race", distance=42195, duration=12600, gpx_data=make_gpx(steps=5)),
            make_raw_activity(
                id="long-run",
                distance=25000,
                duration=7500,
                start_time=datetime(2024, 4, 20, 23, 0, tzinfo=timezone.utc),
            ),
            make_raw_activity(id="short"),
        ])

        source = FakeRaceSource([BEIJING_MARATHON])
        async with RaceMatcher(source=source) as matcher:
            result = await processor.backfill_race_names(matcher)

        assert result == {"processed": 2, "matched": 1}

        matched = await ActivityRepository(db).get_by_source("strava", "race")
        assert matched.race_name == "2024 北京马拉松"
        assert matched.title == "2024 北京马拉松"

        missing = await ActivityRepository(db).get_missing_race_name(20500)
        assert [a.source_id for a in missing] == ["long-run"]


class TestToNaiveUtc:

    def test_converts_aware(self):
        aware = datetime(2024, 3, 10, 8, 30, tzinfo=timezone(timedelta(hours=8)))
        assert to_naive_utc(aware) == datetime(2024, 3, 10, 0, 30)

    def test_naive_unchanged(self):
        assert to_naive_utc(datetime(2024, 3, 10, 0, 30)) == datetime(2024, 3, 10, 0, 30)
