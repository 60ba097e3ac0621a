"""
Tests for race matching.

select_race is tested directly; RaceMatcher is driven with an
in-memory race source instead of a browser.
"""

from datetime import datetime, timezone

import pytest

from paceflow.features.gpx import Coordinates
from paceflow.features.races import Race, RaceMatcher, select_race
from paceflow.features.races.cities import city_coordinates
from paceflow.features.races.matcher import dates_match, with_year


# =============================================================================
# Test Data
# =============================================================================

BEIJING = city_coordinates("北京")
SHANGHAI = city_coordinates("上海")

BEIJING_MARATHON = Race("北京马拉松", "2024-11-03", "北京", BEIJING)
SHANGHAI_MARATHON = Race("上海马拉松", "2024-11-03", "上海", SHANGHAI)
HANGZHOU_MARATHON = Race("杭州马拉松", "2024-11-10", "杭州", city_coordinates("杭州"))

# 07:30 Beijing time on race day
RACE_MORNING = datetime(2024, 11, 2, 23, 30, tzinfo=timezone.utc)
NEAR_BEIJING = Coordinates(39.95, 116.35)


class FakeRaceSource:

    def __init__(self, races_by_year: dict[int, list[Race]], error: Exception | None = None):
        self.races_by_year = races_by_year
        self.error = error
        self.fetched: list[int] = []
        self.closed = False

    def fetch_races(self, year: int) -> list[Race]:
        self.fetched.append(year)
        if self.error:
            raise self.error
        return self.races_by_year.get(year, [])

    def close(self) -> None:
        self.closed = True


# =============================================================================
# Test select_race
# =============================================================================

class TestDatesMatch:

    def test_within_one_day(self):
        assert dates_match(RACE_MORNING, BEIJING_MARATHON)
        assert dates_match(datetime(2024, 11, 3, 12, 0), BEIJING_MARATHON)

    def test_outside_window(self):
        assert not dates_match(datetime(2024, 11, 4, 1, 0, tzinfo=timezone.utc), BEIJING_MARATHON)
        assert not dates_match(datetime(2024, 11, 1, 23, 0, tzinfo=timezone.utc), BEIJING_MARATHON)


class TestSelectRace:

    def test_geographic_confirmation(self):
        race = select_race([SHANGHAI_MARATHON, BEIJING_MARATHON], RACE_MORNING, NEAR_BEIJING)
        assert race == BEIJING_MARATHON

    def test_same_day_without_coordinates_is_ambiguous(self):
        assert select_race([SHANGHAI_MARATHON, BEIJING_MARATHON], RACE_MORNING, None) is None

    def test_same_day_far_from_both_is_ambiguous(self):
        far_away = Coordinates(22.5431, 114.0579)  # Shenzhen
        assert select_race([SHANGHAI_MARATHON, BEIJING_MARATHON], RACE_MORNING, far_away) is None

    def test_single_date_candidate_is_accepted(self):
        assert select_race([BEIJING_MARATHON, HANGZHOU_MARATHON], RACE_MORNING, None) == BEIJING_MARATHON

    def test_single_candidate_without_city_coordinates(self):
        race = Race("某某半程马拉松", "2024-11-03", "某某", None)
        assert select_race([race], RACE_MORNING, NEAR_BEIJING) == race

    def test_no_date_match(self):
        assert select_race([HANGZHOU_MARATHON], RACE_MORNING, NEAR_BEIJING) is None
        assert select_race([], RACE_MORNING, NEAR_BEIJING) is None


class TestWithYear:

    def test_prefix_added(self):
        assert with_year("北京马拉松", 2024) == "2024 北京马拉松"

    def test_existing_prefix_kept(self):
        assert with_year("2024北京马拉松", 2024) == "2024北京马拉松"


# =============================================================================
# Test RaceMatcher
# =============================================================================

class TestRaceMatcher:

    async def test_match_prefixes_year(self):
        source = FakeRaceSource({2024: [BEIJING_MARATHON, SHANGHAI_MARATHON]})
        async with RaceMatcher(source=source) as matcher:
            name = await matcher.match_race_for_activity(RACE_MORNING, 42195, NEAR_BEIJING)

        assert name == "2024 北京马拉松"

    async def test_short_activity_is_not_matched(self):
        source = FakeRaceSource({2024: [BEIJING_MARATHON]})
        async with RaceMatcher(source=source) as matcher:
            assert await matcher.match_race_for_activity(RACE_MORNING, 10000, NEAR_BEIJING) is None
        assert source.fetched == []

    async def test_year_is_scraped_once(self):
        source = FakeRaceSource({2024: [BEIJING_MARATHON]})
        async with RaceMatcher(source=source) as matcher:
            await matcher.match_race_for_activity(RACE_MORNING, 42195, NEAR_BEIJING)
            await matcher.match_race_for_activity(RACE_MORNING, 21097, NEAR_BEIJING)
            assert matcher.cached_years == [2024]

        assert source.fetched == [2024]

    async def test_source_errors_are_swallowed(self):
        source = FakeRaceSource({}, error=RuntimeError("browser crashed"))
        async with RaceMatcher(source=source) as matcher:
            assert await matcher.match_race_for_activity(RACE_MORNING, 42195, NEAR_BEIJING) is None

    async def test_close_releases_source_on_error(self):
        source = FakeRaceSource({2024: []})
        with pytest.raises(ValueError):
            async with RaceMatcher(source=source):
                raise ValueError("sync failed")
        assert source.closed

    async def test_source_factory_used_on_start(self):
        created = []

        def factory():
            source = FakeRaceSource({2024: [BEIJING_MARATHON]})
            created.append(source)
            return source

        matcher = RaceMatcher(source_factory=factory)
        await matcher.start()
        assert len(created) == 1

        await matcher.close()
        assert created[0].closed
        assert matcher.cached_years == []

    async def test_custom_min_distance(self):
        source = FakeRaceSource({2024: [BEIJING_MARATHON]})
        async with RaceMatcher(source=source, min_distance=5000) as matcher:
            name = await matcher.match_race_for_activity(RACE_MORNING, 10000, NEAR_BEIJING)
        assert name == "2024 北京马拉松"
