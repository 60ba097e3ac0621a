"""
Tests for race calendar parsing and the Selenium-backed source.

The browser is replaced with a fake driver; parsing is tested on
sample listing HTML.
"""

import pytest
from selenium.common.exceptions import WebDriverException

from paceflow.features.gpx import Coordinates
from paceflow.features.races.scraper import (
    ZuicoolRaceSource,
    extract_city,
    has_next_page,
    is_challenge_page,
    is_real_marathon,
    parse_events_page,
    parse_race_date,
)


# =============================================================================
# Test Data
# =============================================================================

def event_html(event_id: int, name: str, date: str, location: str) -> str:
    return (
        '<div class="event-item">'
        f'<a class="title" href="https://zuicool.com/event/{event_id}">{name}</a>'
        f'<div class="info">{date} · {location}</div>'
        '</div>'
    )


PAGE_ONE = (
    "<html><body>"
    + event_html(1, "2024北京马拉松", "2024.11.03", "北京·天安门")
    + event_html(2, "线上马拉松挑战赛", "2024.11.05", "北京")
    + event_html(3, "春季半程马拉松", "2024.04.14", "浙江·某某市")
    + event_html(4, "城市徒步大会", "2024.04.20", "上海")
    + '<a href="/events?year=2024&type=run&page=2&per-page=100">下一页</a>'
    + "</body></html>"
)

PAGE_TWO = (
    "<html><body>"
    + event_html(5, "杭州马拉松", "2024.11.03", "浙江·杭州")
    + "</body></html>"
)


# =============================================================================
# Test Parsing
# =============================================================================

class TestIsRealMarathon:

    @pytest.mark.parametrize("name", ["北京马拉松", "无锡半程马拉松", "城市半马", "10公里精英赛"])
    def test_included(self, name):
        assert is_real_marathon(name)

    @pytest.mark.parametrize("name", [
        "线上马拉松",
        "马拉松训练营",
        "越野马拉松",
        "亲子马拉松",
        "女子半程马拉松欢乐跑",
        "城市徒步",
        "5公里健康跑",
    ])
    def test_excluded(self, name):
        assert not is_real_marathon(name)


class TestExtractCity:

    def test_city_from_race_name(self):
        assert extract_city("某省·某地", "2024杭州马拉松") == "杭州"

    def test_municipality(self):
        assert extract_city("上海·浦东新区") == "上海"

    def test_province_then_city(self):
        assert extract_city("浙江·某某市") == "某某"

    def test_plain_city_suffix_stripped(self):
        assert extract_city("某某县") == "某某"

    def test_unknown(self):
        assert extract_city("Online") == "未知"
        assert extract_city("") == "未知"


class TestParseEventsPage:

    def test_filters_and_resolves(self):
        races = parse_events_page(PAGE_ONE)

        assert [r.name for r in races] == ["2024北京马拉松", "春季半程马拉松"]

        beijing, spring = races
        assert beijing.date == "2024-11-03"
        assert beijing.city == "北京"
        assert beijing.coordinates == Coordinates(39.9042, 116.4074)

        assert spring.city == "某某"
        assert spring.coordinates is None

    def test_empty_page(self):
        assert parse_events_page("<html></html>") == []

    def test_parse_race_date(self):
        assert parse_race_date("2026.03.08") == "2026-03-08"
        assert parse_race_date("soon") is None

    def test_pagination_and_challenge(self):
        assert has_next_page(PAGE_ONE, 1)
        assert not has_next_page(PAGE_TWO, 2)
        assert is_challenge_page("<title>Just a moment...</title>")
        assert not is_challenge_page(PAGE_ONE)


# =============================================================================
# Test ZuicoolRaceSource
# =============================================================================

class FakeDriver:
    """Stands in for selenium's Chrome driver."""

    def __init__(self, pages: dict[int, str], fail_on: int | None = None):
        self.pages = pages
        self.fail_on = fail_on
        self.visited: list[str] = []
        self.page_load_timeout = None
        self.page_source = ""
        self.quit_called = False

    def set_page_load_timeout(self, seconds):
        self.page_load_timeout = seconds

    def get(self, url: str):
        self.visited.append(url)
        page = int(url.split("page=")[1].split("&")[0])
        if page == self.fail_on:
            raise WebDriverException("net::ERR_CONNECTION_RESET")
        self.page_source = self.pages.get(page, "<html></html>")

    def quit(self):
        self.quit_called = True


class TestZuicoolRaceSource:

    def make_source(self, driver: FakeDriver) -> ZuicoolRaceSource:
        return ZuicoolRaceSource(
            base_url="https://zuicool.com/events",
            max_pages=5,
            page_load_timeout=30,
            challenge_timeout=15,
            driver_factory=lambda: driver,
        )

    def test_walks_pages_until_no_next_link(self):
        driver = FakeDriver({1: PAGE_ONE, 2: PAGE_TWO})
        source = self.make_source(driver)

        races = source.fetch_races(2024)

        assert [r.name for r in races] == ["2024北京马拉松", "春季半程马拉松", "杭州马拉松"]
        assert driver.visited == [
            "https://zuicool.com/events?year=2024&type=run&page=1&per-page=100",
            "https://zuicool.com/events?year=2024&type=run&page=2&per-page=100",
        ]
        assert driver.page_load_timeout == 30

    def test_page_failure_keeps_partial_results(self):
        driver = FakeDriver({1: PAGE_ONE}, fail_on=2)
        races = self.make_source(driver).fetch_races(2024)
        assert len(races) == 2

    def test_browser_starts_lazily_and_closes(self):
        driver = FakeDriver({1: PAGE_TWO})
        started = []

        def factory():
            started.append(True)
            return driver

        source = ZuicoolRaceSource(max_pages=1, driver_factory=factory)
        source.close()
        assert started == []

        source.fetch_races(2024)
        source.fetch_races(2023)
        assert started == [True]

        source.close()
        assert driver.quit_called

    def test_max_pages(self):
        pages = {i: f'<a href="/events?page={i + 1}">next</a>' for i in range(1, 10)}
        driver = FakeDriver(pages)
        source = self.make_source(driver)
        source.fetch_races(2024)
        assert len(driver.visited) == 5
