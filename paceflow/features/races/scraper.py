"""Race calendar scraping from zuicool.com.

The calendar is a rendered HTML listing behind a bot challenge, so it is
loaded with a headless browser and parsed with regular expressions.
Parsing is kept separate from the browser so any other source that
returns Race lists can replace ZuicoolRaceSource.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Protocol

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.support.ui import WebDriverWait

from paceflow.config import settings
from .cities import KNOWN_CITIES, MUNICIPALITIES, PROVINCES, UNKNOWN_CITY, city_coordinates
from .models import Race

logger = logging.getLogger(__name__)


class RaceScrapeError(Exception):
    """Browser could not be started or the calendar could not be read."""
    pass


# Event link, then its "YYYY.MM.DD · location" line
EVENT_PATTERN = re.compile(
    r'<a[^>]*href="https://zuicool\.com/event/\d+"[^>]*>([^<]+)</a>'
    r'[\s\S]*?(\d{4}\.\d{2}\.\d{2})\s*·\s*([^<"]+)'
)
DATE_PATTERN = re.compile(r"(\d{4})\.(\d{2})\.(\d{2})")
LOCATION_PATTERN = re.compile(r"^([一-龥]+)[・·]?([一-龥]+)?")
CITY_SUFFIX_PATTERN = re.compile(r"[市区县]$")

INCLUDE_PATTERN = re.compile(r"马拉松|半程|半马|全马|10公里精英赛")
EXCLUDE_PATTERNS = tuple(
    re.compile(p)
    for p in (
        r"线上",  # online
        r"训练",  # training
        r"轨迹",  # GPS-art
        r"徒步",  # hiking
        r"急救",  # first aid
        r"培训",  # coaching
        r"越野",  # trail
        r"跑山",
        r"山径",
        r"生态跑",
        r"欢乐跑",  # fun run
        r"健康跑",
        r"踏春",
        r"踏青",
        r"迎春",
        r"赏花",
        r"女子.*跑",  # women-only
        r"亲子",  # family
        r"少年",  # kids
        r"少儿",
    )
)

CHALLENGE_MARKERS = ("challenge", "Checking your browser", "Just a moment")


def is_real_marathon(name: str) -> bool:
    """Road marathon-type event, not a training/online/trail/kids event."""
    if not INCLUDE_PATTERN.search(name):
        return False
    return not any(pattern.search(name) for pattern in EXCLUDE_PATTERNS)


def parse_race_date(date_str: str) -> str | None:
    """'2026.03.08' -> '2026-03-08'."""
    m = DATE_PATTERN.search(date_str)
    if not m:
        return None
    return f"{m.group(1)}-{m.group(2)}-{m.group(3)}"


def extract_city_from_name(name: str) -> str | None:
    for city in KNOWN_CITIES:
        if city in name:
            return city
    return None


def extract_city(location: str, race_name: str | None = None) -> str:
    """Resolve the host city of a race.

    The race name is tried first against the gazetteer; otherwise the
    location string ("省·市" or "城市") is parsed. Returns "未知" when
    nothing usable is found.
    """
    if race_name:
        city = extract_city_from_name(race_name)
        if city:
            return city

    m = LOCATION_PATTERN.match(location.strip())
    if not m:
        return UNKNOWN_CITY

    first, second = m.group(1), m.group(2)

    if first in MUNICIPALITIES:
        return first
    if first in PROVINCES and second:
        return CITY_SUFFIX_PATTERN.sub("", second)
    return CITY_SUFFIX_PATTERN.sub("", first)


def parse_events_page(html: str) -> list[Race]:
    """Extract marathon-type races from one calendar page."""
    races: list[Race] = []

    for m in EVENT_PATTERN.finditer(html):
        name = m.group(1).strip()
        if not is_real_marathon(name):
            continue

        race_date = parse_race_date(m.group(2))
        if not race_date:
            continue

        city = extract_city(m.group(3).strip(), name)
        races.append(
            Race(
                name=name,
                date=race_date,
                city=city,
                coordinates=city_coordinates(city),
            )
        )

    return races


def has_next_page(html: str, page: int) -> bool:
    # "per-page=100" must not count as a link to page 100
    return re.search(rf"[?&;]page={page + 1}(?!\d)", html) is not None


def is_challenge_page(html: str) -> bool:
    return any(marker in html for marker in CHALLENGE_MARKERS)


class RaceSource(Protocol):
    """Anything that can list a year's races."""

    def fetch_races(self, year: int) -> list[Race]: ...

    def close(self) -> None: ...


def _default_driver() -> webdriver.Chrome:
    chrome_options = ChromeOptions()
    chrome_options.add_argument("--headless=new")
    chrome_options.add_argument("--no-sandbox")
    chrome_options.add_argument("--disable-dev-shm-usage")
    chrome_options.add_argument("--window-size=1920,1080")
    return webdriver.Chrome(options=chrome_options)


class ZuicoolRaceSource:
    """Headless-Chrome scraper for the zuicool.com event listing.

    The browser is started on first use and kept until close(), so one
    sync session pays the startup cost once. Calls are blocking.
    """

    def __init__(
        self,
        base_url: str | None = None,
        max_pages: int | None = None,
        page_load_timeout: int | None = None,
        challenge_timeout: int | None = None,
        driver_factory: Callable[[], webdriver.Chrome] = _default_driver,
    ):
        self.base_url = base_url or settings.race_calendar_url
        self.max_pages = max_pages or settings.race_scrape_max_pages
        self.page_load_timeout = page_load_timeout or settings.race_page_load_timeout_seconds
        self.challenge_timeout = challenge_timeout or settings.race_challenge_timeout_seconds
        self._driver_factory = driver_factory
        self._browser: webdriver.Chrome | None = None

    def _get_browser(self) -> webdriver.Chrome:
        if self._browser is None:
            try:
                browser = self._driver_factory()
            except WebDriverException as e:
                raise RaceScrapeError(f"Could not start browser: {e}") from e
            browser.set_page_load_timeout(self.page_load_timeout)
            self._browser = browser
            logger.info("Race calendar browser started")
        return self._browser

    def _load_page(self, url: str) -> str:
        """Navigate and wait (bounded) for any bot challenge to clear."""
        browser = self._get_browser()
        browser.get(url)

        try:
            WebDriverWait(browser, self.challenge_timeout).until(
                lambda d: not is_challenge_page(d.page_source)
            )
        except TimeoutException:
            logger.warning(f"Challenge page did not clear after {self.challenge_timeout}s: {url}")

        return browser.page_source

    def page_url(self, year: int, page: int) -> str:
        return f"{self.base_url}?year={year}&type=run&page={page}&per-page=100"

    def fetch_races(self, year: int) -> list[Race]:
        """Scrape all marathon-type races for a year.

        A page that fails to load ends the walk; races found so far are
        returned.
        """
        races: list[Race] = []
        logger.info(f"Scraping {year} races from {self.base_url}")

        for page in range(1, self.max_pages + 1):
            try:
                html = self._load_page(self.page_url(year, page))
            except RaceScrapeError:
                raise
            except WebDriverException as e:
                logger.warning(f"Error loading race calendar page {page}: {e}")
                break

            page_races = parse_events_page(html)
            races.extend(page_races)
            logger.info(f"Page {page}: found {len(page_races)} marathons")

            if not has_next_page(html, page):
                break

        logger.info(f"Total {len(races)} marathons found for {year}")
        return races

    def close(self) -> None:
        if self._browser is not None:
            try:
                self._browser.quit()
            finally:
                self._browser = None
                logger.info("Race calendar browser closed")
