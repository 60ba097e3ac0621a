"""
Open-Meteo weather service.

Fetches historical hourly weather from the free Open-Meteo archive API.
No API key required. Rate limit: 10,000 requests/day.
"""

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

import httpx

from paceflow.config import settings

logger = logging.getLogger(__name__)

HOURLY_VARIABLES = "temperature_2m,relative_humidity_2m,wind_speed_10m,weather_code"

# WMO Weather interpretation codes
# https://open-meteo.com/en/docs#weathervariables
WMO_DESCRIPTIONS: dict[int, str] = {
    0: "clear sky",
    1: "mainly clear",
    2: "partly cloudy",
    3: "overcast",
    45: "fog",
    48: "depositing rime fog",
    51: "light drizzle",
    53: "moderate drizzle",
    55: "dense drizzle",
    56: "light freezing drizzle",
    57: "dense freezing drizzle",
    61: "slight rain",
    63: "moderate rain",
    65: "heavy rain",
    66: "light freezing rain",
    67: "heavy freezing rain",
    71: "slight snow",
    73: "moderate snow",
    75: "heavy snow",
    77: "snow grains",
    80: "slight rain showers",
    81: "moderate rain showers",
    82: "violent rain showers",
    85: "slight snow showers",
    86: "heavy snow showers",
    95: "thunderstorm",
    96: "thunderstorm with slight hail",
    99: "thunderstorm with heavy hail",
}


def get_weather_description(code: int) -> str:
    return WMO_DESCRIPTIONS.get(code, "unknown")


@dataclass
class WeatherData:
    """Conditions at the start of an activity."""
    temperature: float  # °C
    humidity: int  # %
    wind_speed: float  # km/h
    weather_code: int  # WMO
    description: str

    def to_json(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: Optional[str]) -> Optional["WeatherData"]:
        """Decode a stored weather_data column; None for empty or invalid JSON."""
        if not raw:
            return None
        try:
            return cls(**json.loads(raw))
        except (ValueError, TypeError) as e:
            logger.warning(f"Invalid stored weather data: {e}")
            return None


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _value_at(hourly: dict, key: str, index: int):
    values = hourly.get(key) or []
    return values[index] if index < len(values) else None


async def fetch_weather_for_activity(
    lat: float,
    lon: float,
    start_time: datetime,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[WeatherData]:
    """
    Fetch weather for an activity's start point and time.

    Args:
        lat, lon: Start coordinate (degrees)
        start_time: Activity start; naive values are treated as UTC
        transport: httpx transport override (tests)

    Returns:
        WeatherData, or None if the request fails or data is incomplete
    """
    start_utc = _as_utc(start_time)
    date_str = start_utc.strftime("%Y-%m-%d")

    params = {
        "latitude": f"{lat:.4f}",
        "longitude": f"{lon:.4f}",
        "start_date": date_str,
        "end_date": date_str,
        "hourly": HOURLY_VARIABLES,
    }

    try:
        async with httpx.AsyncClient(
            transport=transport,
            timeout=settings.weather_timeout_seconds,
        ) as client:
            response = await client.get(settings.weather_api_url, params=params)

        if response.status_code != 200:
            logger.warning(f"Open-Meteo API returned {response.status_code} for {date_str}")
            return None

        hourly = response.json().get("hourly") or {}
    except (httpx.HTTPError, ValueError, AttributeError) as e:
        logger.warning(f"Failed to fetch weather data: {e}")
        return None

    times = hourly.get("time") or []
    if not times:
        return None

    # Hourly data is in UTC; pick the hour the activity started
    hour_index = min(start_utc.hour, len(times) - 1)

    temperature = _value_at(hourly, "temperature_2m", hour_index)
    humidity = _value_at(hourly, "relative_humidity_2m", hour_index)
    wind_speed = _value_at(hourly, "wind_speed_10m", hour_index)
    weather_code = _value_at(hourly, "weather_code", hour_index)

    if temperature is None or humidity is None or wind_speed is None or weather_code is None:
        return None

    weather_code = int(weather_code)
    return WeatherData(
        temperature=round(temperature, 1),
        humidity=round(humidity),
        wind_speed=round(wind_speed, 1),
        weather_code=weather_code,
        description=get_weather_description(weather_code),
    )
