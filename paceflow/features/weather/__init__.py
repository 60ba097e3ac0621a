"""Historical weather enrichment."""

from .open_meteo import (
    WMO_DESCRIPTIONS,
    WeatherData,
    fetch_weather_for_activity,
    get_weather_description,
)

__all__ = [
    "WMO_DESCRIPTIONS",
    "WeatherData",
    "fetch_weather_for_activity",
    "get_weather_description",
]
