"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field, field_validator, ConfigDict

# Project root: paceflow/
PROJECT_ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./paceflow.db",
        description="Database connection URL"
    )

    # === Strava ===
    strava_client_id: Optional[str] = Field(default=None)
    strava_client_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("strava_client_secret", "strava_secret"),
    )
    strava_refresh_token: Optional[str] = Field(default=None)
    strava_access_token: Optional[str] = Field(default=None)

    # === Nike Run Club ===
    nike_access_token: Optional[str] = Field(default=None)
    nike_refresh_token: Optional[str] = Field(default=None)

    # === Weather (Open-Meteo archive) ===
    weather_api_url: str = Field(
        default="https://archive-api.open-meteo.com/v1/archive",
        description="Historical weather API endpoint"
    )
    weather_timeout_seconds: float = Field(default=10.0)
    weather_backfill_delay_ms: int = Field(
        default=1000,
        description="Minimum delay between weather API calls in backfill jobs"
    )

    # === Race calendar scraping ===
    race_calendar_url: str = Field(default="https://zuicool.com/events")
    race_scrape_max_pages: int = Field(default=20)
    race_page_load_timeout_seconds: int = Field(default=30)
    race_challenge_timeout_seconds: int = Field(default=15)
    race_match_min_distance_m: float = Field(default=20500)

    # === Sync ===
    sync_default_limit: int = Field(default=100)

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
