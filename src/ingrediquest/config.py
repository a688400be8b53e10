"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

WEB_PLATFORM = "web"
DEVICE_PLATFORM = "device"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    platform: str = DEVICE_PLATFORM
    storage_path: str = "ingrediquest.sqlite3"
    spoonacular_api_key: str | None = None
    spoonacular_base_url: str = "https://api.spoonacular.com"
    mealdb_base_url: str = "https://www.themealdb.com/api/json/v1/1"
    search_cache_ttl_seconds: int = 3600
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_platform(raw: str | None) -> str:
    """Normalize the configured platform to ``web`` or ``device``."""
    if raw is None:
        return DEVICE_PLATFORM
    cleaned = raw.strip().lower()
    if cleaned in {WEB_PLATFORM, "browser"}:
        return WEB_PLATFORM
    return DEVICE_PLATFORM
