"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

MAX_DISTANCE_METERS = 10_000.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    telegram_bot_token: str | None = None
    supabase_url: str
    supabase_service_key: str
    admin_ids: str | None = None
    target_lat: float = 0.0
    target_lng: float = 0.0
    timezone: str = "UTC"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_admin_ids(raw: str | None) -> frozenset[int]:
    """Parse the comma-separated admin Telegram IDs from env."""
    if raw is None:
        return frozenset()
    ids: set[int] = set()
    for chunk in raw.split(","):
        value = chunk.strip()
        if value.isdigit():
            ids.add(int(value))
    return frozenset(ids)
