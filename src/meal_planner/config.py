"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    premium_statuses: str = "active,trialing"
    assignment_write_attempts: int = 2
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_premium_statuses(raw: str | None) -> frozenset[str]:
    """Parse the subscription statuses that unlock premium plans."""
    if raw is None:
        return frozenset()
    statuses: set[str] = set()
    for chunk in raw.split(","):
        value = chunk.strip().lower()
        if value:
            statuses.add(value)
    return frozenset(statuses)
