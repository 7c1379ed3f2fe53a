"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from meal_feed.domain.recommendations import ScoringWeights

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    redis_url: str | None = None
    reference_timezone: str = "Asia/Singapore"
    recommendation_limit: int = 20
    recent_meals_limit: int = 20
    search_history_limit: int = 10
    exclude_own_meals: bool = False
    scoring: ScoringWeights = ScoringWeights()
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        env_nested_delimiter="__",
        extra="ignore",
    )
