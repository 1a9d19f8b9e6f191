"""Configuration management using Pydantic v2 settings.
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application
    app_name: str = Field(default="Crypto Sensei", description="Application name")
    environment: str = Field(
        default="development", description="Environment (development, production)"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool = Field(
        default=True, description="Render log events as JSON lines (False: console text)"
    )

    # Analysis
    history_days: int = Field(
        default=200,
        description="Days of daily history requested per analysis (MA200 needs 200 points)",
    )
    news_limit: int = Field(
        default=5, description="Number of headlines requested per analysis"
    )
    narrative_enabled: bool = Field(
        default=True, description="Request an AI narrative when a generator is configured"
    )

    # Provider cache
    history_cache_ttl: int = Field(
        default=1800, description="Seconds a fetched price history stays fresh"
    )
    news_cache_ttl: int = Field(
        default=900, description="Seconds fetched headlines and sentiment stay fresh"
    )
    stale_cache_ttl: int = Field(
        default=86400,
        description="Seconds an expired entry may still be served when the upstream fails",
    )
    cache_size: int = Field(default=200, description="Max entries per provider cache")

    # Provider throttling
    market_data_min_interval: float = Field(
        default=6.0, description="Minimum seconds between market data upstream calls"
    )
    news_min_interval: float = Field(
        default=60.0, description="Minimum seconds between news upstream calls"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()
