"""
Application settings.

Values come from environment variables prefixed with ``URCHIN_`` (or a
``.env`` file), falling back to the defaults below.

Usage::

    from urchin_radar.config import get_settings

    settings = get_settings()
    settings.thresholds  # RiskThresholds(high=30, medium=10)
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from urchin_radar.schemas import RiskThresholds


class Settings(BaseSettings):
    """Runtime configuration for fetching and aggregation."""

    model_config = SettingsConfigDict(
        env_prefix="URCHIN_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "urchin-radar"
    app_env: str = "development"
    debug: bool = False

    # Fetching
    lookback_years: int = Field(default=5, ge=0)
    page_limit: int = Field(default=300, gt=0, le=300)
    max_records_per_species: int = Field(default=2000, gt=0)
    http_timeout: float = Field(default=30.0, gt=0)

    # Aggregation
    cell_size_deg: float = Field(default=1.0, gt=0)
    high_threshold: int = 30
    medium_threshold: int = 10

    @property
    def thresholds(self) -> RiskThresholds:
        return RiskThresholds(high=self.high_threshold, medium=self.medium_threshold)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
