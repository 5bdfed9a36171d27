"""
Application Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables are loaded from .env file and validated.

Usage:
    from app.config import settings

    # Access settings
    backend = settings.STORAGE_BACKEND
    redis_url = settings.REDIS_URL
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Study Assistant"
    DEBUG: bool = False

    # Storage
    # "memory" keeps sessions and goals in process (development, tests).
    # "redis" stores one hash per user and record kind.
    STORAGE_BACKEND: str = "memory"

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_MAX_CONNECTIONS: int = 10

    # Analytics
    # Mastery points the recent window must differ by to count as a trend
    ANALYTICS_TREND_THRESHOLD: float = 5.0
    # Sessions per trend window (recent vs. previous)
    ANALYTICS_TREND_WINDOW: int = 3
    # Number of focus concepts / recent wins returned
    ANALYTICS_TOP_CONCEPTS: int = 3
    # Trailing window for study momentum
    ANALYTICS_MOMENTUM_DAYS: int = 7
    CONCEPT_NAME_MAX_LENGTH: int = 50

    # Streaks
    STREAK_MILESTONES: list[int] = [3, 7, 14, 30, 60, 100]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def uses_redis(self) -> bool:
        """Whether repositories should be backed by Redis."""
        return self.STORAGE_BACKEND.lower() == "redis"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


@lru_cache()
def load_yaml_config() -> dict[str, Any]:
    """Load application configuration from config/default.yaml."""
    config_path = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


yaml_config: dict[str, Any] = load_yaml_config()
