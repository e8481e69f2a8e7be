"""
Heart Arrows - Backend Configuration

Application settings via environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from functools import lru_cache
from typing import Literal


class Settings(BaseSettings):
    """Application settings."""

    # App
    APP_NAME: str = "Heart Arrows"
    DEBUG: bool = False
    API_PREFIX: str = "/api/v1"
    ENVIRONMENT: Literal["development", "production"] = "development"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_GAME: int = 60

    # Game Settings
    INITIAL_LIVES: int = 3
    MAX_LEVEL: int = 1000
    SESSION_CACHE_SIZE: int = 256

    # Generator
    GENERATION_MAX_ATTEMPTS: int = 3000
    GENERATION_MAX_RETRIES: int = 100
    PARTIAL_MAX_ATTEMPTS: int = 2000
    PARTIAL_FILL_RATIO: float = 0.8
    CURVE_CHANCE_BASE: float = 0.2
    CURVE_CHANCE_PER_LEVEL: float = 0.05

    @field_validator(
        "GENERATION_MAX_ATTEMPTS",
        "GENERATION_MAX_RETRIES",
        "PARTIAL_MAX_ATTEMPTS",
        "INITIAL_LIVES",
        "MAX_LEVEL",
        "SESSION_CACHE_SIZE",
    )
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"must be positive, got: {value}")
        return value

    @field_validator("PARTIAL_FILL_RATIO")
    @classmethod
    def validate_fill_ratio(cls, value: float) -> float:
        if not 0 < value <= 1:
            raise ValueError(f"PARTIAL_FILL_RATIO must be in (0, 1], got: {value}")
        return value

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """Get settings (cached)."""
    return Settings()


settings = get_settings()
