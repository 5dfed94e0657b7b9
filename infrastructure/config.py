"""
Application settings and configuration
"""
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.enums import ConflictPolicy


class Settings(BaseSettings):
    """Booking core settings from environment variables (prefix BOOKING_)"""

    APP_NAME: str = Field(default="Booking Core")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # Booking rules
    DEFAULT_CURRENCY: str = Field(default="USD")
    CONFLICT_POLICY: ConflictPolicy = Field(default=ConflictPolicy.BUSINESS_WIDE)
    REJECT_PAST_DATES: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="BOOKING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
