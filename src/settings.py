"""
Runtime settings for the payments ledger.

Loaded from PAYMENTS_* environment variables (or a local .env file) so the
CLI can be tuned without code changes:

    PAYMENTS_LOG_LEVEL=INFO payments transactions.csv
"""
import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PAYMENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(
        default="WARNING",
        description="Level for diagnostics written to stderr",
    )
    log_format: str = Field(
        default="%(levelname)s: %(message)s",
        description="logging format string for stderr diagnostics",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return level

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings (cached).

    Call get_settings.cache_clear() to reload after the environment changes.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
