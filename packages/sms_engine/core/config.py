"""Centralized engine configuration via Pydantic Settings.

Loads the tunable parsing policy into a typed Settings instance. The
defaults match the constants the engine uses when no environment is set.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


DEFAULT_DEDUP_WINDOW_SECONDS = 60
DEFAULT_MIN_MERCHANT_LENGTH = 3
DEFAULT_MAX_MERCHANT_LENGTH = 50


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # Deduplication
    DEDUP_WINDOW_SECONDS: int = Field(
        default=DEFAULT_DEDUP_WINDOW_SECONDS,
        ge=0,
        description="Max gap between reference-less duplicates, in seconds",
    )

    # Merchant names
    MIN_MERCHANT_LENGTH: int = Field(
        default=DEFAULT_MIN_MERCHANT_LENGTH,
        ge=1,
        description="Shortest payment-address local part turned into a name",
    )
    MAX_MERCHANT_LENGTH: int = Field(
        default=DEFAULT_MAX_MERCHANT_LENGTH,
        ge=1,
        description="Merchant names are truncated to this length",
    )

    # Batch processing
    PARSE_WORKERS: int = Field(
        default=4, ge=1, description="Thread pool size for batch parsing"
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Python log level")
    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )

    @property
    def json_logs(self) -> bool:
        """JSON output everywhere except local development."""
        return self.ENVIRONMENT.lower() != "development"

    model_config = {"env_file": ".env", "env_prefix": "SMS_ENGINE_", "extra": "ignore"}


def get_settings() -> Settings:
    """Factory for Settings, so tests can override it."""
    return Settings()
