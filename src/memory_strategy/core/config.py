"""Configuration management."""

from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    log_level: str = Field(default="INFO", description="Root log level for setup_logging()")

    # Record store
    lock_stripes: int = Field(default=16, ge=1, description="Number of lock-guarded shards in the record map")

    # Consolidation defaults
    consolidation_access_threshold: int = Field(default=3, ge=0)
    consolidation_importance_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    consolidation_prune_age_days: float = Field(default=30.0, ge=0.0)

    model_config = SettingsConfigDict(
        env_prefix="MEMORY_STRATEGY_",
        env_file=".env",
        extra="ignore",  # Ignore extra fields in .env file
    )

    @property
    def prune_age(self) -> timedelta:
        """Default prune age for consolidation sweeps."""
        return timedelta(days=self.consolidation_prune_age_days)


settings = Settings()
