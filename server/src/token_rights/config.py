"""Configuration and environment loading for Token Rights."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Expiring allowances
    default_expiration: int = Field(default=30 * 24 * 60 * 60, ge=0)  # Seconds

    # Fungible token metadata
    token_name: str = "Expiring Token"
    token_symbol: str = "EXP"
    token_decimals: int = Field(default=18, ge=0)

    # Privilege registry
    privilege_total: int = Field(default=3, ge=0)
    admin_address: str = "0xadmin"

    # Event log
    event_history_limit: int = Field(default=10_000, ge=1)

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
