"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    # "none" runs purely against in-memory collections
    backend: Literal["sqlite", "none"] = "sqlite"
    data_dir: Path = Path("data")
    db_name: str = "pos.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class PricingSettings(BaseSettings):
    """Defaults used when registering products."""

    model_config = SettingsConfigDict(env_prefix="PRICING_")

    service_rate_pct: float = 5.0
    misc_rate_pct: float = 5.0
    tax_rate_pct: float = 0.0


class InventorySettings(BaseSettings):
    """Inventory and booking configuration."""

    model_config = SettingsConfigDict(env_prefix="INVENTORY_")

    low_stock_threshold: int = 10
    walk_in_customer_name: str = "Walk-in Customer"
    completed_log_limit: int = 20


class SyncSettings(BaseSettings):
    """Persistence sync configuration."""

    model_config = SettingsConfigDict(env_prefix="SYNC_")

    # Run persistence writes as background tasks instead of awaiting them
    background: bool = False
    max_pending: int = 500


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Boutique POS"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    inventory: InventorySettings = Field(default_factory=InventorySettings)
    sync: SyncSettings = Field(default_factory=SyncSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        if settings.backend == "sqlite":
            settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
