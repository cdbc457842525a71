"""Application settings and configuration."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LEDGER_",
        extra="ignore",
    )

    app_name: str = "Money Ledger"
    app_version: str = "0.1.0"

    # Remote relational store; unset means the in-memory fallback is used
    database_url: Optional[str] = None

    log_level: str = "INFO"

    # Listing defaults
    default_page_size: int = 10
    max_page_size: int = 100

    # Naive dates and day boundaries are interpreted in this zone
    timezone: str = "Asia/Ho_Chi_Minh"

    @property
    def is_remote_configured(self) -> bool:
        """Return True if a remote store URL has been provided."""
        return bool(self.database_url and self.database_url.strip())

    def configuration_warning(self) -> Optional[str]:
        """Describe why the remote store is unusable, or None if it is."""
        if self.is_remote_configured:
            return None
        return (
            "Remote store is not configured (set LEDGER_DATABASE_URL); "
            "showing in-memory sample data."
        )


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
