"""Configuration and settings management using pydantic-settings."""
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


MAINNET_BASE_URL = "https://flare-api.flare.network/v1"


class Settings(BaseSettings):
    """Application settings with environment variable loading."""

    model_config = SettingsConfigDict(
        env_prefix="FLARE_NODES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Core settings
    env: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )

    # Outbound HTTP
    http_timeout_s: float = Field(
        default=30.0,
        description="Timeout for each outbound API request in seconds",
    )

    # Flare API defaults (used by the CLI when no credentials are given)
    api_key: SecretStr | None = Field(
        default=None,
        description="Flare API key for local runs",
    )
    default_base_url: str = Field(
        default=MAINNET_BASE_URL,
        description="Flare API base URL for local runs",
    )

    @field_validator("http_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate that the HTTP timeout is positive."""
        if v <= 0:
            raise ValueError("http_timeout_s must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
