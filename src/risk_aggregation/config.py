"""Configuration management for the aggregation layer."""

import logging
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderSettings(BaseSettings):
    """Remote provider settings."""

    model_config = SettingsConfigDict(env_prefix="RISK_AGG_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    base_url: str = "https://sms.sniperbuisnesscenter.com/api/v1"
    default_timeout: float = Field(10.0, gt=0, le=120)
    catalog_path: Optional[str] = None
    max_connections: int = Field(10, ge=1, le=100)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v):
        """Validate base URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("RISK_AGG_BASE_URL must be an http(s) URL")
        return v.rstrip("/")


class AppSettings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_prefix="RISK_AGG_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    name: str = "risk-aggregation"
    log_level: str = "INFO"
    classify_records: bool = True
    enable_salvage: bool = True

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """Main settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    providers: ProviderSettings = Field(default_factory=ProviderSettings)
    app: AppSettings = Field(default_factory=AppSettings)

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from environment."""
        return cls()
