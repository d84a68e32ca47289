"""
Configuration and settings for the reflectbin service.

The settings are loaded from environment variables using pydantic-settings.
Guardrail bounds are deliberately not here: they are fixed constants in
``metering.policies`` and cannot be widened by deployment configuration.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or a .env file."""

    service_name: str = Field(default="reflectbin", alias="SERVICE_NAME")

    # Bind address used by `python -m reflectbin`
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8105, alias="PORT")

    # Public base URL used for absolute redirects and echoed request URLs.
    # Falls back to the URL the request arrived on when unset.
    public_url: Optional[str] = Field(default=None, alias="PUBLIC_URL")

    # CORS settings (comma-separated list, "*" for any origin)
    allowed_origins: str = Field(default="*", alias="ALLOWED_ORIGINS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


settings = Settings()
