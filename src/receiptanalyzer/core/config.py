"""Application configuration using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from urllib.parse import urlparse

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application settings
    app_name: str = Field(default="receiptanalyzer", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format (text or json)")

    # Vision API configuration (the API key is supplied per request)
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the chat-completions API",
    )
    vision_model: str = Field(
        default="gpt-4o-mini",
        description="Vision model used for receipt analysis",
    )
    upstream_timeout: float | None = Field(
        default=None,
        description="Timeout for vision API calls in seconds (None disables it)",
    )

    # Extraction behaviour
    strict_categories: bool = Field(
        default=False,
        description="Rewrite unknown expense categories to the 'other' category",
    )

    # CORS
    cors_allow_origin: str = Field(
        default="*", description="Value of Access-Control-Allow-Origin"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def vision_api_host(self) -> str:
        """Host name of the vision API, safe to expose in health checks."""
        return urlparse(self.openai_base_url).netloc


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
