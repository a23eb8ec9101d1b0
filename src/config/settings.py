"""
Application Settings
===================

Main application settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json
from pathlib import Path


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Card Render Service", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=True, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3003, description="Server port")

    # Storage Configuration
    storage_path: Path = Field(default=Path("./storage"), description="Storage directory path")

    # Render Target Configuration
    target_url: str = Field(
        default="http://localhost:3000/", description="Page hosting the card templates"
    )
    img_scale: float = Field(default=2.0, gt=0, description="Default screenshot scale factor")

    # Viewport Configuration
    viewport_width: int = Field(default=1920, gt=0, description="Fixed viewport width")
    viewport_height: int = Field(default=1280, gt=0, description="Initial viewport height")
    viewport_margin: int = Field(
        default=200, ge=0, description="Extra height added when the card outgrows the viewport"
    )

    # Browser Configuration
    playwright_headless: bool = Field(default=True, description="Run browser in headless mode")
    max_concurrency: int = Field(default=10, gt=0, description="Concurrent render jobs")
    navigation_timeout: int = Field(default=60000, description="Navigation timeout in ms")
    screenshot_timeout: int = Field(default=60000, description="Screenshot timeout in ms")
    font_wait_timeout: int = Field(default=30000, description="Font readiness timeout in ms")
    protocol_timeout: int = Field(default=120000, description="Browser launch timeout in ms")
    script_timeout: int = Field(default=120000, description="Page script evaluation timeout in ms")
    font_settle_delay: float = Field(
        default=3.0, ge=0, description="Seconds to wait after navigation for lazy fonts"
    )

    # Retry Configuration
    max_attempts: int = Field(default=3, gt=0, description="Render attempts per request")
    retry_delay: float = Field(default=1.0, ge=0, description="Seconds between attempts")

    # Cache Configuration
    cache_ttl: int = Field(default=600, gt=0, description="Cache TTL in seconds")
    cache_max_bytes: int = Field(default=50 * 1024 * 1024, gt=0, description="Cache byte budget")
    cache_max_entries: int = Field(default=100, gt=0, description="Maximum cached entries")

    # Security Configuration
    allowed_hosts: List[str] = Field(default=["*"], description="Allowed hosts for CORS")

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("allowed_hosts", mode="before")
    @classmethod
    def parse_allowed_hosts(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse allowed hosts from string or list."""
        if isinstance(v, str):
            # Handle JSON-like string: ["*"] or ["host1", "host2"]
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            # Handle comma-separated string: "*" or "host1,host2"
            return [host.strip() for host in v.split(",") if host.strip()]
        return v

    @field_validator("storage_path")
    @classmethod
    def create_directories(cls, v: Path) -> Path:
        """Ensure directories exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="CARD_RENDER_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
