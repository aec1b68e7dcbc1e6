"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pathlib import Path

from croniter import croniter
from pydantic import BaseModel, field_validator

DEFAULT_UPSTREAM_URL = "https://www.boomlings.com/database"


class ProxyConfig(BaseModel):
    """A validated configuration model for the application."""

    # Server
    ip: str = "0.0.0.0"
    port: int = 3000

    # Refresh
    refresh_interval: str = "0 */2 * * *"
    refresh_on_startup: bool = True
    featured_pages: int = 2
    use_ng_proxy: bool = False

    # Storage
    sfx_folder: Path = Path("storage/sfx")
    songs_folder: Path = Path("storage/songs")

    # Network
    upstream_url: str = DEFAULT_UPSTREAM_URL
    request_timeout: float = 30
    download_timeout: float = 120

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if v < 0 or v > 65535:
            raise ValueError("Port must be between 0 and 65535.")
        return v

    @field_validator("refresh_interval")
    @classmethod
    def validate_refresh_interval(cls, v: str) -> str:
        """Ensures the refresh schedule is a valid cron expression."""
        if not croniter.is_valid(v):
            raise ValueError(f"'{v}' is not a valid cron expression.")
        return v

    @field_validator("featured_pages")
    @classmethod
    def validate_featured_pages(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Featured pages cannot be negative.")
        return v

    @field_validator("request_timeout", "download_timeout")
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeouts must be positive.")
        return v

    @field_validator("upstream_url")
    @classmethod
    def validate_upstream_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Upstream URL must start with http:// or https://.")
        return v.rstrip("/")

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        return set(cls.model_fields)
