"""
Runtime configuration via environment variables.
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_LIST_URL = "https://www.getonbrd.cl/jobs/programacion"
DEFAULT_USER_AGENT = "boardscout/0.3 (+https://github.com/boardscout/boardscout)"


class Settings(BaseSettings):
    """Settings loaded from ``BOARDSCOUT_*`` environment variables."""

    list_url: str = DEFAULT_LIST_URL
    user_agent: str = DEFAULT_USER_AGENT
    request_timeout_s: int = 20

    # Flat-file response cache (disabled when unset)
    cache_dir: Optional[str] = None
    cache_ttl_hours: int = 24

    # Company logo rendering
    logo_width: int = 40
    logo_colored: bool = False

    log_level: str = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        return str(v or "WARNING").upper()

    @field_validator("request_timeout_s", "logo_width")
    @classmethod
    def positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    class Config:
        env_prefix = "BOARDSCOUT_"
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
