# config.py
import os
from dataclasses import dataclass

from errors import ConfigError


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass
class Config:
    """Holds all application configuration."""
    API_KEY: str = ""
    API_BASE_URL: str = "https://www.googleapis.com/youtube/v3"
    SEARCH_RESULT_LIMIT: int = 20
    REGION_CODE: str = "US"
    MUSIC_CATEGORY_ID: str = "10"
    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        defaults = cls()
        return cls(
            API_KEY=os.getenv("YOUTUBE_API_KEY", defaults.API_KEY),
            API_BASE_URL=os.getenv("YOUTUBE_API_BASE_URL", defaults.API_BASE_URL),
            SEARCH_RESULT_LIMIT=_get_int("YOUTUBE_MAX_RESULTS", defaults.SEARCH_RESULT_LIMIT),
            REGION_CODE=os.getenv("YOUTUBE_REGION_CODE", defaults.REGION_CODE),
            LOG_LEVEL=os.getenv("YTMB_LOG_LEVEL", defaults.LOG_LEVEL),
        )

    def validate(self) -> "Config":
        """Only checks that the opaque values are present."""
        if not self.API_KEY.strip():
            raise ConfigError("YOUTUBE_API_KEY is not set.")
        if not self.API_BASE_URL.strip():
            raise ConfigError("YOUTUBE_API_BASE_URL is empty.")
        if self.SEARCH_RESULT_LIMIT <= 0:
            raise ConfigError("YOUTUBE_MAX_RESULTS must be a positive integer.")
        return self
