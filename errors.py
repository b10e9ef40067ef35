# errors.py
from typing import Optional


class ConfigError(ValueError):
    """Raised when startup configuration is missing a required value."""


class DataSourceError(RuntimeError):
    """Base exception for every failure coming out of the data source adapter."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransportError(DataSourceError):
    """The data source could not be reached or answered with garbage."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SourceError(DataSourceError):
    """The data source answered with a structured error envelope."""

    def __init__(self, message: str, *, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code


class NotFound(DataSourceError):
    """A lookup by id matched zero items."""

    def __init__(self, video_id: str) -> None:
        super().__init__("Video not found")
        self.video_id = video_id


class InvalidRequest(DataSourceError):
    """Input rejected before any request was made."""


class NormalizationSkip(Exception):
    """A single raw item could not yield a record and is dropped."""
