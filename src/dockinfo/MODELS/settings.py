"""
Process-wide settings, fixed at startup.
"""
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

CACHE_DISABLED = -1


class LogLevel(str, Enum):
    """
    Log verbosity accepted on the command line.
    """
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def parse(cls, value: str) -> "LogLevel":
        """
        Maps a user supplied level name to a LogLevel, falling back to INFO.
        """
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.INFO


class ServerSettings(BaseModel):
    """
    Settings for the lookup server and its Docker connection.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Cache lifespan in milliseconds, -1 disables the cache
    cache_timeout: int = CACHE_DISABLED
    log_level: LogLevel = LogLevel.DEBUG

    # HTTP
    host: str = "0.0.0.0"
    port: int = Field(5000, ge=1, le=65535)
    cors_origins: List[str] = ["*"]

    # Docker
    docker_url: Optional[str] = None
    docker_api_version: str = "1.38"
    docker_timeout: float = Field(10.0, gt=0)

    @field_validator("cache_timeout")
    @classmethod
    def _check_cache_timeout(cls, value: int) -> int:
        if value < CACHE_DISABLED:
            raise ValueError(f"cache_timeout must be {CACHE_DISABLED} or >= 0, got {value}")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _parse_log_level(cls, value):
        if isinstance(value, LogLevel):
            return value
        return LogLevel.parse(value)

    @property
    def cache_enabled(self) -> bool:
        return self.cache_timeout != CACHE_DISABLED
