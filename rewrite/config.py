"""Rewrite engine configuration settings."""
from functools import lru_cache
from typing import Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import Direction

class RewriteSettings(BaseSettings):
    """Rewrite engine settings.

    Values are read from environment variables prefixed with REWRITE_, e.g.
    REWRITE_RULES_FILE=settings.json or REWRITE_REWRITE_RESPONSES=false.
    """
    model_config = SettingsConfigDict(env_prefix="REWRITE_", extra="ignore")

    enabled: bool = True
    rewrite_requests: bool = True
    rewrite_responses: bool = True
    rules_file: Optional[str] = Field(
        default=None,
        description="Settings document holding the replaceRules array"
    )
    max_body_size: int = Field(
        default=10 * 1024 * 1024,
        description="Bodies larger than this many bytes are passed through untouched"
    )

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # API
    api_title: str = "Rewrite Engine API"
    api_prefix: str = "/api/rewrite"
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("max_body_size")
    @classmethod
    def _positive_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_body_size must be positive")
        return value

    def allows(self, direction: Union[Direction, str]) -> bool:
        """Whether rewriting is switched on for ``direction``."""
        if not self.enabled:
            return False
        if Direction.coerce(direction) is Direction.REQUEST:
            return self.rewrite_requests
        return self.rewrite_responses

@lru_cache()
def get_settings() -> RewriteSettings:
    """Get cached settings instance."""
    return RewriteSettings()
