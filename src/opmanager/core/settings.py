"""Environment-driven settings for op-manager.

``OpManagerSettings`` reads ``OPMANAGER_*`` environment variables (and a
``.env`` file) so applications embedding the coordinator can tune its
diagnostics without code changes.

Examples:
    >>> from opmanager.core.settings import OpManagerSettings
    >>> OpManagerSettings(log_level="debug").log_level
    'DEBUG'

Tags:
    settings, configuration, pydantic, environment, op-manager
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from opmanager.core.logging import configure_logging

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class OpManagerSettings(BaseSettings):
    """Settings shared by every op-manager entry point.

    Fields
    ──────
    log_level    : structlog level
    log_json     : True for JSON, False for console, unset to auto-detect
    service_name : ``service.name`` stamped on every log line
    """

    model_config = SettingsConfigDict(
        env_prefix="OPMANAGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_json: bool | None = None
    service_name: str = Field(
        default="opmanager",
        description="Service name attached to log records",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> OpManagerSettings:
    """Return the process-wide settings (read once from the environment)."""
    return OpManagerSettings()


def configure_from_settings(settings: OpManagerSettings | None = None) -> OpManagerSettings:
    """Apply *settings* (default: :func:`get_settings`) to logging."""
    settings = settings or get_settings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        service=settings.service_name,
    )
    return settings


__all__ = ["OpManagerSettings", "get_settings", "configure_from_settings"]
