"""
Codegraph Source Configuration

Centralized configuration management using pydantic-settings.
All environment variables use the CODEGRAPH_SOURCE_ prefix.

Usage:
    from codegraph_source.config import settings

    settings.dialect_version        # "3.12"
    settings.all_errors_are_fatal   # False
"""

from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SourceSettings(BaseSettings):
    """
    Processed-source settings.

    Example: CODEGRAPH_SOURCE_DIALECT_VERSION=3.11, CODEGRAPH_SOURCE_ALL_ERRORS_ARE_FATAL=true
    """

    # NOTE: `.env` may be present but unreadable (sandboxed CI). Treat it as not provided.
    _dotenv_path = Path(".env")
    _env_file = ".env" if _dotenv_path.is_file() else None
    try:
        if _env_file is not None:
            _dotenv_path.open("r", encoding="utf-8").close()
    except OSError:
        _env_file = None

    model_config = SettingsConfigDict(
        env_file=_env_file,
        env_file_encoding="utf-8",
        env_prefix="CODEGRAPH_SOURCE_",
        extra="ignore",
    )

    # ========================================================================
    # Parsing
    # ========================================================================
    dialect_version: str = "3.12"  # used when a caller passes no version
    all_errors_are_fatal: bool = False  # guard against backends that may hang on malformed input
    ignore_warnings: bool = False
    end_marker: str = "__END__"

    # ========================================================================
    # Observability
    # ========================================================================
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "console"

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()


# Eager loading (module-level instantiation)
settings = SourceSettings()


def get_settings() -> SourceSettings:
    """Get global settings instance"""
    return settings
