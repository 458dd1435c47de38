"""Library configuration using Pydantic Settings.

Configuration is environment-driven:
- TYPED_ERRORS_* variables tune error rendering
- TYPED_ERRORS_LOG_* variables tune ``configure_logging``
- TYPED_ERRORS_ENV_FILE optionally names a .env file loaded before settings
  are built
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE_VAR = "TYPED_ERRORS_ENV_FILE"

_env_file = os.getenv(ENV_FILE_VAR)

# Load the .env file early so nested settings see its values
if _env_file and Path(_env_file).is_file():
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=False)


def _build_error_settings() -> "ErrorSettings":
    return ErrorSettings()


def _build_log_settings() -> "LogSettings":
    return LogSettings()


class ErrorSettings(BaseSettings):
    """Rendering options for typed errors."""

    max_cause_length: int = Field(
        200,
        description="Cause characters kept in str(error) before truncation",
        ge=1,
    )
    ellipsis: str = Field(
        "...",
        description="Marker appended to a truncated cause",
    )

    model_config = SettingsConfigDict(
        env_prefix="TYPED_ERRORS_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration consumed by ``configure_logging``."""

    level: str = Field(
        "INFO",
        description="Root log level name",
    )
    format: str = Field(
        "json",
        description="Log format: 'json' or 'plain'",
    )
    output: str = Field(
        "stdout",
        description="Log destination: 'stdout' or 'file'",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output is 'file'",
    )
    max_bytes: int = Field(
        0,
        description="Rotate the log file past this size (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(
        3,
        description="Rotated log files to keep",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="TYPED_ERRORS_LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Settings container composed from the domain-specific groups."""

    errors: ErrorSettings = Field(default_factory=_build_error_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        env_prefix="TYPED_ERRORS_",
        case_sensitive=False,
    )


settings = Settings()
