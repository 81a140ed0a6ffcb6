"""
Configuration Management for the Personal Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: The ledger file location is configuration, not a constant.
The store receives it at construction, so tests point it at a temporary
directory and nothing shares a hidden process-wide path.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """
    Ledger store settings.

    Loads configuration from LEDGER_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Persistence
    data_file: Path = Field(
        default=Path("ledger.json"),
        description="Path of the file holding the saved ledger"
    )
    save_attempts: int = Field(
        default=1,
        ge=1,
        le=10,
        description="How many times a save is tried before the error is raised"
    )
    backup_corrupt_file: bool = Field(
        default=True,
        description="Copy an unreadable ledger file aside before starting empty"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured log output"
    )
    log_json: bool = Field(
        default=True,
        description="Render log events as JSON (False = console output)"
    )

    @field_validator('data_file')
    @classmethod
    def expand_data_file(cls, v: Path) -> Path:
        """Expand ~ so the path can be given relative to the user's home."""
        return Path(v).expanduser()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get ledger settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()
