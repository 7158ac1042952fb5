"""Configuration settings for the grocery data core."""
from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Get project root directory (the one holding src/)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

# Default log directory
DEFAULT_LOG_DIR = PROJECT_ROOT / "logs"
DEFAULT_LOG_FILE = DEFAULT_LOG_DIR / "grocery.log"

DEFAULT_DB_NAME = "grocery.db"


class GrocerySettings(BaseSettings):
    """Application settings with environment variable support."""

    # Database
    DB_NAME: str = DEFAULT_DB_NAME
    DATA_DIR: Optional[Path] = None
    DB_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[Path] = DEFAULT_LOG_FILE
    LOG_FORMAT: str = "detailed"  # simple, detailed
    LOG_RETENTION_DAYS: int = 7
    LOG_ROTATION_SIZE_MB: int = 1

    model_config = SettingsConfigDict(
        env_prefix="GROCERY_",
        case_sensitive=False,
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Ensure log file path is absolute and parent directory exists
        if self.LOG_FILE:
            if not self.LOG_FILE.is_absolute():
                self.LOG_FILE = PROJECT_ROOT / self.LOG_FILE
            self.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

    @field_validator("LOG_FILE", "DATA_DIR", mode="before")
    @classmethod
    def blank_path_to_none(cls, v):
        # An empty value (e.g. GROCERY_LOG_FILE="") switches the path off
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("DB_NAME")
    @classmethod
    def validate_db_name(cls, v: str) -> str:
        # Blank names fall back to the default file
        return v.strip() or DEFAULT_DB_NAME

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid_formats = ["simple", "detailed"]
        v = v.lower()
        if v not in valid_formats:
            raise ValueError(f"Log format must be one of: {', '.join(valid_formats)}")
        return v


@lru_cache()
def get_settings() -> GrocerySettings:
    """Get cached settings instance."""
    return GrocerySettings()


def clear_settings_cache() -> None:
    """Clear the settings cache to force reload from environment."""
    get_settings.cache_clear()
