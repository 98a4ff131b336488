"""Runtime settings for the display core.

Settings come from environment variables with safe defaults. Per-call
overrides (e.g. the active language of a request) travel in FormatContext.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


def _env_path(name: str) -> Optional[Path]:
    raw = os.environ.get(name, "").strip()
    return Path(raw) if raw else None


class Settings(BaseModel):
    """Process-wide display settings."""

    default_language: str = Field(
        default="en",
        description="Fallback language for translation-bearing values",
    )
    currency: str = Field(
        default="USD",
        description="ISO currency code used by the currency formatter",
    )
    json_preview_length: int = Field(
        default=100,
        description="Maximum characters of a JSON preview before truncation",
    )
    filter_definitions: Optional[Path] = Field(
        default=None,
        description="Override path for filter strategy definitions JSON",
    )
    schema_dir: Optional[Path] = Field(
        default=None,
        description="Directory of schema JSON/YAML files served by the API",
    )

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            default_language=os.environ.get("DATADISPLAY_DEFAULT_LANGUAGE", "").strip() or "en",
            currency=os.environ.get("DATADISPLAY_CURRENCY", "").strip() or "USD",
            json_preview_length=_env_int("DATADISPLAY_JSON_PREVIEW_LENGTH", 100),
            filter_definitions=_env_path("DATADISPLAY_FILTER_DEFINITIONS"),
            schema_dir=_env_path("DATADISPLAY_SCHEMA_DIR"),
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance (read once from the environment)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
