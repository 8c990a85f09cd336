"""plugsync configuration via environment / .env file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _theia_root() -> Path:
    return Path.home() / ".theia"


def expand_path(value: str | Path) -> Path:
    """Expand ``$HOME``-style variables and ``~`` in *value*."""
    return Path(os.path.expanduser(os.path.expandvars(str(value))))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Locations ---
    PLUGSYNC_CONFIG: Path = Field(default_factory=lambda: _theia_root() / "plugins.toml")
    PLUGSYNC_TARGET: Path = Field(default_factory=lambda: _theia_root() / "plugins")

    # --- HTTP ---
    PLUGSYNC_HTTP_TIMEOUT: float = 60.0

    # --- Logging ---
    PLUGSYNC_LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("PLUGSYNC_CONFIG", "PLUGSYNC_TARGET", mode="before")
    @classmethod
    def _expand(cls, v: str | Path) -> Path:
        return expand_path(v)

    @field_validator("PLUGSYNC_LOG_LEVEL", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @property
    def http_timeout(self) -> float | None:
        """Transport timeout in seconds; ``0`` means no limit."""
        return self.PLUGSYNC_HTTP_TIMEOUT or None


def get_settings() -> Settings:
    return Settings()
