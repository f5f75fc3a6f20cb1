"""
Shipgrid Settings

Environment-driven defaults for the fitting core, validated with
Pydantic Settings. Core functions take explicit parameters; settings only
fill in what a caller leaves out.

Usage:
    from shipgrid.core.config import get_settings

    k_bw = get_settings().bw_penalty_k

Environment Variables:
    SHIPGRID_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
    SHIPGRID_DEBUG: Legacy switch, promotes the default level to DEBUG
    SHIPGRID_LOG_JSON: Emit JSON log lines
    SHIPGRID_BW_PENALTY_K: Responsiveness penalty per point of bandwidth overage
    SHIPGRID_HISTORY_LIMIT: Undo/redo depth of a fit session
    SHIPGRID_CATALOG_PATH: YAML catalog used when load_catalog() gets no path

A .env file in the working directory is read as well.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_LOG_LEVEL: LogLevel = "WARNING"


class ShipgridSettings(BaseSettings):
    """Validated shipgrid settings (prefix SHIPGRID_)."""

    model_config = SettingsConfigDict(
        env_prefix="SHIPGRID_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------

    log_level: LogLevel = Field(default=DEFAULT_LOG_LEVEL, description="Level for shipgrid loggers")
    debug: bool = Field(default=False, description="Legacy DEBUG switch")
    log_json: bool = Field(default=False, description="JSON log output")

    # -------------------------------------------------------------------------
    # Fitting
    # -------------------------------------------------------------------------

    bw_penalty_k: float = Field(
        default=0.01,
        ge=0.0,
        description="k in 1 / (1 + k * BW_over)",
    )
    history_limit: int = Field(
        default=100,
        ge=1,
        description="Undo/redo snapshots kept per fit session",
    )
    catalog_path: Optional[Path] = Field(
        default=None,
        description="Default YAML catalog for load_catalog()",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @field_validator("catalog_path", mode="after")
    @classmethod
    def expand_catalog_path(cls, v: Optional[Path]) -> Optional[Path]:
        return v.expanduser() if v is not None else None

    @property
    def effective_log_level(self) -> str:
        """
        Level actually applied to loggers.

        SHIPGRID_DEBUG only counts while SHIPGRID_LOG_LEVEL is at its default,
        so an explicit level always wins.
        """
        if self.debug and self.log_level == DEFAULT_LOG_LEVEL:
            return "DEBUG"
        return self.log_level

    @property
    def log_level_int(self) -> int:
        return logging.getLevelName(self.effective_log_level)


@lru_cache(maxsize=1)
def get_settings() -> ShipgridSettings:
    """Process-wide settings, read from the environment on first use."""
    return ShipgridSettings()


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()


def is_debug_enabled() -> bool:
    return get_settings().effective_log_level == "DEBUG"
