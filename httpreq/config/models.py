"""
Configuration models for httpreq.

This module defines the configuration data models with validation and defaults.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.base import BaseConfig


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    file_path: Optional[Path] = Field(default=None, description="Log file path")
    max_file_size: int = Field(
        default=10 * 1024 * 1024, description="Max log file size in bytes"
    )
    backup_count: int = Field(default=5, description="Number of backup log files")
    enable_console: bool = Field(default=True, description="Enable console logging")
    enable_file: bool = Field(default=False, description="Enable file logging")
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )

    # Component-specific log levels
    component_levels: Dict[str, LogLevel] = Field(
        default_factory=dict, description="Per-component log levels"
    )

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v: Any) -> Any:
        """Accept level names in any case."""
        return v.upper() if isinstance(v, str) else v


class EngineSettings(BaseConfig):
    """
    Defaults applied by the request engine.

    Per-request descriptor fields always win over these values.
    """

    default_max_redirects: int = Field(
        default=10, ge=0, description="Hop budget when a request sets none"
    )
    default_timeout: Optional[int] = Field(
        default=None,
        gt=0,
        description="Idle socket timeout in milliseconds when a request sets none",
    )
    chunk_size: int = Field(
        default=64 * 1024,
        ge=1024,
        description="Upper bound for a single response chunk read from the socket",
    )
    user_agent: Optional[str] = Field(
        default=None, description="User-Agent sent unless the request sets one"
    )
    verify_ssl: bool = Field(
        default=True,
        description="Verify certificates unless a request sets reject_unauthorized",
    )


class GlobalConfig(BaseModel):
    """Top-level configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    engine: EngineSettings = Field(default_factory=EngineSettings)
