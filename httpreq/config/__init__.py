"""
Configuration management for httpreq.

This module provides centralized configuration management with support for
environment variables and configuration files.
"""

from .loader import ConfigLoader
from .manager import ConfigManager, config_manager, get_settings
from .models import EngineSettings, GlobalConfig, LoggingConfig, LogLevel

__all__ = [
    "ConfigLoader",
    "ConfigManager",
    "config_manager",
    "get_settings",
    "EngineSettings",
    "GlobalConfig",
    "LoggingConfig",
    "LogLevel",
]
