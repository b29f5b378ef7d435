"""
Configuration manager for httpreq.

Holds the process-wide configuration, loading it lazily on first use.
"""

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from .loader import ConfigLoader
from .models import EngineSettings, GlobalConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Centralized configuration manager."""

    _instance: Optional["ConfigManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "ConfigManager":
        """Singleton pattern implementation."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize configuration manager."""
        if hasattr(self, "_initialized"):
            return

        self._initialized = True
        self._config: Optional[GlobalConfig] = None
        self._loader = ConfigLoader()
        self._instance_lock = threading.RLock()

    def load_config(self, config_file: Optional[Union[str, Path]] = None) -> GlobalConfig:
        """
        Load configuration from all sources and make it current.

        Args:
            config_file: Specific config file to load

        Returns:
            The loaded configuration
        """
        with self._instance_lock:
            self._config = self._loader.load_config(config_file)
            logger.debug("Configuration loaded from %s", config_file or "default locations")
            return self._config

    def get_config(self) -> GlobalConfig:
        """Get the current configuration, loading it on first use."""
        with self._instance_lock:
            if self._config is None:
                return self.load_config()
            return self._config

    def set_config(self, config: GlobalConfig) -> None:
        """Replace the current configuration."""
        with self._instance_lock:
            self._config = config

    def reset(self) -> None:
        """Forget the current configuration so the next access reloads it."""
        with self._instance_lock:
            self._config = None


config_manager = ConfigManager()


def get_settings() -> EngineSettings:
    """Engine settings of the current configuration."""
    return config_manager.get_config().engine
