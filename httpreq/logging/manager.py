"""
Logging manager for httpreq.

This module provides centralized logging configuration and management.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict

from ..config.models import LoggingConfig
from .filters import SensitiveDataFilter
from .formatters import ColoredFormatter, StructuredFormatter


class LoggingManager:
    """Centralized logging manager."""

    def __init__(self) -> None:
        self._configured = False
        self._handlers: Dict[str, logging.Handler] = {}

    def setup_logging(self, config: LoggingConfig) -> None:
        """
        Setup logging based on configuration.

        Handlers installed by an earlier call are replaced; handlers the
        application installed itself are left alone.

        Args:
            config: Logging configuration
        """
        if self._configured:
            self.cleanup()

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, config.level.value))

        if config.enable_console:
            self._setup_console_handler(config)

        if config.enable_file and config.file_path:
            self._setup_file_handler(config)

        for component, level in config.component_levels.items():
            logging.getLogger(component).setLevel(getattr(logging, level.value))

        self._configured = True
        logging.getLogger(__name__).debug("Logging system configured")

    def _setup_console_handler(self, config: LoggingConfig) -> None:
        # stdout carries response output
        handler = logging.StreamHandler(sys.stderr)

        formatter: logging.Formatter
        if config.enable_structured:
            formatter = StructuredFormatter()
        else:
            formatter = ColoredFormatter(config.format)

        self.add_handler("console", handler, formatter, config)

    def _setup_file_handler(self, config: LoggingConfig) -> None:
        log_path = Path(str(config.file_path))
        log_path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.handlers.RotatingFileHandler(
            filename=str(log_path),
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding="utf-8",
        )

        formatter: logging.Formatter
        if config.enable_structured:
            formatter = StructuredFormatter()
        else:
            formatter = logging.Formatter(config.format)

        self.add_handler("file", handler, formatter, config)

    def add_handler(
        self,
        name: str,
        handler: logging.Handler,
        formatter: logging.Formatter,
        config: LoggingConfig,
    ) -> None:
        """Install a masked handler on the root logger under ``name``."""
        handler.setFormatter(formatter)
        handler.setLevel(getattr(logging, config.level.value))
        handler.addFilter(SensitiveDataFilter())

        logging.getLogger().addHandler(handler)
        self._handlers[name] = handler

    def get_handler(self, name: str) -> logging.Handler:
        return self._handlers[name]

    def cleanup(self) -> None:
        """Remove and close the handlers installed by this manager."""
        root_logger = logging.getLogger()
        for handler in self._handlers.values():
            root_logger.removeHandler(handler)
            handler.close()

        self._handlers.clear()
        self._configured = False

    def is_configured(self) -> bool:
        """Check if logging is configured."""
        return self._configured


# Global logging manager instance
logging_manager = LoggingManager()


def setup_logging(config: LoggingConfig) -> None:
    """
    Setup logging with configuration.

    Args:
        config: Logging configuration
    """
    logging_manager.setup_logging(config)
