"""
Logging system for httpreq.

Console and rotating file output with credential masking.
"""

from .filters import SensitiveDataFilter
from .formatters import ColoredFormatter, StructuredFormatter
from .manager import LoggingManager, logging_manager, setup_logging

__all__ = [
    "LoggingManager",
    "logging_manager",
    "setup_logging",
    "StructuredFormatter",
    "ColoredFormatter",
    "SensitiveDataFilter",
]
