"""
httpreq CLI package.

Provides the ``httpreq`` command-line interface.
"""

from .main import main, run

__all__ = ["main", "run"]
