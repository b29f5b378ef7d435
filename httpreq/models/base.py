"""
Base models and common types for the httpreq library.

This module contains the common enums, dataclasses and base models shared by
the request and configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict


class HTTPMethod(str, Enum):
    """HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"


@dataclass(frozen=True)
class DownloadProgress:
    """
    Progress snapshot reported once per received chunk.

    Attributes:
        totalsize: Response size announced by the Content-Length header
        currentsize: Bytes received so far in the current hop
        percentage: ``currentsize * 100 / totalsize``
    """

    totalsize: int
    currentsize: int
    percentage: float

    @property
    def is_complete(self) -> bool:
        """Check if every announced byte has arrived."""
        return self.currentsize >= self.totalsize


# Common configuration base classes


class BaseConfig(BaseModel):
    """Base configuration class with common validation settings."""

    model_config = ConfigDict(
        use_enum_values=True, validate_assignment=True, extra="forbid"
    )
