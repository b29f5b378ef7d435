"""
Data models for the httpreq library.
"""

from .base import BaseConfig, DownloadProgress, HTTPMethod
from .http import (
    CompletionCallback,
    ProgressCallback,
    ProxyConfig,
    RequestDescriptor,
    RequestResult,
    Target,
    WireRequest,
)

__all__ = [
    "BaseConfig",
    "CompletionCallback",
    "DownloadProgress",
    "HTTPMethod",
    "ProgressCallback",
    "ProxyConfig",
    "RequestDescriptor",
    "RequestResult",
    "Target",
    "WireRequest",
]
