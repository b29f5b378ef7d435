"""
Single-shot asynchronous HTTP/HTTPS request engine built on AIOHTTP.

One call describes one logical request and yields exactly one outcome: the
terminal response of the redirect chain, or a classified error.

Features:
- Query strings, url-encoded forms, JSON, raw and multipart/form-data bodies
- Opt-in redirect following with a bounded hop budget
- Streaming downloads to disk with per-chunk progress reports
- Proxies, basic authentication, client certificates and TLS tuning
- Idle socket timeouts and a single, exactly-once completion channel
"""

from .completion import CompletionGate
from .config import EngineSettings, GlobalConfig, LoggingConfig, get_settings
from .convenience import delete, download, get, post, put, upload_files
from .core import do_request
from .exceptions import (
    CantSendFilesUsingGetError,
    ErrorCode,
    FileReadError,
    HttpReqError,
    ProgressUnavailableError,
    RequestAbortedError,
    RequestTimeoutError,
    TooManyRedirectsError,
    TransportError,
)
from .logging import setup_logging
from .models import (
    DownloadProgress,
    HTTPMethod,
    ProxyConfig,
    RequestDescriptor,
    RequestResult,
)

__version__ = "0.1.0"

__all__ = [
    # Engine
    "do_request",
    "CompletionGate",
    # Convenience functions
    "get",
    "post",
    "put",
    "delete",
    "download",
    "upload_files",
    # Models
    "RequestDescriptor",
    "RequestResult",
    "ProxyConfig",
    "DownloadProgress",
    "HTTPMethod",
    # Exceptions
    "HttpReqError",
    "ErrorCode",
    "CantSendFilesUsingGetError",
    "FileReadError",
    "TransportError",
    "RequestTimeoutError",
    "TooManyRedirectsError",
    "RequestAbortedError",
    "ProgressUnavailableError",
    # Configuration and logging
    "EngineSettings",
    "GlobalConfig",
    "LoggingConfig",
    "get_settings",
    "setup_logging",
]
