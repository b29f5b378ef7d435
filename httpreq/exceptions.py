"""
Exception hierarchy for the httpreq request engine.

Every failure delivered through the completion callback is an ``HttpReqError``
carrying a machine-readable ``code``. The classes map onto the failure
classes of a single request: usage errors, body encoding errors, transport
errors, timeouts, redirect policy violations and premature stream
termination.
"""

from __future__ import annotations

import asyncio
import errno
from enum import Enum
from typing import Any, Optional

import aiohttp


class ErrorCode(str, Enum):
    """Codes attached to classified errors."""

    CANT_SEND_FILES_USING_GET = "CANT_SEND_FILES_USING_GET"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    TIMEOUT = "TIMEOUT"
    TOO_MANY_REDIRECTS = "TOOMANYREDIRECTS"
    REQUEST_ABORTED = "REQUEST_ABORTED"


class HttpReqError(Exception):
    """
    Base exception for all request engine failures.

    Attributes:
        message: Human-readable error message
        url: URL of the hop that failed (if known)
        code: One of ``ErrorCode`` or a transport-native code
        details: Additional error details as keyword arguments
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        code: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.code = code
        self.details = kwargs


class CantSendFilesUsingGetError(HttpReqError):
    """Raised before dispatch when files are combined with a GET request."""

    def __init__(self, url: Optional[str] = None) -> None:
        super().__init__(
            "Can't send files using GET",
            url=url,
            code=ErrorCode.CANT_SEND_FILES_USING_GET.value,
        )


class FileReadError(HttpReqError):
    """
    Raised when a file referenced for a multipart upload cannot be read.

    Attributes:
        path: The file that could not be read
    """

    def __init__(self, message: str, path: str, url: Optional[str] = None) -> None:
        super().__init__(message, url=url, code=ErrorCode.FILE_READ_ERROR.value)
        self.path = path


class TransportError(HttpReqError):
    """
    Raised for connection and protocol failures of the underlying transport.

    The original exception is available as ``__cause__`` and ``original``.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        code: Optional[str] = None,
        original: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, url=url, code=code)
        self.original = original


class RequestTimeoutError(HttpReqError):
    """
    Raised when the socket stays idle longer than the configured timeout.

    Attributes:
        timeout: The idle timeout that expired, in milliseconds
    """

    def __init__(self, url: Optional[str] = None, timeout: Optional[int] = None) -> None:
        super().__init__("request timed out", url=url, code=ErrorCode.TIMEOUT.value)
        self.timeout = timeout


class TooManyRedirectsError(HttpReqError):
    """
    Raised when a redirect chain exceeds the hop budget.

    Attributes:
        redirects: The configured redirect limit
    """

    def __init__(self, redirects: int, url: Optional[str] = None) -> None:
        super().__init__(
            f"Too many redirects (> {redirects})",
            url=url,
            code=ErrorCode.TOO_MANY_REDIRECTS.value,
        )
        self.redirects = redirects


class RequestAbortedError(HttpReqError):
    """Raised when the response stream closes before it has ended."""

    def __init__(self, url: Optional[str] = None, reason: Optional[str] = None) -> None:
        message = "Request aborted"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, url=url, code=ErrorCode.REQUEST_ABORTED.value)


class ProgressUnavailableError(HttpReqError):
    """
    Reported to progress callbacks when the response has no content length.

    This is a soft signal on the progress channel only. It never reaches the
    completion callback and never aborts the transfer.
    """

    def __init__(self, url: Optional[str] = None) -> None:
        super().__init__(
            "no content-length specified for file, so no progress monitoring possible",
            url=url,
        )


class ErrorHandler:
    """Utility for converting transport exceptions into ``HttpReqError``."""

    @staticmethod
    def transport_code(error: BaseException) -> str:
        """
        Derive a transport-native code for an exception.

        Uses the symbolic errno name (``ECONNREFUSED``) when the error, or the
        OS error it wraps, carries one; otherwise the exception class name.
        """
        candidates = [error, getattr(error, "os_error", None), error.__cause__]
        for candidate in candidates:
            number = getattr(candidate, "errno", None)
            if isinstance(number, int) and number in errno.errorcode:
                return errno.errorcode[number]
        return type(error).__name__

    @staticmethod
    def handle_transport_error(
        error: BaseException,
        url: Optional[str] = None,
        timeout: Optional[int] = None,
        streaming: bool = False,
    ) -> HttpReqError:
        """
        Convert aiohttp and OS level exceptions into the engine's taxonomy.

        Args:
            error: The original exception
            url: The URL of the failing hop
            timeout: Idle timeout in milliseconds, reported on timeouts
            streaming: Whether the response body was being read, in which
                case a dropped connection means the stream was aborted

        Returns:
            The classified error; ``HttpReqError`` instances pass through
        """
        if isinstance(error, HttpReqError):
            return error

        # aiohttp.ServerTimeoutError subclasses asyncio.TimeoutError
        if isinstance(error, asyncio.TimeoutError):
            return RequestTimeoutError(url=url, timeout=timeout)

        if streaming and isinstance(
            error,
            (aiohttp.ClientPayloadError, aiohttp.ServerDisconnectedError, ConnectionResetError),
        ):
            return RequestAbortedError(url=url, reason=str(error) or None)

        return TransportError(
            str(error) or type(error).__name__,
            url=url,
            code=ErrorHandler.transport_code(error),
            original=error,
        )
