"""
Response consumption for one hop.

Buffers the response body in memory or streams it into a file sink,
reports per-chunk progress, and turns the finished stream into a
``RequestResult``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, AsyncIterable, List, Mapping, Optional

import aiofiles
import aiohttp

from ..completion import call_maybe_async
from ..exceptions import ProgressUnavailableError, RequestAbortedError
from ..models import DownloadProgress, RequestDescriptor, RequestResult
from .cookies import extract_cookies

logger = logging.getLogger(__name__)

# Errors meaning the peer went away before the body was complete
STREAM_ABORT_ERRORS = (
    aiohttp.ClientPayloadError,
    aiohttp.ServerDisconnectedError,
    ConnectionResetError,
)


def parse_content_length(headers: Mapping[str, str]) -> Optional[int]:
    """Announced body size, or None when absent or unparsable."""
    value = headers.get("Content-Length")
    if value is None:
        return None
    value = value.strip()
    if not value.isdigit():
        return None
    return int(value)


class ResponseConsumer:
    """
    Consumes the body of a single response.

    The consumer is driven by stream events: ``open`` when the response
    starts, ``on_data`` per chunk, ``on_end`` when the stream ended normally
    and ``on_close`` when the connection went away. ``consume`` wires those
    events to an async chunk iterator.

    Example:
        ```python
        consumer = ResponseConsumer(descriptor, url, response.status, response.headers)
        await consumer.consume(response.content.iter_any())
        result = consumer.build_result()
        ```
    """

    def __init__(
        self,
        descriptor: RequestDescriptor,
        url: str,
        status_code: int,
        headers: Mapping[str, str],
    ) -> None:
        self.descriptor = descriptor
        self.url = url
        self.status_code = status_code
        self.headers = headers
        self.totalsize = parse_content_length(headers)
        self.currentsize = 0
        self.ended = False

        self._chunks: List[bytes] = []
        self._sink: Any = None
        self._location: Optional[Path] = (
            Path(descriptor.download_location)
            if descriptor.download_location is not None
            else None
        )

    async def open(self) -> None:
        """Open the file sink for this hop's response, if one is configured."""
        if self._location is not None and self._sink is None:
            self._sink = await aiofiles.open(self._location, "wb")

    async def on_data(self, chunk: bytes) -> None:
        """Store a chunk and report progress."""
        if self._sink is not None:
            await self._sink.write(chunk)
        else:
            self._chunks.append(chunk)

        self.currentsize += len(chunk)

        callback = self.descriptor.progress_callback
        if callback is None:
            return

        if self.totalsize is None:
            await call_maybe_async(callback, ProgressUnavailableError(url=self.url), None)
            return

        if self.totalsize:
            percentage = self.currentsize * 100 / self.totalsize
        else:
            percentage = 100.0
        progress = DownloadProgress(
            totalsize=self.totalsize,
            currentsize=self.currentsize,
            percentage=percentage,
        )
        await call_maybe_async(callback, None, progress)

    async def on_end(self) -> None:
        """Mark the stream as ended and flush the sink."""
        self.ended = True
        await self._close_sink()

    async def on_close(self, reason: Optional[str] = None) -> Optional[RequestAbortedError]:
        """
        Handle the connection closing.

        Returns:
            The abort error when the stream had not ended yet, None otherwise
        """
        if self.ended:
            return None
        await self._close_sink()
        logger.debug("Response stream for %s closed before its end", self.url)
        return RequestAbortedError(url=self.url, reason=reason)

    async def consume(self, stream: AsyncIterable[bytes]) -> None:
        """
        Drive the consumer from an async chunk iterator until it ends.

        Raises:
            RequestAbortedError: If the stream breaks off before its end
        """
        await self.open()
        try:
            async for chunk in stream:
                await self.on_data(chunk)
        except STREAM_ABORT_ERRORS as e:
            error = await self.on_close(str(e) or None)
            if error is not None:
                raise error from e
            raise
        except BaseException:
            await self._close_sink()
            raise
        await self.on_end()

    def build_result(self) -> RequestResult:
        """
        Build the result for a terminal response.

        Must only be called after ``on_end``.
        """
        if not self.ended:
            raise RuntimeError("response stream has not ended")

        cookies = tuple(extract_cookies(self.headers))

        if self._location is not None:
            return RequestResult(
                url=self.url,
                status_code=self.status_code,
                headers=self.headers,
                cookies=cookies,
                download_location=self._location,
            )

        body: Any = b"".join(self._chunks)
        if not self.descriptor.binary:
            body = body.decode("utf-8", errors="replace")

        return RequestResult(
            url=self.url,
            status_code=self.status_code,
            headers=self.headers,
            cookies=cookies,
            body=body,
        )

    async def _close_sink(self) -> None:
        if self._sink is not None:
            sink, self._sink = self._sink, None
            await sink.close()
