"""
Transport dispatch for one hop.

Opens a dedicated connection for the hop, submits the wire request and
yields the response. Nothing is pooled or reused between hops or requests.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import aiohttp
import yarl

from ..config.models import EngineSettings
from ..exceptions import TransportError
from ..models import WireRequest

logger = logging.getLogger(__name__)


def build_timeout(timeout: Optional[int]) -> aiohttp.ClientTimeout:
    """
    Idle socket timeout in milliseconds to an aiohttp timeout.

    The timeout bounds connecting and every wait for data, never the total
    duration of the exchange.
    """
    if not timeout:
        return aiohttp.ClientTimeout(total=None)
    seconds = timeout / 1000
    return aiohttp.ClientTimeout(total=None, sock_connect=seconds, sock_read=seconds)


def create_connector(wire: WireRequest) -> aiohttp.BaseConnector:
    """Fresh non-pooling connector for one hop."""
    local_addr = (wire.local_address, 0) if wire.local_address else None
    return aiohttp.TCPConnector(force_close=True, local_addr=local_addr)


@asynccontextmanager
async def open_response(
    wire: WireRequest,
    timeout: Optional[int] = None,
    settings: Optional[EngineSettings] = None,
) -> AsyncGenerator[aiohttp.ClientResponse, None]:
    """
    Dispatch a wire request and yield its response.

    The request body is written in full before the response is awaited.
    Leaving the context releases the connection, which aborts a response
    that has not been read to its end.

    Args:
        wire: The hop's wire request
        timeout: Idle socket timeout in milliseconds
        settings: Engine settings

    Yields:
        The response with headers received and body unread

    Raises:
        TransportError: If the target cannot be addressed
        aiohttp.ClientError: For connection and protocol failures
        asyncio.TimeoutError: When the idle timeout expires
    """
    settings = settings or EngineSettings()

    if not wire.host or wire.port is None:
        raise TransportError(f"Invalid URL: {wire.url}", url=wire.url, code="InvalidURL")

    own_connector = wire.connector is None
    connector = create_connector(wire) if own_connector else wire.connector

    request_kwargs: Dict[str, Any] = {
        "headers": wire.headers,
        "data": wire.body,
        "skip_auto_headers": wire.skip_auto_headers,
        "allow_redirects": False,
    }
    if wire.proxy is not None:
        request_kwargs["proxy"] = wire.proxy
    if wire.auth is not None:
        request_kwargs["auth"] = aiohttp.BasicAuth(*wire.auth)
    if wire.ssl_context is not None:
        request_kwargs["ssl"] = wire.ssl_context

    logger.debug(
        "Dispatching %s %s%s",
        wire.method,
        wire.url,
        f" via proxy {wire.proxy}" if wire.proxy else "",
    )

    async with aiohttp.ClientSession(
        connector=connector,
        connector_owner=own_connector,
        timeout=build_timeout(timeout),
        cookie_jar=aiohttp.DummyCookieJar(),
        auto_decompress=False,
        read_bufsize=settings.chunk_size,
    ) as session:
        async with session.request(
            wire.method, yarl.URL(wire.url, encoded=True), **request_kwargs
        ) as response:
            logger.debug("Received %s from %s", response.status, wire.url)
            yield response
