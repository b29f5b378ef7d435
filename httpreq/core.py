"""
Request execution engine.

``do_request`` performs one logical request: it normalizes the descriptor
into a wire request, dispatches it, consumes the response and follows
redirects hop by hop until a terminal response or a classified error, which
is delivered exactly once through a ``CompletionGate``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Union

import aiohttp

from .completion import CompletionGate
from .config import get_settings
from .config.models import EngineSettings
from .exceptions import ErrorHandler, HttpReqError
from .http.options import build_wire_request
from .http.redirects import RedirectState, next_hop, redirect_location
from .http.response import ResponseConsumer
from .http.transport import open_response
from .models import CompletionCallback, RequestDescriptor, RequestResult

logger = logging.getLogger(__name__)

# Failures of the underlying transport, classified before delivery
TRANSPORT_ERRORS = (aiohttp.ClientError, OSError, asyncio.TimeoutError)


def prepare_descriptor(
    descriptor: Union[RequestDescriptor, Dict[str, Any]],
    settings: EngineSettings,
) -> RequestDescriptor:
    """
    Private working copy of the caller's descriptor with defaults applied.

    Hops advance the copy, so the caller's object never changes.
    """
    if isinstance(descriptor, RequestDescriptor):
        request = descriptor.model_copy()
    else:
        request = RequestDescriptor.model_validate(descriptor)

    if request.max_redirects is None:
        request.max_redirects = settings.default_max_redirects
    if request.timeout is None and settings.default_timeout is not None:
        request.timeout = settings.default_timeout
    return request


async def execute(request: RequestDescriptor, settings: EngineSettings) -> RequestResult:
    """
    Run hops until the redirect chain reaches its terminal response.

    Hops run strictly one after another; each opens its own connection and
    releases it before the next hop is dispatched.

    Raises:
        HttpReqError: For classified failures
        aiohttp.ClientError, OSError, asyncio.TimeoutError: Raw transport failures
    """
    while True:
        wire = build_wire_request(request, settings)

        async with open_response(wire, request.timeout, settings) as response:
            consumer = ResponseConsumer(request, request.url, response.status, response.headers)
            await consumer.consume(response.content.iter_any())

        decision = next_hop(request, redirect_location(response.headers))
        if decision.state is RedirectState.TERMINAL:
            return consumer.build_result()


async def do_request(
    descriptor: Union[RequestDescriptor, Dict[str, Any]],
    callback: Optional[CompletionCallback] = None,
    *,
    settings: Optional[EngineSettings] = None,
) -> Optional[RequestResult]:
    """
    Perform one logical HTTP request, following redirects when enabled.

    Args:
        descriptor: What to request, as a ``RequestDescriptor`` or a dict of
            its fields
        callback: Optional ``callback(error, result)``, sync or async, invoked
            exactly once
        settings: Engine settings; the loaded configuration when omitted

    Returns:
        The result of the terminal response. With a callback, failures are
        delivered to it and None is returned.

    Raises:
        HttpReqError: Without a callback, for any classified failure
        pydantic.ValidationError: If a dict descriptor is invalid

    Example:
        ```python
        result = await do_request(
            {"url": "https://example.com/upload", "method": "POST",
             "files": {"report": "/tmp/report.pdf"}, "parameters": {"tag": "q3"}}
        )
        print(result.status_code, result.body)
        ```
    """
    settings = settings or get_settings()
    request = prepare_descriptor(descriptor, settings)
    gate = CompletionGate(callback)

    try:
        result = await execute(request, settings)
    except HttpReqError as e:
        logger.warning("%s %s failed: %s (%s)", request.method, request.url, e.message, e.code)
        gate.reject(e)
    except TRANSPORT_ERRORS as e:
        error = ErrorHandler.handle_transport_error(e, url=request.url, timeout=request.timeout)
        error.__cause__ = e
        logger.warning(
            "%s %s failed: %s (%s)", request.method, request.url, error.message, error.code
        )
        gate.reject(error)
    else:
        gate.resolve(result)

    return await gate.wait()
