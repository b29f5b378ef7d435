"""
Exactly-once completion delivery.

A request can be finalized from several places: normal stream end, a
timeout, a transport error or a premature close. ``CompletionGate`` lets the
first of them win and silently discards the rest, so the caller's callback
fires exactly once.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

from .exceptions import HttpReqError
from .models import RequestResult

logger = logging.getLogger(__name__)


async def call_maybe_async(func: Callable[..., Any], *args: Any) -> Any:
    """Call a sync or async callback and return its result."""
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class CompletionGate:
    """
    One-shot result channel for a single logical request.

    ``resolve`` and ``reject`` report whether they won; only the first call
    settles the gate. ``wait`` hands the outcome to the callback exactly once.

    Example:
        ```python
        gate = CompletionGate(callback)
        gate.reject(RequestTimeoutError(url=url))   # True, first writer wins
        gate.resolve(result)                        # False, discarded
        await gate.wait()                           # callback(error, None)
        ```
    """

    def __init__(self, callback: Optional[Callable[..., Any]] = None) -> None:
        self._future: "asyncio.Future[RequestResult]" = (
            asyncio.get_running_loop().create_future()
        )
        self._callback = callback
        self._delivered = False

    @property
    def settled(self) -> bool:
        return self._future.done()

    def resolve(self, result: RequestResult) -> bool:
        """Settle with a result. Returns False if the gate was already settled."""
        if self._future.done():
            logger.debug("Discarding late result for %s", result.url)
            return False
        self._future.set_result(result)
        return True

    def reject(self, error: HttpReqError) -> bool:
        """Settle with an error. Returns False if the gate was already settled."""
        if self._future.done():
            logger.debug("Discarding late error: %s", error)
            return False
        self._future.set_exception(error)
        return True

    async def wait(self) -> Optional[RequestResult]:
        """
        Wait for the gate to settle and deliver the outcome.

        With a callback, the callback receives ``(error, result)`` exactly once
        and the result (None on failure) is returned without raising. Without
        a callback the result is returned or the error raised.
        """
        error: Optional[HttpReqError] = None
        result: Optional[RequestResult] = None
        try:
            result = await self._future
        except HttpReqError as e:
            error = e

        if self._callback is None:
            if error is not None:
                raise error
            return result

        if not self._delivered:
            self._delivered = True
            await call_maybe_async(self._callback, error, result)
        return result
