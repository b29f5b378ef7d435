"""
Convenience functions for common request shapes.

Each function pre-fills the method (and for downloads the target file) and
delegates to ``do_request``.
"""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .core import do_request
from .models import CompletionCallback, ProgressCallback, RequestDescriptor, RequestResult

Options = Union[RequestDescriptor, Dict[str, Any], None]


def _with_method(
    url: Optional[str],
    options: Options,
    method: str,
    **defaults: Any,
) -> RequestDescriptor:
    """Descriptor for ``options`` with the method forced and unset defaults filled."""
    update: Dict[str, Any] = {"method": method}
    if url is not None:
        update["url"] = url

    if isinstance(options, RequestDescriptor):
        for name, value in defaults.items():
            if name not in options.model_fields_set:
                update[name] = value
        return options.model_copy(update=update)

    data = dict(options or {})
    for name, value in defaults.items():
        data.setdefault(name, value)
    data.update(update)
    return RequestDescriptor.model_validate(data)


async def get(
    url: str,
    options: Options = None,
    callback: Optional[CompletionCallback] = None,
) -> Optional[RequestResult]:
    """
    GET request. Redirects are followed unless ``allow_redirects`` is set.

    Example:
        ```python
        result = await get("https://example.com/search", {"parameters": {"q": "python"}})
        ```
    """
    return await do_request(_with_method(url, options, "GET", allow_redirects=True), callback)


async def post(
    url: str,
    options: Options = None,
    callback: Optional[CompletionCallback] = None,
) -> Optional[RequestResult]:
    """POST request."""
    return await do_request(_with_method(url, options, "POST"), callback)


async def put(
    url: str,
    options: Options = None,
    callback: Optional[CompletionCallback] = None,
) -> Optional[RequestResult]:
    """PUT request."""
    return await do_request(_with_method(url, options, "PUT"), callback)


async def delete(
    url: str,
    options: Options = None,
    callback: Optional[CompletionCallback] = None,
) -> Optional[RequestResult]:
    """DELETE request."""
    return await do_request(_with_method(url, options, "DELETE"), callback)


async def download(
    url: str,
    location: Union[str, Path],
    progress_callback: Optional[ProgressCallback] = None,
    callback: Optional[CompletionCallback] = None,
) -> Optional[RequestResult]:
    """
    Stream a resource to disk, following redirects.

    Args:
        url: Resource to download
        location: File the body is written to
        progress_callback: Optional ``progress_callback(error, progress)``
            called per received chunk
        callback: Optional completion callback

    Returns:
        Result whose ``download_location`` points at the written file
    """
    descriptor = RequestDescriptor(
        url=url,
        method="GET",
        download_location=location,
        allow_redirects=True,
        progress_callback=progress_callback,
    )
    return await do_request(descriptor, callback)


async def upload_files(
    options: Union[RequestDescriptor, Dict[str, Any]],
    callback: Optional[CompletionCallback] = None,
) -> Optional[RequestResult]:
    """
    POST the descriptor's files as multipart/form-data.

    Deprecated: use ``post`` with ``files`` set.
    """
    warnings.warn(
        "upload_files() is deprecated, use post() with files instead",
        DeprecationWarning,
        stacklevel=2,
    )
    return await do_request(_with_method(None, options, "POST"), callback)
