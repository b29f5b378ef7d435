"""
Option normalization.

Merges everything a descriptor declares into the ``WireRequest`` for one hop:
target, body, computed and caller headers, cookies, credentials, proxy,
local address and TLS material.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from ..config.models import EngineSettings
from ..exceptions import ErrorHandler, TransportError
from ..models import RequestDescriptor, WireRequest
from .body import encode_body
from .boundary import resolve_target
from .tls import build_ssl_context

logger = logging.getLogger(__name__)


def set_header(headers: Dict[str, Any], name: str, value: Any) -> None:
    """Set a header, replacing any existing one regardless of case."""
    lowered = name.lower()
    for existing in [k for k in headers if k.lower() == lowered]:
        del headers[existing]
    headers[name] = value


def sanitize_headers(headers: Mapping[Any, Any]) -> Dict[str, str]:
    """Drop headers with an empty name or value and stringify the rest."""
    clean: Dict[str, str] = {}
    for name, value in headers.items():
        if name is None or value is None:
            continue
        name = str(name)
        value = str(value)
        if not name or not value:
            logger.debug("Dropping header with empty name or value: %r", name)
            continue
        clean[name] = value
    return clean


def parse_auth(auth: Optional[str]) -> Optional[Tuple[str, str]]:
    """Split ``user:password`` credentials; the password may be empty."""
    if not auth:
        return None
    login, _, password = auth.partition(":")
    return login, password


def build_wire_request(
    descriptor: RequestDescriptor,
    settings: Optional[EngineSettings] = None,
    boundary: Optional[str] = None,
) -> WireRequest:
    """
    Normalize a descriptor into the wire request for its next hop.

    Args:
        descriptor: The request, with the URL of the hop to perform
        settings: Engine settings providing defaults
        boundary: Multipart boundary override

    Returns:
        WireRequest ready for dispatch

    Raises:
        CantSendFilesUsingGetError: If files are combined with GET
        FileReadError: If a multipart file cannot be read
        TransportError: If the TLS material cannot be loaded
    """
    settings = settings or EngineSettings()
    target = resolve_target(descriptor)
    encoded = encode_body(descriptor, target.path, boundary=boundary)

    headers: Dict[str, Any] = {}
    if settings.user_agent:
        headers["User-Agent"] = settings.user_agent
    if encoded.body is not None:
        headers["Content-Length"] = str(len(encoded.body))
    if encoded.content_type:
        headers["Content-Type"] = encoded.content_type
    if descriptor.cookies:
        headers["Cookie"] = "; ".join(descriptor.cookies)

    for name, value in (descriptor.headers or {}).items():
        set_header(headers, name, value)

    clean_headers = sanitize_headers(headers)

    # aiohttp would otherwise invent a content type and ask for compressed
    # responses, neither of which the caller requested
    skip = {"Accept-Encoding"}
    if not any(name.lower() == "content-type" for name in clean_headers):
        skip.add("Content-Type")

    ssl_context = None
    if target.is_encrypted:
        try:
            ssl_context = build_ssl_context(descriptor, verify_ssl=settings.verify_ssl)
        except (OSError, ValueError) as e:
            raise TransportError(
                f"Invalid TLS configuration: {e}",
                url=descriptor.url,
                code=ErrorHandler.transport_code(e),
                original=e,
            ) from e

    return WireRequest(
        method=descriptor.method,
        host=target.host,
        port=target.port,
        path=encoded.path,
        is_encrypted=target.is_encrypted,
        headers=clean_headers,
        body=encoded.body,
        skip_auto_headers=frozenset(skip),
        proxy=descriptor.proxy.url if descriptor.proxy is not None else None,
        auth=parse_auth(descriptor.auth),
        local_address=descriptor.local_address,
        ssl_context=ssl_context,
        connector=descriptor.agent,
    )
