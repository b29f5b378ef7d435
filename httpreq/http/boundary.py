"""
Target resolution for one hop.

Decides which host and port the connection is opened to, which path is
requested and whether the hop is encrypted, either from a proxy
configuration or from the request URL.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from ..models import RequestDescriptor, Target


def resolve_target(descriptor: RequestDescriptor) -> Target:
    """
    Resolve host, port, path and encryption for a request.

    With a proxy the connection goes to the proxy and the full request URL is
    forwarded as the path. Without one the URL is parsed and the port
    defaults to 443 for ``https`` and 80 otherwise.

    Malformed URLs are not rejected here. An unusable host or port resolves
    to an empty host or ``None`` port and fails at dispatch.
    """
    proxy = descriptor.proxy
    if proxy is not None:
        return Target(
            host=proxy.host,
            port=proxy.port,
            path=descriptor.url,
            is_encrypted=proxy.is_encrypted,
        )

    parts = urlsplit(descriptor.url)
    is_encrypted = parts.scheme.lower() == "https"

    path = parts.path or "/"
    if parts.query:
        path = f"{path}?{parts.query}"

    try:
        port = parts.port
    except ValueError:
        port = None
    else:
        if port is None:
            port = 443 if is_encrypted else 80

    return Target(
        host=parts.hostname or "",
        port=port,
        path=path,
        is_encrypted=is_encrypted,
    )
