"""
SSL context construction for encrypted hops.
"""

from __future__ import annotations

import ssl
from typing import Dict, Optional, Tuple

from ..models import RequestDescriptor

# OpenSSL method names mapped onto a pinned (minimum, maximum) version range
_PROTOCOL_METHODS: Dict[str, Tuple[Optional[ssl.TLSVersion], Optional[ssl.TLSVersion]]] = {
    "TLS_method": (None, None),
    "SSLv23_method": (None, None),
    "TLS_client_method": (None, None),
    "SSLv23_client_method": (None, None),
    "TLSv1_method": (ssl.TLSVersion.TLSv1, ssl.TLSVersion.TLSv1),
    "TLSv1_client_method": (ssl.TLSVersion.TLSv1, ssl.TLSVersion.TLSv1),
    "TLSv1_1_method": (ssl.TLSVersion.TLSv1_1, ssl.TLSVersion.TLSv1_1),
    "TLSv1_1_client_method": (ssl.TLSVersion.TLSv1_1, ssl.TLSVersion.TLSv1_1),
    "TLSv1_2_method": (ssl.TLSVersion.TLSv1_2, ssl.TLSVersion.TLSv1_2),
    "TLSv1_2_client_method": (ssl.TLSVersion.TLSv1_2, ssl.TLSVersion.TLSv1_2),
    "TLSv1_3_method": (ssl.TLSVersion.TLSv1_3, ssl.TLSVersion.TLSv1_3),
    "TLSv1_3_client_method": (ssl.TLSVersion.TLSv1_3, ssl.TLSVersion.TLSv1_3),
}


def has_tls_options(descriptor: RequestDescriptor) -> bool:
    """Check whether the request customizes TLS at all."""
    return any(
        value is not None
        for value in (
            descriptor.reject_unauthorized,
            descriptor.key,
            descriptor.cert,
            descriptor.secure_protocol,
            descriptor.secure_options,
        )
    )


def build_ssl_context(
    descriptor: RequestDescriptor, verify_ssl: bool = True
) -> Optional[ssl.SSLContext]:
    """
    Build an SSL context from the request's TLS options.

    Returns None when neither the request nor the engine settings ask for
    anything beyond aiohttp's default verification.

    Raises:
        ValueError: For an unknown ``secure_protocol`` name
        OSError: If the key or certificate file cannot be loaded
    """
    if not has_tls_options(descriptor) and verify_ssl:
        return None

    ssl_context = ssl.create_default_context()

    verify = verify_ssl if descriptor.reject_unauthorized is None else descriptor.reject_unauthorized
    if not verify:
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE

    if descriptor.cert is not None:
        ssl_context.load_cert_chain(
            certfile=str(descriptor.cert),
            keyfile=str(descriptor.key) if descriptor.key is not None else None,
        )

    if descriptor.secure_protocol is not None:
        try:
            minimum, maximum = _PROTOCOL_METHODS[descriptor.secure_protocol]
        except KeyError:
            raise ValueError(f"Unknown secure protocol: {descriptor.secure_protocol}")
        if minimum is not None:
            ssl_context.minimum_version = minimum
        if maximum is not None:
            ssl_context.maximum_version = maximum

    if descriptor.secure_options is not None:
        ssl_context.options |= descriptor.secure_options

    return ssl_context
