"""
HTTP pipeline components for httpreq.

Each module implements one stage of a hop: target resolution, body
encoding, option normalization, transport dispatch, response consumption
and redirect coordination.
"""

from .body import EncodedBody, encode_body, encode_multipart, encode_query, generate_boundary
from .boundary import resolve_target
from .cookies import extract_cookies
from .options import build_wire_request, sanitize_headers
from .redirects import RedirectDecision, RedirectState, next_hop, redirect_location
from .response import ResponseConsumer
from .tls import build_ssl_context
from .transport import build_timeout, open_response

__all__ = [
    "EncodedBody",
    "encode_body",
    "encode_multipart",
    "encode_query",
    "generate_boundary",
    "resolve_target",
    "extract_cookies",
    "build_wire_request",
    "sanitize_headers",
    "RedirectDecision",
    "RedirectState",
    "next_hop",
    "redirect_location",
    "ResponseConsumer",
    "build_ssl_context",
    "build_timeout",
    "open_response",
]
