"""
Request body encoding.

Builds the outgoing payload and its content type from the descriptor's
``parameters``, ``json_data``, ``files`` and ``body`` fields, including the
multipart/form-data encoding used for file uploads.
"""

from __future__ import annotations

import json
import random
import string
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote, urlencode

from ..exceptions import CantSendFilesUsingGetError, FileReadError
from ..models import RequestDescriptor

BOUNDARY_PREFIX = "-" * 27
BOUNDARY_RANDOM_LENGTH = 29
BOUNDARY_ALPHABET = string.ascii_letters + string.digits

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"
JSON_CONTENT_TYPE = "application/json"
MULTIPART_CONTENT_TYPE = "multipart/form-data; boundary={boundary}"

# Characters encodeURIComponent leaves alone besides alphanumerics and "_.-~"
_URI_COMPONENT_SAFE = "!*'()"

_quote_component = partial(quote, safe=_URI_COMPONENT_SAFE)

_rng = random.Random()


@dataclass(frozen=True)
class EncodedBody:
    """Result of body encoding for one hop."""

    path: str
    body: Optional[bytes] = None
    content_type: Optional[str] = None


def generate_boundary(rng: Optional[random.Random] = None) -> str:
    """
    Generate a multipart boundary.

    27 dashes followed by 29 random alphanumerics. The token only has to be
    unlikely to appear in the payload, so a non-cryptographic generator is
    used.
    """
    rng = rng or _rng
    token = "".join(rng.choice(BOUNDARY_ALPHABET) for _ in range(BOUNDARY_RANDOM_LENGTH))
    return BOUNDARY_PREFIX + token


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def _query_items(parameters: Mapping[str, Any]) -> List[Tuple[str, Union[str, List[str]]]]:
    items: List[Tuple[str, Union[str, List[str]]]] = []
    for key, value in parameters.items():
        if isinstance(value, (list, tuple)):
            items.append((key, [_stringify(v) for v in value]))
        else:
            items.append((key, _stringify(value)))
    return items


def encode_query(parameters: Mapping[str, Any]) -> str:
    """Form-encode parameters; sequences repeat their key."""
    return urlencode(
        _query_items(parameters), doseq=True, safe=_URI_COMPONENT_SAFE, quote_via=quote
    )


def append_query(path: str, query: str) -> str:
    """Append a query string to a request path."""
    if not query:
        return path
    separator = "&" if "?" in path else "?"
    return f"{path}{separator}{query}"


def file_name_from_path(file_path: Union[str, Path]) -> str:
    """Last path segment, treating backslashes as separators."""
    return str(file_path).replace("\\", "/").rsplit("/", 1)[-1]


def encode_multipart(
    parameters: Optional[Mapping[str, Any]],
    files: Mapping[str, Union[str, Path]],
    boundary: str,
    url: Optional[str] = None,
) -> bytes:
    """
    Build a multipart/form-data body.

    Form fields come first with URI-component encoded names and values,
    followed by the files as ``application/octet-stream`` parts. File
    contents carry no trailing CRLF, so every file after the first is
    preceded by one.

    Raises:
        FileReadError: If a file cannot be read
    """
    separator = f"--{boundary}"
    parts: List[bytes] = []

    for key, value in (parameters or {}).items():
        parts.append(
            (
                f"{separator}\r\n"
                f'Content-Disposition: form-data; name="{_quote_component(str(key))}"\r\n'
                "\r\n"
                f"{_quote_component(_stringify(value))}\r\n"
            ).encode("utf-8")
        )

    added_file = False
    for key, file_path in files.items():
        header = (
            f"{separator}\r\n"
            f'Content-Disposition: file; name="{key}"; filename="{file_name_from_path(file_path)}"\r\n'
            "Content-Type: application/octet-stream\r\n"
            "\r\n"
        )
        if added_file:
            header = "\r\n" + header
        parts.append(header.encode("utf-8"))

        try:
            parts.append(Path(file_path).read_bytes())
        except OSError as e:
            raise FileReadError(
                f"Could not read file {file_path}: {e}", path=str(file_path), url=url
            ) from e

        added_file = True

    parts.append(f"\r\n{separator}--\r\n".encode("utf-8"))
    return b"".join(parts)


def encode_body(
    descriptor: RequestDescriptor,
    path: str,
    boundary: Optional[str] = None,
) -> EncodedBody:
    """
    Produce the payload, content type and final path for a request.

    Sources are applied in order, each overwriting the previous one:
    parameters, JSON, files, raw body. For GET the parameters go into the
    query string instead of the body.

    Args:
        descriptor: The request being encoded
        path: Request path resolved for this hop
        boundary: Multipart boundary, generated when omitted

    Raises:
        CantSendFilesUsingGetError: If files are combined with GET
        FileReadError: If a file for the multipart body cannot be read
    """
    body: Optional[bytes] = None
    content_type: Optional[str] = None
    method = descriptor.method

    if descriptor.files is not None and method == "GET":
        raise CantSendFilesUsingGetError(url=descriptor.url)

    if descriptor.parameters is not None:
        if method == "GET":
            path = append_query(path, encode_query(descriptor.parameters))
        else:
            body = encode_query(descriptor.parameters).encode("utf-8")
            content_type = FORM_CONTENT_TYPE

    if descriptor.has_json:
        body = json.dumps(
            descriptor.json_data, separators=(",", ":"), ensure_ascii=False
        ).encode("utf-8")
        content_type = JSON_CONTENT_TYPE

    if descriptor.files is not None:
        boundary = boundary or generate_boundary()
        body = encode_multipart(descriptor.parameters, descriptor.files, boundary, url=descriptor.url)
        content_type = MULTIPART_CONTENT_TYPE.format(boundary=boundary)

    if descriptor.body is not None:
        raw = descriptor.body
        body = raw.encode("utf-8") if isinstance(raw, str) else raw
        content_type = None

    return EncodedBody(path=path, body=body, content_type=content_type)
