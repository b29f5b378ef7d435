"""
Request, wire and result models for the httpreq engine.

``RequestDescriptor`` is the declarative, caller-facing description of one
logical request. ``WireRequest`` is the transport-facing form derived from it
for a single hop, and ``RequestResult`` is what the completion callback
receives for a terminal response.
"""

from __future__ import annotations

import ssl
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple, Union

import aiohttp
from pydantic import BaseModel, ConfigDict, Field, field_validator


ProgressCallback = Callable[..., Any]
CompletionCallback = Callable[..., Any]


class ProxyConfig(BaseModel):
    """Forward proxy the request is sent through."""

    host: str = Field(description="Proxy hostname or address")
    port: int = Field(gt=0, le=65535, description="Proxy port")
    protocol: str = Field(
        default="http",
        description="Proxy protocol. Anything containing 'https' makes the hop encrypted.",
    )

    @property
    def is_encrypted(self) -> bool:
        return "https" in self.protocol.lower()

    @property
    def url(self) -> str:
        scheme = "https" if self.is_encrypted else "http"
        return f"{scheme}://{self.host}:{self.port}"


class RequestDescriptor(BaseModel):
    """
    Declarative description of one logical HTTP request.

    The body is chosen from ``parameters``, ``json_data``, ``files`` and
    ``body`` with the precedence ``body > files > json > parameters``.
    Presence of the JSON payload is tracked explicitly, so ``None``, ``0`` and
    ``""`` are all sendable JSON documents once the field has been set.

    Example:
        ```python
        from httpreq import RequestDescriptor, do_request

        request = RequestDescriptor(
            url="https://api.example.com/items",
            method="POST",
            json={"name": "widget"},
            headers={"Authorization": "Bearer token"},
            timeout=5000,
        )
        result = await do_request(request)
        ```
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        arbitrary_types_allowed=True,
        extra="forbid",
    )

    url: str = Field(description="Target URL, re-parsed on every redirect hop")
    method: str = Field(default="GET", description="HTTP verb sent on the wire")

    # Body sources
    parameters: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Query string for GET, urlencoded body otherwise, "
        "multipart form fields when files are present",
    )
    json_data: Any = Field(
        default=None,
        alias="json",
        description="Value serialized as an application/json body",
    )
    files: Optional[Dict[str, Union[str, Path]]] = Field(
        default=None, description="Field name to file path, sent as multipart/form-data"
    )
    body: Optional[Union[bytes, str]] = Field(
        default=None, description="Raw body. Overrides every other body source."
    )

    # Headers and credentials
    headers: Optional[Dict[str, Any]] = Field(
        default=None, description="Headers merged last, so they win over computed ones"
    )
    cookies: Optional[List[str]] = Field(
        default=None, description="'name=value' pairs joined into one Cookie header"
    )
    auth: Optional[str] = Field(
        default=None, description="'user:password' sent as HTTP basic auth"
    )

    # Routing
    proxy: Optional[ProxyConfig] = Field(default=None)
    local_address: Optional[str] = Field(
        default=None, description="Local interface address to bind"
    )
    agent: Optional[aiohttp.BaseConnector] = Field(
        default=None, description="Caller-owned connector used instead of a fresh one"
    )

    # Redirects
    allow_redirects: bool = Field(default=False)
    max_redirects: Optional[int] = Field(
        default=None, ge=0, description="Hop budget, defaults to the engine setting (10)"
    )
    redirect_count: int = Field(default=0, ge=0)

    # Response handling
    timeout: Optional[int] = Field(
        default=None, gt=0, description="Idle socket timeout in milliseconds"
    )
    download_location: Optional[Union[str, Path]] = Field(
        default=None, description="Stream the response body to this file"
    )
    progress_callback: Optional[ProgressCallback] = Field(default=None)
    binary: bool = Field(default=False, description="Keep the buffered body as bytes")

    # TLS, only applied when the hop is encrypted
    reject_unauthorized: Optional[bool] = Field(default=None)
    key: Optional[Union[str, Path]] = Field(default=None, description="PEM private key file")
    cert: Optional[Union[str, Path]] = Field(default=None, description="PEM certificate file")
    secure_protocol: Optional[str] = Field(
        default=None, description="Protocol method name such as 'TLSv1_2_method'"
    )
    secure_options: Optional[int] = Field(
        default=None, description="Bit mask OR-ed into the SSL context options"
    )

    @field_validator("method")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        """Methods go on the wire upper-cased."""
        v = v.strip().upper()
        if not v:
            raise ValueError("method must not be empty")
        return v

    @property
    def has_json(self) -> bool:
        return "json_data" in self.model_fields_set


@dataclass(frozen=True)
class Target:
    """Where one hop connects to and which path it requests."""

    host: str
    port: Optional[int]
    path: str
    is_encrypted: bool


@dataclass
class WireRequest:
    """Transport-ready representation of one hop's request."""

    method: str
    host: str
    port: Optional[int]
    path: str
    is_encrypted: bool
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    skip_auto_headers: FrozenSet[str] = frozenset()
    proxy: Optional[str] = None
    auth: Optional[Tuple[str, str]] = None
    local_address: Optional[str] = None
    ssl_context: Optional[ssl.SSLContext] = None
    connector: Optional[aiohttp.BaseConnector] = None

    @property
    def url(self) -> str:
        """Absolute URL handed to the client; the literal path when proxied."""
        if self.proxy is not None:
            return self.path

        scheme = "https" if self.is_encrypted else "http"
        default_port = 443 if self.is_encrypted else 80
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is None or self.port == default_port:
            netloc = host
        else:
            netloc = f"{host}:{self.port}"
        return f"{scheme}://{netloc}{self.path}"


@dataclass(frozen=True)
class RequestResult:
    """Normalized outcome of a terminal (non-redirected) response."""

    url: str
    status_code: int
    headers: Mapping[str, str]
    cookies: Tuple[str, ...] = ()
    body: Union[str, bytes, None] = None
    download_location: Optional[Path] = None

    @property
    def is_success(self) -> bool:
        """Check if the response carried a 2xx status."""
        return 200 <= self.status_code < 300

    @property
    def is_client_error(self) -> bool:
        """Check if the response carried a 4xx status."""
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        """Check if the response carried a 5xx status."""
        return 500 <= self.status_code < 600
