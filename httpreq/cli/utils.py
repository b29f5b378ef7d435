"""
Utility functions for CLI operations.

Parsing of the repeated ``KEY=VALUE`` style options into descriptor fields.
"""

import sys
from typing import Dict, List, Optional

from ..models import ProxyConfig


def parse_headers(header_strings: Optional[List[str]]) -> Dict[str, str]:
    """
    Parse header strings into a dictionary.

    Args:
        header_strings: List of header strings in "key:value" format,
                       or None if no headers provided

    Returns:
        Dictionary with header names as keys and values as strings.
        Empty dict if no valid headers provided.

    Note:
        Invalid header formats are reported on stderr but don't cause
        the function to fail. Only valid headers are included in result.

    Example:
        ```python
        headers = parse_headers(["Accept: application/json", "X-Trace:1"])
        # Returns: {"Accept": "application/json", "X-Trace": "1"}
        ```
    """
    headers = {}
    if header_strings:
        for header_string in header_strings:
            if ":" in header_string:
                key, value = header_string.split(":", 1)
                headers[key.strip()] = value.strip()
            else:
                print(f"Warning: Invalid header format: {header_string}", file=sys.stderr)
    return headers


def parse_pairs(items: Optional[List[str]], option: str) -> Dict[str, str]:
    """
    Parse ``KEY=VALUE`` arguments into a dictionary.

    Later occurrences of a key replace earlier ones.

    Raises:
        ValueError: If an item has no ``=`` or an empty key
    """
    pairs: Dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"{option} expects KEY=VALUE, got {item!r}")
        pairs[key] = value
    return pairs


def parse_proxy(value: str) -> ProxyConfig:
    """
    Parse ``[scheme://]host:port`` into a proxy configuration.

    Raises:
        ValueError: If the port is missing or not a number
    """
    protocol = "http"
    if "://" in value:
        protocol, value = value.split("://", 1)

    host, sep, port = value.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ValueError(f"--proxy expects HOST:PORT, got {value!r}")

    return ProxyConfig(host=host.strip("[]"), port=int(port), protocol=protocol)
