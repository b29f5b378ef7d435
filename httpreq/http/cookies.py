"""
Cookie extraction from response headers.
"""

from typing import Any, List, Mapping


def _set_cookie_values(headers: Mapping[str, Any]) -> List[str]:
    getall = getattr(headers, "getall", None)
    if getall is not None:
        return list(getall("Set-Cookie", []))

    for name, value in headers.items():
        if name.lower() == "set-cookie":
            if isinstance(value, (list, tuple)):
                return [str(v) for v in value]
            return [str(value)]
    return []


def extract_cookies(headers: Mapping[str, Any]) -> List[str]:
    """
    Collect ``name=value`` pairs from Set-Cookie headers.

    Attributes such as ``Path`` or ``Expires`` are discarded and empty
    entries are skipped.

    Args:
        headers: Response headers; a multidict or a plain mapping whose
            Set-Cookie value is a string or a list of strings

    Returns:
        Cookies in the order the server sent them
    """
    cookies = []
    for raw in _set_cookie_values(headers):
        pair = raw.split(";", 1)[0]
        if pair:
            cookies.append(pair)
    return cookies
