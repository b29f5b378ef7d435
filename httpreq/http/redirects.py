"""
Redirect coordination.

After each hop the coordinator decides whether the chain keeps following
``Location`` headers or has reached its terminal response.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional
from urllib.parse import urljoin

from ..exceptions import TooManyRedirectsError
from ..models import RequestDescriptor

logger = logging.getLogger(__name__)


class RedirectState(str, Enum):
    """State of a redirect chain after a hop."""

    FOLLOWING = "following"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class RedirectDecision:
    """Outcome of inspecting a finished hop."""

    state: RedirectState
    url: Optional[str] = None


def redirect_location(headers: Mapping[str, str]) -> Optional[str]:
    """The response's redirect target, if any."""
    location = headers.get("Location")
    return location or None


def next_hop(descriptor: RequestDescriptor, location: Optional[str]) -> RedirectDecision:
    """
    Decide how a redirect chain continues after a hop.

    When the hop carried a redirect target and redirects are enabled, the
    descriptor is advanced in place: its hop counter is incremented and its
    URL replaced by the target, resolved against the current URL.

    Args:
        descriptor: The request being executed; mutated when following
        location: The ``Location`` header of the finished hop

    Returns:
        FOLLOWING with the next URL, or TERMINAL

    Raises:
        TooManyRedirectsError: If the hop budget is already used up
    """
    if not location or not descriptor.allow_redirects:
        return RedirectDecision(RedirectState.TERMINAL)

    max_redirects = descriptor.max_redirects if descriptor.max_redirects is not None else 10
    if descriptor.redirect_count >= max_redirects:
        raise TooManyRedirectsError(max_redirects, url=descriptor.url)

    next_url = urljoin(descriptor.url, location)
    logger.debug(
        "Following redirect %d/%d: %s -> %s",
        descriptor.redirect_count + 1,
        max_redirects,
        descriptor.url,
        next_url,
    )
    descriptor.redirect_count += 1
    descriptor.url = next_url
    return RedirectDecision(RedirectState.FOLLOWING, url=next_url)
