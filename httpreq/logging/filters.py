"""
Logging filters for httpreq.

Request logs carry URLs and headers, so every handler installed by
``setup_logging`` masks credentials before a record is emitted.
"""

import logging
import re
from typing import List, Pattern, Tuple


class SensitiveDataFilter(logging.Filter):
    """Filter to mask credentials in log messages."""

    def __init__(self) -> None:
        """Initialize sensitive data filter."""
        super().__init__()

        # (pattern, replacement) pairs, applied in order
        self.rules: List[Tuple[Pattern[str], str]] = [
            # Authorization headers, whatever the scheme
            (
                re.compile(
                    r"(authorization[\"'\s]*[:=][\"'\s]*)(basic|bearer|digest)?(\s*)([^\s\"',}]+)",
                    re.IGNORECASE,
                ),
                r"\1\2\3***MASKED***",
            ),
            # Cookie and Set-Cookie header values
            (
                re.compile(r"((?:set-)?cookie[\"'\s]*[:=][\"'\s]*)([^\"'\n]+)", re.IGNORECASE),
                r"\1***MASKED***",
            ),
            # Bare bearer tokens
            (re.compile(r"(bearer\s+)([a-zA-Z0-9._~+/=-]{8,})", re.IGNORECASE), r"\1***MASKED***"),
            # user:password in URLs
            (re.compile(r"([a-z][a-z0-9+.-]*://[^:/@\s]+):([^@/\s]+)@", re.IGNORECASE), r"\1:***MASKED***@"),
        ]

    def mask(self, message: str) -> str:
        """Return ``message`` with every credential masked."""
        for pattern, replacement in self.rules:
            message = pattern.sub(replacement, message)
        return message

    def filter(self, record: logging.LogRecord) -> bool:
        """Mask the record's rendered message in place."""
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Malformed format arguments; let the handler report them
            return True

        masked = self.mask(message)
        if masked != message:
            record.msg = masked
            record.args = ()
        return True

