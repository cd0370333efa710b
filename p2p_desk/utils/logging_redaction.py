"""
Logging redaction helpers.
Masks Gemini API keys and bearer tokens before records reach a handler.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable


_PATTERNS: Iterable[tuple[re.Pattern, str]] = (
    # Google API keys (Gemini)
    (re.compile(r"AIza[0-9A-Za-z\-_]{35}"), "[REDACTED]"),
    # x-goog-api-key header or ?key= query parameter
    (re.compile(r"(?i)(x-goog-api-key|[?&]key)\s*[:=]\s*([A-Za-z0-9\-\._]+)"), r"\1=[REDACTED]"),
    # Authorization: Bearer <token>
    (re.compile(r"(Bearer\s+)([A-Za-z0-9\-\._]+)"), r"\1[REDACTED]"),
    # Generic api key/secret in config output
    (re.compile(r"(?i)(api[_-]?key|api[_-]?secret)\s*[:=]\s*([A-Za-z0-9\-\._]+)"), r"\1=[REDACTED]"),
)


def redact_message(message: str) -> str:
    """Mask every known secret shape in `message`."""
    for pattern, replacement in _PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class RedactingFilter(logging.Filter):
    """Render the record once and keep only the masked text."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            rendered = record.getMessage()
        except (TypeError, ValueError):
            # Bad %-args; leave the record for the handler to report
            return True
        record.msg, record.args = redact_message(rendered), ()
        return True


def install_redaction_filter() -> None:
    """Attach the filter to the root logger and its handlers.

    Records from child loggers only pass through handler filters, so the
    handlers need their own copy.
    """
    root = logging.getLogger()
    targets = [root, *root.handlers]
    for target in targets:
        if any(isinstance(f, RedactingFilter) for f in target.filters):
            continue
        target.addFilter(RedactingFilter())
