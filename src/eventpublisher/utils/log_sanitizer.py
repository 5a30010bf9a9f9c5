# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Mask credentials before they reach log output.

Usage:
    from eventpublisher.utils.log_sanitizer import sanitize_headers, sanitize_logs

    logger.debug("POST %s headers=%s", url, sanitize_headers(headers))
    clean_text = sanitize_logs("Authorization: Bearer abc.def.ghi")
    # Returns: "Authorization: Bearer [REDACTED]"
"""

from __future__ import annotations

import re
from collections.abc import Mapping

_SENSITIVE_HEADERS: frozenset[str] = frozenset(
    {"authorization", "proxy-authorization", "cookie", "set-cookie"}
)

_DEFAULT_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(?i)\b(bearer)\s+[A-Za-z0-9\-._~+/]+=*"), r"\1 [REDACTED]"),
    (
        re.compile(r"\beyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+"),
        "[JWT_TOKEN]",
    ),
)


class LogSanitizer:
    """Applies regex replacements that mask secrets in free text."""

    def __init__(
        self,
        extra_patterns: Mapping[str, str] | None = None,
        *,
        enabled: bool = True,
    ) -> None:
        self.enabled = enabled
        self._patterns = list(_DEFAULT_PATTERNS)
        for pattern, replacement in (extra_patterns or {}).items():
            self._patterns.append((re.compile(pattern), replacement))

    def sanitize(self, text: str | None) -> str:
        if not text:
            return ""
        if not self.enabled:
            return text
        for pattern, replacement in self._patterns:
            text = pattern.sub(replacement, text)
        return text

    def sanitize_headers(self, headers: Mapping[str, str]) -> dict[str, str]:
        """Copy of ``headers`` with credential-bearing values masked."""
        return {
            name: (
                "[REDACTED]"
                if self.enabled and name.lower() in _SENSITIVE_HEADERS
                else self.sanitize(value)
            )
            for name, value in headers.items()
        }


_sanitizer: LogSanitizer | None = None


def get_log_sanitizer() -> LogSanitizer:
    """Return the process-wide sanitizer instance."""
    global _sanitizer
    if _sanitizer is None:
        _sanitizer = LogSanitizer()
    return _sanitizer


def sanitize_logs(text: str | None) -> str:
    return get_log_sanitizer().sanitize(text)


def sanitize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return get_log_sanitizer().sanitize_headers(headers)


__all__ = [
    "LogSanitizer",
    "get_log_sanitizer",
    "sanitize_headers",
    "sanitize_logs",
]
