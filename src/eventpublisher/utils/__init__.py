# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Utility helpers for eventpublisher."""

from eventpublisher.utils.log_sanitizer import (
    LogSanitizer,
    get_log_sanitizer,
    sanitize_headers,
    sanitize_logs,
)

__all__ = ["LogSanitizer", "get_log_sanitizer", "sanitize_headers", "sanitize_logs"]
