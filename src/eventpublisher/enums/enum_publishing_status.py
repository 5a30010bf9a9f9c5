# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""
Publishing status enum reported per item in a batch response.
"""

from enum import Enum


class EnumPublishingStatus(str, Enum):
    """Broker verdict for a single submitted event."""

    SUBMITTED = "submitted"
    FAILED = "failed"
    ABORTED = "aborted"


__all__ = [
    "EnumPublishingStatus",
]
