# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""
Publishing step enum reported per item in a batch response.

The step tells where in the broker pipeline an item stopped. A failure at
``VALIDATING`` is permanent: resubmitting the same event cannot change it.
"""

from enum import Enum


class EnumPublishingStep(str, Enum):
    """Broker pipeline step at which an item was last processed."""

    NONE = "none"
    VALIDATING = "validating"
    PARTITIONING = "partitioning"
    ENRICHING = "enriching"
    PUBLISHING = "publishing"


__all__ = [
    "EnumPublishingStep",
]
