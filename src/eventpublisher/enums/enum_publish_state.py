# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""
States of the batch publish retry controller.
"""

from enum import Enum


class EnumPublishState(str, Enum):
    """FSM states driven by RetryController.run()."""

    ATTEMPTING = "ATTEMPTING"
    CLASSIFYING_FAILURE = "CLASSIFYING_FAILURE"
    BACKOFF = "BACKOFF"
    SUCCESS = "SUCCESS"
    PERMANENT_FAILURE = "PERMANENT_FAILURE"

    @property
    def is_terminal(self) -> bool:
        """True for SUCCESS and PERMANENT_FAILURE."""
        return self in (EnumPublishState.SUCCESS, EnumPublishState.PERMANENT_FAILURE)


__all__ = [
    "EnumPublishState",
]
