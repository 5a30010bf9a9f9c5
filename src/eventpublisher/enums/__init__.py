# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Enums for eventpublisher."""

from eventpublisher.enums.enum_data_operation import EnumDataOperation
from eventpublisher.enums.enum_publish_state import EnumPublishState
from eventpublisher.enums.enum_publishing_status import EnumPublishingStatus
from eventpublisher.enums.enum_publishing_step import EnumPublishingStep

__all__ = [
    "EnumDataOperation",
    "EnumPublishState",
    "EnumPublishingStatus",
    "EnumPublishingStep",
]
