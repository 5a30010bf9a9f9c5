# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Data models for eventpublisher."""

from eventpublisher.models.model_backoff_config import ModelExponentialBackoffConfig
from eventpublisher.models.model_batch_classification import ModelBatchClassification
from eventpublisher.models.model_batch_item_response import (
    BatchItemResponseList,
    ModelBatchItemResponse,
    dedup_batch_item_responses,
)
from eventpublisher.models.model_event import (
    Event,
    ModelBusinessEvent,
    ModelDataChangeEvent,
    ModelUndefinedEvent,
    get_event_metadata,
)
from eventpublisher.models.model_event_type_schema import ModelEventTypeSchema
from eventpublisher.models.model_metadata import ModelMetadata
from eventpublisher.models.model_publisher_config import (
    ModelPublisherConfig,
    PublisherSettings,
)
from eventpublisher.models.model_retry_state import ModelRetryState

__all__ = [
    "BatchItemResponseList",
    "Event",
    "ModelBatchClassification",
    "ModelBatchItemResponse",
    "ModelBusinessEvent",
    "ModelDataChangeEvent",
    "ModelEventTypeSchema",
    "ModelExponentialBackoffConfig",
    "ModelMetadata",
    "ModelPublisherConfig",
    "ModelRetryState",
    "ModelUndefinedEvent",
    "PublisherSettings",
    "dedup_batch_item_responses",
    "get_event_metadata",
]
