# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""eventpublisher - batch publishing client for an event broker ingestion endpoint.

Encodes DataChange, Business and Undefined events as JSON or Avro binary,
publishes them in batches and retries only the events the broker reports as
retryable.
"""

from eventpublisher.enums import (
    EnumDataOperation,
    EnumPublishingStatus,
    EnumPublishingStep,
    EnumPublishState,
)
from eventpublisher.errors import (
    BatchPartialFailure,
    BatchValidationError,
    EventEncodingError,
    EventPublisherError,
    SchemaResolutionError,
    ServerError,
    TransportError,
)
from eventpublisher.models import (
    Event,
    ModelBatchItemResponse,
    ModelBusinessEvent,
    ModelDataChangeEvent,
    ModelEventTypeSchema,
    ModelExponentialBackoffConfig,
    ModelMetadata,
    ModelPublisherConfig,
    ModelUndefinedEvent,
    PublisherSettings,
    get_event_metadata,
)
from eventpublisher.publisher import (
    AvroEventPublisher,
    EventPublisher,
    create_event_publisher,
)

__all__ = [
    "AvroEventPublisher",
    "BatchPartialFailure",
    "BatchValidationError",
    "EnumDataOperation",
    "EnumPublishState",
    "EnumPublishingStatus",
    "EnumPublishingStep",
    "Event",
    "EventEncodingError",
    "EventPublisher",
    "EventPublisherError",
    "ModelBatchItemResponse",
    "ModelBusinessEvent",
    "ModelDataChangeEvent",
    "ModelEventTypeSchema",
    "ModelExponentialBackoffConfig",
    "ModelMetadata",
    "ModelPublisherConfig",
    "ModelUndefinedEvent",
    "PublisherSettings",
    "SchemaResolutionError",
    "ServerError",
    "TransportError",
    "create_event_publisher",
    "get_event_metadata",
]
