# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""
Exception taxonomy for batch publishing.

Retry policy keys off these types:
    - TransportError with ``premature_close`` set is retried with the whole batch.
    - ServerError with a 5xx status is retried with the whole batch.
    - BatchPartialFailure is classified per item; only retryable items are resent.
    - Everything else (SchemaResolutionError, EventEncodingError, other
      TransportError/ServerError) propagates immediately.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from eventpublisher.models.model_batch_item_response import (
        ModelBatchItemResponse,
    )

# HTTP status code boundaries for error classification
_HTTP_SERVER_ERROR_MIN = 500
_HTTP_SERVER_ERROR_MAX = 600  # Exclusive (5xx range)


class EventPublisherError(Exception):
    """Base exception for event publisher errors."""


class EventEncodingError(EventPublisherError, ValueError):
    """Raised when an event cannot be encoded for the wire.

    This is a caller/data error and is never retried.
    """


class SchemaResolutionError(EventPublisherError):
    """Raised when no registered schema matches the publisher schema."""

    def __init__(self, event_type: str, publisher_schema: str) -> None:
        self.event_type = event_type
        self.publisher_schema = publisher_schema
        super().__init__(
            f"No schema registered for event type {event_type!r} "
            f"matches the publisher schema"
        )


class TransportError(EventPublisherError):
    """Network/IO failure before a broker response was received.

    Attributes:
        premature_close: True when the server closed the connection before
            delivering a response. Only this condition is retried.
    """

    def __init__(self, message: str, *, premature_close: bool = False) -> None:
        self.premature_close = premature_close
        super().__init__(message)


class ServerError(EventPublisherError):
    """Broker answered with a status that is neither success nor per-item."""

    def __init__(
        self,
        status_code: int,
        body: str = "",
        *,
        method: str = "POST",
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.method = method
        self.url = url
        super().__init__(f"{method} {url} failed with status {status_code}: {body}")

    @property
    def is_retryable(self) -> bool:
        """True for 5xx statuses; the broker committed nothing."""
        return _HTTP_SERVER_ERROR_MIN <= self.status_code < _HTTP_SERVER_ERROR_MAX


class BatchPartialFailure(EventPublisherError):
    """One attempt came back as multi-status or unprocessable.

    Carries every item response of that attempt, including submitted ones.
    Raised by the transport and consumed by the retry controller.
    """

    def __init__(
        self, status_code: int, batch_item_responses: list[ModelBatchItemResponse]
    ) -> None:
        self.status_code = status_code
        self.batch_item_responses = batch_item_responses
        super().__init__(
            f"Broker reported per-item outcomes (status {status_code}) "
            f"for {len(batch_item_responses)} events"
        )


class BatchValidationError(EventPublisherError):
    """Definitive list of events the broker did not accept, and why."""

    def __init__(self, batch_item_responses: list[ModelBatchItemResponse]) -> None:
        self.batch_item_responses = batch_item_responses
        errors = "\n".join(repr(response) for response in batch_item_responses)
        super().__init__(f"Error publishing events, errors are {errors}")

    @property
    def event_ids(self) -> list[UUID]:
        """Identifiers of the rejected events that the broker could identify."""
        return [r.eid for r in self.batch_item_responses if r.eid is not None]


__all__ = [
    "BatchPartialFailure",
    "BatchValidationError",
    "EventEncodingError",
    "EventPublisherError",
    "SchemaResolutionError",
    "ServerError",
    "TransportError",
]
