# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""
Batch event publishers.

``EventPublisher`` publishes JSON-encoded batches; ``AvroEventPublisher``
publishes Avro binary batches against a schema resolved up front. Both:

- Fill the event type into metadata that lacks it (``fill_metadata=True``)
- Send one batch per attempt with an ``X-Flow-ID`` correlation header
- Retry per RetryController: whole batch on 5xx or premature close, only the
  retryable subset on 207/422, with exponential backoff
- Raise BatchValidationError naming the unresolved events once the retry
  budget is spent

Usage:
    config = ModelPublisherConfig(base_url="https://broker.example.org")

    async with EventPublisher(config, token_provider=tokens) as publisher:
        await publisher.publish(
            "order.created",
            [ModelBusinessEvent(data={"order_id": "o-1"})],
        )
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from eventpublisher.classifier import recover_event_id
from eventpublisher.constants import CONTENT_TYPE_AVRO_BINARY, CONTENT_TYPE_JSON
from eventpublisher.enrichment import enrich_events
from eventpublisher.errors import EventEncodingError, SchemaResolutionError
from eventpublisher.models.model_event import Event
from eventpublisher.models.model_event_type_schema import ModelEventTypeSchema
from eventpublisher.models.model_publisher_config import ModelPublisherConfig
from eventpublisher.models.model_retry_state import ModelRetryState
from eventpublisher.retry_controller import RetryController
from eventpublisher.serialization.serializer_avro import AvroBatchSerializer
from eventpublisher.serialization.serializer_json import encode_json_batch
from eventpublisher.transport import BatchTransport

if TYPE_CHECKING:
    from types import TracebackType

    import httpx

    from eventpublisher.protocols import ProtocolSchemaResolver, ProtocolTokenProvider

logger = logging.getLogger(__name__)


class EventPublisher:
    """Publishes batches of events to one broker, JSON encoded."""

    content_type: str = CONTENT_TYPE_JSON

    def __init__(
        self,
        config: ModelPublisherConfig,
        *,
        token_provider: ProtocolTokenProvider | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the publisher.

        Args:
            config: Broker URL, timeouts and retry budget.
            token_provider: Optional bearer token source; requests are sent
                unauthenticated without one.
            client: Optional shared httpx.AsyncClient. The caller keeps
                ownership and must close it.
        """
        self._config = config
        self._transport = BatchTransport(
            config, token_provider=token_provider, client=client
        )

    @property
    def config(self) -> ModelPublisherConfig:
        return self._config

    @property
    def transport(self) -> BatchTransport:
        return self._transport

    async def connect(self) -> None:
        await self._transport.connect()

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> EventPublisher:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _encode(self, events: list[Event]) -> bytes:
        return encode_json_batch(events)

    async def _publish_batch(
        self,
        event_type: str,
        events: Iterable[Event],
        *,
        fill_metadata: bool,
        flow_id: str | None,
    ) -> ModelRetryState[Event]:
        batch = list(events)
        if fill_metadata:
            batch = enrich_events(batch, event_type)

        flow_id = flow_id or str(uuid4())

        async def send(pending: list[Event]) -> None:
            body = self._encode(pending)
            await self._transport.send_batch(
                event_type, body, self.content_type, flow_id
            )

        controller: RetryController[Event] = RetryController(
            send,
            backoff=self._config.backoff,
            event_id_of=recover_event_id,
            retry_enabled=self._config.failed_publish_event_retry,
        )
        state = await controller.run(batch)
        logger.debug(
            "Published %d events | event_type=%s | flow_id=%s | rejected=%d",
            len(batch),
            event_type,
            flow_id,
            len(state.rejected),
        )
        return state

    async def publish(
        self,
        event_type: str,
        events: Iterable[Event],
        *,
        fill_metadata: bool = True,
        flow_id: str | None = None,
    ) -> None:
        """
        Publish a batch of events of one event type.

        Args:
            event_type: Name of the event type all events belong to.
            events: DataChange, Business or Undefined events.
            fill_metadata: Default missing ``metadata.event_type`` to ``event_type``.
            flow_id: Correlation id for every attempt; random when omitted.

        Raises:
            BatchValidationError: Events remain unresolved after the retry budget.
            ServerError: Non-retryable status, or 5xx after the retry budget.
            TransportError: Connection failure.
            EventEncodingError: An event cannot be encoded.
        """
        await self._publish_batch(
            event_type,
            events,
            fill_metadata=fill_metadata,
            flow_id=flow_id,
        )


class AvroEventPublisher(EventPublisher):
    """Publishes Avro binary batches for a single event type.

    Build it with ``create`` so the schema is resolved before anything is sent.
    """

    content_type: str = CONTENT_TYPE_AVRO_BINARY

    def __init__(
        self,
        config: ModelPublisherConfig,
        schema: ModelEventTypeSchema,
        *,
        token_provider: ProtocolTokenProvider | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(config, token_provider=token_provider, client=client)
        self._serializer = AvroBatchSerializer(schema)

    @classmethod
    async def create(
        cls,
        config: ModelPublisherConfig,
        event_type: str,
        publisher_schema: str,
        schema_resolver: ProtocolSchemaResolver,
        **kwargs: Any,  # any-ok: forwarded to __init__
    ) -> AvroEventPublisher:
        """Resolve the registered schema matching ``publisher_schema``.

        Raises:
            SchemaResolutionError: No registered schema matches.
            TimeoutError: Resolution took longer than the configured timeout.
        """
        schema = await asyncio.wait_for(
            schema_resolver.fetch_matching_schema(event_type, publisher_schema),
            timeout=config.timeout_seconds,
        )
        if schema is None:
            logger.error(
                "No matching schema found | event_type=%s", event_type
            )
            raise SchemaResolutionError(event_type, publisher_schema)
        logger.info(
            "Resolved publishing schema | event_type=%s | version=%s",
            schema.event_type,
            schema.version,
        )
        return cls(config, schema, **kwargs)

    @property
    def schema(self) -> ModelEventTypeSchema:
        return self._serializer.schema

    def _encode(self, events: list[Event]) -> bytes:
        return self._serializer.encode_batch(events)

    async def publish(
        self,
        event_type: str,
        events: Iterable[Event],
        *,
        fill_metadata: bool = True,
        flow_id: str | None = None,
    ) -> None:
        """Publish under the resolved event type only.

        Raises:
            EventEncodingError: ``event_type`` is not the type the schema was
                resolved for.
        """
        if event_type != self.schema.event_type:
            raise EventEncodingError(
                f"Avro publisher for {self.schema.event_type!r} cannot publish "
                f"to {event_type!r}"
            )
        await super().publish(
            event_type, events, fill_metadata=fill_metadata, flow_id=flow_id
        )

    async def publish_avro(
        self,
        events: Iterable[Event],
        *,
        fill_metadata: bool = True,
        flow_id: str | None = None,
    ) -> None:
        """Publish DataChange/Business events under the resolved event type.

        Raises:
            EventEncodingError: An event lacks metadata or an event type, or its
                payload does not match the schema.
        """
        await self.publish(
            self.schema.event_type,
            events,
            fill_metadata=fill_metadata,
            flow_id=flow_id,
        )


def create_event_publisher(
    config: ModelPublisherConfig,
    **kwargs: Any,  # any-ok: factory forwarding arbitrary kwargs
) -> EventPublisher:
    """
    Create event publisher instance.

    Args:
        config: Publisher configuration
        **kwargs: Additional EventPublisher arguments

    Returns:
        Configured EventPublisher instance
    """
    return EventPublisher(config, **kwargs)


__all__ = [
    "AvroEventPublisher",
    "EventPublisher",
    "create_event_publisher",
]
