# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""
Unit tests for EventPublisher and AvroEventPublisher.

Tests cover:
- JSON batch publishing end to end through a mocked broker
- Metadata enrichment on publish (and opting out of it)
- Flow id propagation across retry attempts
- Resending only retryable events after a multi-status response
- Avro publisher creation against a schema resolver
- Factory function

All tests use httpx.MockTransport - NO real broker connection.
"""

import asyncio
import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from eventpublisher import (
    AvroEventPublisher,
    BatchValidationError,
    EventEncodingError,
    EventPublisher,
    ModelEventTypeSchema,
    ModelPublisherConfig,
    SchemaResolutionError,
    create_event_publisher,
)
from eventpublisher.constants import CONTENT_TYPE_AVRO_BINARY
from eventpublisher.serialization.serializer_avro import AvroBatchSerializer

ORDER_SCHEMA_TEXT = json.dumps(
    {
        "type": "record",
        "name": "Order",
        "fields": [
            {"name": "order_id", "type": "string"},
            {"name": "amount", "type": "int"},
        ],
    }
)


@pytest.fixture
def order_schema() -> ModelEventTypeSchema:
    return ModelEventTypeSchema(
        event_type="order.created", schema_text=ORDER_SCHEMA_TEXT, version="7"
    )


@pytest.fixture
def no_sleep():
    """Skip real backoff delays."""
    with patch(
        "eventpublisher.retry_controller.asyncio.sleep", new_callable=AsyncMock
    ) as mocked:
        yield mocked


def _item(eid, status, step) -> dict[str, str]:
    return {"eid": str(eid), "publishing_status": status, "step": step}


# ============================================================================
# EventPublisher
# ============================================================================


@pytest.mark.unit
class TestEventPublisherInitialization:
    def test_initialization(self, publisher_config):
        publisher = EventPublisher(publisher_config)

        assert publisher.config is publisher_config
        assert publisher.content_type == "application/json"
        assert publisher.transport.is_connected is False

    def test_factory(self, publisher_config):
        publisher = create_event_publisher(publisher_config)

        assert isinstance(publisher, EventPublisher)
        assert publisher.config is publisher_config

    @pytest.mark.asyncio
    async def test_context_manager(self, publisher_config):
        async with EventPublisher(publisher_config) as publisher:
            assert publisher.transport.is_connected is True

        assert publisher.transport.is_connected is False


@pytest.mark.unit
class TestPublish:
    @pytest.mark.asyncio
    async def test_publish_json_batch(
        self,
        publisher_config,
        mock_client_factory,
        recorded_requests,
        business_event,
        data_change_event,
        undefined_event,
        correlation_id,
    ):
        client = mock_client_factory(lambda request: httpx.Response(200))
        publisher = EventPublisher(publisher_config, client=client)

        await publisher.publish(
            "order.created",
            [business_event, data_change_event, undefined_event],
            flow_id=correlation_id,
        )

        request = recorded_requests[0]
        body = json.loads(request.content)
        assert request.url.path == "/event-types/order.created/events"
        assert request.headers["X-Flow-ID"] == correlation_id
        assert body[0]["order_id"] == "o-1"
        assert body[0]["metadata"]["event_type"] == "order.created"
        assert body[1]["data_op"] == "U"
        assert body[1]["metadata"]["event_type"] == "order.created"
        assert body[2] == undefined_event.data

    @pytest.mark.asyncio
    async def test_publish_without_fill_metadata(
        self, publisher_config, mock_client_factory, recorded_requests, business_event
    ):
        client = mock_client_factory(lambda request: httpx.Response(200))
        publisher = EventPublisher(publisher_config, client=client)

        await publisher.publish("order.created", [business_event], fill_metadata=False)

        body = json.loads(recorded_requests[0].content)
        assert "event_type" not in body[0]["metadata"]

    @pytest.mark.asyncio
    async def test_generated_flow_id_reused_across_attempts(
        self, publisher_config, mock_client_factory, recorded_requests, business_event, no_sleep
    ):
        responses = iter([httpx.Response(503), httpx.Response(200)])
        client = mock_client_factory(lambda request: next(responses))
        publisher = EventPublisher(publisher_config, client=client)

        await publisher.publish("order.created", [business_event])

        flow_ids = {request.headers["X-Flow-ID"] for request in recorded_requests}
        assert len(recorded_requests) == 2
        assert len(flow_ids) == 1
        no_sleep.assert_awaited_once_with(1.0)

    @pytest.mark.asyncio
    async def test_resends_only_retryable_events(
        self,
        publisher_config,
        mock_client_factory,
        recorded_requests,
        business_event,
        data_change_event,
        no_sleep,
    ):
        first = [
            _item(business_event.metadata.eid, "submitted", "none"),
            _item(data_change_event.metadata.eid, "aborted", "publishing"),
        ]
        responses = iter(
            [httpx.Response(207, content=json.dumps(first)), httpx.Response(200)]
        )
        client = mock_client_factory(lambda request: next(responses))
        publisher = EventPublisher(publisher_config, client=client)

        await publisher.publish("order.created", [business_event, data_change_event])

        resent = json.loads(recorded_requests[1].content)
        assert len(resent) == 1
        assert resent[0]["metadata"]["eid"] == str(data_change_event.metadata.eid)

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_validation_error(
        self, publisher_config, mock_client_factory, recorded_requests, business_event, no_sleep
    ):
        items = [_item(business_event.metadata.eid, "failed", "publishing")]
        client = mock_client_factory(
            lambda request: httpx.Response(207, content=json.dumps(items))
        )
        publisher = EventPublisher(publisher_config, client=client)

        with pytest.raises(BatchValidationError) as exc_info:
            await publisher.publish("order.created", [business_event])

        assert exc_info.value.event_ids == [business_event.metadata.eid]
        assert len(recorded_requests) == publisher_config.backoff.max_retries + 2

    @pytest.mark.asyncio
    async def test_retry_disabled(
        self, mock_client_factory, recorded_requests, business_event
    ):
        config = ModelPublisherConfig(
            base_url="https://broker.test", failed_publish_event_retry=False
        )
        items = [_item(business_event.metadata.eid, "aborted", "publishing")]
        client = mock_client_factory(
            lambda request: httpx.Response(207, content=json.dumps(items))
        )
        publisher = EventPublisher(config, client=client)

        with pytest.raises(BatchValidationError):
            await publisher.publish("order.created", [business_event])

        assert len(recorded_requests) == 1

    @pytest.mark.asyncio
    async def test_concurrent_publishes(
        self, publisher_config, mock_client_factory, recorded_requests, business_event
    ):
        client = mock_client_factory(lambda request: httpx.Response(200))
        publisher = EventPublisher(publisher_config, client=client)

        await asyncio.gather(
            publisher.publish("a", [business_event], flow_id="f-a"),
            publisher.publish("b", [business_event], flow_id="f-b"),
        )

        paths = {request.url.path: request.headers["X-Flow-ID"] for request in recorded_requests}
        assert paths == {"/event-types/a/events": "f-a", "/event-types/b/events": "f-b"}


# ============================================================================
# AvroEventPublisher
# ============================================================================


@pytest.mark.unit
class TestAvroEventPublisher:
    @pytest.mark.asyncio
    async def test_create_resolves_schema(self, publisher_config, order_schema):
        resolver = AsyncMock()
        resolver.fetch_matching_schema.return_value = order_schema

        publisher = await AvroEventPublisher.create(
            publisher_config, "order.created", ORDER_SCHEMA_TEXT, resolver
        )

        resolver.fetch_matching_schema.assert_awaited_once_with(
            "order.created", ORDER_SCHEMA_TEXT
        )
        assert publisher.schema is order_schema
        assert publisher.content_type == CONTENT_TYPE_AVRO_BINARY

    @pytest.mark.asyncio
    async def test_create_without_matching_schema(
        self, publisher_config, mock_client_factory, recorded_requests
    ):
        resolver = AsyncMock()
        resolver.fetch_matching_schema.return_value = None

        with pytest.raises(SchemaResolutionError) as exc_info:
            await AvroEventPublisher.create(
                publisher_config,
                "order.created",
                ORDER_SCHEMA_TEXT,
                resolver,
                client=mock_client_factory(lambda request: httpx.Response(200)),
            )

        assert exc_info.value.event_type == "order.created"
        assert recorded_requests == []

    @pytest.mark.asyncio
    async def test_publish_avro(
        self,
        publisher_config,
        order_schema,
        mock_client_factory,
        recorded_requests,
        business_event,
    ):
        client = mock_client_factory(lambda request: httpx.Response(200))
        publisher = AvroEventPublisher(publisher_config, order_schema, client=client)

        await publisher.publish_avro([business_event], flow_id="f-1")

        request = recorded_requests[0]
        assert request.url.path == "/event-types/order.created/events"
        assert request.headers["Content-Type"] == CONTENT_TYPE_AVRO_BINARY
        [(metadata, payload)] = AvroBatchSerializer(order_schema).decode_batch(
            request.content
        )
        assert metadata.eid == business_event.metadata.eid
        assert metadata.event_type == "order.created"
        assert payload == {"order_id": "o-1", "amount": 42}

    @pytest.mark.asyncio
    async def test_publish_avro_rejects_undefined_before_sending(
        self,
        publisher_config,
        order_schema,
        mock_client_factory,
        recorded_requests,
        undefined_event,
    ):
        client = mock_client_factory(lambda request: httpx.Response(200))
        publisher = AvroEventPublisher(publisher_config, order_schema, client=client)

        with pytest.raises(EventEncodingError):
            await publisher.publish_avro([undefined_event])

        assert recorded_requests == []

    @pytest.mark.asyncio
    async def test_publish_to_other_event_type_rejected(
        self,
        publisher_config,
        order_schema,
        mock_client_factory,
        recorded_requests,
        business_event,
    ):
        client = mock_client_factory(lambda request: httpx.Response(200))
        publisher = AvroEventPublisher(publisher_config, order_schema, client=client)

        with pytest.raises(EventEncodingError, match="order.cancelled"):
            await publisher.publish("order.cancelled", [business_event])

        assert recorded_requests == []

    @pytest.mark.asyncio
    async def test_publish_to_resolved_event_type(
        self,
        publisher_config,
        order_schema,
        mock_client_factory,
        recorded_requests,
        business_event,
    ):
        client = mock_client_factory(lambda request: httpx.Response(200))
        publisher = AvroEventPublisher(publisher_config, order_schema, client=client)

        await publisher.publish("order.created", [business_event])

        assert recorded_requests[0].url.path == "/event-types/order.created/events"
