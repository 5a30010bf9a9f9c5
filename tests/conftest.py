"""
Pytest configuration and fixtures for eventpublisher tests.

Shared fixtures: publisher configuration, sample events of every variant, and
an httpx.AsyncClient factory backed by httpx.MockTransport so no test touches
the network.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

import httpx
import pytest

from eventpublisher.enums import EnumDataOperation
from eventpublisher.models import (
    ModelBusinessEvent,
    ModelDataChangeEvent,
    ModelExponentialBackoffConfig,
    ModelMetadata,
    ModelPublisherConfig,
    ModelUndefinedEvent,
)

BROKER_URL = "https://broker.test"

# =========================================================================
# Basic Sample Data Fixtures
# =========================================================================


@pytest.fixture
def correlation_id() -> str:
    """Provide a fixed flow id for correlation header assertions."""
    return "550e8400-e29b-41d4-a716-446655440000"


@pytest.fixture
def occurred_at() -> datetime:
    """Millisecond-precision timestamp (survives Avro timestamp-millis)."""
    return datetime(2024, 5, 1, 12, 30, 15, 123000, tzinfo=UTC)


@pytest.fixture
def sample_metadata(occurred_at: datetime) -> ModelMetadata:
    return ModelMetadata(
        eid=UUID("aaaaaaaa-0000-4000-8000-000000000001"),
        occurred_at=occurred_at,
        flow_id="flow-1",
    )


@pytest.fixture
def business_event(sample_metadata: ModelMetadata) -> ModelBusinessEvent:
    return ModelBusinessEvent(
        data={"order_id": "o-1", "amount": 42},
        metadata=sample_metadata,
    )


@pytest.fixture
def data_change_event(occurred_at: datetime) -> ModelDataChangeEvent:
    return ModelDataChangeEvent(
        data={"order_id": "o-2", "amount": 7},
        data_type="order",
        data_op=EnumDataOperation.UPDATE,
        metadata=ModelMetadata(
            eid=UUID("aaaaaaaa-0000-4000-8000-000000000002"),
            occurred_at=occurred_at,
        ),
    )


@pytest.fixture
def undefined_event() -> ModelUndefinedEvent:
    return ModelUndefinedEvent(
        data={"eid": "aaaaaaaa-0000-4000-8000-000000000003", "free": "form"}
    )


# =========================================================================
# Configuration Fixtures
# =========================================================================


@pytest.fixture
def publisher_config() -> ModelPublisherConfig:
    """Publisher configuration with a short retry budget."""
    return ModelPublisherConfig(
        base_url=BROKER_URL,
        timeout_seconds=5.0,
        backoff=ModelExponentialBackoffConfig(
            initial_delay_seconds=1.0,
            backoff_factor=2.0,
            max_retries=2,
        ),
    )


# =========================================================================
# HTTP Mock Fixtures
# =========================================================================


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """Requests seen by clients built with ``mock_client_factory``."""
    return []


@pytest.fixture
def mock_client_factory(
    recorded_requests: list[httpx.Request],
) -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """
    Build an httpx.AsyncClient whose requests are answered by ``handler``.

    Every request is appended to ``recorded_requests`` before the handler runs.
    """

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> httpx.AsyncClient:
        def record(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return httpx.AsyncClient(transport=httpx.MockTransport(record))

    return factory
