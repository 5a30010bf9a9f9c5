# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Async HTTP transport for the broker ingestion endpoint.

Sends one encoded batch per call and maps the outcome onto the publisher
error taxonomy:

    2xx (except 207)              -> returns None
    207 / 422                     -> BatchPartialFailure with parsed item responses
    5xx                           -> ServerError (retryable)
    other status                  -> ServerError (not retryable), body kept for diagnostics
    httpx.RemoteProtocolError     -> TransportError(premature_close=True)
    other httpx.TransportError    -> TransportError(premature_close=False)

The underlying httpx.AsyncClient is safe to share between concurrent publish
calls; this class holds no per-call state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from eventpublisher.constants import (
    EVENTS_PATH_TEMPLATE,
    HEADER_AUTHORIZATION,
    HEADER_FLOW_ID,
    PARTIAL_FAILURE_STATUS_CODES,
)
from eventpublisher.errors import BatchPartialFailure, ServerError, TransportError
from eventpublisher.models.model_batch_item_response import BatchItemResponseList
from eventpublisher.models.model_publisher_config import ModelPublisherConfig
from eventpublisher.utils.log_sanitizer import sanitize_headers, sanitize_logs

if TYPE_CHECKING:
    from types import TracebackType

    from eventpublisher.protocols import ProtocolTokenProvider

logger = logging.getLogger(__name__)


class BatchTransport:
    """Connection-pooled sender of encoded event batches.

    Supports both context manager and manual lifecycle management. When an
    ``httpx.AsyncClient`` is injected the caller keeps ownership of it and
    ``close()`` leaves it open.

    Example:
        ```python
        config = ModelPublisherConfig(base_url="https://broker.example.org")
        async with BatchTransport(config) as transport:
            await transport.send_batch(
                "order.created", body, "application/json", flow_id="abc"
            )
        ```
    """

    def __init__(
        self,
        config: ModelPublisherConfig,
        *,
        token_provider: ProtocolTokenProvider | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._token_provider = token_provider
        self._client = client
        self._owns_client = client is None

    @property
    def config(self) -> ModelPublisherConfig:
        return self._config

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def events_url(self, event_type: str) -> str:
        """Full URL of the ingestion endpoint for ``event_type``."""
        base = self._config.base_url.rstrip("/")
        return base + EVENTS_PATH_TEMPLATE.format(name=quote(event_type, safe=""))

    async def connect(self) -> None:
        """Open the connection pool. Safe to call multiple times (idempotent)."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.timeout_seconds),
            limits=httpx.Limits(
                max_keepalive_connections=self._config.max_keepalive_connections,
                max_connections=self._config.max_connections,
            ),
        )
        self._owns_client = True
        logger.debug("BatchTransport connected to %s", self._config.base_url)

    async def close(self) -> None:
        """Close the connection pool. Safe to call multiple times (idempotent)."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.debug("BatchTransport connection closed")

    async def __aenter__(self) -> BatchTransport:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _headers(self, content_type: str, flow_id: str) -> dict[str, str]:
        headers = {HEADER_FLOW_ID: flow_id, "Content-Type": content_type}
        if self._token_provider is not None:
            token = await self._token_provider.get_token()
            headers[HEADER_AUTHORIZATION] = f"Bearer {token}"
        return headers

    async def send_batch(
        self,
        event_type: str,
        body: bytes,
        content_type: str,
        flow_id: str,
    ) -> None:
        """POST one encoded batch.

        Raises:
            BatchPartialFailure: Broker answered 207 or 422 with item responses.
            ServerError: Any other non-success status.
            TransportError: No response was received.
        """
        if self._client is None:
            await self.connect()
        if self._client is None:
            raise TransportError("Client is not connected")

        url = self.events_url(event_type)
        headers = await self._headers(content_type, flow_id)
        logger.debug(
            "POST %s | headers=%s | bytes=%d", url, sanitize_headers(headers), len(body)
        )

        try:
            response = await self._client.post(url, content=body, headers=headers)
        except httpx.RemoteProtocolError as exc:
            raise TransportError(
                f"The server closed the connection before delivering a response "
                f"for POST {url}: {exc}",
                premature_close=True,
            ) from exc
        except httpx.TransportError as exc:
            raise TransportError(f"POST {url} failed: {exc}") from exc

        status = response.status_code
        if status in PARTIAL_FAILURE_STATUS_CODES:
            try:
                items = BatchItemResponseList.validate_json(response.content)
            except ValidationError as exc:
                raise ServerError(
                    status, sanitize_logs(response.text), url=url
                ) from exc
            raise BatchPartialFailure(status, items)

        if response.is_success:
            logger.debug("POST %s accepted | status=%d | flow_id=%s", url, status, flow_id)
            return

        raise ServerError(status, sanitize_logs(response.text), url=url)


__all__ = ["BatchTransport"]
