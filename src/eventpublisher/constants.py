# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""
Shared Constants for eventpublisher.

Wire-level names used by the transport and serializers.

Usage:
    from eventpublisher.constants import HEADER_FLOW_ID

    headers = {HEADER_FLOW_ID: flow_id}
"""

# =============================================================================
# HTTP
# =============================================================================

EVENTS_PATH_TEMPLATE: str = "/event-types/{name}/events"
"""Path of the broker ingestion endpoint for one event type."""

HEADER_FLOW_ID: str = "X-Flow-ID"
"""Correlation header sent with every publish request."""

HEADER_AUTHORIZATION: str = "Authorization"

CONTENT_TYPE_JSON: str = "application/json"
CONTENT_TYPE_AVRO_BINARY: str = "application/avro-binary"

HTTP_MULTI_STATUS: int = 207
HTTP_UNPROCESSABLE_ENTITY: int = 422

PARTIAL_FAILURE_STATUS_CODES: frozenset[int] = frozenset(
    {HTTP_MULTI_STATUS, HTTP_UNPROCESSABLE_ENTITY}
)
"""Statuses whose body is a per-item list of batch item responses."""

# =============================================================================
# Event envelope
# =============================================================================

METADATA_KEY: str = "metadata"
DATA_OP_KEY: str = "data_op"
UNDEFINED_EVENT_ID_KEY: str = "eid"
"""Field probed in Undefined payloads to recover an event identifier."""

__all__ = [
    "CONTENT_TYPE_AVRO_BINARY",
    "CONTENT_TYPE_JSON",
    "DATA_OP_KEY",
    "EVENTS_PATH_TEMPLATE",
    "HEADER_AUTHORIZATION",
    "HEADER_FLOW_ID",
    "HTTP_MULTI_STATUS",
    "HTTP_UNPROCESSABLE_ENTITY",
    "METADATA_KEY",
    "PARTIAL_FAILURE_STATUS_CODES",
    "UNDEFINED_EVENT_ID_KEY",
]
