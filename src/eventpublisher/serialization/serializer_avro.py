# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Avro binary encoding of event batches.

Each event becomes an envelope of (metadata record, payload bytes). The payload
is written with the event type schema resolved before publishing; the envelope
and batch use the fixed schemas in ``schema_publishing_batch``.

Only metadata-bearing events (DataChange, Business) can be binary encoded, and
their metadata must name the event type. Both conditions are caller errors and
raise EventEncodingError before any request is made.
"""

from __future__ import annotations

import io
import json
from collections.abc import Iterable, Mapping
from typing import Any

import fastavro
from pydantic import BaseModel

from eventpublisher.errors import EventEncodingError
from eventpublisher.models.model_event import Event, get_event_metadata
from eventpublisher.models.model_event_type_schema import ModelEventTypeSchema
from eventpublisher.models.model_metadata import ModelMetadata
from eventpublisher.serialization.schema_publishing_batch import (
    PARSED_PUBLISHING_BATCH_SCHEMA,
)

# fastavro reports datum/schema mismatches with these
_AVRO_WRITE_ERRORS = (ValueError, TypeError, KeyError, AttributeError)


def metadata_to_avro(metadata: ModelMetadata, schema_version: str) -> dict[str, Any]:
    """Build the envelope metadata record; optional fields only when present."""
    if not metadata.event_type:
        raise EventEncodingError(
            f"Event {metadata.eid} has no event type; it is required for binary encoding"
        )

    record: dict[str, Any] = {  # any-ok: avro record datum
        "eid": str(metadata.eid),
        "event_type": metadata.event_type,
        "occurred_at": metadata.occurred_at,
        "version": schema_version,
    }
    if metadata.parent_eids is not None:
        record["parent_eids"] = [str(eid) for eid in metadata.parent_eids]
    if metadata.published_by is not None:
        record["published_by"] = metadata.published_by
    if metadata.received_at is not None:
        record["received_at"] = metadata.received_at
    if metadata.partition is not None:
        record["partition"] = metadata.partition
    if metadata.flow_id is not None:
        record["flow_id"] = metadata.flow_id
    if metadata.span_ctx is not None:
        record["span_ctx"] = json.dumps(metadata.span_ctx)
    if metadata.partition_compaction_key is not None:
        record["partition_compaction_key"] = metadata.partition_compaction_key
    if metadata.partition_keys is not None:
        record["partition_keys"] = list(metadata.partition_keys)
    if metadata.event_owner is not None:
        record["event_owner"] = metadata.event_owner
    return record


def metadata_from_avro(record: Mapping[str, Any]) -> ModelMetadata:
    """Inverse of metadata_to_avro. The schema version is not part of ModelMetadata."""
    span_ctx = record.get("span_ctx")
    return ModelMetadata(
        eid=record["eid"],
        occurred_at=record["occurred_at"],
        event_type=record.get("event_type"),
        received_at=record.get("received_at"),
        parent_eids=record.get("parent_eids"),
        flow_id=record.get("flow_id"),
        partition=record.get("partition"),
        partition_compaction_key=record.get("partition_compaction_key"),
        span_ctx=json.loads(span_ctx) if span_ctx is not None else None,
        published_by=record.get("published_by"),
        partition_keys=record.get("partition_keys"),
        event_owner=record.get("event_owner"),
    )


def _payload_to_datum(data: object) -> Any:  # any-ok: avro datum
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True)
    if isinstance(data, Mapping):
        return dict(data)
    return data


class AvroBatchSerializer:
    """Encodes batches of events for one event type schema.

    Example:
        ```python
        serializer = AvroBatchSerializer(schema)
        body = serializer.encode_batch(events)
        ```
    """

    def __init__(self, schema: ModelEventTypeSchema) -> None:
        self._schema = schema
        self._payload_schema = schema.parsed_schema

    @property
    def schema(self) -> ModelEventTypeSchema:
        return self._schema

    def encode_payload(self, data: object) -> bytes:
        buffer = io.BytesIO()
        try:
            fastavro.schemaless_writer(
                buffer, self._payload_schema, _payload_to_datum(data)
            )
        except _AVRO_WRITE_ERRORS as exc:
            raise EventEncodingError(
                f"Payload does not match schema version {self._schema.version} "
                f"of {self._schema.event_type}: {exc}"
            ) from exc
        return buffer.getvalue()

    def encode_envelope(self, event: Event) -> dict[str, Any]:
        metadata = get_event_metadata(event)
        if metadata is None:
            raise EventEncodingError(
                "Undefined events carry no metadata and cannot be binary encoded"
            )
        return {
            "metadata": metadata_to_avro(metadata, self._schema.version),
            "payload": self.encode_payload(event.data),
        }

    def encode_batch(self, events: Iterable[Event]) -> bytes:
        """Encode events into one PublishingBatch body."""
        envelopes = [self.encode_envelope(event) for event in events]
        buffer = io.BytesIO()
        fastavro.schemaless_writer(
            buffer, PARSED_PUBLISHING_BATCH_SCHEMA, {"events": envelopes}
        )
        return buffer.getvalue()

    def decode_batch(self, body: bytes) -> list[tuple[ModelMetadata, Any]]:
        """Decode a PublishingBatch body into (metadata, payload) pairs."""
        batch = fastavro.schemaless_reader(
            io.BytesIO(body), PARSED_PUBLISHING_BATCH_SCHEMA
        )
        decoded: list[tuple[ModelMetadata, Any]] = []
        for envelope in batch["events"]:
            payload = fastavro.schemaless_reader(
                io.BytesIO(envelope["payload"]), self._payload_schema
            )
            decoded.append((metadata_from_avro(envelope["metadata"]), payload))
        return decoded


__all__ = [
    "AvroBatchSerializer",
    "metadata_from_avro",
    "metadata_to_avro",
]
