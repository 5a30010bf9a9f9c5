# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Avro schemas of the binary publishing envelope.

A request body is one ``PublishingBatch`` record: an array of ``Envelope``
records, each holding a ``Metadata`` record and the payload bytes written with
the event type's own schema.
"""

from __future__ import annotations

from typing import Any

import fastavro

_TIMESTAMP_MILLIS: dict[str, str] = {"type": "long", "logicalType": "timestamp-millis"}
_UUID_STRING: dict[str, str] = {"type": "string", "logicalType": "uuid"}


def _optional(avro_type: Any, name: str) -> dict[str, Any]:  # any-ok: avro type
    return {"name": name, "type": ["null", avro_type], "default": None}


METADATA_SCHEMA: dict[str, Any] = {  # any-ok: avro schema document
    "type": "record",
    "name": "Metadata",
    "fields": [
        {"name": "occurred_at", "type": _TIMESTAMP_MILLIS},
        {"name": "eid", "type": _UUID_STRING},
        _optional("string", "flow_id"),
        _optional(_TIMESTAMP_MILLIS, "received_at"),
        {"name": "version", "type": "string"},
        _optional("string", "published_by"),
        {"name": "event_type", "type": "string"},
        _optional("string", "partition"),
        _optional({"type": "array", "items": "string"}, "partition_keys"),
        _optional("string", "partition_compaction_key"),
        _optional({"type": "array", "items": _UUID_STRING}, "parent_eids"),
        _optional("string", "span_ctx"),
        _optional("string", "event_owner"),
    ],
}

ENVELOPE_SCHEMA: dict[str, Any] = {  # any-ok: avro schema document
    "type": "record",
    "name": "Envelope",
    "fields": [
        {"name": "metadata", "type": METADATA_SCHEMA},
        {"name": "payload", "type": "bytes"},
    ],
}

PUBLISHING_BATCH_SCHEMA: dict[str, Any] = {  # any-ok: avro schema document
    "type": "record",
    "name": "PublishingBatch",
    "namespace": "eventpublisher.avro",
    "fields": [
        {"name": "events", "type": {"type": "array", "items": ENVELOPE_SCHEMA}},
    ],
}

PARSED_PUBLISHING_BATCH_SCHEMA = fastavro.parse_schema(PUBLISHING_BATCH_SCHEMA)

__all__ = [
    "ENVELOPE_SCHEMA",
    "METADATA_SCHEMA",
    "PARSED_PUBLISHING_BATCH_SCHEMA",
    "PUBLISHING_BATCH_SCHEMA",
]
