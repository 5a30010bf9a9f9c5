# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""JSON wire encoding of events.

Wire shapes:
    DataChange  -> {"data": ..., "data_type": ..., "data_op": "C|U|D|S", "metadata": {...}}
    Business    -> payload object with a top-level "metadata" key merged in
    Undefined   -> payload, unchanged

Decoding probes ``data_op`` first and ``metadata`` second; a value that has
neither decodes as Undefined.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError, to_json, to_jsonable_python

from eventpublisher.constants import DATA_OP_KEY, METADATA_KEY
from eventpublisher.errors import EventEncodingError
from eventpublisher.models.model_event import (
    Event,
    ModelBusinessEvent,
    ModelDataChangeEvent,
    ModelUndefinedEvent,
)
from eventpublisher.models.model_metadata import ModelMetadata

logger = logging.getLogger(__name__)


def payload_to_json(data: object) -> Any:  # any-ok: arbitrary JSON value
    """Render a payload as a JSON-compatible value (models use their aliases)."""
    try:
        return to_jsonable_python(data, by_alias=True)
    except PydanticSerializationError as exc:
        raise EventEncodingError(
            f"Payload of type {type(data).__name__} is not JSON serializable: {exc}"
        ) from exc


def event_to_json(event: Event) -> Any:  # any-ok: arbitrary JSON value
    """Map one event to its JSON wire value."""
    match event:
        case ModelDataChangeEvent():
            return {
                "data": payload_to_json(event.data),
                "data_type": event.data_type,
                DATA_OP_KEY: event.data_op.value,
                METADATA_KEY: event.metadata.to_wire(),
            }
        case ModelBusinessEvent():
            payload = payload_to_json(event.data)
            if not isinstance(payload, dict):
                raise EventEncodingError(
                    "Business event payload must encode to a JSON object, "
                    f"got {type(payload).__name__}"
                )
            return {**payload, METADATA_KEY: event.metadata.to_wire()}
        case ModelUndefinedEvent():
            return payload_to_json(event.data)
    raise EventEncodingError(f"Not an event variant: {type(event).__name__}")


def encode_json_batch(events: Iterable[Event]) -> bytes:
    """Encode a batch as a compact JSON array (the request body)."""
    return to_json([event_to_json(event) for event in events])


@lru_cache(maxsize=128)
def _payload_adapter(payload_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(payload_type)


def _decode_payload(raw: Any, payload_type: Any) -> Any:
    if payload_type is None:
        return raw
    return _payload_adapter(payload_type).validate_python(raw)


def event_from_json(obj: Any, payload_type: Any = None) -> Event:
    """Decode one JSON wire value into an event variant.

    Args:
        obj: Parsed JSON value.
        payload_type: Type the payload is validated into. ``None`` keeps the
            raw JSON value.

    Raises:
        pydantic.ValidationError: If a probed variant is malformed.
    """
    data_op = metadata = None
    if isinstance(obj, Mapping):
        data_op = obj.get(DATA_OP_KEY)
        metadata = obj.get(METADATA_KEY)

    if data_op is not None and metadata is not None:
        return ModelDataChangeEvent(
            data=_decode_payload(obj.get("data"), payload_type),
            data_type=obj.get("data_type"),
            data_op=data_op,
            metadata=ModelMetadata.model_validate(metadata),
        )
    if metadata is not None:
        payload = {key: value for key, value in obj.items() if key != METADATA_KEY}
        return ModelBusinessEvent(
            data=_decode_payload(payload, payload_type),
            metadata=ModelMetadata.model_validate(metadata),
        )
    # TODO(eventpublisher): surface objects carrying "data_op" without "metadata";
    # they currently fall through to Undefined like any other marker-less value.
    if data_op is not None:
        logger.debug("Event has data_op but no metadata, decoding as undefined")
    return ModelUndefinedEvent(data=_decode_payload(obj, payload_type))


def decode_json_batch(body: bytes | str, payload_type: Any = None) -> list[Event]:
    """Decode a JSON array body into events."""
    items = json.loads(body)
    if not isinstance(items, list):
        raise ValueError(f"Expected a JSON array of events, got {type(items).__name__}")
    return [event_from_json(item, payload_type) for item in items]


__all__ = [
    "decode_json_batch",
    "encode_json_batch",
    "event_from_json",
    "event_to_json",
    "payload_to_json",
]
