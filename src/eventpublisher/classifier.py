# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Batch response classification.

Partitions one attempt's per-item responses into accepted, non-retryable and
retryable, and selects the events to resend. Pure and deterministic.

Rules:
    - submitted                      -> accepted and non-retryable
    - failed/aborted at validating   -> non-retryable (resubmitting cannot help)
    - anything else                  -> retryable

An event is resent when its identifier matches a retryable response, when the
broker returned no verdict for it, or when no identifier can be recovered from
it at all.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar
from uuid import UUID

from eventpublisher.constants import UNDEFINED_EVENT_ID_KEY
from eventpublisher.models.model_batch_classification import ModelBatchClassification
from eventpublisher.models.model_batch_item_response import ModelBatchItemResponse
from eventpublisher.models.model_event import Event, get_event_metadata
from eventpublisher.serialization.serializer_json import payload_to_json

EventT = TypeVar("EventT")


def _find_first_by_key(value: Any, key: str) -> Any:  # any-ok: JSON traversal
    """Depth-first, pre-order search for the first value stored under ``key``."""
    if isinstance(value, dict):
        for name, child in value.items():
            if name == key:
                return child
            found = _find_first_by_key(child, key)
            if found is not None:
                return found
    elif isinstance(value, list):
        for child in value:
            found = _find_first_by_key(child, key)
            if found is not None:
                return found
    return None


def recover_event_id(event: Event) -> UUID | None:
    """Identifier of an event as the broker will report it.

    DataChange and Business events carry it in metadata. For Undefined events
    the encoded payload is probed for a field literally named ``eid``.
    """
    metadata = get_event_metadata(event)
    if metadata is not None:
        return metadata.eid

    candidate = _find_first_by_key(payload_to_json(event.data), UNDEFINED_EVENT_ID_KEY)
    if candidate is None:
        return None
    try:
        return UUID(str(candidate))
    except ValueError:
        return None


def classify_batch(
    events: Sequence[EventT],
    responses: Sequence[ModelBatchItemResponse],
    event_id_of: Callable[[EventT], UUID | None],
) -> ModelBatchClassification[EventT]:
    """Partition responses and pick the events to resend.

    Args:
        events: Events submitted in the attempt, in batch order.
        responses: Broker item responses for that attempt.
        event_id_of: Recovers the identifier of an event (None if unknown).

    Returns:
        ModelBatchClassification with retryable events in original order.
    """
    accepted = [r for r in responses if r.is_submitted]
    non_retryable = [r for r in responses if r.is_permanent]
    retryable_responses = [r for r in responses if not r.is_permanent]

    retry_ids = {r.eid for r in retryable_responses if r.eid is not None}
    verdict_ids = {r.eid for r in responses if r.eid is not None}

    retryable_events: list[EventT] = []
    for event in events:
        eid = event_id_of(event)
        if eid is None or eid in retry_ids or eid not in verdict_ids:
            retryable_events.append(event)

    return ModelBatchClassification(
        accepted=accepted,
        non_retryable=non_retryable,
        retryable_responses=retryable_responses,
        retryable_events=retryable_events,
    )


__all__ = ["classify_batch", "recover_event_id"]
