# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Fill required envelope fields before encoding.

Only the event type name is filled, and only when the caller left it unset.
Undefined events carry no metadata slot and pass through unmodified.
"""

from __future__ import annotations

from collections.abc import Iterable

from eventpublisher.models.model_event import Event, get_event_metadata


def enrich_event(event: Event, target_event_type_name: str) -> Event:
    """Return the event with ``metadata.event_type`` defaulted to the target name."""
    metadata = get_event_metadata(event)
    if metadata is None or metadata.event_type is not None:
        return event
    return event.model_copy(
        update={
            "metadata": metadata.model_copy(
                update={"event_type": target_event_type_name}
            )
        }
    )


def enrich_events(events: Iterable[Event], target_event_type_name: str) -> list[Event]:
    return [enrich_event(event, target_event_type_name) for event in events]


__all__ = ["enrich_event", "enrich_events"]
