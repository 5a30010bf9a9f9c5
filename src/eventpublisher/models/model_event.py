# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Event tagged union.

Three closed variants share a payload of a caller-defined type:

    - ModelDataChangeEvent: mutation of an external entity.
    - ModelBusinessEvent: domain occurrence; metadata merged into the payload on the wire.
    - ModelUndefinedEvent: raw payload without a guaranteed envelope.

``get_event_metadata`` is the only place that matches on the variant to reach
metadata. No other module should branch on the concrete event class for that.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from eventpublisher.enums.enum_data_operation import EnumDataOperation
from eventpublisher.models.model_metadata import ModelMetadata

PayloadT = TypeVar("PayloadT")


class ModelDataChangeEvent(BaseModel, Generic[PayloadT]):
    """Mutation (create/update/delete/snapshot) of an external entity."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: PayloadT
    data_type: str = Field(..., description="Type of the changed entity")
    data_op: EnumDataOperation
    metadata: ModelMetadata


class ModelBusinessEvent(BaseModel, Generic[PayloadT]):
    """Domain/business occurrence."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: PayloadT
    metadata: ModelMetadata = Field(default_factory=ModelMetadata)


class ModelUndefinedEvent(BaseModel, Generic[PayloadT]):
    """Raw payload; any identifier inside it is only recoverable heuristically."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: PayloadT


Event = ModelDataChangeEvent | ModelBusinessEvent | ModelUndefinedEvent


def get_event_metadata(event: Event) -> ModelMetadata | None:
    """Return the envelope metadata of an event, or None for Undefined events."""
    match event:
        case ModelDataChangeEvent() | ModelBusinessEvent():
            return event.metadata
        case ModelUndefinedEvent():
            return None
    raise TypeError(f"Not an event variant: {type(event).__name__}")


__all__ = [
    "Event",
    "ModelBusinessEvent",
    "ModelDataChangeEvent",
    "ModelUndefinedEvent",
    "PayloadT",
    "get_event_metadata",
]
