# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Per-item verdict returned by the broker for a multi-status publish."""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from eventpublisher.enums.enum_publishing_status import EnumPublishingStatus
from eventpublisher.enums.enum_publishing_step import EnumPublishingStep


class ModelBatchItemResponse(BaseModel):
    """Broker verdict on one submitted event.

    Attributes:
        eid: Event identifier; absent when the broker could not parse the event.
        publishing_status: submitted, failed or aborted.
        step: Pipeline step at which the item stopped.
        detail: Human-readable explanation.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    eid: UUID | None = Field(default=None)
    publishing_status: EnumPublishingStatus
    step: EnumPublishingStep | None = Field(default=None)
    detail: str | None = Field(default=None)

    @property
    def is_submitted(self) -> bool:
        return self.publishing_status is EnumPublishingStatus.SUBMITTED

    @property
    def is_permanent(self) -> bool:
        """True when resubmitting the event cannot change the verdict."""
        return self.step is EnumPublishingStep.VALIDATING or self.is_submitted


def dedup_batch_item_responses(
    responses: Iterable[ModelBatchItemResponse],
) -> list[ModelBatchItemResponse]:
    """Deduplicate by event identifier, keeping first position and latest verdict.

    Responses without an eid cannot be matched across attempts and are kept
    unless structurally identical.
    """
    merged: dict[object, ModelBatchItemResponse] = {}
    for response in responses:
        key = response.eid if response.eid is not None else response
        merged[key] = response
    return list(merged.values())


BatchItemResponseList = TypeAdapter(list[ModelBatchItemResponse])
"""Validates the JSON array body of a 207/422 response."""


__all__ = [
    "BatchItemResponseList",
    "ModelBatchItemResponse",
    "dedup_batch_item_responses",
]
