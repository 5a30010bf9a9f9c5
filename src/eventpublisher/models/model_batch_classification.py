# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Result of classifying one attempt's batch item responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from eventpublisher.models.model_batch_item_response import ModelBatchItemResponse

EventT = TypeVar("EventT")


@dataclass(frozen=True)
class ModelBatchClassification(Generic[EventT]):
    """Partition of one attempt's outcome.

    Attributes:
        accepted: Responses with status submitted.
        non_retryable: Permanent outcomes (submitted, or failed while validating).
        retryable_responses: Failed/aborted at any other step, or unidentified.
        retryable_events: Events to resend, in original batch order.
    """

    accepted: list[ModelBatchItemResponse] = field(default_factory=list)
    non_retryable: list[ModelBatchItemResponse] = field(default_factory=list)
    retryable_responses: list[ModelBatchItemResponse] = field(default_factory=list)
    retryable_events: list[EventT] = field(default_factory=list)

    @property
    def rejected(self) -> list[ModelBatchItemResponse]:
        """Permanent failures: non-retryable responses that were not submitted."""
        return [r for r in self.non_retryable if not r.is_submitted]


__all__ = ["ModelBatchClassification"]
