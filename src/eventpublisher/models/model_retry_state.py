# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Accumulator carried across the attempts of one publish call."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from eventpublisher.enums.enum_publish_state import EnumPublishState
from eventpublisher.models.model_batch_item_response import (
    ModelBatchItemResponse,
    dedup_batch_item_responses,
)

EventT = TypeVar("EventT")


@dataclass
class ModelRetryState(Generic[EventT]):
    """Mutable state owned by a single RetryController.run() call.

    Never shared between concurrent publish calls.

    Attributes:
        pending: Events to send on the next attempt.
        delay_seconds: Delay used by the most recent backoff.
        attempt: Number of backoffs taken so far.
        state: Current FSM state.
        non_retryable: Permanent verdicts seen so far, one per event identifier.
        last_error: Most recent transient failure that triggered a whole-batch retry.
    """

    pending: list[EventT]
    delay_seconds: float
    attempt: int = 0
    state: EnumPublishState = EnumPublishState.ATTEMPTING
    non_retryable: list[ModelBatchItemResponse] = field(default_factory=list)
    last_error: BaseException | None = None

    def merge_non_retryable(self, responses: list[ModelBatchItemResponse]) -> None:
        """Fold responses into the accumulator, deduplicated by event identifier."""
        self.non_retryable = dedup_batch_item_responses([*self.non_retryable, *responses])

    @property
    def rejected(self) -> list[ModelBatchItemResponse]:
        """Accumulated permanent failures (non-retryable and not submitted)."""
        return [r for r in self.non_retryable if not r.is_submitted]


__all__ = ["ModelRetryState"]
