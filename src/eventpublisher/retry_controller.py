# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""
Retry controller for batch publishing.

Drives repeated publish attempts with exponential backoff until every event
is resolved or the retry budget is spent. Two kinds of retry:

    - Whole-batch retry: a 5xx status or a premature connection close means no
      item has a trustworthy outcome, so the pending batch is resent unchanged.
    - Classified retry: a 207/422 response carries a definitive per-item verdict,
      so only the retryable subset is resent.

FSM (EnumPublishState):

    ATTEMPTING ──ok──────────────▶ SUCCESS
        │ partial failure             ▲
        ▼                             │ nothing left to resend
    CLASSIFYING_FAILURE ──────────────┤
        │ retryable subset            │
        ▼                             │
    BACKOFF ◀── transient failure ── ATTEMPTING
        │ sleep
        └──▶ ATTEMPTING

    Any other failure, or a failure once ``attempt > max_retries``,
    goes to PERMANENT_FAILURE and is raised.

The loop is iterative; memory stays bounded however many retries are taken.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Generic, TypeVar
from uuid import UUID

from eventpublisher.classifier import classify_batch
from eventpublisher.enums.enum_publish_state import EnumPublishState
from eventpublisher.enums.enum_publishing_status import EnumPublishingStatus
from eventpublisher.errors import (
    BatchPartialFailure,
    BatchValidationError,
    EventPublisherError,
    ServerError,
    TransportError,
)
from eventpublisher.models.model_backoff_config import ModelExponentialBackoffConfig
from eventpublisher.models.model_batch_classification import ModelBatchClassification
from eventpublisher.models.model_batch_item_response import (
    ModelBatchItemResponse,
    dedup_batch_item_responses,
)
from eventpublisher.models.model_retry_state import ModelRetryState

logger = logging.getLogger(__name__)

EventT = TypeVar("EventT")

SendBatch = Callable[[list[EventT]], Awaitable[None]]
Sleep = Callable[[float], Awaitable[None]]


def is_transient(error: BaseException) -> bool:
    """True for failures after which the whole batch may be resent."""
    if isinstance(error, TransportError):
        return error.premature_close
    if isinstance(error, ServerError):
        return error.is_retryable
    return False


def _format_rejections(responses: Iterable[ModelBatchItemResponse]) -> str:
    return ",".join(
        f"eid: {r.eid if r.eid is not None else 'N/A'}, detail: {r.detail or 'N/A'}"
        for r in responses
    )


class RetryController(Generic[EventT]):
    """Runs one logical publish call to completion.

    A controller is cheap and holds no per-call state; ``run`` creates a fresh
    ModelRetryState each time, so one controller may serve concurrent calls.

    Example:
        ```python
        controller = RetryController(
            send,
            backoff=ModelExponentialBackoffConfig(max_retries=3),
            event_id_of=recover_event_id,
        )
        await controller.run(events)
        ```
    """

    def __init__(
        self,
        send: SendBatch[EventT],
        *,
        backoff: ModelExponentialBackoffConfig,
        event_id_of: Callable[[EventT], UUID | None],
        retry_enabled: bool = True,
        sleep: Sleep | None = None,
    ) -> None:
        """
        Args:
            send: Encodes and sends one batch. Returns on full success, raises
                BatchPartialFailure for per-item outcomes, other errors otherwise.
            backoff: Delay growth and retry budget.
            event_id_of: Recovers the identifier of an event for matching and logs.
            retry_enabled: When False a single attempt is made.
            sleep: Awaitable delay; defaults to ``asyncio.sleep``.
        """
        self._send = send
        self._backoff = backoff
        self._event_id_of = event_id_of
        self._retry_enabled = retry_enabled
        self._sleep = sleep

    def _event_ids(self, events: Iterable[EventT]) -> str:
        ids = (self._event_id_of(event) for event in events)
        return ",".join(str(eid) for eid in ids if eid is not None)

    async def run(self, events: Iterable[EventT]) -> ModelRetryState[EventT]:
        """Publish ``events`` until resolved.

        Returns:
            The final retry state (SUCCESS). Permanent rejections recorded along
            the way are in ``state.non_retryable``.

        Raises:
            BatchValidationError: Retry budget spent with events still unresolved,
                or a partial failure while retries are disabled.
            TransportError | ServerError: Non-transient failure, or a transient one
                after the budget is spent.
            asyncio.CancelledError: The call was cancelled; no further attempts.
        """
        state: ModelRetryState[EventT] = ModelRetryState(
            pending=list(events),
            delay_seconds=self._backoff.initial_delay_seconds,
        )

        failure: BatchPartialFailure | None = None
        try:
            if not self._retry_enabled:
                await self._attempt_once(state)
                return state

            while not state.state.is_terminal:
                if state.state is EnumPublishState.ATTEMPTING:
                    failure = await self._attempt(state)
                elif state.state is EnumPublishState.CLASSIFYING_FAILURE:
                    if failure is None:
                        raise RuntimeError("Classifying without a partial failure")
                    self._classify(state, failure)
                elif state.state is EnumPublishState.BACKOFF:
                    await self._backoff_wait(state)
        except asyncio.CancelledError:
            logger.info(
                "Event publish cancelled | attempt=%d | pending=%d",
                state.attempt,
                len(state.pending),
            )
            raise

        if state.attempt > 0:
            logger.info("Events published after %d retries", state.attempt)
        return state

    async def _attempt_once(self, state: ModelRetryState[EventT]) -> None:
        try:
            await self._send(state.pending)
        except BatchPartialFailure as failure:
            state.merge_non_retryable(failure.batch_item_responses)
            unresolved = [
                r for r in failure.batch_item_responses if not r.is_submitted
            ]
            if unresolved:
                state.state = EnumPublishState.PERMANENT_FAILURE
                raise BatchValidationError(unresolved) from failure
        state.state = EnumPublishState.SUCCESS

    async def _attempt(
        self, state: ModelRetryState[EventT]
    ) -> BatchPartialFailure | None:
        try:
            await self._send(state.pending)
        except BatchPartialFailure as failure:
            state.state = EnumPublishState.CLASSIFYING_FAILURE
            return failure
        except EventPublisherError as error:
            if not is_transient(error):
                state.state = EnumPublishState.PERMANENT_FAILURE
                raise
            if state.attempt > self._backoff.max_retries:
                logger.error(
                    "Max retry failed for publishing events, event id's still not "
                    "submitted are %s",
                    self._event_ids(state.pending),
                )
                state.state = EnumPublishState.PERMANENT_FAILURE
                raise
            state.last_error = error
            state.state = EnumPublishState.BACKOFF
            return None
        state.state = EnumPublishState.SUCCESS
        return None

    def _classify(
        self, state: ModelRetryState[EventT], failure: BatchPartialFailure
    ) -> None:
        responses = failure.batch_item_responses
        classification = classify_batch(state.pending, responses, self._event_id_of)
        state.merge_non_retryable(classification.non_retryable)

        rejected = classification.rejected
        if rejected:
            logger.error(
                "Events %s did not pass validation schema, not submitting",
                _format_rejections(rejected),
            )

        if state.attempt > self._backoff.max_retries:
            unresolved = self._unresolved(state, classification)
            if unresolved:
                logger.error(
                    "Max retry failed for publishing events, event id's still not "
                    "submitted are %s",
                    ",".join(str(r.eid) for r in unresolved if r.eid is not None),
                )
                state.state = EnumPublishState.PERMANENT_FAILURE
                raise BatchValidationError(unresolved) from failure

        if not classification.retryable_events:
            state.pending = []
            state.state = EnumPublishState.SUCCESS
            return

        state.pending = classification.retryable_events
        state.state = EnumPublishState.BACKOFF

    def _unresolved(
        self,
        state: ModelRetryState[EventT],
        classification: ModelBatchClassification[EventT],
    ) -> list[ModelBatchItemResponse]:
        """Rejections so far plus a verdict for every event still pending.

        Events the broker returned no verdict for get a synthetic aborted one.
        """
        responses = [*state.non_retryable, *classification.retryable_responses]
        answered = {r.eid for r in responses if r.eid is not None}
        for event in classification.retryable_events:
            eid = self._event_id_of(event)
            if eid is None or eid not in answered:
                responses.append(
                    ModelBatchItemResponse(
                        eid=eid,
                        publishing_status=EnumPublishingStatus.ABORTED,
                        detail="No verdict returned by the broker",
                    )
                )
        return [r for r in dedup_batch_item_responses(responses) if not r.is_submitted]

    async def _backoff_wait(self, state: ModelRetryState[EventT]) -> None:
        delay = self._backoff.calculate(state.attempt, state.delay_seconds)
        logger.warning(
            "Events with eid's %s failed to submit, retrying in %d millis",
            self._event_ids(state.pending),
            int(delay * 1000),
        )
        sleep = self._sleep or asyncio.sleep
        await sleep(delay)
        state.delay_seconds = delay
        state.attempt += 1
        state.state = EnumPublishState.ATTEMPTING


__all__ = ["RetryController", "SendBatch", "is_transient"]
