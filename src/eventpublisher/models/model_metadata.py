# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Envelope metadata attached to DataChange and Business events."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ModelMetadata(BaseModel):
    """Event envelope metadata.

    Field names follow Python conventions; the wire names are kept as aliases
    (``partitionKeys`` and ``eventOwner`` are camelCase on the wire).
    Instances are immutable. Derive changed copies with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    eid: UUID = Field(default_factory=uuid4, description="Unique event identifier")
    occurred_at: AwareDatetime = Field(
        default_factory=_utc_now,
        description="When the event occurred",
    )
    event_type: str | None = Field(
        default=None, description="Event type name; filled at publish time"
    )
    received_at: AwareDatetime | None = Field(default=None)
    parent_eids: list[UUID] | None = Field(
        default=None, description="Identifiers of the events that caused this one"
    )
    flow_id: str | None = Field(default=None, description="Correlation/flow identifier")
    partition: str | None = Field(default=None)
    partition_compaction_key: str | None = Field(default=None)
    span_ctx: dict[str, str] | None = Field(
        default=None, description="Opaque trace/span context"
    )
    published_by: str | None = Field(default=None)
    partition_keys: list[str] | None = Field(default=None, alias="partitionKeys")
    event_owner: str | None = Field(default=None, alias="eventOwner")

    def to_wire(self) -> dict[str, object]:
        """JSON-ready dict using wire names; absent optional fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = ["ModelMetadata"]
