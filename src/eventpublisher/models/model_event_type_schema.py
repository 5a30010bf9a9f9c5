# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Resolved Avro schema for publishing one event type in binary form."""

from __future__ import annotations

import json
from functools import cached_property
from typing import Any

import fastavro
from pydantic import BaseModel, ConfigDict, Field


class ModelEventTypeSchema(BaseModel):
    """Schema text plus the version token the broker registered it under.

    Attributes:
        event_type: Name of the event type the schema belongs to.
        schema_text: Avro schema JSON text for the event payload.
        version: Schema version token written into every envelope.
    """

    model_config = ConfigDict(frozen=True, ignored_types=(cached_property,))

    event_type: str = Field(..., min_length=1)
    schema_text: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)

    @cached_property
    def parsed_schema(self) -> Any:  # any-ok: fastavro parsed schema is untyped
        """fastavro-parsed payload schema; raises on malformed schema text."""
        return fastavro.parse_schema(json.loads(self.schema_text))


__all__ = ["ModelEventTypeSchema"]
