# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Protocols for the collaborators a publisher depends on.

Token acquisition and schema lookup are owned by the host application. The
publisher only needs these narrow async interfaces, which lets tests pass
simple fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from eventpublisher.models.model_event_type_schema import ModelEventTypeSchema


@runtime_checkable
class ProtocolTokenProvider(Protocol):
    """Yields a bearer credential for each publish request."""

    async def get_token(self) -> str:
        """Return the raw token, without the ``Bearer`` prefix."""
        ...


@runtime_checkable
class ProtocolSchemaResolver(Protocol):
    """Resolves the registered Avro schema matching a publisher schema."""

    async def fetch_matching_schema(
        self,
        event_type: str,
        publisher_schema: str,
    ) -> ModelEventTypeSchema | None:
        """Return the matching registered schema and its version, or None.

        Args:
            event_type: Name of the event type to look up.
            publisher_schema: Avro schema text the publisher writes payloads with.
        """
        ...


__all__ = [
    "ProtocolSchemaResolver",
    "ProtocolTokenProvider",
]
