# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Exponential backoff configuration for publish retries."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelExponentialBackoffConfig(BaseModel):
    """Backoff parameters shared read-only by all publish calls.

    Attributes:
        initial_delay_seconds: Delay carried into the first backoff computation.
        backoff_factor: Growth factor applied per attempt.
        max_retries: Attempt count beyond which a failure becomes terminal.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    initial_delay_seconds: float = Field(default=1.0, gt=0.0)
    backoff_factor: float = Field(default=1.5, ge=1.0)
    max_retries: int = Field(default=5, ge=0)

    def calculate(self, count: int, current_delay_seconds: float) -> float:
        """Next delay given the attempt count and the previous delay.

        ``current * factor ** count``: the first backoff (count 0) waits the
        current delay unchanged, later ones grow geometrically.
        """
        return current_delay_seconds * (self.backoff_factor**count)


__all__ = ["ModelExponentialBackoffConfig"]
