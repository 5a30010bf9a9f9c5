# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Publisher configuration.

``PublisherSettings`` loads from the environment; ``ModelPublisherConfig`` is the
frozen value publishers consume.

Environment variables:
    EVENT_PUBLISHER_BASE_URL: broker base URL (required when using settings)
    EVENT_PUBLISHER_TIMEOUT_SECONDS: float (default 30.0)
    EVENT_PUBLISHER_FAILED_PUBLISH_EVENT_RETRY: bool (default true)
    EVENT_PUBLISHER_INITIAL_DELAY_SECONDS: float (default 1.0)
    EVENT_PUBLISHER_BACKOFF_FACTOR: float (default 1.5)
    EVENT_PUBLISHER_MAX_RETRIES: int (default 5)
    EVENT_PUBLISHER_MAX_CONNECTIONS: int (default 10)
    EVENT_PUBLISHER_MAX_KEEPALIVE_CONNECTIONS: int (default 5)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from eventpublisher.models.model_backoff_config import ModelExponentialBackoffConfig


class ModelPublisherConfig(BaseModel):
    """Configuration for the batch publisher HTTP client.

    Attributes:
        base_url: Broker base URL; the events path is appended to it.
        timeout_seconds: HTTP request timeout in seconds.
        failed_publish_event_retry: When False every publish is a single attempt.
        backoff: Retry budget and delay growth.
        max_connections: Connection pool size.
        max_keepalive_connections: Idle connections kept in the pool.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    base_url: str = Field(..., min_length=1)
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    failed_publish_event_retry: bool = Field(default=True)
    backoff: ModelExponentialBackoffConfig = Field(
        default_factory=ModelExponentialBackoffConfig
    )
    max_connections: int = Field(default=10, ge=1)
    max_keepalive_connections: int = Field(default=5, ge=0)


class PublisherSettings(BaseSettings):
    """Pydantic Settings for the publisher, loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="EVENT_PUBLISHER_",
        extra="ignore",
    )

    base_url: str = Field(..., min_length=1, description="Broker base URL")
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    failed_publish_event_retry: bool = Field(default=True)
    initial_delay_seconds: float = Field(default=1.0, gt=0.0)
    backoff_factor: float = Field(default=1.5, ge=1.0)
    max_retries: int = Field(default=5, ge=0)
    max_connections: int = Field(default=10, ge=1)
    max_keepalive_connections: int = Field(default=5, ge=0)

    def to_config(self) -> ModelPublisherConfig:
        """Convert settings to a frozen ModelPublisherConfig instance."""
        return ModelPublisherConfig(
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            failed_publish_event_retry=self.failed_publish_event_retry,
            backoff=ModelExponentialBackoffConfig(
                initial_delay_seconds=self.initial_delay_seconds,
                backoff_factor=self.backoff_factor,
                max_retries=self.max_retries,
            ),
            max_connections=self.max_connections,
            max_keepalive_connections=self.max_keepalive_connections,
        )


__all__ = ["ModelPublisherConfig", "PublisherSettings"]
