# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Unit tests for publisher configuration and environment loading."""

import pytest
from pydantic import ValidationError

from eventpublisher.models import (
    ModelExponentialBackoffConfig,
    ModelPublisherConfig,
    PublisherSettings,
)

ENV_VARS = [
    "EVENT_PUBLISHER_BASE_URL",
    "EVENT_PUBLISHER_TIMEOUT_SECONDS",
    "EVENT_PUBLISHER_FAILED_PUBLISH_EVENT_RETRY",
    "EVENT_PUBLISHER_INITIAL_DELAY_SECONDS",
    "EVENT_PUBLISHER_BACKOFF_FACTOR",
    "EVENT_PUBLISHER_MAX_RETRIES",
    "EVENT_PUBLISHER_MAX_CONNECTIONS",
    "EVENT_PUBLISHER_MAX_KEEPALIVE_CONNECTIONS",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.unit
class TestModelPublisherConfig:
    def test_defaults(self):
        config = ModelPublisherConfig(base_url="https://broker.test")

        assert config.timeout_seconds == 30.0
        assert config.failed_publish_event_retry is True
        assert config.backoff == ModelExponentialBackoffConfig()
        assert config.max_connections == 10
        assert config.max_keepalive_connections == 5

    def test_frozen(self):
        config = ModelPublisherConfig(base_url="https://broker.test")
        with pytest.raises(ValidationError):
            config.timeout_seconds = 1.0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"base_url": ""},
            {"base_url": "https://b", "timeout_seconds": 0},
            {"base_url": "https://b", "max_connections": 0},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValidationError):
            ModelPublisherConfig(**kwargs)


@pytest.mark.unit
class TestPublisherSettings:
    def test_from_environment(self, clean_env):
        clean_env.setenv("EVENT_PUBLISHER_BASE_URL", "https://broker.env")
        clean_env.setenv("EVENT_PUBLISHER_FAILED_PUBLISH_EVENT_RETRY", "false")
        clean_env.setenv("EVENT_PUBLISHER_MAX_RETRIES", "2")
        clean_env.setenv("EVENT_PUBLISHER_BACKOFF_FACTOR", "3")

        config = PublisherSettings().to_config()

        assert config.base_url == "https://broker.env"
        assert config.failed_publish_event_retry is False
        assert config.backoff.max_retries == 2
        assert config.backoff.backoff_factor == 3.0
        assert config.backoff.initial_delay_seconds == 1.0

    def test_base_url_required(self, clean_env):
        with pytest.raises(ValidationError):
            PublisherSettings()

    def test_invalid_environment_value(self, clean_env):
        clean_env.setenv("EVENT_PUBLISHER_BASE_URL", "https://broker.env")
        clean_env.setenv("EVENT_PUBLISHER_MAX_RETRIES", "-1")

        with pytest.raises(ValidationError):
            PublisherSettings()

    def test_explicit_values_override_environment(self, clean_env):
        clean_env.setenv("EVENT_PUBLISHER_BASE_URL", "https://broker.env")

        settings = PublisherSettings(base_url="https://explicit", timeout_seconds=2.5)

        assert settings.to_config().base_url == "https://explicit"
        assert settings.to_config().timeout_seconds == 2.5
