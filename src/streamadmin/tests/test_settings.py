"""Tests for environment-based configuration."""

from __future__ import annotations

import pytest

from streamadmin.foundation.config import StreamAdminSettings, clear_settings_cache, get_settings
from streamadmin.runtime.pagination import ThrottlePolicy
from streamadmin.runtime.retry import RetryPolicy


@pytest.fixture(autouse=True)
def fresh_settings() -> object:
    """Reset cached settings around each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


def test_defaults() -> None:
    settings = StreamAdminSettings()
    assert settings.retry.max_attempts == 6
    assert settings.retry.base_delay == 0.2
    assert settings.throttle.stream_interval == 0.2
    assert settings.throttle.tag_interval == 0.2
    assert settings.throttle.consumer_interval == 0.0
    assert settings.pagination.stream_chunk_size == 10
    assert settings.pagination.tag_chunk_size == 50
    assert settings.pagination.consumer_chunk_size == 10
    assert settings.logging.format == "console"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STREAMADMIN_RETRY_MAX_ATTEMPTS", "3")
    monkeypatch.setenv("STREAMADMIN_THROTTLE_TAG_INTERVAL", "1.5")
    monkeypatch.setenv("STREAMADMIN_PAGINATION_STREAM_CHUNK_SIZE", "100")
    monkeypatch.setenv("STREAMADMIN_LOG_FORMAT", "json")

    settings = get_settings()

    assert settings.retry.max_attempts == 3
    assert settings.throttle.tag_interval == 1.5
    assert settings.pagination.stream_chunk_size == 100
    assert settings.logging.format == "json"


def test_invalid_values_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STREAMADMIN_THROTTLE_STREAM_INTERVAL", "-1")
    with pytest.raises(ValueError):
        StreamAdminSettings()


def test_settings_are_cached() -> None:
    assert get_settings() is get_settings()


def test_policies_from_settings() -> None:
    settings = StreamAdminSettings()
    assert ThrottlePolicy.streams(settings.throttle).min_interval == 0.2
    assert ThrottlePolicy.consumers(settings.throttle).is_disabled
    assert RetryPolicy.from_settings(settings.retry).max_attempts == 6


def test_throttle_remaining() -> None:
    policy = ThrottlePolicy(min_interval=0.2)
    assert policy.remaining(None, 5.0) == 0.0
    assert policy.remaining(10.0, 10.05) == pytest.approx(0.15)
    assert policy.remaining(10.0, 11.0) == 0.0
