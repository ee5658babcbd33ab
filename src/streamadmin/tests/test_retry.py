"""Tests for backoff strategies, RetryPolicy and execute_with_retry."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from streamadmin.foundation.config import RetrySettings
from streamadmin.foundation.errors import LimitExceededException
from streamadmin.runtime.retry import (
    DEFAULT_RETRY,
    NO_RETRY,
    Backoff,
    ConstantBackoff,
    ExponentialBackoff,
    RetryPolicy,
    execute_with_retry,
)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# ─────────────────────────────────────────────────────────────────────────────
# Backoff
# ─────────────────────────────────────────────────────────────────────────────


def test_exponential_growth() -> None:
    backoff = ExponentialBackoff(base=0.2, multiplier=2.0)
    assert [backoff.delay(i) for i in range(5)] == pytest.approx([0.2, 0.4, 0.8, 1.6, 3.2])


def test_exponential_cap() -> None:
    backoff = ExponentialBackoff(base=1.0, multiplier=10.0, max_delay=5.0)
    assert backoff.delay(0) == 1.0
    assert backoff.delay(3) == 5.0


def test_exponential_jitter_bounds() -> None:
    backoff = ExponentialBackoff(base=1.0, multiplier=2.0, jitter=True)
    for _ in range(50):
        assert 1.0 <= backoff.delay(1) <= 3.0


def test_constant_backoff() -> None:
    assert {ConstantBackoff(0.3).delay(i) for i in range(4)} == {0.3}


def test_strategies_satisfy_protocol() -> None:
    assert isinstance(ExponentialBackoff(), Backoff)
    assert isinstance(ConstantBackoff(), Backoff)


# ─────────────────────────────────────────────────────────────────────────────
# Policy
# ─────────────────────────────────────────────────────────────────────────────


class TestRetryPolicy:

    def test_defaults_match_control_plane_backoff(self) -> None:
        assert DEFAULT_RETRY.max_attempts == 6
        assert DEFAULT_RETRY.max_retries == 5
        assert DEFAULT_RETRY.get_delay(0) == pytest.approx(0.2)

    def test_only_rate_limiting_is_retried_by_default(self) -> None:
        policy = RetryPolicy(max_attempts=3)
        assert policy.should_retry(LimitExceededException("list_tags_for_stream"), 0)
        assert not policy.should_retry(PermissionError("denied"), 0)

    def test_attempt_budget(self) -> None:
        policy = RetryPolicy(max_attempts=3)
        err = LimitExceededException("list_streams")
        assert policy.should_retry(err, 1)
        assert not policy.should_retry(err, 2)

    def test_no_retry(self) -> None:
        assert NO_RETRY.is_disabled
        assert not NO_RETRY.should_retry(LimitExceededException("list_streams"), 0)

    def test_max_attempts_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            RetryPolicy(max_attempts=0)

    def test_policy_is_frozen(self) -> None:
        with pytest.raises(ValidationError):
            DEFAULT_RETRY.max_attempts = 2  # type: ignore[misc]

    def test_from_settings(self) -> None:
        policy = RetryPolicy.from_settings(RetrySettings(max_attempts=4, base_delay=0.5, multiplier=3.0))
        assert policy.max_attempts == 4
        assert [policy.get_delay(i) for i in range(3)] == pytest.approx([0.5, 1.5, 4.5])


# ─────────────────────────────────────────────────────────────────────────────
# Execution
# ─────────────────────────────────────────────────────────────────────────────


class TestExecuteWithRetry:

    @pytest.mark.asyncio
    async def test_returns_first_success(self) -> None:
        sleep = RecordingSleep()
        calls = 0

        async def op() -> str:
            nonlocal calls
            calls += 1
            if calls < 3:
                raise LimitExceededException("describe_limits")
            return "ok"

        assert await execute_with_retry(op, RetryPolicy(max_attempts=5), "describe_limits", sleep=sleep) == "ok"
        assert calls == 3
        assert sleep.delays == pytest.approx([0.2, 0.4])

    @pytest.mark.asyncio
    async def test_non_retryable_propagates_without_sleep(self) -> None:
        sleep = RecordingSleep()

        async def op() -> str:
            raise KeyError("StreamDescription")

        with pytest.raises(KeyError):
            await execute_with_retry(op, DEFAULT_RETRY, "describe_stream", sleep=sleep)
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_exhaustion_reraises_same_error(self) -> None:
        sleep = RecordingSleep()
        raised: list[Exception] = []

        async def op() -> str:
            raised.append(err := LimitExceededException("list_streams"))
            raise err

        with pytest.raises(LimitExceededException) as excinfo:
            await execute_with_retry(op, RetryPolicy(max_attempts=2), "list_streams", sleep=sleep)

        assert len(raised) == 2
        assert excinfo.value is raised[-1]
        assert len(sleep.delays) == 1
