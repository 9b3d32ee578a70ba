"""
Tests for the retry/backoff controller.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from taurine_browser.errors import (
    AuthError,
    RetryExhaustedError,
    TransportError,
)
from taurine_browser.retry import (
    BackoffStrategy,
    RetryConfig,
    retry,
    run_with_retry,
    with_retry,
)


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff delays instead of sleeping."""
    recorded: list[float] = []

    async def fake_sleep(delay, *args, **kwargs):
        recorded.append(delay)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    return recorded


class TestRetryConfig:
    """Tests for delay calculation."""

    def test_linear_is_attempt_times_base(self):
        """Test the default linear strategy."""
        config = RetryConfig(base_delay=1.5)
        assert [config.calculate_delay(n) for n in (1, 2, 3)] == [1.5, 3.0, 4.5]

    def test_fixed(self):
        """Test fixed delays."""
        config = RetryConfig(base_delay=2.0, backoff=BackoffStrategy.FIXED)
        assert [config.calculate_delay(n) for n in (1, 2, 3)] == [2.0, 2.0, 2.0]

    def test_exponential(self):
        """Test exponential delays."""
        config = RetryConfig(base_delay=1.0, backoff=BackoffStrategy.EXPONENTIAL)
        assert [config.calculate_delay(n) for n in (1, 2, 3, 4)] == [1.0, 2.0, 4.0, 8.0]

    def test_jitter_within_bounds(self):
        """Test jittered delays stay within +/-25% of linear."""
        config = RetryConfig(base_delay=1.0, backoff=BackoffStrategy.JITTER)
        for _ in range(50):
            assert 1.5 <= config.calculate_delay(2) <= 2.5

    def test_max_delay_cap(self):
        """Test delays never exceed max_delay."""
        config = RetryConfig(base_delay=10.0, max_delay=15.0)
        assert config.calculate_delay(3) == 15.0

    def test_invalid_attempts(self):
        """Test max_attempts must be at least one."""
        with pytest.raises(ValueError):
            RetryConfig(max_attempts=0)


class TestWithRetry:
    """Tests for with_retry."""

    @pytest.mark.asyncio
    async def test_first_attempt_succeeds(self, sleeps):
        """Test no retry or sleep on success."""
        op = AsyncMock(return_value="ok")
        assert await with_retry(op) == "ok"
        assert op.await_count == 1
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_succeeds_after_failures(self, sleeps):
        """Test recovery on the third attempt with incremental delays."""
        op = AsyncMock(side_effect=[TransportError("a"), TransportError("b"), "ok"])
        assert await with_retry(op, max_attempts=3, base_delay=1.0) == "ok"
        assert op.await_count == 3
        assert sleeps == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_exhaustion(self, sleeps):
        """Test RetryExhaustedError after max_attempts failures."""
        errors = [TransportError(f"fail {i}", status_code=503) for i in range(3)]
        op = AsyncMock(side_effect=errors)

        with pytest.raises(RetryExhaustedError) as exc_info:
            await with_retry(op, max_attempts=3, base_delay=0.5)

        assert op.await_count == 3
        assert exc_info.value.attempts == 3
        assert exc_info.value.last_error is errors[-1]
        assert exc_info.value.__cause__ is errors[-1]
        # No sleep after the final attempt
        assert sleeps == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_single_attempt(self, sleeps):
        """Test max_attempts=1 never sleeps."""
        op = AsyncMock(side_effect=TransportError("nope"))
        with pytest.raises(RetryExhaustedError):
            await with_retry(op, max_attempts=1)
        assert op.await_count == 1
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_non_matching_error_propagates(self, sleeps):
        """Test errors outside retry_on are not retried or wrapped."""
        op = AsyncMock(side_effect=AuthError("bad key", status_code=401))
        with pytest.raises(AuthError):
            await with_retry(op, retry_on=(KeyError,), max_attempts=3)
        assert op.await_count == 1
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_cancellation_not_retried(self, sleeps):
        """Test CancelledError propagates immediately."""
        op = AsyncMock(side_effect=asyncio.CancelledError())
        with pytest.raises(asyncio.CancelledError):
            await with_retry(op, max_attempts=3)
        assert op.await_count == 1

    @pytest.mark.asyncio
    async def test_on_retry_callback(self, sleeps):
        """Test the callback receives attempt, error and delay."""
        calls = []
        op = AsyncMock(side_effect=[TransportError("x"), "ok"])
        await with_retry(
            op,
            base_delay=2.0,
            on_retry=lambda attempt, err, delay: calls.append((attempt, str(err), delay)),
        )
        assert calls == [(1, "x", 2.0)]


class TestRetryDecorator:
    """Tests for the retry decorator and run_with_retry."""

    @pytest.mark.asyncio
    async def test_decorator(self, sleeps):
        """Test decorated coroutine is retried with its arguments."""
        calls = []

        @retry(max_attempts=2, base_delay=0.1)
        async def flaky(value):
            calls.append(value)
            if len(calls) < 2:
                raise TransportError("flaky")
            return value * 2

        assert await flaky(21) == 42
        assert calls == [21, 21]
        assert flaky.__name__ == "flaky"

    @pytest.mark.asyncio
    async def test_run_with_retry_config(self, sleeps):
        """Test run_with_retry honours the config."""
        op = AsyncMock(side_effect=TransportError("down"))
        config = RetryConfig(max_attempts=4, base_delay=1.0, backoff=BackoffStrategy.FIXED)
        with pytest.raises(RetryExhaustedError):
            await run_with_retry(op, config)
        assert op.await_count == 4
        assert sleeps == [1.0, 1.0, 1.0]
