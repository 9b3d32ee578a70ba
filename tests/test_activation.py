"""
Tests for the activation poller.

Long deadlines are exercised against a fake clock: the poller's sleeps
advance the clock instead of waiting.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from taurine_browser import activation
from taurine_browser.activation import ActivationPoller, await_active
from taurine_browser.errors import ActivationTimeoutError, NotFoundError
from taurine_browser.models import Session


def make_session(status: str, session_id: str = "sess123") -> Session:
    return Session(session_id=session_id, status=status)


class FakeClock:
    """Monotonic clock advanced only by sleeps."""

    def __init__(self) -> None:
        self.now = 1000.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(activation, "time", SimpleNamespace(monotonic=fake.monotonic))
    monkeypatch.setattr(activation, "asyncio", SimpleNamespace(sleep=fake.sleep))
    return fake


class TestActivationPoller:
    """Tests for ActivationPoller."""

    @pytest.mark.asyncio
    async def test_already_active(self, clock):
        """Test a single poll when the first status is active."""
        status_fn = AsyncMock(return_value=make_session("active"))
        session = await ActivationPoller().wait(status_fn)
        assert session.is_active
        assert status_fn.await_count == 1
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_becomes_active(self, clock):
        """Test polling until the status flips."""
        status_fn = AsyncMock(side_effect=[
            make_session("pending"),
            make_session("pending"),
            make_session("active"),
        ])
        session = await ActivationPoller(timeout=20.0, interval=1.0).wait(status_fn)
        assert session.status == "active"
        assert status_fn.await_count == 3
        assert clock.sleeps == [1.0, 1.0]

    @pytest.mark.asyncio
    async def test_times_out_after_deadline(self, clock):
        """Test an always-pending session times out at ~20s."""
        status_fn = AsyncMock(return_value=make_session("pending"))
        start = clock.now

        with pytest.raises(ActivationTimeoutError) as exc_info:
            await ActivationPoller(timeout=20.0, interval=1.0).wait(status_fn)

        err = exc_info.value
        assert err.last_status == "pending"
        assert err.session_id == "sess123"
        assert 20.0 <= err.elapsed <= 21.0
        assert clock.now - start == pytest.approx(20.0)
        # One poll at t=0 and one after each of the 20 one-second sleeps
        assert status_fn.await_count == 21

    @pytest.mark.asyncio
    async def test_last_sleep_does_not_overshoot(self, clock):
        """Test the final sleep is clipped to the remaining time."""
        status_fn = AsyncMock(return_value=make_session("pending"))
        with pytest.raises(ActivationTimeoutError):
            await ActivationPoller(timeout=2.5, interval=1.0).wait(status_fn)
        assert clock.sleeps == [1.0, 1.0, 0.5]

    @pytest.mark.asyncio
    async def test_reports_last_status(self, clock):
        """Test the timeout carries the most recent status."""
        status_fn = AsyncMock(side_effect=[
            make_session("pending"),
            make_session("provisioning"),
        ])
        with pytest.raises(ActivationTimeoutError) as exc_info:
            await ActivationPoller(timeout=1.0, interval=1.0).wait(status_fn)
        assert exc_info.value.last_status == "provisioning"

    @pytest.mark.asyncio
    async def test_status_error_propagates(self, clock):
        """Test a failing status query is not treated as not-yet-active."""
        status_fn = AsyncMock(side_effect=[
            make_session("pending"),
            NotFoundError("gone", status_code=404),
        ])
        with pytest.raises(NotFoundError):
            await ActivationPoller().wait(status_fn)
        assert status_fn.await_count == 2

    @pytest.mark.asyncio
    async def test_zero_timeout_polls_once(self, clock):
        """Test at least one poll happens even with no time budget."""
        status_fn = AsyncMock(return_value=make_session("pending"))
        with pytest.raises(ActivationTimeoutError):
            await ActivationPoller(timeout=0.0).wait(status_fn)
        assert status_fn.await_count == 1

    def test_invalid_arguments(self):
        """Test argument validation."""
        with pytest.raises(ValueError):
            ActivationPoller(timeout=-1)
        with pytest.raises(ValueError):
            ActivationPoller(interval=0)


class TestAwaitActive:
    """Tests for the functional shortcut."""

    @pytest.mark.asyncio
    async def test_defaults_to_twenty_seconds(self, clock):
        """Test the default deadline."""
        status_fn = AsyncMock(return_value=make_session("pending"))
        with pytest.raises(ActivationTimeoutError) as exc_info:
            await await_active(status_fn)
        assert exc_info.value.elapsed == pytest.approx(20.0)

    @pytest.mark.asyncio
    async def test_real_clock_short_deadline(self):
        """Test with the real event loop and a tiny deadline."""
        status_fn = AsyncMock(return_value=make_session("pending"))
        with pytest.raises(ActivationTimeoutError):
            await await_active(status_fn, timeout=0.05, interval=0.01)
        assert status_fn.await_count >= 2
