"""
Activation polling for taurine-browser.

A freshly created session starts out ``pending`` while the service
provisions a browser. ``ActivationPoller`` queries its status on a fixed
cadence until it becomes ``active`` or a deadline passes.

Example:
    poller = ActivationPoller(timeout=20.0, interval=1.0)
    session = await poller.wait(lambda: fetch_status(session_id))
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from taurine_browser.config.defaults import (
    DEFAULT_ACTIVATION_INTERVAL,
    DEFAULT_ACTIVATION_TIMEOUT,
)
from taurine_browser.errors import ActivationTimeoutError
from taurine_browser.models import Session

logger = logging.getLogger(__name__)

StatusFn = Callable[[], Awaitable[Session]]


class ActivationPoller:
    """Deadline-bounded status poller.

    Unlike the page waiters, a failing status query is not treated as
    "not active yet": the error propagates on the first occurrence.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_ACTIVATION_TIMEOUT,
        interval: float = DEFAULT_ACTIVATION_INTERVAL,
    ) -> None:
        """Initialize the poller.

        Args:
            timeout: Maximum time to wait in seconds.
            interval: Time between status queries in seconds.
        """
        if timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {timeout}")
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self.timeout = timeout
        self.interval = interval

    async def wait(self, status_fn: StatusFn) -> Session:
        """Poll ``status_fn`` until the session is active.

        Args:
            status_fn: Coroutine function returning the current Session.

        Returns:
            The first Session observed with status ``active``.

        Raises:
            ActivationTimeoutError: If the deadline passes first.
        """
        start_time = time.monotonic()
        last: Optional[Session] = None
        polls = 0

        while True:
            last = await status_fn()
            polls += 1
            elapsed = time.monotonic() - start_time

            if last.is_active:
                logger.debug(
                    f"Session {last.session_id} active after {polls} poll(s) "
                    f"({elapsed:.2f}s)"
                )
                return last

            logger.debug(
                f"Session {last.session_id} status {last.status!r} "
                f"(poll {polls}, {elapsed:.2f}s elapsed)"
            )

            if elapsed >= self.timeout:
                raise ActivationTimeoutError(elapsed, last.status, last.session_id)

            # Do not overshoot the deadline
            remaining = self.timeout - elapsed
            await asyncio.sleep(min(self.interval, remaining))


async def await_active(
    status_fn: StatusFn,
    timeout: float = DEFAULT_ACTIVATION_TIMEOUT,
    interval: float = DEFAULT_ACTIVATION_INTERVAL,
) -> Session:
    """Functional shortcut for ``ActivationPoller(timeout, interval).wait()``."""
    return await ActivationPoller(timeout, interval).wait(status_fn)


__all__ = ["ActivationPoller", "await_active", "StatusFn"]
