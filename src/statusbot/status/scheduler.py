"""Rate limiting for in-progress status updates.

Test shards report progress in bursts, and GitHub rate limits status writes.
``UpdateScheduler`` runs every submitted request through two independent
policies sharing the same downstream write:

* a throttle that writes immediately at most once per window, so some update
  lands regularly during a long burst;
* a debounce that writes the latest request once the burst has been quiet
  for a while, so the final state is always delivered.

A single isolated submit therefore produces two identical writes. GitHub
overwrites statuses by (context, sha), which makes that harmless.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from statusbot.github.models import StatusRequest


logger = logging.getLogger(__name__)

Dispatch = Callable[[StatusRequest], Awaitable[Any]]


@dataclass
class SchedulerState:
    """Mutable delivery state, touched only from the event loop thread."""

    last_dispatched_at: float | None = None
    pending_request: StatusRequest | None = None
    pending_timer: asyncio.TimerHandle | None = None


class _Policy:
    """Shared fire-and-forget plumbing for the two policies."""

    name = "policy"

    def __init__(self, dispatch: Dispatch, state: SchedulerState | None = None):
        self._dispatch = dispatch
        self.state = state or SchedulerState()
        self._tasks: set[asyncio.Task] = set()
        self._disposed = False

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _spawn(self, request: StatusRequest) -> None:
        task = asyncio.get_running_loop().create_task(self._run(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, request: StatusRequest) -> None:
        try:
            await self._dispatch(request)
        except Exception:
            # Nobody awaits a scheduled write, so this is the only report
            logger.exception(f"Scheduled status write ({self.name}) failed for {request.state.value}")

    async def drain(self) -> None:
        """Wait for all writes already fired by this policy."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class Throttle(_Policy):
    """Fires at most once per ``window`` seconds; calls inside the window are dropped."""

    name = "throttle"

    def __init__(
        self,
        dispatch: Dispatch,
        window: float,
        state: SchedulerState | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(dispatch, state)
        self.window = window
        self._clock = clock

    def submit(self, request: StatusRequest) -> bool:
        """Fire ``request`` unless the window is still open.

        Returns:
            True if a write was fired
        """
        if self._disposed:
            return False

        now = self._clock()
        last = self.state.last_dispatched_at
        if last is not None and now - last < self.window:
            return False

        self._spawn(request)
        self.state.last_dispatched_at = now
        return True

    def dispose(self) -> None:
        self._disposed = True


class Debounce(_Policy):
    """Fires the latest request once ``delay`` seconds pass without a new one."""

    name = "debounce"

    def __init__(self, dispatch: Dispatch, delay: float, state: SchedulerState | None = None):
        super().__init__(dispatch, state)
        self.delay = delay

    @property
    def pending(self) -> StatusRequest | None:
        return self.state.pending_request

    def submit(self, request: StatusRequest) -> None:
        if self._disposed:
            return

        # Raises outside a running loop, before any state changes
        loop = asyncio.get_running_loop()
        self.state.pending_request = request
        self._cancel_timer()
        self.state.pending_timer = loop.call_later(self.delay, self._fire)

    def _cancel_timer(self) -> None:
        if self.state.pending_timer is not None:
            self.state.pending_timer.cancel()
            self.state.pending_timer = None

    def _fire(self) -> None:
        request = self.state.pending_request
        self.state.pending_request = None
        self.state.pending_timer = None
        if request is not None:
            self._spawn(request)

    async def flush(self) -> None:
        """Fire any pending request now and wait for in-flight writes."""
        if self.state.pending_request is not None:
            self._cancel_timer()
            self._fire()
        await self.drain()

    def dispose(self) -> None:
        """Drop the pending request and stop accepting new ones."""
        self._disposed = True
        self._cancel_timer()
        self.state.pending_request = None


class UpdateScheduler:
    """Throttle + debounce combinator over a single status write."""

    def __init__(
        self,
        dispatch: Dispatch,
        throttle_ms: int = 5000,
        debounce_ms: int = 2500,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.state = SchedulerState()
        self.throttle = Throttle(dispatch, throttle_ms / 1000, self.state, clock=clock)
        self.debounce = Debounce(dispatch, debounce_ms / 1000, self.state)

    def submit(self, request: StatusRequest) -> None:
        """Queue ``request`` for delivery. Never blocks; must run on the event loop."""
        self.debounce.submit(request)
        self.throttle.submit(request)

    @property
    def in_flight(self) -> int:
        return self.throttle.in_flight + self.debounce.in_flight

    async def flush(self) -> None:
        await self.debounce.flush()
        await self.throttle.drain()

    async def drain(self) -> None:
        """Wait for fired writes without firing the pending debounce request."""
        await self.throttle.drain()
        await self.debounce.drain()

    def dispose(self) -> None:
        self.debounce.dispose()
        self.throttle.dispose()
