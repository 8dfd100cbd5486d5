"""
Clock abstraction for detector timers.

Detectors never touch ambient timers directly. They receive a Clock that
provides the current instant (integer milliseconds) and one-shot,
cancellable callbacks.

Cancellation is synchronous: once a TimerHandle is cancelled its callback
will never run, even if the backend already queued it for dispatch.
"""

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], None]


class TimerHandle:
    """
    A pending one-shot callback.

    Attributes:
        deadline: Absolute instant (ms) the callback is due
        cancelled: True once cancelled (the callback will not run)
        fired: True once the callback has run
    """

    def __init__(self, deadline: int, callback: TimerCallback) -> None:
        self.deadline = deadline
        self.cancelled = False
        self.fired = False
        self._callback = callback
        self._backend: Any = None

    @property
    def active(self) -> bool:
        """True while the callback may still run."""
        return not self.cancelled and not self.fired

    def cancel(self) -> None:
        """Invalidate the handle. Safe to call more than once."""
        if self.cancelled:
            return
        self.cancelled = True
        if self._backend is not None:
            self._backend.cancel()
            self._backend = None

    def _run(self) -> None:
        # The flag check is what makes a late dispatch harmless.
        if not self.active:
            return
        self.fired = True
        self._backend = None
        self._callback()

    def __repr__(self) -> str:
        status = "cancelled" if self.cancelled else ("fired" if self.fired else "pending")
        return f"<TimerHandle deadline={self.deadline} {status}>"


class Clock(ABC):
    """
    Abstract time source and one-shot scheduler.

    Implementations:
    - ManualClock: advanced by hand (tests, simulations)
    - AsyncioClock: backed by an asyncio event loop
    """

    @abstractmethod
    def now(self) -> int:
        """
        Get the current instant.

        Returns:
            Monotonic time in milliseconds
        """
        pass

    @abstractmethod
    def after(self, delay_ms: int, callback: TimerCallback) -> TimerHandle:
        """
        Schedule a one-shot callback.

        Args:
            delay_ms: Delay from now in milliseconds (negative is treated as 0)
            callback: Called with no arguments when the delay elapses

        Returns:
            Handle that can be passed to cancel()
        """
        pass

    def cancel(self, handle: Optional[TimerHandle]) -> None:
        """
        Cancel a pending callback.

        Args:
            handle: Handle returned by after(); None is ignored
        """
        if handle is not None:
            handle.cancel()


class ManualClock(Clock):
    """
    Deterministic clock for tests.

    Time only moves when advance() or advance_to() is called. Due timers fire
    in deadline order (ties in scheduling order) and now() reports each
    timer's own deadline while its callback runs.
    """

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms
        self._queue: List[Tuple[int, int, TimerHandle]] = []
        self._seq = itertools.count()

    def now(self) -> int:
        return self._now

    def after(self, delay_ms: int, callback: TimerCallback) -> TimerHandle:
        handle = TimerHandle(self._now + max(0, int(delay_ms)), callback)
        heapq.heappush(self._queue, (handle.deadline, next(self._seq), handle))
        return handle

    def advance(self, delta_ms: int) -> int:
        """
        Move time forward and fire every timer that becomes due.

        Args:
            delta_ms: Milliseconds to advance (must not be negative)

        Returns:
            Number of callbacks fired
        """
        if delta_ms < 0:
            raise ValueError(f"Cannot move clock backwards (delta_ms={delta_ms})")
        return self.advance_to(self._now + delta_ms)

    def advance_to(self, target_ms: int) -> int:
        """
        Move time forward to an absolute instant, firing due timers.

        Timers scheduled by callbacks are honoured if they fall due before
        target_ms.

        Args:
            target_ms: Absolute instant in milliseconds

        Returns:
            Number of callbacks fired
        """
        if target_ms < self._now:
            raise ValueError(f"Cannot move clock backwards ({self._now} -> {target_ms})")

        fired = 0
        while self._queue and self._queue[0][0] <= target_ms:
            deadline, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self._now = deadline
            handle._run()
            fired += 1

        self._now = target_ms
        return fired

    def pending(self) -> List[TimerHandle]:
        """Get live handles ordered by deadline."""
        return [h for _, _, h in sorted(self._queue) if h.active]


class AsyncioClock(Clock):
    """
    Clock backed by an asyncio event loop.

    All callbacks run on the loop thread, which gives detectors the
    single-threaded dispatch they rely on.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> int:
        return int(self.loop.time() * 1000)

    def after(self, delay_ms: int, callback: TimerCallback) -> TimerHandle:
        delay_ms = max(0, int(delay_ms))
        handle = TimerHandle(self.now() + delay_ms, callback)
        handle._backend = self.loop.call_later(delay_ms / 1000, self._dispatch, handle)
        return handle

    @staticmethod
    def _dispatch(handle: TimerHandle) -> None:
        try:
            handle._run()
        except Exception as e:
            logger.error(f"Error in timer callback {handle!r}: {e}", exc_info=True)
