"""Clock and one-shot timer sources.

The alert state machine never sleeps or spawns threads on its own; it asks
a TimerSource for the current time and for cancellable one-shot callbacks.
ThreadingTimerSource is used for live monitoring, ManualTimerSource for
offline replay and tests, where time only moves when advance() is called.
"""

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class TimerHandle:
    """Cancellable reference to a scheduled callback."""

    def __init__(self, due: float, cancel: Optional[Callable[[], None]] = None):
        self.due = due
        self._cancel = cancel
        self._done = False

    def cancel(self) -> None:
        """Cancel the callback. Safe to call more than once or after firing."""
        if self._done:
            return
        self._done = True
        if self._cancel:
            self._cancel()

    def mark_fired(self) -> None:
        self._done = True

    @property
    def active(self) -> bool:
        """True until the callback fires or is cancelled."""
        return not self._done


class TimerSource:
    """Interface for a monotonic clock with one-shot timers."""

    def now(self) -> float:
        """Return monotonic time in seconds."""
        raise NotImplementedError

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Schedule `callback` to run once after `delay` seconds."""
        raise NotImplementedError


class ThreadingTimerSource(TimerSource):
    """Wall-clock timers backed by threading.Timer daemon threads."""

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        def fire():
            handle.mark_fired()
            callback()

        timer = threading.Timer(delay, fire)
        timer.daemon = True
        handle = TimerHandle(self.now() + delay, timer.cancel)
        timer.start()
        return handle


class ManualTimerSource(TimerSource):
    """Deterministic clock that only advances when told to.

    Example:
        >>> timers = ManualTimerSource()
        >>> fired = []
        >>> _ = timers.call_later(3.0, lambda: fired.append(timers.now()))
        >>> timers.advance(2.5)
        0
        >>> timers.advance(0.5)
        1
        >>> fired
        [3.0]
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._counter = itertools.count()
        self._queue: List[Tuple[float, int, TimerHandle, Callable[[], None]]] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self._now + delay)
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle, callback))
        return handle

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every callback that comes due.

        Callbacks run in due-time order with the clock set to their due time.

        Returns:
            Number of callbacks fired
        """
        if seconds < 0:
            raise ValueError("Cannot move the clock backwards")

        target = self._now + seconds
        fired = 0

        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self._now = due
            handle.mark_fired()
            callback()
            fired += 1

        self._now = target
        return fired

    @property
    def pending(self) -> int:
        """Number of scheduled, uncancelled callbacks."""
        return sum(1 for entry in self._queue if entry[2].active)
