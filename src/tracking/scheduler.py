"""Timers for the tracker: one-shot delays (debounce) and fixed intervals.

``ThreadingScheduler`` runs callbacks on daemon timer threads.
``ManualScheduler`` keeps a virtual clock that only moves when ``advance()``
is called, for deterministic tests and simulations.
"""

import heapq
import itertools
import threading
from abc import ABC, abstractmethod


class TimerHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay: float, callback) -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""
        ...

    @abstractmethod
    def call_every(self, interval: float, callback) -> TimerHandle:
        """Run ``callback`` every ``interval`` seconds until cancelled."""
        ...


# ---------------------------------------------------------------------------
# Real time
# ---------------------------------------------------------------------------
class _ThreadTimerHandle(TimerHandle):
    def __init__(self) -> None:
        super().__init__()
        self.timer: threading.Timer | None = None

    def cancel(self) -> None:
        super().cancel()
        if self.timer is not None:
            self.timer.cancel()


class ThreadingScheduler(Scheduler):
    def call_later(self, delay, callback):
        handle = _ThreadTimerHandle()

        def fire():
            if not handle.cancelled:
                callback()

        handle.timer = threading.Timer(delay, fire)
        handle.timer.daemon = True
        handle.timer.start()
        return handle

    def call_every(self, interval, callback):
        handle = _ThreadTimerHandle()

        def fire():
            if handle.cancelled:
                return
            arm()
            callback()

        def arm():
            handle.timer = threading.Timer(interval, fire)
            handle.timer.daemon = True
            handle.timer.start()

        arm()
        return handle


# ---------------------------------------------------------------------------
# Virtual time
# ---------------------------------------------------------------------------
class ManualScheduler(Scheduler):
    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list = []
        self._sequence = itertools.count()

    def _push(self, when, handle, callback, interval=None):
        heapq.heappush(self._queue, (when, next(self._sequence), handle, callback, interval))

    def call_later(self, delay, callback):
        handle = TimerHandle()
        self._push(self.now + delay, handle, callback)
        return handle

    def call_every(self, interval, callback):
        handle = TimerHandle()
        self._push(self.now + interval, handle, callback, interval)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due callbacks in time order."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle, callback, interval = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = when
            if interval is not None:
                self._push(when + interval, handle, callback, interval)
            callback()
        self.now = target
