from __future__ import annotations

import heapq
import itertools
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

# Tolerance when comparing due times, so that 20 ticks of 0.1 are all due at 2.0.
_EPSILON = 1e-9


@dataclass(eq=False)
class ScheduledHandle:
    """A pending one-shot or recurring event on a SimulationClock.

    Attributes:
        callback: Invoked with no arguments each time the event fires.
        interval: Period for recurring events; None for one-shot events.
        max_calls: Stop after this many calls (recurring only); None means never.
        calls: Number of times the callback has run.
    """

    callback: Callable[[], None]
    start: float
    interval: Optional[float] = None
    max_calls: Optional[int] = None
    calls: int = 0
    cancelled: bool = False
    label: str = ""

    @property
    def active(self) -> bool:
        if self.cancelled:
            return False
        if self.interval is None:
            return self.calls == 0
        return self.max_calls is None or self.calls < self.max_calls

    def next_due(self) -> float:
        if self.interval is None:
            return self.start
        # Computed from the start time rather than accumulated, so it does not drift.
        return self.start + (self.calls + 1) * self.interval

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        logger.debug("Cancelled scheduled event %s after %d calls", self.label or id(self), self.calls)


class SimulationClock:
    """Single-threaded virtual-time event queue.

    Timer ticks and driver commands share one heap ordered by
    ``(due_time, sequence)``. Each event runs to completion before the next
    one starts, and events due at the same instant run in the order they
    were scheduled.

    Usage:
        clock = SimulationClock()
        handle = clock.call_every(0.1, tick)
        clock.call_soon(command)
        clock.advance(2.0)   # runs command, then 20 ticks
        handle.cancel()
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: List[tuple] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if h.active)

    def _push(self, handle: ScheduledHandle) -> None:
        heapq.heappush(self._queue, (handle.next_due(), next(self._seq), handle))

    def call_soon(self, callback: Callable[[], None], *, label: str = "") -> ScheduledHandle:
        """Queue a command to run at the current time, after events already due."""
        handle = ScheduledHandle(callback=callback, start=self._now, label=label)
        self._push(handle)
        return handle

    def call_later(self, delay: float, callback: Callable[[], None], *, label: str = "") -> ScheduledHandle:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        handle = ScheduledHandle(callback=callback, start=self._now + delay, label=label)
        self._push(handle)
        return handle

    def call_every(
        self,
        interval: float,
        callback: Callable[[], None],
        *,
        max_calls: Optional[int] = None,
        label: str = "",
    ) -> ScheduledHandle:
        """Run ``callback`` every ``interval`` time units, first one interval from now."""
        if interval <= 0:
            raise ValueError("interval must be positive")
        if max_calls is not None and max_calls < 0:
            raise ValueError("max_calls must be non-negative")
        handle = ScheduledHandle(
            callback=callback,
            start=self._now,
            interval=interval,
            max_calls=max_calls,
            label=label,
        )
        if handle.active:
            self._push(handle)
        return handle

    def run_pending(self) -> int:
        """Run every event due at the current time. Returns the number run."""
        return self._run_until(self._now)

    def advance(self, dt: float) -> int:
        """Move time forward by ``dt``, running each event as it falls due."""
        if dt < 0:
            raise ValueError("dt must be non-negative")
        target = self._now + dt
        ran = self._run_until(target)
        self._now = target
        return ran

    def _run_until(self, target: float) -> int:
        ran = 0
        while self._queue and self._queue[0][0] <= target + _EPSILON:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self._now = max(self._now, due)
            handle.calls += 1
            handle.callback()
            ran += 1
            if handle.interval is not None and handle.active:
                self._push(handle)
        return ran

    def run_realtime(
        self,
        duration: float,
        *,
        tick_rate: float = 30.0,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Drive the clock from wall time for ``duration`` seconds.

        A blocking loop for headless drivers; throttles to ``tick_rate`` updates per second.
        """
        target_dt = 1.0 / tick_rate if tick_rate and tick_rate > 0 else 0.0
        end = self._now + duration
        last = clock()
        while self._now < end - _EPSILON:
            now = clock()
            self.advance(min(now - last, end - self._now))
            last = now
            if target_dt > 0:
                remaining = target_dt - (clock() - now)
                if remaining > 0:
                    sleep(remaining)
        logger.info("Realtime run complete at t=%.3f", self._now)
