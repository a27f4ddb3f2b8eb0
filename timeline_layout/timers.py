"""Cancellable timers driven by the host event loop."""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

LOGGER = logging.getLogger(__name__)


@dataclass
class TimerHandle:
    """Cancel handle returned by :meth:`TimerQueue.schedule`."""

    deadline: float
    callback: Callable[[], None] = field(repr=False)
    cancelled: bool = False
    fired: bool = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


class TimerQueue:
    """Single-threaded timer queue.

    Nothing runs in the background: the owner of the event loop calls
    :meth:`run_due` (for example once per frame) and every callback whose
    deadline has passed fires in deadline order.
    """

    def __init__(self, time_provider: Callable[[], float] = time.monotonic) -> None:
        self.time_provider = time_provider
        self._heap: List[tuple[float, int, TimerHandle]] = []
        self._counter = itertools.count()

    def schedule(self, callback: Callable[[], None], delay: float) -> TimerHandle:
        deadline = self.time_provider() + max(0.0, delay)
        handle = TimerHandle(deadline=deadline, callback=callback)
        heapq.heappush(self._heap, (deadline, next(self._counter), handle))
        LOGGER.debug("Scheduled timer for %.3f seconds from now", delay)
        return handle

    def run_due(self) -> int:
        """Fire every callback whose deadline has been reached.

        Returns the number of callbacks that ran.
        """

        now = self.time_provider()
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            handle.fired = True
            handle.callback()
            fired += 1
        return fired

    def next_deadline(self) -> Optional[float]:
        while self._heap and self._heap[0][2].cancelled:
            heapq.heappop(self._heap)
        return self._heap[0][0] if self._heap else None

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle in self._heap if handle.active)


class Debouncer:
    """Run ``callback`` once ``delay`` seconds after the most recent trigger."""

    def __init__(self, timers: TimerQueue, callback: Callable[[], None], delay: float) -> None:
        self.timers = timers
        self.callback = callback
        self.delay = delay
        self._handle: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None and self._handle.active

    def trigger(self) -> None:
        self.cancel()
        self._handle = self.timers.schedule(self._fire, self.delay)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.callback()


__all__ = ["Debouncer", "TimerHandle", "TimerQueue"]
