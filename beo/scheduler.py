"""Cooperative single-threaded scheduling.

The usage timer only ever talks to a :class:`Scheduler`.  On the desktop and
in tests that is a :class:`LoopScheduler`, which keeps its own virtual
clock; the mobile app adapts Kivy's ``Clock`` to the same protocol.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

log = logging.getLogger(__name__)


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run callbacks later on the calling thread."""

    def schedule_interval(self, callback: Callable[[], None], interval: float) -> Cancellable: ...

    def schedule_once(self, callback: Callable[[], None], delay: float = 0.0) -> Cancellable: ...


@dataclass(eq=False)
class ScheduledEvent:
    """Handle for a pending callback."""

    callback: Callable[[], None]
    interval: Optional[float] = None
    active: bool = field(default=True)

    def cancel(self) -> None:
        # Queued occurrences stay in the heap and are dropped when popped.
        self.active = False


class LoopScheduler:
    """Runs scheduled callbacks in due-time order against a virtual clock.

    ``advance()`` moves the clock forward instantly (tests); ``run()`` moves it
    forward in real time using ``sleep`` (CLI).  Callbacks with the same due
    time run in the order they were scheduled, so a zero-delay callback
    scheduled from inside another callback runs after it returns.
    """

    def __init__(self, sleep: Optional[Callable[[float], None]] = None) -> None:
        self.time = 0.0
        self._sleep = sleep or time.sleep
        self._queue: list[tuple[float, int, ScheduledEvent]] = []
        self._seq = itertools.count()

    def _push(self, due: float, event: ScheduledEvent) -> None:
        heapq.heappush(self._queue, (due, next(self._seq), event))

    def schedule_interval(self, callback: Callable[[], None], interval: float) -> ScheduledEvent:
        if interval <= 0:
            raise ValueError("interval must be positive")
        event = ScheduledEvent(callback, interval)
        self._push(self.time + interval, event)
        return event

    def schedule_once(self, callback: Callable[[], None], delay: float = 0.0) -> ScheduledEvent:
        event = ScheduledEvent(callback)
        self._push(self.time + max(delay, 0.0), event)
        return event

    def _discard_cancelled(self) -> None:
        while self._queue and not self._queue[0][2].active:
            heapq.heappop(self._queue)

    @property
    def pending(self) -> int:
        """Number of live scheduled callbacks."""
        return sum(1 for _, _, e in self._queue if e.active)

    def next_due(self) -> Optional[float]:
        self._discard_cancelled()
        return self._queue[0][0] if self._queue else None

    def advance(self, seconds: float) -> None:
        """Run everything due within the next *seconds* of virtual time."""
        target = self.time + seconds
        while True:
            self._discard_cancelled()
            if not self._queue or self._queue[0][0] > target:
                break
            due, _, event = heapq.heappop(self._queue)
            self.time = max(self.time, due)
            if event.interval is None:
                event.active = False
            else:
                self._push(due + event.interval, event)
            event.callback()
        self.time = max(self.time, target)

    def run_pending(self) -> None:
        """Run callbacks that are already due without moving the clock."""
        self.advance(0.0)

    def run(self, duration: Optional[float] = None) -> None:
        """Drive the loop in real time until idle or *duration* elapses."""
        end = None if duration is None else self.time + duration
        while True:
            due = self.next_due()
            if due is None:
                log.debug("Scheduler idle; leaving loop")
                break
            if end is not None and due > end:
                self._sleep(max(end - self.time, 0.0))
                self.time = end
                break
            delay = due - self.time
            if delay > 0:
                self._sleep(delay)
            self.advance(max(delay, 0.0))
