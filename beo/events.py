"""Deferred event hand-off between the usage timer and its consumers."""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Any, Callable, Optional

from beo.scheduler import Cancellable, Scheduler

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LimitReached:
    """The hourly budget was crossed for the first time this hour."""

    hour: int
    hourly_used_seconds: int
    limit_minutes: int


class EventQueue:
    """FIFO of events delivered on the scheduler's next turn.

    ``post()`` never calls a handler directly, so a handler can never see
    the poster halfway through an update.
    """

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._pending: deque[Any] = deque()
        self._handlers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)
        self._drain_event: Optional[Cancellable] = None

    def subscribe(self, event_type: type, handler: Callable[[Any], None]) -> Callable[[], None]:
        """Register *handler* for *event_type*. Returns an unsubscribe function."""
        self._handlers[event_type].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

        return unsubscribe

    def post(self, event: Any) -> None:
        self._pending.append(event)
        if self._drain_event is None:
            self._drain_event = self._scheduler.schedule_once(self.drain, 0.0)

    def drain(self) -> int:
        """Deliver all queued events. Returns how many were delivered."""
        self._drain_event = None
        delivered = 0
        while self._pending:
            event = self._pending.popleft()
            handlers = list(self._handlers.get(type(event), ()))
            if not handlers:
                log.debug("No handler for %s", type(event).__name__)
            for handler in handlers:
                handler(event)
            delivered += 1
        return delivered

    def __len__(self) -> int:
        return len(self._pending)
