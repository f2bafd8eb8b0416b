"""Hourly usage timer and limit enforcement.

The :class:`UsageTimer` owns the session and hourly counters for one app
session.  It is driven by a one-second tick from a :class:`Scheduler`,
resets the hourly counter whenever the wall-clock hour changes, writes the
counter through to a :class:`TimerStateStore` at most once every
``save_interval`` ticks, and posts a single :class:`LimitReached` event per
hour once the budget is used up.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from beo.constants import (
    HOURLY_LIMIT_DEFAULT,
    SAVE_INTERVAL_TICKS,
    SECONDS_PER_HOUR,
    TICK_INTERVAL_S,
)
from beo.events import EventQueue, LimitReached
from beo.models import TimerSnapshot, clamp_hourly_limit
from beo.scheduler import Cancellable, Scheduler
from beo.store import TimerStateStore

log = logging.getLogger(__name__)


def should_reset(stored_hour: Optional[int], current_hour: int) -> bool:
    """True when usage recorded for *stored_hour* must not count for *current_hour*.

    A missing stored hour means nothing was recorded yet, which is not a reset.
    """
    return stored_hour is not None and stored_hour != current_hour


class UsageTimer:
    """Tracks foreground usage against an hourly limit.

    Only ``initialize``, ``start``, ``stop``, ``reset``, ``acknowledge_limit``
    and the tick mutate state, and all of them must be called from the
    scheduler's thread.
    """

    def __init__(
        self,
        store: TimerStateStore,
        scheduler: Scheduler,
        limit_minutes: int = HOURLY_LIMIT_DEFAULT,
        *,
        events: Optional[EventQueue] = None,
        clock: Callable[[], datetime] = datetime.now,
        save_interval: int = SAVE_INTERVAL_TICKS,
        tick_interval: float = TICK_INTERVAL_S,
    ) -> None:
        self.store = store
        self.scheduler = scheduler
        self.events = events if events is not None else EventQueue(scheduler)
        self._clock = clock
        self._save_interval = save_interval
        self._tick_interval = tick_interval
        self._limit_minutes = clamp_hourly_limit(limit_minutes)

        self.session_seconds = 0
        self.hourly_used_seconds = 0
        self.current_hour: Optional[int] = None
        self.limit_reached = False
        self._save_counter = 0
        self._tick_event: Optional[Cancellable] = None

    # -- configuration -----------------------------------------------------

    @property
    def limit_minutes(self) -> int:
        return self._limit_minutes

    @limit_minutes.setter
    def limit_minutes(self, minutes: int) -> None:
        # Takes effect on the next tick; a limit that already fired this hour stays fired.
        self._limit_minutes = clamp_hourly_limit(minutes)

    @property
    def limit_seconds(self) -> int:
        return self._limit_minutes * 60

    @property
    def is_running(self) -> bool:
        return self._tick_event is not None

    @property
    def is_initialized(self) -> bool:
        return self.current_hour is not None

    def on_limit_reached(self, handler: Callable[[LimitReached], None]) -> Callable[[], None]:
        """Subscribe to the once-per-hour limit event."""
        return self.events.subscribe(LimitReached, handler)

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            session_seconds=self.session_seconds,
            hourly_used_seconds=self.hourly_used_seconds,
            current_hour=self.current_hour,
            limit_reached=self.limit_reached,
            limit_minutes=self._limit_minutes,
            is_running=self.is_running,
        )

    # -- lifecycle ---------------------------------------------------------

    def initialize(self, limit_minutes: Optional[int] = None) -> TimerSnapshot:
        """Load persisted usage and apply the hour-boundary check."""
        if limit_minutes is not None:
            self.limit_minutes = limit_minutes

        saved = self.store.load()
        hour = self._clock().hour
        self.current_hour = hour

        if should_reset(saved.saved_hour, hour):
            log.info("Hour changed (%s -> %s); hourly usage reset", saved.saved_hour, hour)
            self.hourly_used_seconds = 0
            self.limit_reached = False
            self.store.save(0, hour)
        else:
            self.hourly_used_seconds = saved.hourly_used_seconds
            self.limit_reached = saved.hourly_used_seconds >= self.limit_seconds
        return self.snapshot()

    def start(self) -> None:
        """Begin ticking. Does nothing if already running."""
        if self.is_running:
            return
        if not self.is_initialized:
            self.initialize()
        self._tick_event = self.scheduler.schedule_interval(self._on_tick, self._tick_interval)
        log.debug("Usage timer started at %ss this hour", self.hourly_used_seconds)

    def stop(self) -> None:
        """Cancel the tick and persist the current usage."""
        if self._tick_event is not None:
            self._tick_event.cancel()
            self._tick_event = None
            log.debug("Usage timer stopped at %ss this hour", self.hourly_used_seconds)
        self.persist()

    def reset(self) -> None:
        """Zero all counters. The store is left untouched."""
        self.session_seconds = 0
        self.hourly_used_seconds = 0
        self.limit_reached = False
        self._save_counter = 0

    def acknowledge_limit(self) -> None:
        """Keep the limit closed until the next hour after the user responded."""
        self.limit_reached = True

    def persist(self) -> bool:
        """Write the hourly counter now. Skipped before the first initialize."""
        if self.current_hour is None:
            return False
        return self.store.save(self.hourly_used_seconds, self.current_hour)

    # -- ticking -----------------------------------------------------------

    def _on_tick(self) -> None:
        if self._tick_event is None:
            return
        self.tick()

    def tick(self) -> None:
        """One second of foreground usage."""
        hour = self._clock().hour
        if should_reset(self.current_hour, hour):
            log.info("Hour rolled over (%s -> %s); hourly usage reset", self.current_hour, hour)
            self.current_hour = hour
            self.hourly_used_seconds = 0
            self.limit_reached = False
            self._save_counter = 0
            self.store.save(0, hour)
            return
        if self.current_hour is None:
            self.current_hour = hour

        self.session_seconds += 1
        self.hourly_used_seconds = min(self.hourly_used_seconds + 1, SECONDS_PER_HOUR)

        self._save_counter += 1
        if self._save_counter >= self._save_interval:
            self._save_counter = 0
            log.debug("Saving %ss for hour %s", self.hourly_used_seconds, self.current_hour)
            self.store.save(self.hourly_used_seconds, self.current_hour)

        if self.hourly_used_seconds >= self.limit_seconds and not self.limit_reached:
            self.limit_reached = True
            log.info(
                "Hourly limit of %s min reached at hour %s",
                self._limit_minutes,
                self.current_hour,
            )
            self.events.post(
                LimitReached(
                    hour=self.current_hour,
                    hourly_used_seconds=self.hourly_used_seconds,
                    limit_minutes=self._limit_minutes,
                )
            )
