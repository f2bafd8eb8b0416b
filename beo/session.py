"""Wires the timer, store, lifecycle bridge and coordinator for one app session."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Callable, Optional

from beo import db
from beo.config import load_config
from beo.coordinator import InterventionCoordinator
from beo.events import EventQueue
from beo.interventions import get_random_intervention
from beo.lifecycle import LifecycleBridge, LifecycleSignalSource
from beo.models import Intervention, Profile, TimerSnapshot
from beo.scheduler import Scheduler
from beo.store import TimerStore
from beo.timer import UsageTimer

log = logging.getLogger(__name__)


class TrackingSession:
    """Everything the dashboard needs while it is on screen."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        scheduler: Scheduler,
        *,
        clock: Callable[[], datetime] = datetime.now,
        picker: Callable[[], Intervention] = get_random_intervention,
        presenter: Optional[Callable[[Intervention], None]] = None,
        lifecycle: Optional[LifecycleSignalSource] = None,
    ) -> None:
        self.conn = conn
        self.scheduler = scheduler
        self.screen_active = False
        self.store = TimerStore(conn)
        self.events = EventQueue(scheduler)
        self.timer = UsageTimer(
            self.store, scheduler, self._profile_limit(), events=self.events, clock=clock
        )
        self.coordinator = InterventionCoordinator(
            self.timer,
            conn,
            picker=picker,
            presenter=presenter,
            screen_active=lambda: self.screen_active,
        )
        self.bridge = LifecycleBridge(self.timer, should_run=self._should_tick)
        if lifecycle is not None:
            self.bridge.attach(lifecycle)

    def _profile_limit(self) -> int:
        profile = db.load_profile(self.conn)
        if profile is not None:
            return profile.hourly_limit
        return load_config().default_hourly_limit

    def _should_tick(self) -> bool:
        return self.screen_active and not self.coordinator.break_active

    @property
    def profile(self) -> Optional[Profile]:
        return db.load_profile(self.conn)

    def snapshot(self) -> TimerSnapshot:
        return self.timer.snapshot()

    def open(self) -> TimerSnapshot:
        """Dashboard shown: reload usage and start ticking."""
        self.screen_active = True
        snapshot = self.timer.initialize(self._profile_limit())
        if not self.coordinator.break_active:
            self.timer.start()
        return snapshot

    def close(self) -> None:
        """Dashboard hidden: stop ticking and persist."""
        self.screen_active = False
        self.timer.stop()

    def set_hourly_limit(self, minutes: int) -> Optional[Profile]:
        """Save a new limit; the running timer picks it up on its next tick."""
        profile = db.update_hourly_limit(self.conn, minutes)
        self.timer.limit_minutes = profile.hourly_limit if profile else minutes
        return profile

    def full_reset(self) -> None:
        """Erase all stored data and zero the timer."""
        self.screen_active = False
        if self.timer.is_running:
            self.timer.stop()
        self.coordinator.dismiss()
        db.clear_all_data(self.conn)
        self.timer.reset()
        log.info("All data cleared")
