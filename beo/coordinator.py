"""Presents a wellness break when the hourly limit is reached."""

from __future__ import annotations

import logging
import sqlite3
from typing import Callable, Optional

from beo import db
from beo.events import LimitReached
from beo.interventions import get_random_intervention
from beo.models import HistoryEntry, HistoryEntryCreate, Intervention
from beo.timer import UsageTimer

log = logging.getLogger(__name__)


class InterventionCoordinator:
    """Pauses the timer for a break and records how the user responded.

    At most one break is shown at a time; further limit events while a break
    is on screen are ignored.  *presenter* is called with the chosen activity
    once the timer has been paused.
    """

    def __init__(
        self,
        timer: UsageTimer,
        conn: sqlite3.Connection,
        *,
        picker: Callable[[], Intervention] = get_random_intervention,
        screen_active: Callable[[], bool] = lambda: True,
        presenter: Optional[Callable[[Intervention], None]] = None,
    ) -> None:
        self.timer = timer
        self.conn = conn
        self.picker = picker
        self.presenter = presenter
        self._screen_active = screen_active
        self.current: Optional[Intervention] = None
        self._break_hour: Optional[int] = None
        self._unsubscribe = timer.on_limit_reached(self.handle_limit_reached)

    @property
    def break_active(self) -> bool:
        return self.current is not None

    def close(self) -> None:
        self._unsubscribe()

    def handle_limit_reached(self, event: Optional[LimitReached] = None) -> None:
        if self.break_active:
            log.debug("Break already showing; ignoring limit event")
            return
        self.current = self.picker()
        self._break_hour = event.hour if event is not None else self.timer.current_hour
        log.info("Offering break: %s", self.current.name)
        self.timer.stop()
        if self.presenter is not None:
            self.presenter(self.current)

    def respond(self, completed: bool) -> Optional[HistoryEntry]:
        """Record the user's answer and re-arm the timer for the rest of the hour."""
        intervention = self.current
        if intervention is None:
            return None

        entry: Optional[HistoryEntry] = None
        try:
            entry = db.add_history_entry(
                self.conn,
                HistoryEntryCreate(
                    intervention_name=intervention.name,
                    duration_minutes=intervention.duration_minutes,
                    completed=completed,
                ),
            )
        except sqlite3.Error:
            log.warning("Could not record break history", exc_info=True)

        self.current = None
        # A reload may already have moved the timer into a later, unspent hour.
        if self.timer.current_hour == self._break_hour:
            self.timer.acknowledge_limit()
        else:
            log.debug(
                "Break belonged to hour %s; not closing hour %s",
                self._break_hour,
                self.timer.current_hour,
            )
        if self._screen_active():
            self.timer.start()
        return entry

    def dismiss(self) -> None:
        """Drop a showing break without recording it (full app reset)."""
        self.current = None
        self._break_hour = None

    def complete(self) -> Optional[HistoryEntry]:
        return self.respond(True)

    def skip(self) -> Optional[HistoryEntry]:
        return self.respond(False)
