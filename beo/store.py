"""Durable storage of the hourly usage counter.

Two string keys in the ``kv_store`` table: the seconds used this hour and
the hour-of-day they belong to.  Reads are sanitized; I/O failures are
logged and never raised to the caller.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Protocol

from beo import db
from beo.constants import HOURLY_START_KEY, HOURLY_USED_KEY
from beo.models import StoredTimerState
from beo.validation import validate_hourly_used, validate_stored_hour

log = logging.getLogger(__name__)


class TimerStateStore(Protocol):
    """What the usage timer needs from persistence."""

    def load(self) -> StoredTimerState: ...

    def save(self, hourly_used_seconds: int, hour: int) -> bool: ...

    def clear(self) -> bool: ...


class TimerStore:
    """SQLite-backed timer state store."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def load(self) -> StoredTimerState:
        """Return the saved state; absent or corrupt values become defaults."""
        try:
            raw = db.get_values(self.conn, (HOURLY_USED_KEY, HOURLY_START_KEY))
        except sqlite3.Error:
            log.warning("Could not load timer state; starting from zero", exc_info=True)
            return StoredTimerState()
        return StoredTimerState(
            hourly_used_seconds=validate_hourly_used(raw[HOURLY_USED_KEY]),
            saved_hour=validate_stored_hour(raw[HOURLY_START_KEY]),
        )

    def save(self, hourly_used_seconds: int, hour: int) -> bool:
        """Write both keys together. Returns False if the write failed."""
        try:
            db.set_values(
                self.conn,
                {
                    HOURLY_USED_KEY: str(int(hourly_used_seconds)),
                    HOURLY_START_KEY: str(int(hour)),
                },
            )
        except sqlite3.Error:
            log.warning("Could not save timer state", exc_info=True)
            return False
        return True

    def clear(self) -> bool:
        """Remove both keys (full app reset)."""
        try:
            db.delete_values(self.conn, (HOURLY_USED_KEY, HOURLY_START_KEY))
        except sqlite3.Error:
            log.warning("Could not clear timer state", exc_info=True)
            return False
        return True
