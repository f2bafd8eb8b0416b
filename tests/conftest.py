"""Shared fixtures: a temporary database, a virtual-time scheduler and a wall clock that follows it."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from beo import db
from beo.scheduler import LoopScheduler


class FollowingClock:
    """Wall clock = start + scheduler time + any manual jumps."""

    def __init__(self, scheduler: LoopScheduler, start: datetime) -> None:
        self.scheduler = scheduler
        self.start = start
        self.offset = timedelta()

    def jump(self, **kwargs: float) -> None:
        """Move wall time without running any ticks (e.g. while suspended)."""
        self.offset += timedelta(**kwargs)

    def __call__(self) -> datetime:
        return self.start + self.offset + timedelta(seconds=self.scheduler.time)


@pytest.fixture()
def conn(tmp_path: Path):
    """Provide a fresh database file for each test."""
    connection = db.get_connection(db_path=tmp_path / "test.db")
    yield connection
    connection.close()


@pytest.fixture()
def scheduler() -> LoopScheduler:
    return LoopScheduler(sleep=lambda _: None)


@pytest.fixture()
def clock(scheduler: LoopScheduler) -> FollowingClock:
    """Starts at 10:00:00 so tests have most of an hour before a rollover."""
    return FollowingClock(scheduler, datetime(2026, 3, 2, 10, 0, 0))


@pytest.fixture()
def make_clock(scheduler: LoopScheduler):
    """Factory for a clock starting at a chosen wall time."""

    def factory(start: datetime) -> FollowingClock:
        return FollowingClock(scheduler, start)

    return factory
