"""SQLite database layer. All public functions return Pydantic models."""

from __future__ import annotations

import sqlite3
import uuid
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Iterable, Optional

from beo.assessments import get_risk_level, score_bsmas
from beo.config import get_db_path as _config_get_db_path
from beo.constants import MAX_HISTORY_ITEMS, PROFILE_KEY
from beo.models import (
    DailyCheckIn,
    DailyCheckInCreate,
    HistoryEntry,
    HistoryEntryCreate,
    Profile,
    TodayStats,
    clamp_hourly_limit,
)
from beo.validation import validate_profile

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key    TEXT PRIMARY KEY,
    value  TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS history (
    id                TEXT    PRIMARY KEY,
    timestamp         TEXT    NOT NULL,
    intervention      TEXT    NOT NULL,
    duration_minutes  INTEGER NOT NULL,
    completed         INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS daily_checkins (
    date_key         TEXT PRIMARY KEY,
    mood             INTEGER NOT NULL,
    stress           INTEGER NOT NULL,
    location         TEXT    NOT NULL,
    activity         TEXT    NOT NULL,
    perceived_hours  REAL,
    recorded_at      TEXT    NOT NULL
);
"""


def _get_db_path() -> Path:
    """Return the database file path from config (or default)."""
    return _config_get_db_path()


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Open a connection and ensure the schema exists."""
    path = db_path or _get_db_path()
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.executescript(_SCHEMA)
    return conn


# ---------------------------------------------------------------------------
# Key-value store
# ---------------------------------------------------------------------------


def get_value(conn: sqlite3.Connection, key: str) -> Optional[str]:
    """Read a raw string value, or None if the key is absent."""
    row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
    return row["value"] if row else None


def get_values(conn: sqlite3.Connection, keys: Iterable[str]) -> dict[str, Optional[str]]:
    """Read several keys at once. Missing keys map to None."""
    keys = list(keys)
    placeholders = ", ".join("?" for _ in keys)
    rows = conn.execute(
        f"SELECT key, value FROM kv_store WHERE key IN ({placeholders})", keys
    ).fetchall()
    found = {r["key"]: r["value"] for r in rows}
    return {k: found.get(k) for k in keys}


def set_values(conn: sqlite3.Connection, values: dict[str, str]) -> None:
    """Write several keys in one transaction."""
    with conn:
        conn.executemany(
            """INSERT INTO kv_store (key, value) VALUES (?, ?)
               ON CONFLICT(key) DO UPDATE SET value = excluded.value""",
            list(values.items()),
        )


def delete_values(conn: sqlite3.Connection, keys: Iterable[str]) -> None:
    """Remove keys; absent keys are ignored."""
    with conn:
        conn.executemany("DELETE FROM kv_store WHERE key = ?", [(k,) for k in keys])


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


def load_profile(conn: sqlite3.Connection) -> Optional[Profile]:
    """Return the stored profile, or None if missing or invalid."""
    return validate_profile(get_value(conn, PROFILE_KEY))


def save_profile(conn: sqlite3.Connection, profile: Profile) -> Profile:
    """Persist a profile and return it."""
    set_values(conn, {PROFILE_KEY: profile.model_dump_json()})
    return profile


def create_profile(
    conn: sqlite3.Connection, answers: list[int], hourly_limit: int
) -> Profile:
    """Score questionnaire answers and save a new profile."""
    score = score_bsmas(answers)
    profile = Profile(
        bsmas_score=score,
        risk_level=get_risk_level(score),
        hourly_limit=hourly_limit,
    )
    return save_profile(conn, profile)


def update_hourly_limit(conn: sqlite3.Connection, minutes: int) -> Optional[Profile]:
    """Change the profile's hourly limit (clamped). None if there is no profile."""
    profile = load_profile(conn)
    if profile is None:
        return None
    updated = profile.model_copy(update={"hourly_limit": clamp_hourly_limit(minutes)})
    return save_profile(conn, updated)


# ---------------------------------------------------------------------------
# Intervention history
# ---------------------------------------------------------------------------


def _row_to_entry(row: sqlite3.Row) -> HistoryEntry:
    """Convert a database row to a HistoryEntry model."""
    return HistoryEntry(
        id=row["id"],
        timestamp=datetime.fromisoformat(row["timestamp"]),
        intervention_name=row["intervention"],
        duration_minutes=row["duration_minutes"],
        completed=bool(row["completed"]),
    )


def add_history_entry(
    conn: sqlite3.Connection, entry_in: HistoryEntryCreate
) -> HistoryEntry:
    """Record a break response, evicting the oldest entries beyond capacity."""
    entry = HistoryEntry(
        id=uuid.uuid4().hex,
        timestamp=datetime.now(),
        intervention_name=entry_in.intervention_name,
        duration_minutes=entry_in.duration_minutes,
        completed=entry_in.completed,
    )
    with conn:
        conn.execute(
            "INSERT INTO history (id, timestamp, intervention, duration_minutes, completed) "
            "VALUES (?, ?, ?, ?, ?)",
            (
                entry.id,
                entry.timestamp.isoformat(),
                entry.intervention_name,
                entry.duration_minutes,
                int(entry.completed),
            ),
        )
        conn.execute(
            """DELETE FROM history WHERE rowid NOT IN (
                   SELECT rowid FROM history
                   ORDER BY timestamp DESC, rowid DESC LIMIT ?
               )""",
            (MAX_HISTORY_ITEMS,),
        )
    return entry


def list_history(
    conn: sqlite3.Connection, limit: int = MAX_HISTORY_ITEMS
) -> list[HistoryEntry]:
    """List history entries, most recent first."""
    rows = conn.execute(
        "SELECT * FROM history ORDER BY timestamp DESC, rowid DESC LIMIT ?", (limit,)
    ).fetchall()
    return [_row_to_entry(r) for r in rows]


def get_today_stats(
    conn: sqlite3.Connection, for_date: Optional[date] = None
) -> TodayStats:
    """Count completed and skipped breaks for one calendar day."""
    day = for_date or date.today()
    start = datetime.combine(day, datetime.min.time())
    end = start + timedelta(days=1)
    row = conn.execute(
        "SELECT COALESCE(SUM(completed), 0) AS done, COUNT(*) AS total "
        "FROM history WHERE timestamp >= ? AND timestamp < ?",
        (start.isoformat(), end.isoformat()),
    ).fetchone()
    return TodayStats(
        completed=row["done"], skipped=row["total"] - row["done"], total=row["total"]
    )


def clear_history(conn: sqlite3.Connection) -> None:
    """Delete every history entry."""
    with conn:
        conn.execute("DELETE FROM history")


# ---------------------------------------------------------------------------
# Daily check-ins
# ---------------------------------------------------------------------------


def _row_to_check_in(row: sqlite3.Row) -> DailyCheckIn:
    """Convert a database row to a DailyCheckIn model."""
    return DailyCheckIn(
        date_key=date.fromisoformat(row["date_key"]),
        mood=row["mood"],
        stress=row["stress"],
        location=row["location"],
        activity=row["activity"],
        perceived_hours=row["perceived_hours"],
        recorded_at=datetime.fromisoformat(row["recorded_at"]),
    )


def save_check_in(
    conn: sqlite3.Connection, check_in: DailyCheckInCreate
) -> DailyCheckIn:
    """Store today's check-in, replacing any earlier one from today."""
    now = datetime.now()
    stored = DailyCheckIn(date_key=now.date(), recorded_at=now, **check_in.model_dump())
    with conn:
        conn.execute(
            """INSERT INTO daily_checkins
                   (date_key, mood, stress, location, activity, perceived_hours, recorded_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)
               ON CONFLICT(date_key) DO UPDATE SET
                   mood = excluded.mood,
                   stress = excluded.stress,
                   location = excluded.location,
                   activity = excluded.activity,
                   perceived_hours = excluded.perceived_hours,
                   recorded_at = excluded.recorded_at""",
            (
                stored.date_key.isoformat(),
                stored.mood,
                stored.stress,
                stored.location.value,
                stored.activity.value,
                stored.perceived_hours,
                stored.recorded_at.isoformat(),
            ),
        )
    return stored


def get_check_in(conn: sqlite3.Connection, for_date: date) -> Optional[DailyCheckIn]:
    """Fetch the check-in for a specific date."""
    row = conn.execute(
        "SELECT * FROM daily_checkins WHERE date_key = ?", (for_date.isoformat(),)
    ).fetchone()
    return _row_to_check_in(row) if row else None


def has_checked_in_today(conn: sqlite3.Connection) -> bool:
    return get_check_in(conn, date.today()) is not None


def list_check_ins(conn: sqlite3.Connection, days: int = 7) -> list[DailyCheckIn]:
    """Check-ins from the last *days* days (today included), newest first."""
    since = date.today() - timedelta(days=days - 1)
    rows = conn.execute(
        "SELECT * FROM daily_checkins WHERE date_key >= ? ORDER BY date_key DESC",
        (since.isoformat(),),
    ).fetchall()
    return [_row_to_check_in(r) for r in rows]


def clear_check_ins(conn: sqlite3.Connection) -> None:
    """Delete every stored check-in."""
    with conn:
        conn.execute("DELETE FROM daily_checkins")


# ---------------------------------------------------------------------------
# Full reset
# ---------------------------------------------------------------------------


def clear_all_data(conn: sqlite3.Connection) -> None:
    """Remove the profile, timer state, history and check-ins."""
    with conn:
        conn.execute("DELETE FROM kv_store")
        conn.execute("DELETE FROM history")
        conn.execute("DELETE FROM daily_checkins")
