"""Pydantic models -- single source of truth for all data types."""

from __future__ import annotations

import enum
import math
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from beo.constants import (
    HOURLY_LIMIT_DEFAULT,
    HOURLY_LIMIT_MAX,
    HOURLY_LIMIT_MIN,
    SECONDS_PER_HOUR,
)


class RiskLevel(str, enum.Enum):
    """BSMAS risk classification."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class AppState(str, enum.Enum):
    """Host application lifecycle states."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    BACKGROUND = "background"

    @property
    def is_suspended(self) -> bool:
        return self is not AppState.ACTIVE


def clamp_hourly_limit(minutes: int) -> int:
    """Clamp an hourly limit into the supported range."""
    return max(HOURLY_LIMIT_MIN, min(HOURLY_LIMIT_MAX, int(minutes)))


class Profile(BaseModel):
    """The user's questionnaire result and hourly budget."""

    bsmas_score: int = Field(ge=6, le=30)
    risk_level: RiskLevel
    hourly_limit: int = HOURLY_LIMIT_DEFAULT
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("hourly_limit", mode="before")
    @classmethod
    def _clamp_limit(cls, value: object) -> int:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return HOURLY_LIMIT_DEFAULT
        if isinstance(value, float) and not math.isfinite(value):
            return HOURLY_LIMIT_DEFAULT
        return clamp_hourly_limit(int(value))


class Intervention(BaseModel):
    """A short wellness activity offered when the hourly budget runs out."""

    id: str
    name: str
    duration_minutes: int = Field(gt=0)
    description: str = ""


class HistoryEntry(BaseModel):
    """One presented break and how the user responded."""

    id: str = Field(min_length=1)
    timestamp: datetime
    intervention_name: str = Field(min_length=1)
    duration_minutes: int = Field(ge=0)
    completed: bool


class HistoryEntryCreate(BaseModel):
    """Input model for recording a break response."""

    intervention_name: str = Field(min_length=1)
    duration_minutes: int = Field(ge=0)
    completed: bool


class TodayStats(BaseModel):
    """Break counts for a single day."""

    completed: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)


class CheckInLocation(str, enum.Enum):
    HOME = "Home"
    WORK = "Work"
    TRANSIT = "Transit"
    OTHER = "Other"


class CheckInActivity(str, enum.Enum):
    WORKING = "Working"
    SOCIALIZING = "Socializing"
    RELAXING = "Relaxing"
    OTHER = "Other"


class DailyCheckInCreate(BaseModel):
    """Input model for a daily mood check-in."""

    mood: int = Field(ge=1, le=10)
    stress: int = Field(ge=1, le=10)
    location: CheckInLocation
    activity: CheckInActivity
    perceived_hours: Optional[float] = Field(default=None, ge=0, le=24)


class DailyCheckIn(DailyCheckInCreate):
    """A stored daily check-in (one per calendar day)."""

    date_key: date
    recorded_at: datetime = Field(default_factory=datetime.now)


class StoredTimerState(BaseModel):
    """Sanitized snapshot read back from the timer store."""

    hourly_used_seconds: int = Field(default=0, ge=0, le=SECONDS_PER_HOUR)
    saved_hour: Optional[int] = Field(default=None, ge=0, le=23)


class TimerSnapshot(BaseModel):
    """Read-only view of the usage timer for dashboards."""

    session_seconds: int = Field(ge=0)
    hourly_used_seconds: int = Field(ge=0, le=SECONDS_PER_HOUR)
    current_hour: Optional[int] = Field(default=None, ge=0, le=23)
    limit_reached: bool = False
    limit_minutes: int = Field(ge=HOURLY_LIMIT_MIN, le=HOURLY_LIMIT_MAX)
    is_running: bool = False

    @property
    def limit_seconds(self) -> int:
        return self.limit_minutes * 60

    @property
    def is_over_limit(self) -> bool:
        return self.hourly_used_seconds >= self.limit_seconds

    @property
    def remaining_seconds(self) -> int:
        return max(0, self.limit_seconds - self.hourly_used_seconds)

    @property
    def progress_pct(self) -> float:
        return min(self.hourly_used_seconds / self.limit_seconds * 100, 100.0)


class AppConfig(BaseModel):
    """Application configuration (persisted to ~/.config/beo/config.json)."""

    db_path: Optional[str] = None  # None = use default (~/.local/share/beo/)
    default_hourly_limit: int = Field(
        default=HOURLY_LIMIT_DEFAULT, ge=HOURLY_LIMIT_MIN, le=HOURLY_LIMIT_MAX
    )
