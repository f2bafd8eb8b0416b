"""Tuning constants shared by the timer, storage and interfaces."""

from __future__ import annotations

SECONDS_PER_HOUR = 3600

# Hourly budget (minutes)
HOURLY_LIMIT_MIN = 5
HOURLY_LIMIT_MAX = 55
HOURLY_LIMIT_DEFAULT = 45
HOURLY_LIMIT_STEP = 5

# Timer
TICK_INTERVAL_S = 1.0
SAVE_INTERVAL_TICKS = 10

# History
MAX_HISTORY_ITEMS = 100

# Persisted timer keys
HOURLY_USED_KEY = "hourly_used_seconds"
HOURLY_START_KEY = "hourly_start_hour"
PROFILE_KEY = "profile"
