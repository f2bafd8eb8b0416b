"""Tests for Pydantic models."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from beo.models import (
    AppState,
    DailyCheckIn,
    DailyCheckInCreate,
    Intervention,
    Profile,
    RiskLevel,
    StoredTimerState,
    TimerSnapshot,
    clamp_hourly_limit,
)


class TestAppState:
    def test_values(self) -> None:
        assert AppState("active") is AppState.ACTIVE
        assert AppState.BACKGROUND.value == "background"

    def test_suspended(self) -> None:
        assert not AppState.ACTIVE.is_suspended
        assert AppState.INACTIVE.is_suspended
        assert AppState.BACKGROUND.is_suspended


class TestProfile:
    def test_create(self) -> None:
        profile = Profile(bsmas_score=15, risk_level=RiskLevel.MODERATE, hourly_limit=30)
        assert profile.hourly_limit == 30
        assert profile.created_at is not None

    def test_limit_clamped(self) -> None:
        assert Profile(bsmas_score=6, risk_level="Low", hourly_limit=2).hourly_limit == 5
        assert Profile(bsmas_score=6, risk_level="Low", hourly_limit=90).hourly_limit == 55

    def test_non_numeric_limit_uses_default(self) -> None:
        profile = Profile(bsmas_score=6, risk_level="Low", hourly_limit="lots")
        assert profile.hourly_limit == 45

    @pytest.mark.parametrize("limit", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_limit_uses_default(self, limit: float) -> None:
        assert Profile(bsmas_score=6, risk_level="Low", hourly_limit=limit).hourly_limit == 45

    def test_huge_integer_limit_clamped(self) -> None:
        assert Profile(bsmas_score=6, risk_level="Low", hourly_limit=10**400).hourly_limit == 55

    def test_score_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            Profile(bsmas_score=31, risk_level=RiskLevel.HIGH)

    def test_json_roundtrip(self) -> None:
        profile = Profile(bsmas_score=22, risk_level=RiskLevel.HIGH, hourly_limit=15)
        assert Profile.model_validate_json(profile.model_dump_json()) == profile


class TestClampHourlyLimit:
    @pytest.mark.parametrize(("given", "expected"), [(0, 5), (5, 5), (30, 30), (55, 55), (60, 55)])
    def test_clamp(self, given: int, expected: int) -> None:
        assert clamp_hourly_limit(given) == expected


class TestIntervention:
    def test_duration_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Intervention(id="x", name="Nothing", duration_minutes=0)


class TestCheckIn:
    def test_mood_range(self) -> None:
        with pytest.raises(ValidationError):
            DailyCheckInCreate(mood=11, stress=3, location="Home", activity="Working")

    def test_perceived_hours_range(self) -> None:
        with pytest.raises(ValidationError):
            DailyCheckInCreate(
                mood=5, stress=5, location="Home", activity="Working", perceived_hours=25
            )

    def test_stored_check_in(self) -> None:
        c = DailyCheckIn(
            date_key=date(2026, 3, 2), mood=7, stress=2, location="Work", activity="Relaxing"
        )
        assert c.perceived_hours is None
        assert c.location.value == "Work"


class TestTimerModels:
    def test_stored_state_defaults(self) -> None:
        state = StoredTimerState()
        assert state.hourly_used_seconds == 0
        assert state.saved_hour is None

    def test_stored_state_rejects_hour_24(self) -> None:
        with pytest.raises(ValidationError):
            StoredTimerState(saved_hour=24)

    def test_snapshot_derived_values(self) -> None:
        snap = TimerSnapshot(session_seconds=10, hourly_used_seconds=150, limit_minutes=5)
        assert snap.limit_seconds == 300
        assert snap.remaining_seconds == 150
        assert snap.progress_pct == pytest.approx(50.0)
        assert not snap.is_over_limit

    def test_snapshot_over_limit(self) -> None:
        snap = TimerSnapshot(session_seconds=0, hourly_used_seconds=400, limit_minutes=5)
        assert snap.is_over_limit
        assert snap.remaining_seconds == 0
        assert snap.progress_pct == 100.0
