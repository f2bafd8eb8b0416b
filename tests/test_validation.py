"""Tests for stored-value sanitizers."""

from __future__ import annotations

import pytest

from beo.models import Profile, RiskLevel
from beo.validation import validate_hourly_used, validate_profile, validate_stored_hour


class TestHourlyUsed:
    @pytest.mark.parametrize(("raw", "expected"), [("0", 0), ("1800", 1800), ("3600", 3600), (" 42 ", 42)])
    def test_valid(self, raw: str, expected: int) -> None:
        assert validate_hourly_used(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", "-5", "3601", "9999", "1e3"])
    def test_invalid_is_zero(self, raw) -> None:
        assert validate_hourly_used(raw) == 0

    def test_corrupt_value_logged(self, caplog) -> None:
        validate_hourly_used("abc")
        assert "abc" in caplog.text


class TestStoredHour:
    @pytest.mark.parametrize("raw", ["0", "13", "23"])
    def test_valid(self, raw: str) -> None:
        assert validate_stored_hour(raw) == int(raw)

    @pytest.mark.parametrize("raw", [None, "24", "-1", "x"])
    def test_invalid_is_none(self, raw) -> None:
        assert validate_stored_hour(raw) is None


class TestProfile:
    def test_valid_json(self) -> None:
        raw = Profile(bsmas_score=10, risk_level=RiskLevel.LOW).model_dump_json()
        profile = validate_profile(raw)
        assert profile is not None
        assert profile.bsmas_score == 10

    @pytest.mark.parametrize("raw", [None, "", "{}", '{"bsmas_score": 3, "risk_level": "Low"}'])
    def test_invalid_is_none(self, raw) -> None:
        assert validate_profile(raw) is None

    @pytest.mark.parametrize("limit", ["1e400", "-1e400"])
    def test_non_finite_limit_uses_default(self, limit: str) -> None:
        raw = f'{{"bsmas_score": 10, "risk_level": "Low", "hourly_limit": {limit}}}'
        profile = validate_profile(raw)
        assert profile is not None
        assert profile.hourly_limit == 45
