"""Tests for CLI commands."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest
import typer
from typer.testing import CliRunner

from beo import db
from beo.cli import app
from beo.store import TimerStore

runner = CliRunner()

SETUP_INPUT = "3\n" * 6 + "30\n"


@pytest.fixture(autouse=True)
def _use_tmp_paths(tmp_path: Path):
    """Redirect all CLI tests to a temporary database and config."""
    db_path = tmp_path / "test.db"
    with patch("beo.db._get_db_path", return_value=db_path), patch(
        "beo.config._CONFIG_DIR", tmp_path / "config"
    ), patch("beo.config._CONFIG_FILE", tmp_path / "config" / "config.json"), patch(
        "beo.config._DB_DIR", tmp_path / "data"
    ):
        yield db_path


@pytest.fixture()
def db_path(_use_tmp_paths) -> Path:
    return _use_tmp_paths


class TestSetup:
    def test_setup_creates_profile(self, db_path) -> None:
        result = runner.invoke(app, ["setup"], input=SETUP_INPUT)
        assert result.exit_code == 0
        assert "18/30" in result.output
        assert "Moderate" in result.output

        conn = db.get_connection(db_path)
        profile = db.load_profile(conn)
        conn.close()
        assert profile is not None
        assert profile.hourly_limit == 30

    def test_setup_reprompts_bad_answer(self) -> None:
        result = runner.invoke(app, ["setup"], input="9\n" + SETUP_INPUT)
        assert result.exit_code == 0
        assert "Please enter a number" in result.output

    def test_setup_rejects_off_step_limit(self) -> None:
        result = runner.invoke(app, ["setup"], input="3\n" * 6 + "7\n30\n")
        assert result.exit_code == 0
        assert "steps of 5" in result.output

    def test_setup_again_can_be_declined(self) -> None:
        runner.invoke(app, ["setup"], input=SETUP_INPUT)
        result = runner.invoke(app, ["setup"], input="n\n")
        assert result.exit_code == 1


class TestLimit:
    def test_change_limit(self) -> None:
        runner.invoke(app, ["setup"], input=SETUP_INPUT)
        result = runner.invoke(app, ["limit", "15"])
        assert result.exit_code == 0
        assert "15 min" in result.output

    def test_invalid_limit(self) -> None:
        runner.invoke(app, ["setup"], input=SETUP_INPUT)
        result = runner.invoke(app, ["limit", "60"])
        assert result.exit_code == 1

    def test_limit_without_profile(self) -> None:
        result = runner.invoke(app, ["limit", "20"])
        assert result.exit_code == 1
        assert "beo setup" in result.output


class TestStatus:
    def test_status_without_profile(self) -> None:
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 1

    def test_status_shows_usage(self) -> None:
        runner.invoke(app, ["setup"], input=SETUP_INPUT)
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "Profile" in result.output
        assert "Usage" in result.output
        assert "No activity yet" in result.output


class TestTrack:
    def test_track_without_profile(self) -> None:
        result = runner.invoke(app, ["track", "--duration", "3"])
        assert result.exit_code == 1

    def test_track_records_usage(self, db_path) -> None:
        runner.invoke(app, ["setup"], input=SETUP_INPUT)
        with patch("beo.scheduler.time.sleep"):
            result = runner.invoke(app, ["track", "--duration", "3"])
        assert result.exit_code == 0
        assert "30-minute" in result.output
        assert "Usage" in result.output

        conn = db.get_connection(db_path)
        state = TimerStore(conn).load()
        conn.close()
        assert state.hourly_used_seconds == 3

    def test_track_offers_break_at_limit(self, db_path) -> None:
        runner.invoke(app, ["setup"], input=SETUP_INPUT)
        runner.invoke(app, ["limit", "5"])
        conn = db.get_connection(db_path)
        TimerStore(conn).save(299, datetime.now().hour)
        conn.close()

        with patch("beo.scheduler.time.sleep"):
            result = runner.invoke(app, ["track", "--duration", "3"], input="n\n")

        assert result.exit_code == 0
        assert "Time for a break" in result.output
        assert "Break skipped" in result.output
        conn = db.get_connection(db_path)
        stats = db.get_today_stats(conn)
        conn.close()
        assert stats.skipped == 1

    def test_interrupted_break_prompt_counts_as_skip(self, db_path) -> None:
        runner.invoke(app, ["setup"], input=SETUP_INPUT)
        runner.invoke(app, ["limit", "5"])
        conn = db.get_connection(db_path)
        TimerStore(conn).save(299, datetime.now().hour)
        conn.close()

        with patch("beo.scheduler.time.sleep"), patch(
            "beo.cli.typer.confirm", side_effect=typer.Abort()
        ):
            result = runner.invoke(app, ["track", "--duration", "3"])

        assert result.exit_code == 0
        assert "Break skipped" in result.output
        assert "Aborted" not in result.output
        conn = db.get_connection(db_path)
        history = db.list_history(conn)
        conn.close()
        assert len(history) == 1
        assert history[0].completed is False


class TestHistory:
    def test_history_empty(self) -> None:
        result = runner.invoke(app, ["history"])
        assert result.exit_code == 0
        assert "No activity yet" in result.output
        assert "0 total" in result.output


class TestCheckIn:
    def test_checkin_with_options(self) -> None:
        result = runner.invoke(
            app,
            ["checkin", "--mood", "7", "--stress", "3", "--location", "home",
             "--activity", "working", "--hours", "2.5"],
        )
        assert result.exit_code == 0
        assert "Saved check-in" in result.output

    def test_checkin_twice_updates(self) -> None:
        args = ["checkin", "--mood", "7", "--stress", "3", "--location", "Work",
                "--activity", "Relaxing"]
        runner.invoke(app, args)
        result = runner.invoke(app, args)
        assert "Updated check-in" in result.output

    def test_checkin_out_of_range(self) -> None:
        result = runner.invoke(
            app,
            ["checkin", "--mood", "11", "--stress", "3", "--location", "Home",
             "--activity", "Other"],
        )
        assert result.exit_code != 0

    def test_checkins_listing(self) -> None:
        runner.invoke(
            app,
            ["checkin", "--mood", "4", "--stress", "8", "--location", "Transit",
             "--activity", "Socializing"],
        )
        result = runner.invoke(app, ["checkins"])
        assert result.exit_code == 0
        assert "Transit" in result.output

    def test_checkins_empty(self) -> None:
        result = runner.invoke(app, ["checkins"])
        assert "No check-ins yet" in result.output


class TestReset:
    def test_reset_clears_profile(self, db_path) -> None:
        runner.invoke(app, ["setup"], input=SETUP_INPUT)
        result = runner.invoke(app, ["reset", "--yes"])
        assert result.exit_code == 0
        assert "All data cleared" in result.output

        conn = db.get_connection(db_path)
        assert db.load_profile(conn) is None
        conn.close()

    def test_reset_can_be_aborted(self) -> None:
        runner.invoke(app, ["setup"], input=SETUP_INPUT)
        result = runner.invoke(app, ["reset"], input="n\n")
        assert result.exit_code == 1


class TestConfig:
    def test_show(self) -> None:
        result = runner.invoke(app, ["config", "--show"])
        assert result.exit_code == 0
        assert "(default)" in result.output
        assert "45 min" in result.output

    def test_default_limit(self) -> None:
        result = runner.invoke(app, ["config", "--default-limit", "25"])
        assert result.exit_code == 0
        result = runner.invoke(app, ["config", "--show"])
        assert "25 min" in result.output

    def test_default_limit_invalid(self) -> None:
        result = runner.invoke(app, ["config", "--default-limit", "3"])
        assert result.exit_code == 1

    def test_set_db_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "elsewhere" / "mine.db"
        result = runner.invoke(app, ["config", "--db-path", str(custom)])
        assert result.exit_code == 0
        assert "mine.db" in result.output
