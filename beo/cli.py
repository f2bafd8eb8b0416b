"""beo CLI -- mindful screen-time breaks from the terminal."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

import typer
from rich.logging import RichHandler

from beo import breaks, db, display
from beo.assessments import (
    BSMAS_INSTRUCTIONS,
    BSMAS_QUESTIONS,
    BSMAS_SCALE_LABELS,
    LIKERT_MAX,
    LIKERT_MIN,
    describe_risk,
)
from beo.constants import HOURLY_LIMIT_MAX, HOURLY_LIMIT_MIN, HOURLY_LIMIT_STEP
from beo.models import (
    CheckInActivity,
    CheckInLocation,
    DailyCheckInCreate,
    Intervention,
    TimerSnapshot,
)
from beo.scheduler import LoopScheduler
from beo.session import TrackingSession
from beo.store import TimerStore
from beo.timer import should_reset

app = typer.Typer(
    name="beo",
    help="Notice your screen time and take mindful breaks.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Notice your screen time and take mindful breaks."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=display.console, show_path=False)],
    )


def _conn() -> db.sqlite3.Connection:
    """Get a database connection (convenience wrapper)."""
    return db.get_connection()


def _valid_limit(minutes: int) -> bool:
    return (
        HOURLY_LIMIT_MIN <= minutes <= HOURLY_LIMIT_MAX
        and minutes % HOURLY_LIMIT_STEP == 0
    )


_LIMIT_HINT = (
    f"Choose {HOURLY_LIMIT_MIN}-{HOURLY_LIMIT_MAX} minutes "
    f"in steps of {HOURLY_LIMIT_STEP}."
)


# ---------------------------------------------------------------------------
# Onboarding & profile
# ---------------------------------------------------------------------------


@app.command()
def setup() -> None:
    """Answer the BSMAS questionnaire and choose an hourly limit."""
    from beo.config import load_config

    conn = _conn()
    if db.load_profile(conn) is not None:
        typer.confirm("You already have a profile. Start over?", default=False, abort=True)

    display.print_info(BSMAS_INSTRUCTIONS)
    for label in BSMAS_SCALE_LABELS:
        display.print_info(f"  {label}")
    display.console.print()

    answers: list[int] = []
    for i, question in enumerate(BSMAS_QUESTIONS, 1):
        while True:
            raw = typer.prompt(f"  ({i}/{len(BSMAS_QUESTIONS)}) {question} ({LIKERT_MIN}-{LIKERT_MAX})")
            try:
                val = int(raw)
                if LIKERT_MIN <= val <= LIKERT_MAX:
                    answers.append(val)
                    break
            except ValueError:
                pass
            display.print_warning(f"  Please enter a number from {LIKERT_MIN} to {LIKERT_MAX}.")

    default_limit = load_config().default_hourly_limit
    while True:
        minutes = typer.prompt("Hourly limit in minutes", default=default_limit, type=int)
        if _valid_limit(minutes):
            break
        display.print_warning(_LIMIT_HINT)

    profile = db.create_profile(conn, answers, minutes)
    display.print_profile(profile)
    display.print_nudge(describe_risk(profile.risk_level))
    conn.close()


@app.command()
def limit(
    minutes: int = typer.Argument(..., help="New hourly limit in minutes"),
) -> None:
    """Change your hourly screen-time limit."""
    if not _valid_limit(minutes):
        display.print_warning(_LIMIT_HINT)
        raise typer.Exit(1)
    conn = _conn()
    profile = db.update_hourly_limit(conn, minutes)
    conn.close()
    if profile is None:
        display.print_warning("No profile yet. Run `beo setup` first.")
        raise typer.Exit(1)
    display.print_success(f"Hourly limit set to {profile.hourly_limit} min.")


# ---------------------------------------------------------------------------
# Usage
# ---------------------------------------------------------------------------


def _stored_snapshot(conn: db.sqlite3.Connection, limit_minutes: int) -> TimerSnapshot:
    """The persisted hourly usage as it applies to the current hour."""
    saved = TimerStore(conn).load()
    hour = datetime.now().hour
    used = 0 if should_reset(saved.saved_hour, hour) else saved.hourly_used_seconds
    return TimerSnapshot(
        session_seconds=0,
        hourly_used_seconds=used,
        current_hour=hour,
        limit_reached=used >= limit_minutes * 60,
        limit_minutes=limit_minutes,
    )


@app.command()
def status() -> None:
    """See your profile, this hour's usage and today's breaks."""
    conn = _conn()
    profile = db.load_profile(conn)
    if profile is None:
        display.print_warning("No profile yet. Run `beo setup` first.")
        conn.close()
        raise typer.Exit(1)
    display.print_profile(profile)
    display.print_usage(_stored_snapshot(conn, profile.hourly_limit), db.get_today_stats(conn))
    display.print_history(db.list_history(conn, limit=5))
    conn.close()


@app.command()
def track(
    duration: Optional[int] = typer.Option(
        None, "--duration", "-d", min=1, help="Stop after this many seconds"
    ),
) -> None:
    """Track screen time in the foreground. Press Ctrl-C to stop."""
    conn = _conn()
    if db.load_profile(conn) is None:
        display.print_warning("No profile yet. Run `beo setup` first.")
        conn.close()
        raise typer.Exit(1)

    scheduler = LoopScheduler()
    progress = display.create_usage_progress()
    session: TrackingSession

    def present(intervention: Intervention) -> None:
        progress.stop()
        display.print_intervention(intervention)
        completed = False
        try:
            start_break = typer.confirm("Start the break now?", default=True)
        except typer.Abort:
            # Ctrl-C or end of input at the prompt counts as skipping the break
            start_break = False
        if start_break:
            completed = breaks.run_break(intervention)
        session.coordinator.respond(completed)
        if completed:
            display.print_success("Break completed.")
        else:
            display.print_info("Break skipped.")
        progress.start()

    session = TrackingSession(conn, scheduler, presenter=present)
    snapshot = session.open()
    bar = progress.add_task(
        "This hour",
        total=snapshot.limit_seconds,
        completed=min(snapshot.hourly_used_seconds, snapshot.limit_seconds),
        used="", limit=display.format_time(snapshot.limit_seconds),
    )

    def refresh() -> None:
        snap = session.snapshot()
        progress.update(
            bar,
            total=snap.limit_seconds,
            completed=min(snap.hourly_used_seconds, snap.limit_seconds),
            used=display.format_time(snap.hourly_used_seconds),
            limit=display.format_time(snap.limit_seconds),
        )

    refresher = scheduler.schedule_interval(refresh, 1.0)
    display.print_info(f"Tracking with a {snapshot.limit_minutes}-minute hourly limit.")

    try:
        with progress:
            scheduler.run(duration=duration)
    except KeyboardInterrupt:
        display.console.print("\n[yellow]Tracking stopped.[/yellow]")
    finally:
        refresher.cancel()
        session.close()

    display.print_usage(session.snapshot(), db.get_today_stats(conn))
    conn.close()


@app.command()
def history(
    limit: int = typer.Option(10, "--limit", "-n", help="Number of entries to show"),
) -> None:
    """Show your recent breaks."""
    conn = _conn()
    stats = db.get_today_stats(conn)
    display.print_history(db.list_history(conn, limit=limit))
    display.print_info(
        f"Today: {stats.completed} completed, {stats.skipped} skipped, {stats.total} total"
    )
    conn.close()


# ---------------------------------------------------------------------------
# Daily check-in
# ---------------------------------------------------------------------------


@app.command()
def checkin(
    mood: int = typer.Option(..., prompt="How's your mood? (1-10)", min=1, max=10),
    stress: int = typer.Option(..., prompt="How stressed are you? (1-10)", min=1, max=10),
    location: CheckInLocation = typer.Option(
        ..., prompt="Where are you?", case_sensitive=False
    ),
    activity: CheckInActivity = typer.Option(
        ..., prompt="What are you doing?", case_sensitive=False
    ),
    hours: Optional[float] = typer.Option(
        None, "--hours", min=0, max=24, help="Hours you think you spent on your phone today"
    ),
) -> None:
    """Record today's mood check-in."""
    conn = _conn()
    replacing = db.has_checked_in_today(conn)
    check_in = db.save_check_in(
        conn,
        DailyCheckInCreate(
            mood=mood,
            stress=stress,
            location=location,
            activity=activity,
            perceived_hours=hours,
        ),
    )
    conn.close()
    verb = "Updated" if replacing else "Saved"
    display.print_success(f"{verb} check-in for {check_in.date_key.isoformat()}.")


@app.command()
def checkins(
    days: int = typer.Option(7, "--days", "-d", min=1, help="How many days back to show"),
) -> None:
    """Show recent daily check-ins."""
    conn = _conn()
    display.print_check_ins(db.list_check_ins(conn, days=days))
    conn.close()


# ---------------------------------------------------------------------------
# Reset & configuration
# ---------------------------------------------------------------------------


@app.command()
def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Erase your profile, usage, break history and check-ins."""
    if not yes:
        typer.confirm("This deletes all beo data on this device. Continue?", abort=True)
    conn = _conn()
    db.clear_all_data(conn)
    conn.close()
    display.print_success("All data cleared.")


@app.command()
def config(
    db_path: Optional[str] = typer.Option(
        None, "--db-path",
        help="Set a custom database file path",
    ),
    default_limit: Optional[int] = typer.Option(
        None, "--default-limit",
        help="Hourly limit offered during setup",
    ),
    reset_path: bool = typer.Option(False, "--reset", help="Reset to default local DB"),
    show: bool = typer.Option(False, "--show", help="Show current config"),
) -> None:
    """Configure where your data is stored."""
    from beo import config as cfg

    if db_path:
        result = cfg.set_db_path(db_path)
        display.print_success(f"Database path set to: {result.db_path}")
    elif default_limit is not None:
        if not _valid_limit(default_limit):
            display.print_warning(_LIMIT_HINT)
            raise typer.Exit(1)
        cfg.set_default_hourly_limit(default_limit)
        display.print_success(f"Default hourly limit set to {default_limit} min.")
    elif reset_path:
        cfg.reset_db_path()
        display.print_success("Reset to default local database.")
    elif show:
        current = cfg.load_config()
        resolved = cfg.get_db_path()
        if current.db_path:
            display.print_info(f"Database: {current.db_path}")
        else:
            display.print_info(f"Database: {resolved} (default)")
        display.print_info(f"Default hourly limit: {current.default_hourly_limit} min")
    else:
        display.print_info("Use --db-path, --default-limit, --reset, or --show.")
