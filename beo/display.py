"""Rich terminal formatting helpers."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn, TimeRemainingColumn
from rich.table import Table
from rich.text import Text

from beo.assessments import describe_risk
from beo.models import (
    DailyCheckIn,
    HistoryEntry,
    Intervention,
    Profile,
    RiskLevel,
    TimerSnapshot,
    TodayStats,
)

console = Console()

_RISK_STYLE: dict[RiskLevel, str] = {
    RiskLevel.LOW: "green",
    RiskLevel.MODERATE: "yellow",
    RiskLevel.HIGH: "red",
}


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_time(seconds: float) -> str:
    """Seconds as MM:SS (minutes are not wrapped at 60)."""
    total = max(0, int(seconds or 0))
    mins, secs = divmod(total, 60)
    return f"{mins:02d}:{secs:02d}"


def format_minutes(minutes: float) -> str:
    """Minutes as '45m' or '1h 15m'."""
    total = max(0, int(minutes or 0))
    if total < 60:
        return f"{total}m"
    hours, mins = divmod(total, 60)
    return f"{hours}h {mins}m" if mins else f"{hours}h"


def format_date(value: datetime | date, today: Optional[date] = None) -> str:
    """'Today', 'Yesterday' or 'Mon DD'."""
    day = value.date() if isinstance(value, datetime) else value
    today = today or date.today()
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return f"{day:%b} {day.day}"


# ---------------------------------------------------------------------------
# Panels
# ---------------------------------------------------------------------------


def print_profile(profile: Profile) -> None:
    style = _RISK_STYLE[profile.risk_level]
    lines = [
        f"BSMAS score: {profile.bsmas_score}/30",
        f"Risk level: [{style}]{profile.risk_level.value}[/{style}]",
        describe_risk(profile.risk_level),
        "",
        f"Hourly limit: {profile.hourly_limit} min",
    ]
    console.print(Panel("\n".join(lines), title="Profile", border_style="blue"))


def print_usage(snapshot: TimerSnapshot, stats: Optional[TodayStats] = None) -> None:
    """Print the hourly usage dashboard."""
    lines = [
        f"Session: {format_time(snapshot.session_seconds)}",
        f"This hour: {format_time(snapshot.hourly_used_seconds)} "
        f"of {snapshot.limit_minutes}m limit ({snapshot.progress_pct:.0f}%)",
    ]
    if snapshot.is_over_limit:
        lines.append("[red]Hourly limit reached.[/red]")
    else:
        lines.append(f"Remaining: {format_time(snapshot.remaining_seconds)}")
    if stats is not None:
        lines += [
            "",
            f"Breaks today: {stats.completed} completed, {stats.skipped} skipped",
        ]
    border = "red" if snapshot.is_over_limit else "green"
    console.print(Panel("\n".join(lines), title="Usage", border_style=border))


def print_history(entries: list[HistoryEntry], title: str = "Recent breaks") -> None:
    if not entries:
        console.print(
            Panel(
                "No activity yet. Keep using the app to see your break history here.",
                title=title,
                border_style="dim",
            )
        )
        return

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("status", width=3)
    table.add_column("name")
    table.add_column("duration", justify="right")
    table.add_column("when", justify="right")

    for entry in entries:
        table.add_row(
            "[x]" if entry.completed else "[-]",
            entry.intervention_name,
            format_minutes(entry.duration_minutes),
            f"{format_date(entry.timestamp)} {entry.timestamp:%H:%M}",
            style="green" if entry.completed else "dim",
        )
    console.print(Panel(table, title=title, border_style="blue"))


def print_check_ins(check_ins: list[DailyCheckIn]) -> None:
    if not check_ins:
        console.print(Panel("No check-ins yet.", title="Check-ins", border_style="dim"))
        return

    table = Table(box=None, pad_edge=False)
    table.add_column("Day")
    table.add_column("Mood", justify="right")
    table.add_column("Stress", justify="right")
    table.add_column("Where")
    table.add_column("Doing")
    table.add_column("Hours", justify="right")
    for c in check_ins:
        table.add_row(
            format_date(c.date_key),
            str(c.mood),
            str(c.stress),
            c.location.value,
            c.activity.value,
            "" if c.perceived_hours is None else f"{c.perceived_hours:g}",
        )
    console.print(Panel(table, title="Check-ins", border_style="blue"))


def print_intervention(intervention: Intervention) -> None:
    """Announce a wellness break."""
    body = Text(justify="center")
    body.append(f"{intervention.name}\n", style="bold")
    body.append(f"{intervention.duration_minutes} min\n\n", style="dim")
    body.append(intervention.description)
    console.print(
        Panel(body, title="Time for a break", border_style="magenta", padding=(1, 4))
    )


def print_nudge(message: str) -> None:
    """Print a message in a styled panel."""
    text = Text(message, justify="center")
    console.print(Panel(text, border_style="magenta", padding=(1, 4)))


def print_success(message: str) -> None:
    console.print(f"[green]{message}[/green]")


def print_info(message: str) -> None:
    console.print(f"[blue]{message}[/blue]")


def print_warning(message: str) -> None:
    console.print(f"[yellow]{message}[/yellow]")


# ---------------------------------------------------------------------------
# Progress bars
# ---------------------------------------------------------------------------


def create_countdown_progress() -> Progress:
    """Progress bar for a break countdown."""
    return Progress(
        TextColumn("[bold magenta]{task.description}"),
        BarColumn(bar_width=40),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeRemainingColumn(),
        console=console,
    )


def create_usage_progress() -> Progress:
    """Progress bar for hourly usage against the limit."""
    return Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=40),
        TextColumn("{task.fields[used]} / {task.fields[limit]}"),
        console=console,
        transient=True,
    )
