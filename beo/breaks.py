"""Guided countdown for a wellness break in the terminal."""

from __future__ import annotations

import time

from beo.display import console, create_countdown_progress, print_nudge
from beo.models import Intervention


def run_break(intervention: Intervention) -> bool:
    """Count down the activity's duration. Returns True if completed, False if interrupted."""
    total_seconds = intervention.duration_minutes * 60
    progress = create_countdown_progress()

    try:
        with progress:
            task = progress.add_task(intervention.name, total=total_seconds)
            for _ in range(total_seconds):
                time.sleep(1)
                progress.advance(task, 1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Break ended early.[/yellow]")
        return False

    # Bell notification
    console.print("\a", end="")
    print_nudge("Nice work. Welcome back.")
    return True
