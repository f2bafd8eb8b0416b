"""Catalog of short wellness breaks offered when the hourly budget runs out."""

from __future__ import annotations

import random
from typing import Optional

from beo.models import Intervention

INTERVENTIONS: list[Intervention] = [
    Intervention(
        id="breathing",
        name="Breathing Exercise",
        duration_minutes=3,
        description="Take slow, deep breaths. Inhale for 4 seconds, hold for 4, exhale for 4.",
    ),
    Intervention(
        id="window",
        name="Window Fresh Air",
        duration_minutes=2,
        description="Go to a window or step outside. Take in fresh air and observe your surroundings.",
    ),
    Intervention(
        id="walk",
        name="Short Walk",
        duration_minutes=10,
        description="Take a brief walk around your space. Move your body and clear your mind.",
    ),
    Intervention(
        id="water",
        name="Cold Water Splash",
        duration_minutes=1,
        description="Splash cold water on your face. Feel refreshed and reset your focus.",
    ),
    Intervention(
        id="stretch",
        name="Stretching",
        duration_minutes=5,
        description="Stretch your arms, neck, and back. Release tension from your body.",
    ),
]


def get_random_intervention() -> Intervention:
    """Return one activity, chosen uniformly at random."""
    return random.choice(INTERVENTIONS)


def get_intervention(intervention_id: str) -> Optional[Intervention]:
    """Look an activity up by its id."""
    for item in INTERVENTIONS:
        if item.id == intervention_id:
            return item
    return None
