"""Sanitizers applied to values read back from storage.

Everything here is total: corrupt input maps to a safe default instead of
raising, so callers never see a value outside its documented range.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from beo.constants import SECONDS_PER_HOUR
from beo.models import Profile

log = logging.getLogger(__name__)


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def validate_hourly_used(value: Optional[str]) -> int:
    """Return stored seconds in [0, 3600], or 0 when absent or corrupt."""
    parsed = _parse_int(value)
    if parsed is None or not 0 <= parsed <= SECONDS_PER_HOUR:
        if value is not None:
            log.warning("Discarding corrupt hourly usage value %r", value)
        return 0
    return parsed


def validate_stored_hour(value: Optional[str]) -> Optional[int]:
    """Return a stored hour in [0, 23], or None when absent or corrupt."""
    parsed = _parse_int(value)
    if parsed is None or not 0 <= parsed <= 23:
        if value is not None:
            log.warning("Discarding corrupt stored hour %r", value)
        return None
    return parsed


def validate_profile(raw: Optional[str]) -> Optional[Profile]:
    """Parse a JSON profile, returning None if it is missing or invalid."""
    if not raw:
        return None
    try:
        return Profile.model_validate_json(raw)
    except ValidationError:
        log.warning("Stored profile failed validation; ignoring it")
        return None

