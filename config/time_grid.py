"""Time arithmetic for the rotating bell schedule.

All times are wall-clock strings in 24h format ("8:00", "14:15") or
minutes since midnight.
"""

import re

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def time_to_minutes(text: str) -> int:
    """Parse "H:MM" or "HH:MM" into minutes since midnight.

    Raises ValueError on anything else. No range clamping.
    """
    match = _TIME_RE.match(text.strip()) if isinstance(text, str) else None
    if match is None:
        raise ValueError(f"Invalid time format: {text!r} (expected H:MM or HH:MM)")
    hours, minutes = int(match.group(1)), int(match.group(2))
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Format minutes since midnight as "H:MM" (no leading zero on the hour)."""
    hours, rest = divmod(minutes, 60)
    return f"{hours}:{rest:02d}"


def overlap_minutes(start_a: int, end_a: int, start_b: int, end_b: int) -> int:
    """Minutes shared by [start_a, end_a) and [start_b, end_b).

    Touching intervals and zero-width intervals share nothing.
    """
    return max(0, min(end_a, end_b) - max(start_a, start_b))
