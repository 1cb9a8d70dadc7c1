"""
UTC datetime and duration utilities.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
Durations in configuration and on the command line use Go-style strings
such as "8h", "90m", "1h30m" or "0".
"""

import re
from datetime import UTC, datetime, timedelta

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def parse_duration(value: str) -> timedelta:
    """
    Parse a Go-style duration string into a timedelta.

    Accepts a sequence of decimal numbers with unit suffixes
    ("300ms", "1.5h", "2h45m"). A bare "0" is zero. Negative durations
    are rejected since no TTL or timeout may be negative.

    Args:
        value: Duration string

    Returns:
        Parsed duration

    Raises:
        ValueError: If the string is empty, negative, or malformed
    """
    text = value.strip()
    if not text:
        raise ValueError("duration must be a non-empty string")
    if text.startswith("-"):
        raise ValueError(f"duration {value!r} must not be negative")
    text = text.lstrip("+")
    if text == "0":
        return timedelta(0)

    total = 0.0
    pos = 0
    for match in _DURATION_PART_RE.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(text):
        raise ValueError(f"invalid duration {value!r}")
    return timedelta(seconds=total)


def format_duration(value: timedelta) -> str:
    """Format a timedelta compactly, e.g. 8h, 1h30m, 45s (0 for zero)."""
    seconds = int(value.total_seconds())
    if seconds <= 0:
        return "0"
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    out = ""
    if hours:
        out += f"{hours}h"
    if minutes:
        out += f"{minutes}m"
    if secs:
        out += f"{secs}s"
    return out
