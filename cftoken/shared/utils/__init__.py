"""Shared utilities: UTC datetimes and duration strings."""

from cftoken.shared.utils.datetime import (
    ensure_utc,
    format_duration,
    parse_duration,
    utc_now,
)

__all__ = [
    "utc_now",
    "ensure_utc",
    "parse_duration",
    "format_duration",
]
