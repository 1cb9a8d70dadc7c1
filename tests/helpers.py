"""Shared test constants."""

from datetime import UTC, datetime

FIXED_NOW = datetime(2024, 1, 2, 15, 4, 5, tzinfo=UTC)
ZONE_ID = "0123456789abcdef0123456789abcdef"
OTHER_ZONE_ID = "fedcba9876543210fedcba9876543210"
