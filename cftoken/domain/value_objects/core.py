"""Domain value helpers for zone names and zone identifiers."""

import re

# Cloudflare zone IDs are 32 hex characters (either case).
_ZONE_ID_RE = re.compile(r"^[0-9a-fA-F]{32}$")


def normalize_zone_name(value: str) -> str:
    """Trim, lowercase and drop one trailing dot ('Example.COM.' -> 'example.com')."""
    value = value.strip().lower()
    if value.endswith("."):
        value = value[:-1]
    return value


def looks_like_zone_id(value: str) -> bool:
    """Return whether value is shaped like a zone ID (32 hex characters)."""
    return bool(_ZONE_ID_RE.match(value))
