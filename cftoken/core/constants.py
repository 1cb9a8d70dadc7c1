"""Core constants: provider literals and hard-coded fallbacks.

Single source of truth for values that sit at the bottom of every
precedence chain.
"""

from datetime import timedelta

# Allow-list entry that disables IP restriction for the whole token.
DISABLE_IP_RESTRICTION_SENTINEL = "0.0.0.0/32"

# Permission group names used when nothing else supplies permissions.
DEFAULT_PERMISSION_KEYS: tuple[str, ...] = ("Zone:Read",)

DEFAULT_TOKEN_TTL = timedelta(hours=8)

# Policy resource key for a zone: <prefix>.<zone_id> -> "*"
ZONE_RESOURCE_PREFIX = "com.cloudflare.api.account.zone"
WILDCARD_RESOURCE = "*"

# Appended to every token name (UTC creation time).
TOKEN_NAME_TIME_FORMAT = "%Y%m%dT%H%M%SZ"

# Config directory name under $XDG_CONFIG_HOME or ~/.config
CONFIG_DIR_NAME = "cftoken"
CONFIG_FILE_NAME = "config.json"
ZONES_FILE_NAME = "zones.json"

# Zone sources reported by zone listing
ZONE_SOURCE_CONFIG = "config"
ZONE_SOURCE_ZONES_FILE = "zones.json"
