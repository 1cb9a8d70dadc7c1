"""Domain value helpers shared across layers."""

from cftoken.domain.value_objects.core import looks_like_zone_id, normalize_zone_name

__all__ = [
    "looks_like_zone_id",
    "normalize_zone_name",
]
