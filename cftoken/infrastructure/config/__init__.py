"""Configuration file loading (config.json, zones.json)."""

from cftoken.infrastructure.config.loader import (
    load_config_file,
    load_zone_table,
    load_zones_file,
)

__all__ = ["load_config_file", "load_zone_table", "load_zones_file"]
