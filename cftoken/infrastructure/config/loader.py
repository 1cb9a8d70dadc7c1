"""Loads config.json and zones.json into a ZoneTable.

config.json carries global defaults and an optional ``zones`` map;
zones.json (optional) is a zone map whose entries override same-named
zones from config.json. Either file may be absent. Each zone entry is
turned into SimpleZone or ExtendedZone here, once.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from cftoken.core.constants import (
    CONFIG_FILE_NAME,
    ZONE_SOURCE_CONFIG,
    ZONE_SOURCE_ZONES_FILE,
    ZONES_FILE_NAME,
)
from cftoken.domain.entities.zone import (
    ExtendedZone,
    GlobalDefaults,
    SimpleZone,
    ZoneEntry,
    ZoneRecord,
    ZoneTable,
)
from cftoken.domain.exceptions import InvalidConfiguration
from cftoken.domain.value_objects.core import normalize_zone_name
from cftoken.schemas.config_file import ConfigFileSchema, ZoneEntrySchema, ZoneRecordSchema
from cftoken.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_ZONE_MAP_ADAPTER = TypeAdapter(dict[str, ZoneEntrySchema])


def _read_json(path: Path) -> Any | None:
    """Return parsed JSON, or None when the file does not exist."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("config file %s not found", path)
        return None
    except OSError as e:
        raise InvalidConfiguration(f"read {path}: {e.strerror or e}", str(path)) from e
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(f"parse {path}: {e}", str(path)) from e


def _validation_message(path: Path, error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"invalid {path}: {location}: {first.get('msg', 'invalid value')}"


def _to_entry(schema: str | ZoneRecordSchema) -> ZoneEntry | None:
    if isinstance(schema, str):
        zone_id = schema.strip()
        return SimpleZone(zone_id) if zone_id else None
    return ExtendedZone(
        ZoneRecord(
            zone_id=schema.zone_id,
            permissions=tuple(schema.permissions),
            allowed_cidrs=tuple(schema.allowed_cidrs),
            ttl=schema.ttl,
            template_file=schema.template_file,
            template_inline=schema.template_inline,
            variables=dict(schema.variables),
            inherit_defaults=schema.inherit_defaults,
        )
    )


def _add_zones(
    zones: dict[str, ZoneEntry],
    sources: dict[str, str],
    raw: dict[str, str | ZoneRecordSchema],
    source: str,
) -> None:
    for name, schema in raw.items():
        key = normalize_zone_name(name)
        if not key:
            continue
        entry = _to_entry(schema)
        if entry is None:
            continue
        zones[key] = entry
        sources[key] = source


def load_config_file(path: Path) -> ConfigFileSchema:
    """Load and validate config.json; a missing file yields empty defaults.

    Raises:
        InvalidConfiguration: If the file is unreadable, not JSON, or invalid.
    """
    data = _read_json(path)
    if data is None:
        return ConfigFileSchema()
    try:
        return ConfigFileSchema.model_validate(data)
    except ValidationError as e:
        raise InvalidConfiguration(_validation_message(path, e), str(path)) from e


def load_zones_file(path: Path) -> dict[str, str | ZoneRecordSchema]:
    """Load and validate zones.json; a missing file yields no zones.

    Raises:
        InvalidConfiguration: If the file is unreadable, not JSON, or invalid.
    """
    data = _read_json(path)
    if data is None:
        return {}
    try:
        return _ZONE_MAP_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise InvalidConfiguration(_validation_message(path, e), str(path)) from e


def load_zone_table(config_dir: Path) -> ZoneTable:
    """Build the ZoneTable from the files in config_dir."""
    config_path = config_dir / CONFIG_FILE_NAME
    config = load_config_file(config_path)
    zones: dict[str, ZoneEntry] = {}
    sources: dict[str, str] = {}
    _add_zones(zones, sources, config.zones, ZONE_SOURCE_CONFIG)
    _add_zones(zones, sources, load_zones_file(config_dir / ZONES_FILE_NAME), ZONE_SOURCE_ZONES_FILE)
    logger.debug("loaded %d zone(s) from %s", len(zones), config_dir)
    return ZoneTable(
        zones=zones,
        defaults=GlobalDefaults(
            permissions=tuple(config.default_permissions),
            allowed_cidrs=tuple(config.default_allowed_cidrs),
            ttl=config.default_ttl,
        ),
        sources=sources,
    )
