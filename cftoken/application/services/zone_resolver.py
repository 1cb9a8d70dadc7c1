"""Zone lookup by name with default inheritance."""

from __future__ import annotations

from dataclasses import replace
from typing import NamedTuple

from cftoken.domain.entities.zone import (
    ConfiguredZone,
    ExtendedZone,
    GlobalDefaults,
    ZoneRecord,
    ZoneTable,
)
from cftoken.domain.exceptions import ZoneNotFound
from cftoken.domain.value_objects.core import normalize_zone_name


class ResolvedZone(NamedTuple):
    """Zone ID plus the extended record (None for a bare ID entry)."""

    zone_id: str
    record: ZoneRecord | None


def apply_defaults(record: ZoneRecord, defaults: GlobalDefaults) -> ZoneRecord:
    """Copy global permissions/CIDRs into a record that opts in and omits them.

    Only records with inherit_defaults set are changed, and only the fields
    they leave empty. Returns a new record; the input is not mutated.
    """
    if not record.inherit_defaults:
        return record
    changes: dict[str, tuple[str, ...]] = {}
    if not record.permissions and defaults.permissions:
        changes["permissions"] = tuple(defaults.permissions)
    if not record.allowed_cidrs and defaults.allowed_cidrs:
        changes["allowed_cidrs"] = tuple(defaults.allowed_cidrs)
    return replace(record, **changes) if changes else record


def resolve_zone(name: str, table: ZoneTable) -> ResolvedZone:
    """Resolve a zone name ('Example.COM.' == 'example.com') to its ID and record.

    Inheritance of global defaults happens here, once, before the record
    is returned.

    Raises:
        ZoneNotFound: If the normalized name is empty or not configured.
    """
    key = normalize_zone_name(name)
    entry = table.zones.get(key) if key else None
    if entry is None:
        raise ZoneNotFound(name)
    if isinstance(entry, ExtendedZone):
        return ResolvedZone(entry.zone_id, apply_defaults(entry.record, table.defaults))
    return ResolvedZone(entry.zone_id, None)


def list_configured_zones(table: ZoneTable) -> list[ConfiguredZone]:
    """Return every configured zone sorted by name."""
    return [
        ConfiguredZone(name=name, id=entry.zone_id, source=table.sources.get(name, ""))
        for name, entry in sorted(table.zones.items())
    ]
