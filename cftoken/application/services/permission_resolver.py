"""Resolves free-form permission identifiers against the permission catalog."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import NamedTuple

from cftoken.domain.entities.permission import PermissionCatalogEntry, PermissionGroupRef
from cftoken.domain.exceptions import NoPermissionsSpecified, PermissionNotFound
from cftoken.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_KEY_STRIP = str.maketrans("", "", " _-:.")


def normalize_key(value: str) -> str:
    """Lowercase and strip space, underscore, hyphen, colon and period.

    'Zone:Read', 'zone_read' and 'ZONE-READ' all normalize to 'zoneread'.
    """
    return value.strip().lower().translate(_KEY_STRIP)


class PermissionMatch(NamedTuple):
    """Matched policy references and catalog entries, in input order."""

    refs: list[PermissionGroupRef]
    entries: list[PermissionCatalogEntry]


class PermissionResolver:
    """Matches permission inputs by exact ID, normalized name, then normalized alias key.

    Catalog entries are scanned in order and each entry is tried against all
    three strategies; the first entry matching any of them wins. Two entries
    sharing a normalized name are not reported as ambiguous.
    """

    def __init__(self, catalog: Sequence[PermissionCatalogEntry]) -> None:
        self._catalog = list(catalog)
        self._strategies: list[Callable[[str, PermissionCatalogEntry], bool]] = [
            lambda raw, entry: raw.strip().casefold() == entry.id.casefold(),
            lambda raw, entry: normalize_key(entry.name) == normalize_key(raw),
            lambda raw, entry: bool(entry.alias_key)
            and normalize_key(entry.alias_key) == normalize_key(raw),
        ]

    def find(self, permission: str) -> PermissionCatalogEntry | None:
        """Return the catalog entry for one input, or None when nothing matches."""
        for entry in self._catalog:
            if any(strategy(permission, entry) for strategy in self._strategies):
                return entry
        return None

    def match(self, inputs: Sequence[str]) -> PermissionMatch:
        """Resolve every input; fail on the first one that matches nothing.

        Raises:
            NoPermissionsSpecified: If inputs is empty.
            PermissionNotFound: If any input has no match (no partial result).
        """
        if not inputs:
            raise NoPermissionsSpecified()
        refs: list[PermissionGroupRef] = []
        entries: list[PermissionCatalogEntry] = []
        for permission in inputs:
            entry = self.find(permission)
            if entry is None:
                raise PermissionNotFound(permission)
            logger.debug("permission %r resolved to %s (%s)", permission, entry.id, entry.name)
            refs.append(PermissionGroupRef(id=entry.id))
            entries.append(entry)
        return PermissionMatch(refs, entries)


def match_permissions(
    catalog: Sequence[PermissionCatalogEntry], inputs: Sequence[str]
) -> PermissionMatch:
    """Resolve inputs against catalog (see PermissionResolver.match)."""
    return PermissionResolver(catalog).match(inputs)
