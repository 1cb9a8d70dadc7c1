"""Builds a finished TokenSpecification from overrides, zone config and defaults.

Every field is resolved through an explicit, ordered list of layers:
caller override, zone record, global default, hard-coded fallback. Each
layer returns ``(value, present)`` and the first present value wins.
The builder never submits anything; it is a pure function of its inputs
apart from the permission catalog fetch, which only happens when static
permission names have to be matched.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any, NamedTuple, TypeVar

from cftoken.application.dtos.token import TokenOverrides
from cftoken.application.interfaces.services import IPermissionCatalog
from cftoken.application.services.cidr_normalizer import normalize_cidrs
from cftoken.application.services.permission_resolver import PermissionResolver
from cftoken.application.services.policy_template_renderer import PolicyTemplateRenderer
from cftoken.application.services.zone_resolver import resolve_zone
from cftoken.core.constants import (
    DEFAULT_PERMISSION_KEYS,
    DEFAULT_TOKEN_TTL,
    TOKEN_NAME_TIME_FORMAT,
    WILDCARD_RESOURCE,
    ZONE_RESOURCE_PREFIX,
)
from cftoken.domain.entities.permission import PermissionCatalogEntry
from cftoken.domain.entities.policy import PolicyDocument
from cftoken.domain.entities.token import TokenSpecification
from cftoken.domain.entities.zone import ZoneRecord, ZoneTable
from cftoken.domain.exceptions import (
    MissingTokenPrefix,
    MissingZoneIdentifier,
    NoCIDRsConfigured,
    TemplateOutputInvalid,
    ZoneNotFound,
)
from cftoken.domain.value_objects.core import looks_like_zone_id
from cftoken.shared.telemetry.logging import get_logger
from cftoken.shared.utils.datetime import ensure_utc, utc_now

logger = get_logger(__name__)

T = TypeVar("T")

# A precedence layer: (layer name, callable returning (value, present)).
Layer = tuple[str, Callable[[], tuple[T, bool]]]

LAYER_OVERRIDE = "override"
LAYER_ZONE = "zone"
LAYER_DEFAULT = "default"
LAYER_FALLBACK = "fallback"


def first_present(field_name: str, layers: list[Layer[T]]) -> tuple[T | None, str | None]:
    """Return the value and layer name of the first present layer, or (None, None)."""
    for layer_name, candidate in layers:
        value, present = candidate()
        if present:
            logger.debug("%s resolved from %s layer", field_name, layer_name)
            return value, layer_name
    return None, None


def format_token_name(prefix: str, created_at: datetime) -> str:
    """Return '<prefix>-<UTC timestamp>', e.g. 'dev-20240102T150405Z'."""
    return f"{prefix}-{ensure_utc(created_at).strftime(TOKEN_NAME_TIME_FORMAT)}"


def zone_resource_key(zone_id: str) -> str:
    """Policy resource key granting access to one zone."""
    return f"{ZONE_RESOURCE_PREFIX}.{zone_id}"


class ZoneContext(NamedTuple):
    """Zone ID, display name (None for a direct ID) and extended record."""

    zone_id: str
    zone_name: str | None
    record: ZoneRecord | None


class TokenSpecificationBuilder:
    """Merges overrides, zone configuration and defaults into a TokenSpecification."""

    def __init__(
        self,
        catalog: IPermissionCatalog,
        zone_table: ZoneTable,
        renderer: PolicyTemplateRenderer | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._catalog = catalog
        self._zone_table = zone_table
        self._renderer = renderer or PolicyTemplateRenderer()
        self._clock = clock

    def build(self, overrides: TokenOverrides) -> TokenSpecification:
        """Resolve every field and return the finished specification.

        Raises:
            MissingZoneIdentifier, ZoneNotFound: Zone could not be determined.
            MissingTokenPrefix: No name source is available.
            NoCIDRsConfigured, MalformedCIDR: Allow-list problems.
            NoPermissionsSpecified, PermissionNotFound: Permission resolution failed.
            NoTemplateSource, TemplateReadError, TemplateSyntaxInvalid,
            TemplateOutputInvalid: Template rendering failed.
        """
        zone = self.resolve_zone_context(overrides)
        created_at = ensure_utc(self._clock())

        prefix = self._resolve_prefix(overrides, zone)
        name = format_token_name(prefix, created_at)

        cidrs, disabled = self._resolve_cidrs(overrides, zone.record)
        ttl = self._resolve_ttl(overrides, zone.record)
        expires_at = created_at + ttl if ttl > timedelta(0) else None

        if overrides.permissions is None and zone.record is not None and zone.record.has_template:
            policies = self._render_template(overrides, zone.record)
            permission_inputs: list[str] = []
            matched: list[PermissionCatalogEntry] = []
            from_template = True
        else:
            permission_inputs = self._resolve_permission_inputs(overrides, zone.record)
            match = PermissionResolver(self._catalog.list_permission_groups()).match(
                permission_inputs
            )
            policies = [
                PolicyDocument(
                    effect="allow",
                    resources={zone_resource_key(zone.zone_id): WILDCARD_RESOURCE},
                    permission_groups=tuple(match.refs),
                )
            ]
            matched = match.entries
            from_template = False

        return TokenSpecification(
            name=name,
            policies=tuple(policies),
            created_at=created_at,
            expires_at=expires_at,
            allowed_cidrs=tuple(cidrs),
            ip_restriction_disabled=disabled,
            zone_id=zone.zone_id,
            zone_name=zone.zone_name,
            permission_inputs=tuple(permission_inputs),
            matched_permissions=tuple(matched),
            from_template=from_template,
        )

    def resolve_zone_context(self, overrides: TokenOverrides) -> ZoneContext:
        """Determine the zone from an explicit ID or a configured (or ID-shaped) name.

        Raises:
            MissingZoneIdentifier: Neither zone ID nor zone name given.
            ZoneNotFound: Name is not configured and does not look like an ID.
        """
        zone_id = (overrides.zone_id or "").strip()
        if zone_id:
            return ZoneContext(zone_id, None, None)

        zone_name = (overrides.zone_name or "").strip()
        if not zone_name:
            raise MissingZoneIdentifier()
        try:
            resolved = resolve_zone(zone_name, self._zone_table)
        except ZoneNotFound:
            if looks_like_zone_id(zone_name):
                logger.debug("zone %r not configured; using it as a zone ID", zone_name)
                return ZoneContext(zone_name, None, None)
            raise
        return ZoneContext(resolved.zone_id, zone_name, resolved.record)

    def _resolve_prefix(self, overrides: TokenOverrides, zone: ZoneContext) -> str:
        prefix = (overrides.token_prefix or "").strip()
        value, _ = first_present(
            "token prefix",
            [
                (LAYER_OVERRIDE, lambda: (prefix, bool(prefix))),
                (LAYER_ZONE, lambda: (zone.zone_name, bool(zone.zone_name))),
            ],
        )
        if value is None:
            raise MissingTokenPrefix()
        return value

    def _resolve_permission_inputs(
        self, overrides: TokenOverrides, record: ZoneRecord | None
    ) -> list[str]:
        defaults = self._zone_table.defaults

        def from_override() -> tuple[list[str], bool]:
            if overrides.permissions is None:
                return [], False
            cleaned = [p.strip() for p in overrides.permissions if p.strip()]
            # An explicitly empty flag selects the hard-coded fallback.
            return cleaned or list(DEFAULT_PERMISSION_KEYS), True

        value, _ = first_present(
            "permissions",
            [
                (LAYER_OVERRIDE, from_override),
                (
                    LAYER_ZONE,
                    lambda: (
                        list(record.permissions) if record else [],
                        bool(record and record.permissions),
                    ),
                ),
                (LAYER_DEFAULT, lambda: (list(defaults.permissions), bool(defaults.permissions))),
                (LAYER_FALLBACK, lambda: (list(DEFAULT_PERMISSION_KEYS), True)),
            ],
        )
        return value or []

    def _resolve_cidrs(
        self, overrides: TokenOverrides, record: ZoneRecord | None
    ) -> tuple[list[str], bool]:
        defaults = self._zone_table.defaults
        raw, layer = first_present(
            "allowed CIDRs",
            [
                (
                    LAYER_OVERRIDE,
                    lambda: (list(overrides.allowed_cidrs or ()), overrides.allowed_cidrs is not None),
                ),
                (
                    LAYER_ZONE,
                    lambda: (
                        list(record.allowed_cidrs) if record else [],
                        bool(record and record.allowed_cidrs),
                    ),
                ),
                (
                    LAYER_DEFAULT,
                    lambda: (list(defaults.allowed_cidrs), bool(defaults.allowed_cidrs)),
                ),
            ],
        )
        if raw is None:
            raise NoCIDRsConfigured()
        cidrs, disabled = normalize_cidrs(raw)
        if disabled:
            logger.debug("IP restriction disabled by sentinel CIDR")
        elif not cidrs:
            raise NoCIDRsConfigured(explicit=layer == LAYER_OVERRIDE)
        return cidrs, disabled

    def _resolve_ttl(self, overrides: TokenOverrides, record: ZoneRecord | None) -> timedelta:
        defaults = self._zone_table.defaults
        value, _ = first_present(
            "ttl",
            [
                (LAYER_OVERRIDE, lambda: (overrides.ttl, overrides.ttl is not None)),
                (
                    LAYER_ZONE,
                    lambda: (
                        record.ttl if record else None,
                        record is not None and record.ttl is not None,
                    ),
                ),
                (LAYER_DEFAULT, lambda: (defaults.ttl, defaults.ttl is not None)),
                (LAYER_FALLBACK, lambda: (DEFAULT_TOKEN_TTL, True)),
            ],
        )
        return value if value is not None else DEFAULT_TOKEN_TTL

    def _render_template(
        self, overrides: TokenOverrides, record: ZoneRecord
    ) -> list[PolicyDocument]:
        # ZoneID first, then record variables, then caller variables (last wins).
        variables: dict[str, Any] = {}
        if record.zone_id:
            variables["ZoneID"] = record.zone_id
        variables.update(record.variables)
        variables.update(overrides.variables)

        policies = self._renderer.render(
            record.template_file, record.template_inline, variables
        )
        if not policies:
            raise TemplateOutputInvalid("[]", "template rendered no policies")
        return policies
