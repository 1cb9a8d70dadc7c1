"""Domain entities: permission catalog, policies, zones, tokens."""

from cftoken.domain.entities.permission import PermissionCatalogEntry, PermissionGroupRef
from cftoken.domain.entities.policy import PolicyDocument
from cftoken.domain.entities.token import (
    PermissionGroupSummary,
    TokenInspection,
    TokenPolicyInspection,
    TokenResult,
    TokenSpecification,
    TokenVerification,
)
from cftoken.domain.entities.zone import (
    ConfiguredZone,
    ExtendedZone,
    GlobalDefaults,
    SimpleZone,
    ZoneEntry,
    ZoneRecord,
    ZoneTable,
)

__all__ = [
    "ConfiguredZone",
    "ExtendedZone",
    "GlobalDefaults",
    "PermissionCatalogEntry",
    "PermissionGroupRef",
    "PermissionGroupSummary",
    "PolicyDocument",
    "SimpleZone",
    "TokenInspection",
    "TokenPolicyInspection",
    "TokenResult",
    "TokenSpecification",
    "TokenVerification",
    "ZoneEntry",
    "ZoneRecord",
    "ZoneTable",
]
