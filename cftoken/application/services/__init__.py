"""Application services: the token specification resolution engine."""

from cftoken.application.services.cidr_normalizer import (
    NormalizedCIDRs,
    normalize_cidrs,
    split_cidr_list,
)
from cftoken.application.services.permission_resolver import (
    PermissionMatch,
    PermissionResolver,
    match_permissions,
    normalize_key,
)
from cftoken.application.services.policy_template_renderer import (
    PolicyTemplateRenderer,
    render_policies,
)
from cftoken.application.services.token_provisioning_service import (
    ProvisioningOutcome,
    StaticPermissionCatalog,
    TokenProvisioningService,
)
from cftoken.application.services.token_spec_builder import (
    TokenSpecificationBuilder,
    format_token_name,
)
from cftoken.application.services.zone_resolver import (
    ResolvedZone,
    list_configured_zones,
    resolve_zone,
)

__all__ = [
    "NormalizedCIDRs",
    "PermissionMatch",
    "PermissionResolver",
    "PolicyTemplateRenderer",
    "ProvisioningOutcome",
    "ResolvedZone",
    "StaticPermissionCatalog",
    "TokenProvisioningService",
    "TokenSpecificationBuilder",
    "format_token_name",
    "list_configured_zones",
    "match_permissions",
    "normalize_cidrs",
    "normalize_key",
    "render_policies",
    "resolve_zone",
    "split_cidr_list",
]
