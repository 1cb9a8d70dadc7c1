"""Token domain entities.

TokenSpecification is the finished, provider-agnostic request produced by
the builder. The remaining types describe what the provider returns.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from cftoken.domain.entities.permission import PermissionCatalogEntry
from cftoken.domain.entities.policy import PolicyDocument
from cftoken.domain.exceptions import NoCIDRsConfigured


@dataclass(frozen=True)
class TokenSpecification:
    """Fully resolved token request: name, policies, expiry, CIDR allow-list.

    Invariants: at least one policy, and at least one allowed CIDR unless
    IP restriction is disabled. The remaining fields describe how the
    specification was resolved (used by preview output).
    """

    name: str
    policies: tuple[PolicyDocument, ...]
    created_at: datetime
    expires_at: datetime | None = None
    allowed_cidrs: tuple[str, ...] = ()
    ip_restriction_disabled: bool = False
    zone_id: str = ""
    zone_name: str | None = None
    permission_inputs: tuple[str, ...] = ()
    matched_permissions: tuple[PermissionCatalogEntry, ...] = ()
    from_template: bool = False

    def __post_init__(self) -> None:
        if not self.policies:
            raise ValueError("Token specification requires at least one policy")
        if not self.allowed_cidrs and not self.ip_restriction_disabled:
            raise NoCIDRsConfigured()

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body for the token creation endpoint."""
        payload: dict[str, Any] = {
            "name": self.name,
            "policies": [policy.to_payload() for policy in self.policies],
        }
        if self.expires_at is not None:
            payload["expires_on"] = format_rfc3339(self.expires_at)
        if self.allowed_cidrs:
            payload["condition"] = {"request_ip": {"in": list(self.allowed_cidrs)}}
        return payload


@dataclass(frozen=True)
class TokenResult:
    """Subset of the create-token response the CLI reports."""

    id: str
    name: str
    status: str = ""
    value: str = ""
    expires_on: str = ""
    zone_id: str = ""
    allowed_cidrs: tuple[str, ...] = ()


@dataclass(frozen=True)
class TokenVerification:
    """Metadata returned by the verify endpoint."""

    id: str
    status: str = ""
    expires_on: str = ""
    not_before: str = ""


@dataclass(frozen=True)
class PermissionGroupSummary:
    """Concise permission group metadata inside an inspected policy."""

    id: str
    name: str = ""
    key: str = ""


@dataclass(frozen=True)
class TokenPolicyInspection:
    """Essential components of one policy of an existing token."""

    effect: str
    permission_groups: tuple[PermissionGroupSummary, ...] = ()
    resources: tuple[str, ...] = ()


@dataclass(frozen=True)
class TokenInspection:
    """Summary of an existing token's configuration."""

    id: str
    name: str = ""
    status: str = ""
    expires_on: str = ""
    not_before: str = ""
    allowed_cidrs: tuple[str, ...] = ()
    denied_cidrs: tuple[str, ...] = ()
    policies: tuple[TokenPolicyInspection, ...] = field(default_factory=tuple)


def format_rfc3339(value: datetime) -> str:
    """Format a datetime as RFC3339 in UTC with a 'Z' suffix (naive values are taken as UTC)."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")
