"""Policy document entity.

Represents an allow/deny rule pairing resources with permission groups,
independent of the wire format used to submit it.
"""

from dataclasses import dataclass
from typing import Any

from cftoken.domain.entities.permission import PermissionGroupRef
from cftoken.domain.exceptions import InvalidPolicyEffect

VALID_EFFECTS = frozenset({"allow", "deny"})


@dataclass(frozen=True)
class PolicyDocument:
    """Domain entity for one token policy. Validation runs on construction."""

    effect: str
    resources: dict[str, str]
    permission_groups: tuple[PermissionGroupRef, ...] = ()
    id: str | None = None

    def __post_init__(self) -> None:
        if self.effect not in VALID_EFFECTS:
            raise InvalidPolicyEffect(self.effect)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready representation used by the token API."""
        payload: dict[str, Any] = {
            "effect": self.effect,
            "resources": dict(self.resources),
            "permission_groups": [{"id": ref.id} for ref in self.permission_groups],
        }
        if self.id:
            payload["id"] = self.id
        return payload
