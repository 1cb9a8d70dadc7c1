"""Schemas for policy documents produced by rendered templates."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from cftoken.domain.entities.permission import PermissionGroupRef
from cftoken.domain.entities.policy import PolicyDocument


class PermissionGroupSchema(BaseModel):
    """Permission group reference inside a policy."""

    id: str = Field(..., min_length=1)
    name: str | None = None


class PolicyDocumentSchema(BaseModel):
    """One policy object as written in a template's JSON output.

    A missing or empty effect means 'allow'; non-string resource values
    are stringified. The effect itself is checked by PolicyDocument.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    effect: str = "allow"
    resources: dict[str, Any]
    permission_groups: list[PermissionGroupSchema] = Field(default_factory=list)

    @field_validator("effect", mode="before")
    @classmethod
    def default_effect(cls, value: Any) -> Any:
        if value is None or value == "":
            return "allow"
        return value

    @field_validator("resources")
    @classmethod
    def stringify_resources(cls, value: dict[str, Any]) -> dict[str, str]:
        return {key: v if isinstance(v, str) else str(v) for key, v in value.items()}

    def to_entity(self) -> PolicyDocument:
        """Convert to the domain entity (raises InvalidPolicyEffect on bad effect)."""
        return PolicyDocument(
            id=self.id or None,
            effect=self.effect,
            resources=dict(self.resources),
            permission_groups=tuple(
                PermissionGroupRef(id=group.id, name=group.name)
                for group in self.permission_groups
            ),
        )


PolicyListAdapter = TypeAdapter(list[PolicyDocumentSchema])
