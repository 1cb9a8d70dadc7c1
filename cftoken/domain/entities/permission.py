"""Permission catalog entities.

A catalog entry is a provider-defined capability grant. The catalog is
fetched once per run and never mutated.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PermissionCatalogEntry:
    """One permission group offered by the provider.

    ``alias_key`` is the machine-friendly key (Cloudflare ``meta.key``);
    it may be empty.
    """

    id: str
    name: str
    alias_key: str = ""
    description: str = ""
    scopes: tuple[str, ...] = ()

    def display_name(self) -> str:
        """Return the first non-blank of name, alias key and id."""
        for value in (self.name, self.alias_key, self.id):
            if value.strip():
                return value
        return ""


@dataclass(frozen=True)
class PermissionGroupRef:
    """Reference to a permission group inside a policy (id plus optional name)."""

    id: str
    name: str | None = None
