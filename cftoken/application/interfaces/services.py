"""Service interfaces (ports) for the application layer.

Protocols define the two external collaborators the resolution engine
depends on: the permission catalog fetch and the token submission sink.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from cftoken.domain.entities.permission import PermissionCatalogEntry
    from cftoken.domain.entities.token import TokenResult, TokenSpecification


class IPermissionCatalog(Protocol):
    """Protocol for fetching the provider's permission catalog."""

    def list_permission_groups(self) -> list[PermissionCatalogEntry]:
        """Return every permission group available to the management token.

        Transport failures propagate unchanged as fatal errors.
        """


class ITokenSink(Protocol):
    """Protocol for submitting a finished token specification."""

    def create_token(self, spec: TokenSpecification) -> TokenResult:
        """Create the token and return its identifier, name and secret (if issued)."""
