"""Token provisioning use case: build a specification, then preview or submit it."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from cftoken.application.dtos.token import TokenOverrides
from cftoken.application.interfaces.services import IPermissionCatalog, ITokenSink
from cftoken.application.services.token_spec_builder import TokenSpecificationBuilder
from cftoken.domain.entities.permission import PermissionCatalogEntry
from cftoken.domain.entities.token import TokenResult, TokenSpecification
from cftoken.domain.entities.zone import ZoneTable
from cftoken.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class StaticPermissionCatalog:
    """In-memory catalog (implements IPermissionCatalog) for prefetched entries."""

    def __init__(self, entries: Sequence[PermissionCatalogEntry]) -> None:
        self._entries = list(entries)

    def list_permission_groups(self) -> list[PermissionCatalogEntry]:
        return list(self._entries)


@dataclass(frozen=True)
class ProvisioningOutcome:
    """Specification that was built and, unless previewing, the created token."""

    spec: TokenSpecification
    result: TokenResult | None = None

    @property
    def dry_run(self) -> bool:
        return self.result is None


class TokenProvisioningService:
    """Runs the builder and hands the finished specification to the sink.

    Submission failures are not retried.
    """

    def __init__(self, builder: TokenSpecificationBuilder, sink: ITokenSink) -> None:
        self.builder = builder
        self.sink = sink

    @classmethod
    def create(
        cls, catalog: IPermissionCatalog, sink: ITokenSink, zone_table: ZoneTable
    ) -> TokenProvisioningService:
        """Convenience constructor wiring a default builder."""
        return cls(TokenSpecificationBuilder(catalog, zone_table), sink)

    def preview(self, overrides: TokenOverrides) -> ProvisioningOutcome:
        """Resolve everything (including the catalog fetch) without creating a token."""
        spec = self.builder.build(overrides)
        logger.info("dry run: token %s not created", spec.name)
        return ProvisioningOutcome(spec=spec)

    def provision(self, overrides: TokenOverrides) -> ProvisioningOutcome:
        """Build the specification and create the token."""
        spec = self.builder.build(overrides)
        logger.info("creating token %s for zone %s", spec.name, spec.zone_id)
        result = self.sink.create_token(spec)
        if not result.zone_id or not result.allowed_cidrs:
            result = replace(
                result,
                zone_id=result.zone_id or spec.zone_id,
                allowed_cidrs=result.allowed_cidrs or spec.allowed_cidrs,
            )
        return ProvisioningOutcome(spec=spec, result=result)
