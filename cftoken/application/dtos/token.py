"""DTOs for token provisioning use cases (no dependency on transport)."""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any


@dataclass(frozen=True)
class TokenOverrides:
    """Explicit caller overrides, highest in every precedence chain.

    ``None`` means "not provided". An empty ``permissions`` tuple means the
    flag was given but empty, which selects the hard-coded fallback.
    ``allowed_cidrs`` is the raw list; it is normalized by the builder.
    """

    token_prefix: str | None = None
    zone_id: str | None = None
    zone_name: str | None = None
    permissions: tuple[str, ...] | None = None
    allowed_cidrs: tuple[str, ...] | None = None
    ttl: timedelta | None = None
    variables: dict[str, Any] = field(default_factory=dict)
