"""Zone configuration entities.

A zone entry is either a bare zone ID or an extended record. The variant
is decided once when configuration is loaded, so use sites never branch
on the raw JSON shape.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any


@dataclass(frozen=True)
class ZoneRecord:
    """Extended per-zone settings.

    Empty ``permissions``/``allowed_cidrs`` mean "not set by this record";
    ``ttl`` of None means the record does not override the TTL.
    """

    zone_id: str
    permissions: tuple[str, ...] = ()
    allowed_cidrs: tuple[str, ...] = ()
    ttl: timedelta | None = None
    template_file: str | None = None
    template_inline: str | None = None
    variables: dict[str, Any] = field(default_factory=dict)
    inherit_defaults: bool = False

    @property
    def has_template(self) -> bool:
        """Return whether this record renders its policies from a template."""
        return bool(self.template_file or self.template_inline)


@dataclass(frozen=True)
class SimpleZone:
    """Zone entry that only maps a name to an ID."""

    zone_id: str


@dataclass(frozen=True)
class ExtendedZone:
    """Zone entry carrying a full ZoneRecord."""

    record: ZoneRecord

    @property
    def zone_id(self) -> str:
        return self.record.zone_id


ZoneEntry = SimpleZone | ExtendedZone


@dataclass(frozen=True)
class GlobalDefaults:
    """Defaults from config.json that sit below zone records in precedence."""

    permissions: tuple[str, ...] = ()
    allowed_cidrs: tuple[str, ...] = ()
    ttl: timedelta | None = None


@dataclass(frozen=True)
class ZoneTable:
    """All configured zones keyed by normalized name, plus global defaults.

    ``sources`` records where each zone came from (for listing only).
    """

    zones: dict[str, ZoneEntry] = field(default_factory=dict)
    defaults: GlobalDefaults = field(default_factory=GlobalDefaults)
    sources: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ConfiguredZone:
    """Row of the zone listing: name, ID and where it was configured."""

    name: str
    id: str
    source: str
