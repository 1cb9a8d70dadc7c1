"""Pytest configuration and shared fixtures for cftoken.

Settings are isolated per test: the config directory points at tmp_path
and the settings cache is cleared so env overrides take effect.
"""

from datetime import timedelta

import pytest

from cftoken.application.services.token_provisioning_service import StaticPermissionCatalog
from cftoken.core.config import get_settings
from cftoken.domain.entities.permission import PermissionCatalogEntry
from cftoken.domain.entities.zone import (
    ExtendedZone,
    GlobalDefaults,
    SimpleZone,
    ZoneRecord,
    ZoneTable,
)
from tests.helpers import FIXED_NOW, OTHER_ZONE_ID, ZONE_ID


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the config dir at a temp directory and provide a dummy API token."""
    config_dir = tmp_path / "cftoken-config"
    config_dir.mkdir()
    monkeypatch.setenv("CFTOKEN_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("CLOUDFLARE_API_TOKEN", "test-management-token")
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    get_settings.cache_clear()
    yield config_dir
    get_settings.cache_clear()


@pytest.fixture
def catalog_entries() -> list[PermissionCatalogEntry]:
    return [
        PermissionCatalogEntry(id="p1", name="Zone Read", alias_key="zone.read"),
        PermissionCatalogEntry(id="p2", name="DNS Write", alias_key="zone.dns.edit"),
        PermissionCatalogEntry(id="p3", name="Cache Purge", alias_key="zone.cache_purge"),
    ]


@pytest.fixture
def catalog(catalog_entries) -> StaticPermissionCatalog:
    return StaticPermissionCatalog(catalog_entries)


@pytest.fixture
def zone_table() -> ZoneTable:
    """Zones covering bare IDs, static records, inheriting records and templates."""
    return ZoneTable(
        zones={
            "plain.com": SimpleZone(ZONE_ID),
            "static.com": ExtendedZone(
                ZoneRecord(
                    zone_id=OTHER_ZONE_ID,
                    permissions=("DNS Write",),
                    allowed_cidrs=("192.0.2.0/24",),
                    ttl=timedelta(hours=1),
                )
            ),
            "inherit.com": ExtendedZone(
                ZoneRecord(zone_id=ZONE_ID, inherit_defaults=True)
            ),
            "templated.com": ExtendedZone(
                ZoneRecord(
                    zone_id=ZONE_ID,
                    template_inline=(
                        '[{"effect": "allow", '
                        '"resources": {"com.cloudflare.api.account.zone.{{ .ZoneID }}": "*"}, '
                        '"permission_groups": [{"id": "{{ .PermID }}"}]}]'
                    ),
                    variables={"PermID": "from-record"},
                )
            ),
        },
        defaults=GlobalDefaults(
            permissions=("Zone:Read",),
            allowed_cidrs=("10.0.0.1/32",),
        ),
    )


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW
