"""Tests for the cftoken command line (argument handling and command dispatch)."""

import json

import httpx
import pytest

from cftoken import cli
from cftoken.core.config import get_settings
from cftoken.domain.exceptions import InvalidArgument
from cftoken.infrastructure.external.cloudflare.client import CloudflareClient
from tests.helpers import ZONE_ID

PERMISSION_GROUPS = [
    {"id": "p1", "name": "Zone Read", "meta": {"key": "zone.read"}},
    {"id": "p2", "name": "DNS Write", "meta": {"key": "zone.dns.edit"}},
]


def _ok(result) -> httpx.Response:
    return httpx.Response(200, json={"success": True, "errors": [], "result": result})


class FakeCloudflare:
    """MockTransport handler emulating the user-token endpoints."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.tokens_seen: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.tokens_seen.append(request.headers["Authorization"])
        path = request.url.path
        if path.endswith("/user/tokens/permission_groups"):
            return _ok(PERMISSION_GROUPS)
        if path.endswith("/user/tokens/verify"):
            return _ok({"id": "tok-verify", "status": "active"})
        if request.method == "POST" and path.endswith("/user/tokens"):
            body = json.loads(request.content)
            return _ok(
                {
                    "id": "tok-new",
                    "name": body["name"],
                    "status": "active",
                    "value": "new-secret",
                    "expires_on": body.get("expires_on"),
                }
            )
        if "/user/tokens/" in path:
            return _ok(
                {
                    "id": path.rsplit("/", 1)[-1],
                    "name": "inspected",
                    "status": "active",
                    "condition": {"request_ip": {"in": ["10.0.0.1/32"]}},
                    "policies": [
                        {
                            "effect": "allow",
                            "resources": {f"com.cloudflare.api.account.zone.{ZONE_ID}": "*"},
                            "permission_groups": [{"id": "p1", "name": "Zone Read"}],
                        }
                    ],
                }
            )
        return httpx.Response(404, json={"success": False, "errors": [{"message": "no route"}]})

    def posted(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]


@pytest.fixture
def fake_cloudflare(monkeypatch) -> FakeCloudflare:
    fake = FakeCloudflare()

    def from_settings(cls, settings, token=None, timeout=None):
        return cls(
            token or settings.require_api_token(),
            base_url=settings.cloudflare_api_base_url,
            transport=httpx.MockTransport(fake),
        )

    monkeypatch.setattr(CloudflareClient, "from_settings", classmethod(from_settings))
    return fake


@pytest.fixture
def config_dir(isolated_settings):
    (isolated_settings / "config.json").write_text(
        json.dumps(
            {
                "default_permissions": ["Zone:Read"],
                "default_allowed_cidrs": ["10.0.0.1/32"],
                "zones": {
                    "example.com": ZONE_ID,
                    "dns.example.com": {
                        "zone_id": ZONE_ID,
                        "permissions": ["DNS Write"],
                        "ttl": "1h",
                    },
                },
            }
        ),
        encoding="utf-8",
    )
    return isolated_settings


class TestParseTemplateVars:
    def test_pairs(self) -> None:
        assert cli.parse_template_vars(["A=1", " B = two ", "A=3", "C="]) == {
            "A": "3",
            "B": "two",
            "C": "",
        }

    def test_missing_separator(self) -> None:
        with pytest.raises(InvalidArgument, match="key=value"):
            cli.parse_template_vars(["oops"])


class TestOverridesFromArgs:
    def test_unset_flags_are_none(self) -> None:
        overrides = cli.overrides_from_args(cli.build_parser().parse_args(["--zone", "a.com"]))
        assert overrides.zone_name == "a.com"
        assert overrides.permissions is None
        assert overrides.allowed_cidrs is None
        assert overrides.ttl is None
        assert overrides.token_prefix is None

    def test_explicit_values(self) -> None:
        args = cli.build_parser().parse_args(
            [
                "--zone-id", ZONE_ID,
                "--token-prefix", "ci",
                "--permissions", "Zone Read, ,DNS Write",
                "--allow-cidrs", "10.0.0.1/32, 192.0.2.0/24",
                "--ttl", "30m",
                "--var", "Env=prod",
            ]
        )
        overrides = cli.overrides_from_args(args)
        assert overrides.permissions == ("Zone Read", "DNS Write")
        assert overrides.allowed_cidrs == ("10.0.0.1/32", "192.0.2.0/24")
        assert overrides.ttl.total_seconds() == 1800
        assert overrides.variables == {"Env": "prod"}

    def test_empty_permissions_flag(self) -> None:
        args = cli.build_parser().parse_args(["--zone", "a.com", "--permissions", ""])
        assert cli.overrides_from_args(args).permissions == ()


class TestMain:
    def test_no_arguments_prints_help(self, capsys) -> None:
        assert cli.main([]) == 0
        assert "usage: cftoken" in capsys.readouterr().out

    def test_invalid_ttl_is_a_usage_error(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--zone", "a.com", "--ttl", "soon"])
        assert exc_info.value.code == 2

    def test_inspect_token_requires_inspect(self, capsys) -> None:
        assert cli.main(["--inspect-token", "abc"]) == 1
        assert "error: --inspect-token requires --inspect" in capsys.readouterr().err

    def test_inspect_token_conflicts_with_creation(self, capsys) -> None:
        assert cli.main(["--zone", "example.com", "--inspect", "--inspect-token", "abc"]) == 1
        assert "cannot be combined" in capsys.readouterr().err

    def test_missing_api_token(self, monkeypatch, capsys, fake_cloudflare) -> None:
        monkeypatch.delenv("CLOUDFLARE_API_TOKEN")
        get_settings.cache_clear()
        assert cli.main(["--list-permissions"]) == 1
        assert "CLOUDFLARE_API_TOKEN" in capsys.readouterr().err
        assert fake_cloudflare.requests == []


class TestListing:
    def test_list_zones(self, config_dir, capsys) -> None:
        assert cli.main(["--list-zones"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["ZONE", "ID", "SOURCE"]
        assert lines[1].split() == ["dns.example.com", ZONE_ID, "config"]
        assert lines[2].split() == ["example.com", ZONE_ID, "config"]

    def test_list_zones_without_config(self, capsys) -> None:
        assert cli.main(["--list-zones"]) == 1
        assert "no zones configured" in capsys.readouterr().err

    def test_list_permissions(self, fake_cloudflare, capsys) -> None:
        assert cli.main(["--list-permissions"]) == 0
        out = capsys.readouterr().out
        assert "p1\tZone Read" in out
        assert "key: zone.dns.edit" in out


class TestCreation:
    def test_dry_run(self, config_dir, fake_cloudflare, capsys) -> None:
        assert cli.main(["--zone", "example.com", "--dry-run"]) == 0
        out = capsys.readouterr().out
        assert "DRY RUN: no changes made." in out
        assert "  Name: example.com-" in out
        assert f"  Zone: example.com ({ZONE_ID})" in out
        assert "Zone Read (p1, key: zone.read)" in out
        assert "Allowed CIDRs: 10.0.0.1/32" in out
        assert fake_cloudflare.posted() == []

    def test_dry_run_without_restriction(self, config_dir, fake_cloudflare, capsys) -> None:
        assert cli.main(["--zone", "example.com", "--allow-cidrs", "0.0.0.0/32", "--dry-run"]) == 0
        assert "none (IP restriction disabled)" in capsys.readouterr().out

    def test_create_token(self, config_dir, fake_cloudflare, capsys) -> None:
        assert cli.main(["--zone", "dns.example.com", "--token-prefix", "ci"]) == 0
        out = capsys.readouterr().out
        assert "Token created successfully." in out
        assert "Value:  new-secret" in out
        assert f"Zone ID: {ZONE_ID} (dns.example.com)" in out

        [body] = fake_cloudflare.posted()
        assert body["name"].startswith("ci-")
        assert body["policies"][0]["permission_groups"] == [{"id": "p2"}]
        assert body["condition"] == {"request_ip": {"in": ["10.0.0.1/32"]}}
        assert "expires_on" in body

    def test_create_and_inspect(self, config_dir, fake_cloudflare, capsys) -> None:
        assert cli.main(["--zone", "example.com", "--inspect"]) == 0
        out = capsys.readouterr().out
        assert "Token details:" in out
        assert "ID: tok-new" in out
        assert "Zone Read (p1)" in out

    def test_unknown_permission(self, config_dir, fake_cloudflare, capsys) -> None:
        assert cli.main(["--zone", "example.com", "--permissions", "Nope"]) == 1
        assert "permission group 'Nope' not found" in capsys.readouterr().err
        assert fake_cloudflare.posted() == []

    def test_unknown_zone(self, config_dir, fake_cloudflare, capsys) -> None:
        assert cli.main(["--zone", "missing.com"]) == 1
        assert "zone 'missing.com' not found" in capsys.readouterr().err


class TestInspection:
    def test_inspect_management_token(self, fake_cloudflare, capsys) -> None:
        assert cli.main(["--inspect"]) == 0
        assert "ID: tok-verify" in capsys.readouterr().out
        assert set(fake_cloudflare.tokens_seen) == {"Bearer test-management-token"}

    def test_inspect_other_token(self, fake_cloudflare, capsys) -> None:
        assert cli.main(["--inspect", "--inspect-token", "other-token"]) == 0
        assert "Token details:" in capsys.readouterr().out
        assert fake_cloudflare.tokens_seen[0] == "Bearer other-token"
        assert fake_cloudflare.tokens_seen[-1] == "Bearer test-management-token"
