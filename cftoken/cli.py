"""Command line entry point for cftoken.

Usage:
    cftoken --zone example.com [--permissions "Zone:Read,DNS:Edit"] [--dry-run]
    cftoken --list-zones
    cftoken --list-permissions
    cftoken --inspect [--inspect-token VALUE]

Environment:
    CLOUDFLARE_API_TOKEN   API token allowed to create tokens (required for API calls).
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from datetime import timedelta

from cftoken import __version__
from cftoken.application.dtos.token import TokenOverrides
from cftoken.application.services.cidr_normalizer import split_cidr_list
from cftoken.application.services.token_provisioning_service import TokenProvisioningService
from cftoken.application.services.token_spec_builder import zone_resource_key
from cftoken.application.services.zone_resolver import list_configured_zones
from cftoken.core.config import Settings, get_settings
from cftoken.core.constants import DEFAULT_TOKEN_TTL
from cftoken.domain.entities.token import (
    TokenInspection,
    TokenResult,
    TokenSpecification,
    format_rfc3339,
)
from cftoken.domain.exceptions import CftokenException, InvalidArgument, InvalidConfiguration
from cftoken.infrastructure.config.loader import load_zone_table
from cftoken.infrastructure.external.cloudflare.client import CloudflareClient
from cftoken.shared.telemetry.logging import get_logger, setup_logging
from cftoken.shared.utils.datetime import format_duration, parse_duration

logger = get_logger(__name__)


def _duration_arg(value: str) -> timedelta:
    try:
        return parse_duration(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def parse_template_vars(values: Sequence[str]) -> dict[str, str]:
    """Parse repeated key=value flags (later keys win).

    Raises:
        InvalidArgument: If a value has no '='.
    """
    out: dict[str, str] = {}
    for value in values:
        key, sep, val = value.partition("=")
        if not sep:
            raise InvalidArgument(
                f"invalid format; expected key=value, got {value!r}", argument="--var"
            )
        out[key.strip()] = val.strip()
    return out


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cftoken",
        description="Create narrowly-scoped Cloudflare API tokens for a zone.",
        epilog="Environment: CLOUDFLARE_API_TOKEN  API token with permission to create tokens (required).",
    )
    parser.add_argument(
        "--token-prefix",
        default="",
        help="Prefix for the new API token (defaults to zone name; timestamp appended automatically)",
    )
    parser.add_argument("--zone-id", default="", help="Zone identifier the new token should access")
    parser.add_argument(
        "--zone", default="", help="Zone name or configured zone with extended settings"
    )
    parser.add_argument(
        "--permissions",
        default=None,
        help="Comma-separated permission group names or IDs (default: Zone:Read)",
    )
    parser.add_argument(
        "--ttl",
        type=_duration_arg,
        default=None,
        help=f"Token TTL, e.g. 8h or 30m; 0 for no expiration (default: {format_duration(DEFAULT_TOKEN_TTL)})",
    )
    parser.add_argument(
        "--allow-cidrs",
        default=None,
        help="Comma-separated CIDRs allowed to use the token (0.0.0.0/32 disables IP restriction)",
    )
    parser.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Template variable (repeatable; overrides zone variables)",
    )
    parser.add_argument(
        "--list-permissions",
        action="store_true",
        help="List permission groups available to the current token and exit",
    )
    parser.add_argument("--list-zones", action="store_true", help="List configured zones and exit")
    parser.add_argument(
        "--inspect",
        action="store_true",
        help="Inspect token details (the new token when creating one, else the management or given token)",
    )
    parser.add_argument(
        "--inspect-token", default="", help="Token value to inspect with --inspect outside of token creation"
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Preview the token without calling the create endpoint"
    )
    parser.add_argument(
        "--timeout", type=_duration_arg, default=None, help="Request timeout, e.g. 15s or 1m"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _client(settings: Settings, args: argparse.Namespace, token: str | None = None) -> CloudflareClient:
    if token is None:
        try:
            token = settings.require_api_token()
        except ValueError as e:
            raise InvalidConfiguration(str(e)) from e
    timeout = args.timeout.total_seconds() if args.timeout else None
    return CloudflareClient.from_settings(settings, token=token, timeout=timeout)


def overrides_from_args(args: argparse.Namespace) -> TokenOverrides:
    """Translate parsed flags into TokenOverrides (None = flag not given)."""
    permissions = None
    if args.permissions is not None:
        permissions = tuple(p.strip() for p in args.permissions.split(",") if p.strip())
    allowed_cidrs = None
    if args.allow_cidrs is not None:
        allowed_cidrs = tuple(split_cidr_list(args.allow_cidrs))
    return TokenOverrides(
        token_prefix=args.token_prefix.strip() or None,
        zone_id=args.zone_id.strip() or None,
        zone_name=args.zone.strip() or None,
        permissions=permissions,
        allowed_cidrs=allowed_cidrs,
        ttl=args.ttl,
        variables=parse_template_vars(args.var),
    )


def run(args: argparse.Namespace) -> int:
    """Dispatch the selected command. Raises CftokenException on failure."""
    settings = get_settings()
    inspect_token = args.inspect_token.strip()
    creating = bool(args.token_prefix.strip() or args.zone.strip() or args.zone_id.strip())

    if inspect_token and not args.inspect:
        raise InvalidArgument("--inspect-token requires --inspect", argument="--inspect-token")
    if creating and inspect_token:
        raise InvalidArgument(
            "--inspect-token cannot be combined with token creation; "
            "the new token is inspected automatically",
            argument="--inspect-token",
        )

    if args.list_zones:
        list_zones(settings)
        return 0

    with _client(settings, args) as client:
        if args.list_permissions:
            list_permissions(client)
            return 0
        if args.inspect and not creating:
            run_inspection(settings, args, client, inspect_token)
            return 0

        zone_table = load_zone_table(settings.config_dir)
        service = TokenProvisioningService.create(client, client, zone_table)
        overrides = overrides_from_args(args)

        if args.dry_run:
            print_dry_run(service.preview(overrides).spec)
            return 0

        outcome = service.provision(overrides)
        print_token_result(outcome.result, outcome.spec)
        if args.inspect:
            print_token_inspection(client.describe_token(outcome.result.id))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        parser.print_help()
        return 0
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    try:
        return run(args)
    except CftokenException as e:
        logger.debug("command failed: %s %s", e.error_code, e.details)
        print(f"error: {e.message}", file=sys.stderr)
        return 1


# --- output ---------------------------------------------------------------


def _or(value: str, fallback: str) -> str:
    return value if value.strip() else fallback


def _join(values: Sequence[str], fallback: str) -> str:
    return ", ".join(values) if values else fallback


def list_zones(settings: Settings) -> None:
    zones = list_configured_zones(load_zone_table(settings.config_dir))
    if not zones:
        raise InvalidConfiguration(
            f"no zones configured; add a zones map to {settings.config_dir / 'config.json'}"
        )
    width = max(len("ZONE"), *(len(z.name) for z in zones))
    id_width = max(len("ID"), *(len(z.id) for z in zones))
    print(f"{'ZONE':<{width}}  {'ID':<{id_width}}  SOURCE")
    for zone in zones:
        print(f"{zone.name:<{width}}  {zone.id:<{id_width}}  {zone.source}")


def list_permissions(client: CloudflareClient) -> None:
    for entry in client.list_permission_groups():
        print(f"{entry.id}\t{entry.name}")
        if entry.description:
            print(f"    {entry.description}")
        if entry.alias_key:
            print(f"    key: {entry.alias_key}")


def run_inspection(
    settings: Settings, args: argparse.Namespace, management: CloudflareClient, token: str
) -> None:
    if token:
        with _client(settings, args, token=token) as verify_client:
            verification = verify_client.verify_token()
    else:
        verification = management.verify_token()
    print_token_inspection(management.describe_token(verification.id))


def print_dry_run(spec: TokenSpecification) -> None:
    print("DRY RUN: no changes made.")
    print("Token would be created with:")
    print(f"  Name: {spec.name}")
    if spec.zone_name:
        print(f"  Zone: {spec.zone_name} ({spec.zone_id})")
    else:
        print(f"  Zone ID: {spec.zone_id}")
    print(f"  Expires: {format_rfc3339(spec.expires_at) if spec.expires_at else 'none'}")
    cidrs = "none (IP restriction disabled)" if spec.ip_restriction_disabled else _join(spec.allowed_cidrs, "none")
    print(f"  Allowed CIDRs: {cidrs}")
    if spec.from_template:
        print("  Policies (from template):")
        for idx, policy in enumerate(spec.policies, start=1):
            groups = ", ".join(ref.name or ref.id for ref in policy.permission_groups) or "none"
            print(f"    {idx}. {policy.effect}: {_join(sorted(policy.resources), 'none')}")
            print(f"       Permission groups: {groups}")
        return
    print(f"  Permission inputs: {_join(spec.permission_inputs, 'none')}")
    print("  Permission groups:")
    if not spec.matched_permissions:
        print("    (none)")
    for entry in spec.matched_permissions:
        display = entry.display_name()
        if entry.alias_key and entry.alias_key != display:
            print(f"    - {display} ({entry.id}, key: {entry.alias_key})")
        else:
            print(f"    - {display} ({entry.id})")
    print("  Resources:")
    print(f"    - {zone_resource_key(spec.zone_id)} -> *")


def print_token_result(result: TokenResult, spec: TokenSpecification) -> None:
    print("Token created successfully.")
    print(f"Name:   {result.name}")
    print(f"ID:     {result.id}")
    print(f"Value:  {_or(result.value, '<redacted by API>')}")
    print(f"Status: {_or(result.status, '<unknown>')}")
    zone_display = f"{result.zone_id} ({spec.zone_name})" if spec.zone_name else result.zone_id
    print(f"Zone ID: {zone_display}")
    if result.expires_on:
        expires = result.expires_on
    elif spec.expires_at is not None:
        expires = "<not returned>"
    else:
        expires = "none"
    print(f"Expires: {expires}")
    print(f"Allowed CIDRs: {_join(result.allowed_cidrs, 'none')}")


def print_token_inspection(desc: TokenInspection) -> None:
    print("Token details:")
    print(f"ID: {_or(desc.id, '<unknown>')}")
    print(f"Name: {_or(desc.name, '<unspecified>')}")
    print(f"Status: {_or(desc.status, '<unknown>')}")
    print(f"Expires: {_or(desc.expires_on, 'none')}")
    if desc.not_before:
        print(f"Not Before: {desc.not_before}")
    print(f"Allowed CIDRs: {_join(desc.allowed_cidrs, 'none')}")
    print(f"Denied CIDRs: {_join(desc.denied_cidrs, 'none')}")
    if not desc.policies:
        print("Policies: none")
        return
    print("Policies:")
    for idx, policy in enumerate(desc.policies, start=1):
        print(f"  {idx}. Effect: {_or(policy.effect, '<unknown>')}")
        print(f"     Resources: {_join(policy.resources, 'none')}")
        if not policy.permission_groups:
            print("     Permission Groups: none")
            continue
        print("     Permission Groups:")
        for group in policy.permission_groups:
            display = next((v for v in (group.name, group.key, group.id) if v.strip()), "")
            if group.key and group.key != display:
                print(f"       - {display} ({group.id}, key: {group.key})")
            else:
                print(f"       - {display} ({group.id})")


if __name__ == "__main__":
    sys.exit(main())
