"""CIDR allow-list normalization.

Trims entries, drops blanks, validates each as an IPv4/IPv6 CIDR and
recognizes the sentinel that disables IP restriction for the token.
"""

import ipaddress
from typing import NamedTuple

from cftoken.core.constants import DISABLE_IP_RESTRICTION_SENTINEL
from cftoken.domain.exceptions import MalformedCIDR


class NormalizedCIDRs(NamedTuple):
    """Normalized allow-list and whether IP restriction is disabled."""

    cidrs: list[str]
    disabled: bool


def normalize_cidrs(raw: list[str] | tuple[str, ...]) -> NormalizedCIDRs:
    """Normalize an allow-list, preserving input order.

    A sentinel entry anywhere in the list discards the whole list and
    disables restriction, regardless of the validity of other entries.

    Raises:
        MalformedCIDR: If an entry does not parse as a CIDR.
    """
    cleaned = [entry.strip() for entry in raw if entry and entry.strip()]
    if DISABLE_IP_RESTRICTION_SENTINEL in cleaned:
        return NormalizedCIDRs([], True)

    for cidr in cleaned:
        _validate_cidr(cidr)
    return NormalizedCIDRs(cleaned, False)


def split_cidr_list(value: str) -> list[str]:
    """Split a comma-separated CIDR string into trimmed, non-empty entries."""
    return [part.strip() for part in value.split(",") if part.strip()]


def _validate_cidr(cidr: str) -> None:
    # Require an explicit prefix length; a bare address is not a CIDR.
    if "/" not in cidr:
        raise MalformedCIDR(cidr, "missing prefix length")
    # Netmask and hostmask forms (10.0.0.0/255.255.255.0) are not CIDR notation.
    prefix = cidr.rpartition("/")[2]
    if not (prefix.isascii() and prefix.isdigit()):
        raise MalformedCIDR(cidr, "prefix length must be a decimal number")
    try:
        ipaddress.ip_network(cidr, strict=False)
    except ValueError as e:
        raise MalformedCIDR(cidr, str(e)) from e
