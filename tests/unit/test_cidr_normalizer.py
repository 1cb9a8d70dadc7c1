"""Tests for CIDR allow-list normalization."""

import pytest

from cftoken.application.services.cidr_normalizer import normalize_cidrs, split_cidr_list
from cftoken.domain.exceptions import MalformedCIDR


class TestNormalizeCIDRs:
    """Trim, validate, keep order; the sentinel disables restriction."""

    def test_trims_and_preserves_order(self) -> None:
        result = normalize_cidrs([" 10.0.0.1/32 ", "2001:db8::/64"])
        assert result.cidrs == ["10.0.0.1/32", "2001:db8::/64"]
        assert result.disabled is False

    def test_drops_blank_entries(self) -> None:
        result = normalize_cidrs(["", "  ", "192.0.2.0/24"])
        assert result.cidrs == ["192.0.2.0/24"]

    def test_does_not_deduplicate(self) -> None:
        result = normalize_cidrs(["10.0.0.1/32", "10.0.0.1/32"])
        assert result.cidrs == ["10.0.0.1/32", "10.0.0.1/32"]

    def test_host_bits_accepted(self) -> None:
        assert normalize_cidrs(["10.0.0.5/24"]).cidrs == ["10.0.0.5/24"]

    def test_sentinel_alone_disables(self) -> None:
        result = normalize_cidrs(["0.0.0.0/32"])
        assert result.cidrs == []
        assert result.disabled is True

    def test_sentinel_short_circuits_other_entries(self) -> None:
        assert normalize_cidrs(["0.0.0.0/32", "10.0.0.1/32"]) == ([], True)

    def test_sentinel_ignores_invalid_entries(self) -> None:
        assert normalize_cidrs(["not-a-cidr", " 0.0.0.0/32 "]) == ([], True)

    def test_invalid_entry_rejected(self) -> None:
        with pytest.raises(MalformedCIDR, match="not-a-cidr") as exc_info:
            normalize_cidrs(["10.0.0.1/32", "not-a-cidr"])
        assert exc_info.value.details["cidr"] == "not-a-cidr"

    def test_bare_address_rejected(self) -> None:
        with pytest.raises(MalformedCIDR, match="prefix length"):
            normalize_cidrs(["10.0.0.1"])

    @pytest.mark.parametrize(
        "cidr", ["10.0.0.0/255.255.255.0", "10.0.0.0/0.0.0.255", "10.0.0.0/", "10.0.0.0/+8"]
    )
    def test_non_decimal_prefix_rejected(self, cidr: str) -> None:
        with pytest.raises(MalformedCIDR, match="decimal") as exc_info:
            normalize_cidrs([cidr])
        assert exc_info.value.details["cidr"] == cidr

    def test_out_of_range_prefix_rejected(self) -> None:
        with pytest.raises(MalformedCIDR):
            normalize_cidrs(["10.0.0.0/33"])

    def test_empty_list(self) -> None:
        assert normalize_cidrs([]) == ([], False)


def test_split_cidr_list() -> None:
    assert split_cidr_list(" 10.0.0.1/32, ,2001:db8::/64,") == ["10.0.0.1/32", "2001:db8::/64"]
    assert split_cidr_list("") == []
