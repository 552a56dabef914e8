"""Tests for address validation."""

import pytest

from dnschanger.core.exceptions import InvalidAddress
from dnschanger.core.validators import (
    is_valid_ip,
    normalize_addresses,
    split_by_family,
    validate_addresses,
)


class TestIsValidIP:
    """Tests for is_valid_ip."""

    @pytest.mark.parametrize(
        "address",
        ["8.8.8.8", "149.112.112.112", "2001:4860:4860::8888", "::1", " 1.1.1.1 "],
    )
    def test_valid(self, address):
        assert is_valid_ip(address) is True

    @pytest.mark.parametrize(
        "address",
        ["not-an-ip", "256.1.1.1", "8.8.8", "dns.google", "", None, "1.1.1.1.1"],
    )
    def test_invalid(self, address):
        assert is_valid_ip(address) is False


class TestValidateAddresses:
    """Tests for validate_addresses."""

    def test_valid_list(self):
        assert validate_addresses(["8.8.8.8", "8.8.4.4"]) == ["8.8.8.8", "8.8.4.4"]

    def test_strips_and_drops_blank_entries(self):
        assert validate_addresses([" 1.1.1.1 ", "", "  "]) == ["1.1.1.1"]

    def test_canonical_ipv6(self):
        assert validate_addresses(["2606:4700:4700:0:0:0:0:1111"]) == ["2606:4700:4700::1111"]

    def test_empty_list(self):
        with pytest.raises(InvalidAddress):
            validate_addresses([])

    def test_only_blank_entries(self):
        with pytest.raises(InvalidAddress):
            validate_addresses(["", " "])

    def test_invalid_entry(self):
        with pytest.raises(InvalidAddress) as exc_info:
            validate_addresses(["8.8.8.8", "not-an-ip"])
        assert exc_info.value.invalid == ["not-an-ip"]
        assert "not-an-ip" in str(exc_info.value)

    def test_duplicates(self):
        with pytest.raises(InvalidAddress) as exc_info:
            validate_addresses(["1.1.1.1", "1.1.1.1"])
        assert exc_info.value.invalid == ["1.1.1.1"]


class TestHelpers:
    """Tests for list helpers."""

    def test_normalize_keeps_order(self):
        assert normalize_addresses(["b", " a ", ""]) == ["b", "a"]

    def test_split_by_family(self):
        v4, v6 = split_by_family(["2001:4860:4860::8888", "8.8.8.8", "8.8.4.4"])
        assert v4 == ["8.8.8.8", "8.8.4.4"]
        assert v6 == ["2001:4860:4860::8888"]
