"""
Validators - input validation for resolver address lists.

Address lists are written to the OS as a whole, so validation happens
before any write and covers the complete list.
"""

import ipaddress
import logging

from dnschanger.core.exceptions import InvalidAddress

logger = logging.getLogger(__name__)


def is_valid_ip(address: str) -> bool:
    """
    Check whether a string is an IPv4 or IPv6 address.

    Args:
        address: The address to check

    Returns:
        True if valid, False otherwise
    """
    if not address or not isinstance(address, str):
        return False

    try:
        ipaddress.ip_address(address.strip())
        return True
    except ValueError:
        return False


def normalize_addresses(addresses: list[str]) -> list[str]:
    """Strip whitespace and drop empty entries, keeping order."""
    return [a.strip() for a in addresses if a and a.strip()]


def validate_addresses(addresses: list[str]) -> list[str]:
    """
    Validate a resolver address list.

    Args:
        addresses: Addresses in priority order

    Returns:
        The normalized list, each address in canonical form

    Raises:
        InvalidAddress: if the list is empty, contains an entry that is not
            an IP address, or contains duplicates
    """
    candidates = normalize_addresses(addresses)
    if not candidates:
        raise InvalidAddress("At least one DNS server address is required")

    invalid = [a for a in candidates if not is_valid_ip(a)]
    if invalid:
        logger.warning(f"Rejected invalid DNS addresses: {invalid}")
        raise InvalidAddress(
            f"Invalid IP address: {', '.join(invalid)}",
            invalid=invalid,
        )

    canonical = [str(ipaddress.ip_address(a)) for a in candidates]
    duplicates = sorted({a for a in canonical if canonical.count(a) > 1})
    if duplicates:
        raise InvalidAddress(
            f"Duplicate DNS address: {', '.join(duplicates)}",
            invalid=duplicates,
        )

    return canonical


def split_by_family(addresses: list[str]) -> tuple[list[str], list[str]]:
    """Split addresses into (IPv4, IPv6) lists, keeping order."""
    v4: list[str] = []
    v6: list[str] = []
    for address in addresses:
        if ipaddress.ip_address(address).version == 4:
            v4.append(address)
        else:
            v6.append(address)
    return v4, v6
