"""Privacy transforms - the only place raw request data is reduced.

Pure functions, no state:
- mask_ip: reduce an address to its /24 (IPv4) or /64 (IPv6) network
- fingerprint_hash: one-way digest of device/language signals

Neither function logs its input.
"""

import hashlib
import ipaddress
from typing import Optional, Union

from geoguard.common.constants import PrivacyConstants


IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def _prefix_length(version: int) -> int:
    if version == 4:
        return PrivacyConstants.IPV4_PREFIX_LENGTH
    return PrivacyConstants.IPV6_PREFIX_LENGTH


def _parse_address(address: str) -> Optional[Union[ipaddress.IPv4Address, ipaddress.IPv6Address]]:
    """Parse an address, accepting an already masked prefix as its network address.

    CIDR input is only accepted at the masking prefix length (/24 or /64).
    """
    if not isinstance(address, str):
        return None

    candidate = address.strip()
    if not candidate:
        return None

    try:
        if "/" in candidate:
            network = ipaddress.ip_network(candidate, strict=False)
            if network.prefixlen != _prefix_length(network.version):
                return None
            parsed = network.network_address
        else:
            parsed = ipaddress.ip_address(candidate)
    except ValueError:
        return None

    # ::ffff:a.b.c.d is an IPv4 client seen through a dual-stack socket
    if isinstance(parsed, ipaddress.IPv6Address) and parsed.ipv4_mapped is not None:
        return parsed.ipv4_mapped
    return parsed


def mask_network(address: str) -> Optional[IPNetwork]:
    """Return the masked network containing ``address``, or None if unparseable."""
    parsed = _parse_address(address)
    if parsed is None:
        return None

    return ipaddress.ip_network(f"{parsed}/{_prefix_length(parsed.version)}", strict=False)


def mask_ip(address: str) -> str:
    """Mask an IP address to its subnet prefix.

    IPv4 addresses keep their /24 network, IPv6 addresses their /64 network.

    Args:
        address: Raw IP address (or an already-masked prefix)

    Returns:
        CIDR string such as ``"192.0.2.0/24"`` or ``"2001:db8::/64"``,
        or an empty string when the input cannot be parsed.
    """
    network = mask_network(address)
    if network is None:
        return ""
    return network.with_prefixlen


def prefix_network_address(prefix: str) -> str:
    """Return the network address part of a masked prefix ("" if invalid)."""
    network = mask_network(prefix)
    if network is None:
        return ""
    return str(network.network_address)


def is_masked_prefix(value: str) -> bool:
    """Check that ``value`` is exactly a masked prefix as produced by mask_ip."""
    if not value or "/" not in value:
        return False
    return mask_ip(value) == value


def fingerprint_hash(user_agent: str, language: str) -> str:
    """Hash device signals into a stable, one-way fingerprint.

    Args:
        user_agent: Raw User-Agent header
        language: Raw Accept-Language header

    Returns:
        Hex-encoded SHA-256 digest of ``user_agent|language``
    """
    data = f"{user_agent or ''}{PrivacyConstants.FINGERPRINT_SEPARATOR}{language or ''}"
    return hashlib.new(PrivacyConstants.HASH_ALGORITHM, data.encode("utf-8")).hexdigest()
