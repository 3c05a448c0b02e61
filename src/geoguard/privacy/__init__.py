"""Privacy transforms."""

from geoguard.privacy.transform import (
    fingerprint_hash,
    is_masked_prefix,
    mask_ip,
    mask_network,
    prefix_network_address,
)

__all__ = [
    "fingerprint_hash",
    "is_masked_prefix",
    "mask_ip",
    "mask_network",
    "prefix_network_address",
]
