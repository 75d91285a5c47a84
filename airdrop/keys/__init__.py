"""
Credential identities.

AirdropKey normalises address, SSH and PGP credentials into one
hashable, bucketed identity.
"""
from .address import Address, NETWORK_HRPS, is_bech32, parse_address
from .airdrop_key import AirdropKey, KeyMode, KeyType

__all__ = [
    "Address",
    "NETWORK_HRPS",
    "is_bech32",
    "parse_address",
    "AirdropKey",
    "KeyMode",
    "KeyType",
]
