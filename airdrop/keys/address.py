"""
Address Parsing

Handshake addresses are bech32 witness addresses. Only the three public
network prefixes are accepted, the witness version must be 0 and the
program must be a 20- or 32-byte hash.
"""

from __future__ import annotations

from dataclasses import dataclass

import bech32

from airdrop.schemas.errors import InvalidAddressError

# Human-readable part -> network name.
NETWORK_HRPS: dict[str, str] = {
    "hs": "main",
    "ts": "testnet",
    "rs": "regtest",
}

ADDRESS_HASH_SIZES = (20, 32)


@dataclass(frozen=True)
class Address:
    """A parsed bech32 address."""
    hrp: str
    version: int
    hash: bytes

    @property
    def network(self) -> str:
        return NETWORK_HRPS[self.hrp]

    def to_string(self) -> str:
        encoded = bech32.encode(self.hrp, self.version, list(self.hash))
        if encoded is None:
            raise InvalidAddressError("Cannot encode address.")
        return encoded

    def __str__(self) -> str:
        return self.to_string()


def is_bech32(value: str) -> bool:
    """Cheap test used to tell address arguments apart from key file paths."""
    hrp, sep, _ = value.lower().rpartition("1")
    if not sep or hrp not in NETWORK_HRPS:
        return False
    version, program = bech32.decode(hrp, value)
    return version is not None and program is not None


def parse_address(value: str) -> Address:
    """
    Parse and validate a textual address.

    Raises:
        InvalidAddressError: On an unknown prefix, bad checksum, non-zero
            version or unexpected hash size
    """
    if not isinstance(value, str) or not value:
        raise InvalidAddressError("Invalid address.", address=str(value))

    hrp, sep, _ = value.lower().rpartition("1")

    if not sep:
        raise InvalidAddressError("Invalid address.", address=value)

    if hrp not in NETWORK_HRPS:
        raise InvalidAddressError("Invalid address HRP.", address=value)

    version, program = bech32.decode(hrp, value)

    if version is None or program is None:
        raise InvalidAddressError("Invalid address.", address=value)

    if version != 0:
        raise InvalidAddressError("Invalid address version.", address=value)

    program = bytes(program)

    if len(program) not in ADDRESS_HASH_SIZES:
        raise InvalidAddressError("Invalid address.", address=value)

    return Address(hrp=hrp, version=version, hash=program)


__all__ = [
    "NETWORK_HRPS",
    "Address",
    "is_bech32",
    "parse_address",
]
