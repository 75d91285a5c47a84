"""
Proof Registry
File: registry.py

Purpose: Faucet and sponsor entries from the published ``proof.json``: a JSON
array of ``[address, value, sponsorFlag]`` triples.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from airdrop.keys.address import parse_address
from airdrop.schemas.errors import FormatError, LeafNotFoundError

# Fees in dollarydoos (1 HNS = 1e6).
SPONSOR_FEE = 500_000_000
FAUCET_FEE = 100_000_000


class ProofRegistryEntry(BaseModel):
    """One faucet or sponsor award."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    address: str = Field(..., min_length=1)
    value: int = Field(..., ge=0)
    sponsor: bool = Field(default=False)

    @property
    def fee(self) -> int:
        return SPONSOR_FEE if self.sponsor else FAUCET_FEE


def parse_registry(raw: bytes | str) -> list[ProofRegistryEntry]:
    """
    Parse registry JSON.

    Raises:
        FormatError: If the document is not an array of triples
    """
    try:
        items: Any = json.loads(raw)
    except ValueError as e:
        raise FormatError(f"Invalid registry JSON: {e}") from e

    if not isinstance(items, list):
        raise FormatError("Registry must be a JSON array")

    entries = []
    for i, item in enumerate(items):
        if not isinstance(item, list) or len(item) != 3:
            raise FormatError(f"Registry entry {i} is not an [address, value, sponsor] triple")
        address, value, sponsor = item
        try:
            entries.append(
                ProofRegistryEntry(address=address, value=value, sponsor=bool(sponsor))
            )
        except ValueError as e:
            raise FormatError(f"Invalid registry entry {i}: {e}") from e

    return entries


def find_registry_entry(entries: list[ProofRegistryEntry], address: str) -> ProofRegistryEntry:
    """
    Find the entry whose address hash matches ``address``.

    Raises:
        InvalidAddressError: If ``address`` is malformed
        LeafNotFoundError: If the address is neither faucet nor sponsor
    """
    target = parse_address(address)

    for entry in entries:
        if parse_address(entry.address).hash == target.hash:
            return entry

    raise LeafNotFoundError(
        target.hash,
        message="Address is not a faucet or sponsor address.",
    )


__all__ = [
    "SPONSOR_FEE",
    "FAUCET_FEE",
    "ProofRegistryEntry",
    "parse_registry",
    "find_registry_entry",
]
