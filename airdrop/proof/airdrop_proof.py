"""
Airdrop Proof
File: airdrop_proof.py

Purpose: The proof handed to the node, its canonical binary/base64 encoding
and the local verify() predicate.

Binary layout (little-endian):
    varint  index
    u8      proof length, then 32-byte sibling hashes
    u8      sub-proof flag (1 = present)
      varint  subindex
      u8      sub-proof length, then 32-byte sibling hashes
    varint  key length, then encoded AirdropKey
    u8      address version
    u8      address length (0, 20 or 32), then address hash
    u64     fee

verify() Contract:
- Without ExpectedRoots it is a self-consistency check: the key decodes,
  branch shapes are possible, indexes fit the branch depth, address and fee
  are well formed. A well-formed proof against the wrong root still passes.
- With ExpectedRoots it also recomputes the root and compares it, and checks
  the index and depth against the published leaf count.
Final acceptance always happens on the node, which holds the canonical roots.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from airdrop.crypto.hashing import HASH_SIZE
from airdrop.keys.address import ADDRESS_HASH_SIZES
from airdrop.keys.airdrop_key import AirdropKey
from airdrop.merkle import compute_tree_depth, derive_root
from airdrop.schemas.errors import FormatError, KeyFormatError
from airdrop.schemas.wire import BufferReader, BufferWriter


MAX_PROOF_DEPTH = 32
# Leaf groups hold at most 255 hashes.
MAX_SUBPROOF_DEPTH = 8
MAX_KEY_SIZE = 2048
MAX_FEE = 0xffffffffffffffff


@dataclass(frozen=True)
class ExpectedRoots:
    """Published roots and leaf counts, when the caller knows them."""
    airdrop_root: Optional[bytes] = None
    airdrop_leaves: Optional[int] = None
    faucet_root: Optional[bytes] = None
    faucet_leaves: Optional[int] = None


def _write_branch(bw: BufferWriter, siblings: list[bytes]) -> None:
    if len(siblings) > 0xff:
        raise FormatError(f"Branch too long: {len(siblings)}")
    bw.write_u8(len(siblings))
    for sibling in siblings:
        bw.write_bytes(sibling)


def _read_branch(br: BufferReader, max_depth: int) -> list[bytes]:
    count = br.read_u8()
    if count > max_depth:
        raise FormatError(f"Branch depth {count} exceeds {max_depth}")
    return [br.read_bytes(HASH_SIZE) for _ in range(count)]


def _branch_ok(index: int, siblings: list[bytes], max_depth: int) -> bool:
    if len(siblings) > max_depth:
        return False
    if any(len(sibling) != HASH_SIZE for sibling in siblings):
        return False
    return 0 <= index < (1 << len(siblings))


class AirdropProof(BaseModel):
    """
    Merkle proof of an airdrop entitlement.

    Faucet proofs carry only ``index``/``proof``. Bulk proofs also carry
    ``subindex``/``subproof``: the position of the key inside its leaf group.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    index: int = Field(default=0, ge=0, description="Top-level leaf position")
    proof: list[bytes] = Field(default_factory=list, description="Top-level sibling hashes")
    subindex: Optional[int] = Field(default=None, ge=0, description="Position within the leaf group")
    subproof: Optional[list[bytes]] = Field(default=None, description="Sibling hashes within the leaf group")
    key: bytes = Field(default=b"", description="Encoded AirdropKey (a copy)")
    version: int = Field(default=0, ge=0, le=0xff, description="Address version")
    address: bytes = Field(default=b"", description="Destination address hash")
    fee: int = Field(default=0, ge=0, le=MAX_FEE, description="Fee in dollarydoos")

    @property
    def has_subproof(self) -> bool:
        return self.subindex is not None and self.subproof is not None

    def get_key(self) -> AirdropKey:
        """Decode the embedded key. Raises KeyFormatError."""
        return AirdropKey.decode(self.key)

    def compute_root(self, key: AirdropKey | None = None) -> bytes:
        """Root implied by the key, the sub-proof (if any) and the proof."""
        if key is None:
            key = self.get_key()

        leaf = key.hash()

        if self.has_subproof:
            leaf = derive_root(leaf, self.subindex, self.subproof)

        return derive_root(leaf, self.index, self.proof)

    def verify(self, expected: ExpectedRoots | None = None) -> bool:
        """
        Check the proof is well formed and, if roots are given, that it
        commits to them.
        """
        if len(self.key) > MAX_KEY_SIZE:
            return False

        try:
            key = self.get_key()
        except KeyFormatError:
            return False

        if not _branch_ok(self.index, self.proof, MAX_PROOF_DEPTH):
            return False

        if key.is_address():
            if self.subindex is not None or self.subproof is not None:
                return False
            if self.fee > key.value:
                return False
        else:
            if not self.has_subproof:
                return False
            if not _branch_ok(self.subindex, self.subproof, MAX_SUBPROOF_DEPTH):
                return False

        if self.version != 0:
            return False

        if self.address and len(self.address) not in ADDRESS_HASH_SIZES:
            return False

        if expected is None:
            return True

        if key.is_address():
            root, leaves = expected.faucet_root, expected.faucet_leaves
        else:
            root, leaves = expected.airdrop_root, expected.airdrop_leaves

        if leaves is not None:
            if self.index >= leaves:
                return False
            if len(self.proof) != compute_tree_depth(leaves):
                return False

        if root is not None and self.compute_root(key) != root:
            return False

        return True

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def encode(self) -> bytes:
        bw = BufferWriter()
        bw.write_varint(self.index)
        _write_branch(bw, self.proof)

        if self.has_subproof:
            bw.write_u8(1)
            bw.write_varint(self.subindex)
            _write_branch(bw, self.subproof)
        else:
            bw.write_u8(0)

        bw.write_var_bytes(self.key)
        bw.write_u8(self.version)
        bw.write_u8(len(self.address))
        bw.write_bytes(self.address)
        bw.write_u64(self.fee)
        return bw.render()

    @classmethod
    def decode(cls, data: bytes) -> "AirdropProof":
        """
        Parse the binary form.

        Raises:
            FormatError: On malformed, truncated or trailing data
        """
        br = BufferReader(data)
        fields: dict[str, Any] = {}

        fields["index"] = br.read_varint()
        fields["proof"] = _read_branch(br, MAX_PROOF_DEPTH)

        flag = br.read_u8()
        if flag not in (0, 1):
            raise FormatError(f"Invalid sub-proof flag: {flag}")
        if flag == 1:
            fields["subindex"] = br.read_varint()
            fields["subproof"] = _read_branch(br, MAX_SUBPROOF_DEPTH)

        key_size = br.read_varint()
        if key_size > MAX_KEY_SIZE:
            raise FormatError(f"Key too large: {key_size} bytes")
        fields["key"] = br.read_bytes(key_size)

        fields["version"] = br.read_u8()

        address_size = br.read_u8()
        if address_size not in (0, *ADDRESS_HASH_SIZES):
            raise FormatError(f"Invalid address size: {address_size}")
        fields["address"] = br.read_bytes(address_size)

        fields["fee"] = br.read_u64()
        br.verify_end()

        return cls(**fields)

    def to_base64(self) -> str:
        return base64.b64encode(self.encode()).decode("ascii")

    @classmethod
    def from_base64(cls, value: str) -> "AirdropProof":
        try:
            raw = base64.b64decode(value.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise FormatError(f"Invalid base64 proof: {e}") from e
        return cls.decode(raw)

    def to_json(self) -> dict[str, Any]:
        """Hex view of every field, as printed by the CLI."""
        data: dict[str, Any] = {
            "index": self.index,
            "proof": [sibling.hex() for sibling in self.proof],
        }

        if self.has_subproof:
            data["subindex"] = self.subindex
            data["subproof"] = [sibling.hex() for sibling in self.subproof]

        data["key"] = self.key.hex()
        data["version"] = self.version
        data["address"] = self.address.hex()
        data["fee"] = self.fee
        return data


__all__ = [
    "MAX_PROOF_DEPTH",
    "MAX_SUBPROOF_DEPTH",
    "ExpectedRoots",
    "AirdropProof",
]
