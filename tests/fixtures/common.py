"""
Common test fixtures shared by all modules.

Provides factory functions for airdrop data structures:
- Addresses and faucet leaf sets
- Ed25519 / P-256 / RSA credentials
- Bulk leaf groups with a sealed nonce bucket
- An in-memory dataset source
- A dataset manifest matching given file contents

Nothing here touches the network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from airdrop.crypto.envelope import seal_nonce
from airdrop.crypto.hashing import blake2b256, sha256
from airdrop.keys.address import Address
from airdrop.keys.airdrop_key import AirdropKey
from airdrop.keys.loaders import LoadedCredential
from airdrop.schemas.manifest import DatasetManifest
from airdrop.schemas.registry import ProofRegistryEntry
from airdrop.tree.nonces import BUCKET_COUNT, encode_bucket


# Test address.
TEST_ADDRESS = "ts1q5z7yym8xrh4quqg3kw498ngy7hnd4sruqyxnxd"

EMPTY_DIGEST = sha256(b"").hex()


# =============================================================================
# Hashes and Addresses
# =============================================================================

def make_hash(label: str) -> bytes:
    """Deterministic 32-byte value for a label."""
    return blake2b256(label.encode("utf-8"))


def make_leaves(count: int, prefix: str = "leaf") -> list[bytes]:
    return [make_hash(f"{prefix}-{i}") for i in range(count)]


def make_address(label: str = "addr", hrp: str = "ts", size: int = 20) -> str:
    """A valid bech32 address whose hash is derived from ``label``."""
    return Address(hrp=hrp, version=0, hash=make_hash(label)[:size]).to_string()


def make_faucet_leaves(
    address: str,
    value: int,
    sponsor: bool = False,
    position: int = 7,
    total: int = 1000,
) -> list[bytes]:
    """Faucet leaves with the address key's hash at ``position``."""
    leaves = make_leaves(total, prefix="faucet")
    leaves[position] = AirdropKey.from_address(address, value, sponsor).hash()
    return leaves


# =============================================================================
# Credentials
# =============================================================================

def make_credential(kind: str = "ed25519") -> LoadedCredential:
    """A freshly generated SSH-style credential with its private key."""
    if kind == "ed25519":
        private_key = ed25519.Ed25519PrivateKey.generate()
    elif kind == "p256":
        private_key = ec.generate_private_key(ec.SECP256R1())
    elif kind == "rsa":
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    else:
        raise ValueError(f"Unknown credential kind: {kind}")

    return LoadedCredential(
        kind="ssh",
        key=AirdropKey.from_ssh(private_key),
        private_key=private_key,
    )


def committed_hash(credential: LoadedCredential, nonce: bytes, bare: bool = False) -> bytes:
    """Hash the credential commits to once ``nonce`` is applied."""
    key = AirdropKey.from_public_key(credential.key.public_key)
    if bare:
        key.apply_nonce(nonce)
    else:
        key.apply_tweak(nonce)
    return key.hash()


def make_bucket(
    credential: LoadedCredential,
    nonce: bytes,
    total: int = 5,
    position: int = 2,
) -> bytes:
    """
    Bucket file of ``total`` ciphertexts where only the entry at ``position``
    is sealed to ``credential``; the rest belong to other keys.
    """
    ciphertexts = []

    for i in range(total):
        if i == position:
            ciphertexts.append(seal_nonce(credential.key.public_key, nonce))
        else:
            other = ed25519.Ed25519PrivateKey.generate().public_key()
            ciphertexts.append(seal_nonce(other, make_hash(f"other-nonce-{i}")))

    return encode_bucket(ciphertexts)


def make_groups(
    target: bytes,
    group_sizes: tuple[int, ...] = (3, 5, 4, 2, 6),
    group: int = 3,
    position: int = 1,
) -> list[list[bytes]]:
    """Leaf groups with ``target`` at ``groups[group][position]``."""
    groups = [
        make_leaves(size, prefix=f"group-{i}")
        for i, size in enumerate(group_sizes)
    ]
    groups[group][position] = target
    return groups


# =============================================================================
# Dataset Source
# =============================================================================

@dataclass
class InMemoryDatasets:
    """Dataset source backed by in-memory values."""
    faucet_leaves: list[bytes] = field(default_factory=list)
    groups: list[list[bytes]] = field(default_factory=list)
    buckets: dict[int, bytes] = field(default_factory=dict)
    registry: list[ProofRegistryEntry] = field(default_factory=list)
    reads: list[str] = field(default_factory=list)

    def read_faucet_leaves(self) -> list[bytes]:
        self.reads.append("faucet")
        return self.faucet_leaves

    def read_leaves(self) -> list[list[bytes]]:
        self.reads.append("tree")
        return self.groups

    def read_nonce_file(self, bucket: int) -> bytes:
        self.reads.append(f"nonces/{bucket:03d}")
        return self.buckets.get(bucket, b"")

    def read_proof_file(self) -> list[ProofRegistryEntry]:
        self.reads.append("proof")
        return self.registry


# =============================================================================
# Manifest
# =============================================================================

def make_manifest(
    tree: bytes = b"",
    faucet: bytes = b"",
    buckets: Optional[dict[int, bytes]] = None,
    proof: bytes = b"[]",
    tree_leaves: int = 0,
    tree_keys: int = 0,
    faucet_leaves: int = 0,
    tree_root: Optional[bytes] = None,
    faucet_root: Optional[bytes] = None,
) -> DatasetManifest:
    """Manifest whose checksums match the given file contents."""
    buckets = buckets or {}
    checksums = [
        sha256(buckets[i]).hex() if i in buckets else EMPTY_DIGEST
        for i in range(BUCKET_COUNT)
    ]

    return DatasetManifest(
        tree={
            "checksum": sha256(tree).hex(),
            "leaves": tree_leaves,
            "keys": tree_keys,
            "checksums": checksums,
            "reward": 0,
            "root": tree_root.hex() if tree_root else None,
        },
        faucet={
            "checksum": sha256(faucet).hex(),
            "leaves": faucet_leaves,
            "root": faucet_root.hex() if faucet_root else None,
        },
        proof_checksum=sha256(proof).hex(),
    )
