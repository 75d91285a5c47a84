"""
Proof Builder
Orchestrates the nonce resolver, leaf index and merkle primitives to build an
AirdropProof for one identity.

Two paths, selected by key.is_address():
- Faucet: find the address-key hash in the flat faucet leaves and build one
  branch. Only index/proof are set.
- Bulk: open the bucket nonce with the private key, apply it (tweak by
  default, bare on request), find the committed hash in the leaf groups, then
  build the branch inside the group (subindex/subproof) and the branch of the
  group root among all group roots (index/proof).

A missing leaf is fatal: the credential is not in the entitlement set.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

from airdrop.keys.airdrop_key import AirdropKey
from airdrop.merkle import create_branch
from airdrop.proof.airdrop_proof import AirdropProof
from airdrop.schemas.errors import LeafNotFoundError, StateError
from airdrop.tree.leaves import (
    NOT_FOUND,
    find_in_bulk,
    find_in_faucet,
    flatten_leaves,
)
from airdrop.tree.nonces import find_nonce


logger = logging.getLogger(__name__)


class DatasetSource(Protocol):
    """Where the builder reads published datasets from."""

    def read_faucet_leaves(self) -> list[bytes]:
        ...

    def read_leaves(self) -> list[list[bytes]]:
        ...

    def read_nonce_file(self, bucket: int) -> bytes:
        ...


def build_faucet_proof(key: AirdropKey, leaves: Sequence[bytes]) -> AirdropProof:
    """
    Single-level proof for an address key.

    Raises:
        LeafNotFoundError: If the key's hash is not a faucet leaf
    """
    target = key.hash()
    index = find_in_faucet(leaves, target)

    if index == NOT_FOUND:
        raise LeafNotFoundError(target)

    logger.info("Creating proof from leaf...")

    branch = create_branch(leaves, index)

    return AirdropProof(
        index=index,
        proof=branch.siblings,
        key=key.encode(),
    )


def build_bulk_proof(
    key: AirdropKey,
    groups: Sequence[Sequence[bytes]],
    nonce_data: bytes,
    private_key: Any,
    bare: bool = False,
) -> AirdropProof:
    """
    Two-level proof for an SSH or PGP derived key.

    The key is mutated: the recovered nonce is applied to it.

    Raises:
        NonceNotFoundError: If no ciphertext in the bucket opens
        StateError: If a nonce was already applied to the key
        LeafNotFoundError: If the committed hash is not in any leaf group
    """
    bucket = key.bucket()

    logger.info("Decrypting nonce...")

    nonce = find_nonce(
        nonce_data,
        lambda ciphertext: key.decrypt(ciphertext, private_key),
        bucket,
    )

    if bare:
        key.apply_nonce(nonce)
    else:
        key.apply_tweak(nonce)

    logger.info("Finding merkle leaf...")

    target = key.hash()
    index, subindex = find_in_bulk(groups, target)

    if index == NOT_FOUND:
        raise LeafNotFoundError(target)

    logger.info("Creating proof from leaf...")

    subtree = groups[index]
    subbranch = create_branch(subtree, subindex)
    branch = create_branch(flatten_leaves(groups), index)

    return AirdropProof(
        index=index,
        proof=branch.siblings,
        subindex=subindex,
        subproof=subbranch.siblings,
        key=key.encode(),
    )


class ProofBuilder:
    """
    Builds proofs against a dataset source.

    Usage:
        builder = ProofBuilder(datasets)
        proof = builder.create_proof(key, private_key)
    """

    def __init__(self, datasets: DatasetSource) -> None:
        self.datasets = datasets

    def create_proof(
        self,
        key: AirdropKey,
        private_key: Any = None,
        bare: bool = False,
    ) -> AirdropProof:
        """
        Build the proof for ``key``, choosing the faucet or bulk path.

        Raises:
            StateError: If a derived key is given without a private key
        """
        if key.is_address():
            leaves = self.datasets.read_faucet_leaves()
            return build_faucet_proof(key, leaves)

        if private_key is None:
            raise StateError("A private key is required to decrypt the nonce")

        groups = self.datasets.read_leaves()
        nonce_data = self.datasets.read_nonce_file(key.bucket())

        return build_bulk_proof(key, groups, nonce_data, private_key, bare=bare)


__all__ = [
    "DatasetSource",
    "build_faucet_proof",
    "build_bulk_proof",
    "ProofBuilder",
]
