"""
Merkle Tree Implementation
Deterministic merkle tree construction, branch generation, and root derivation.

This module provides:
- Deterministic merkle root computation
- Branch (sibling path) generation for any leaf index
- Root derivation from a leaf and its branch
- Sentinel padding rule for odd number of nodes

Commitment Rules (Hard Contracts):
1. Leaf hashing: node = blake2b256(0x00 || leaf)
2. Parent hashing: parent = blake2b256(0x01 || left || right)
3. Padding rule: an odd node at any level is paired with SENTINEL
4. Empty leaves: root is SENTINEL = blake2b256(b"")
5. Single leaf: root = hash_leaf(leaf)

Determinism Notes:
- This module never sorts leaves - it trusts input order
- Padding with a sentinel instead of duplicating the last node keeps
  two different leaf lists from sharing a root
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from airdrop.crypto.hashing import blake2b256, hash_concat

LEAF_PREFIX = b"\x00"
INTERNAL_PREFIX = b"\x01"

# Padding node and empty tree root.
SENTINEL: bytes = blake2b256(b"")


@dataclass(frozen=True)
class MerkleBranch:
    """
    A merkle inclusion proof for a single leaf.

    Attributes:
        leaf: The raw leaf value being proven (32 bytes)
        index: The 0-based index of the leaf in the original leaf list
        siblings: Sibling hashes from bottom to top of tree
        root: The merkle root this branch was generated against
    """
    leaf: bytes
    index: int
    siblings: list[bytes]
    root: bytes

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


def hash_leaf(leaf: bytes) -> bytes:
    return hash_concat(LEAF_PREFIX, leaf)


def hash_internal(left: bytes, right: bytes) -> bytes:
    return hash_concat(INTERNAL_PREFIX, left, right)


def _next_level(nodes: list[bytes]) -> list[bytes]:
    if len(nodes) % 2 == 1:
        nodes = nodes + [SENTINEL]

    return [
        hash_internal(nodes[i], nodes[i + 1])
        for i in range(0, len(nodes), 2)
    ]


def create_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a merkle root from a sequence of leaves.

    Algorithm:
    1. If empty: return SENTINEL
    2. Hash every leaf with the leaf prefix
    3. Pair adjacent nodes (odd node paired with SENTINEL) until one remains

    Args:
        leaves: Sequence of 32-byte leaf values. Order matters and is preserved.

    Returns:
        32-byte merkle root
    """
    if len(leaves) == 0:
        return SENTINEL

    level = [hash_leaf(leaf) for leaf in leaves]

    while len(level) > 1:
        level = _next_level(level)

    return level[0]


def create_branch(leaves: Sequence[bytes], index: int) -> MerkleBranch:
    """
    Generate the merkle branch for the leaf at the given index.

    Args:
        leaves: Sequence of leaf values
        index: 0-based index of the leaf to prove

    Returns:
        MerkleBranch with leaf, index, siblings (bottom-up), and root

    Raises:
        IndexError: If index is out of range
        ValueError: If leaves is empty
    """
    if len(leaves) == 0:
        raise ValueError("Cannot generate branch for empty leaf list")

    if index < 0 or index >= len(leaves):
        raise IndexError(
            f"Leaf index {index} out of range for {len(leaves)} leaves"
        )

    siblings: list[bytes] = []
    level = [hash_leaf(leaf) for leaf in leaves]
    position = index

    while len(level) > 1:
        sibling = position ^ 1
        siblings.append(level[sibling] if sibling < len(level) else SENTINEL)
        level = _next_level(level)
        position >>= 1

    return MerkleBranch(
        leaf=leaves[index],
        index=index,
        siblings=siblings,
        root=level[0],
    )


def derive_root(leaf: bytes, index: int, siblings: Sequence[bytes]) -> bytes:
    """
    Recompute the root implied by a leaf, its index and its branch.

    If current index is even the node is a left child, otherwise a right child.
    """
    node = hash_leaf(leaf)

    for sibling in siblings:
        if index & 1:
            node = hash_internal(sibling, node)
        else:
            node = hash_internal(node, sibling)
        index >>= 1

    return node


def verify_branch(branch: MerkleBranch) -> bool:
    """Check that a branch derives the root it claims."""
    if branch.index >= (1 << len(branch.siblings)):
        return False
    return derive_root(branch.leaf, branch.index, branch.siblings) == branch.root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of siblings in a branch for a tree of ``num_leaves`` leaves.

    A single leaf has depth 0, two leaves depth 1, three or four depth 2.
    """
    depth = 0
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


__all__ = [
    "SENTINEL",
    "MerkleBranch",
    "hash_leaf",
    "hash_internal",
    "create_root",
    "create_branch",
    "derive_root",
    "verify_branch",
    "compute_tree_depth",
]
