"""
Merkle Tree and Commitments
Deterministic merkle tree construction + branch generation/verification.

This module provides:
- MerkleBranch: Dataclass representing a merkle inclusion proof
- create_root: Compute root from leaves
- create_branch: Generate branch for a specific leaf
- derive_root: Recompute the root implied by a leaf and branch
- verify_branch: Verify a branch against its claimed root

Usage:
    from airdrop.merkle import create_root, create_branch, verify_branch

    root = create_root(leaves)
    branch = create_branch(leaves, index=2)
    assert verify_branch(branch)
"""
from .merkle_tree import (
    SENTINEL,
    MerkleBranch,
    hash_leaf,
    hash_internal,
    create_root,
    create_branch,
    derive_root,
    verify_branch,
    compute_tree_depth,
)


__all__ = [
    "MerkleBranch",
    "SENTINEL",
    "hash_leaf",
    "hash_internal",
    "create_root",
    "create_branch",
    "derive_root",
    "verify_branch",
    "compute_tree_depth",
]
