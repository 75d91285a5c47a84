"""
Test fixtures package for airdrop tests.

This package provides factory functions for creating test objects.

Usage:
    from fixtures.common import make_credential, make_groups

    def test_something():
        credential = make_credential("ed25519")
        groups = make_groups(target_hash)
"""

from .common import (
    TEST_ADDRESS,
    InMemoryDatasets,
    committed_hash,
    make_address,
    make_bucket,
    make_credential,
    make_faucet_leaves,
    make_groups,
    make_hash,
    make_leaves,
    make_manifest,
)

__all__ = [
    "TEST_ADDRESS",
    "InMemoryDatasets",
    "committed_hash",
    "make_address",
    "make_bucket",
    "make_credential",
    "make_faucet_leaves",
    "make_groups",
    "make_hash",
    "make_leaves",
    "make_manifest",
]
