"""
Leaf Index
In-memory form of the published airdrop datasets plus linear search.

Dataset formats (little-endian):
- Bulk tree file:  u32 total_groups, then per group u8 count, count x 32 bytes
- Faucet file:     u32 total_leaves, then total_leaves x 32 bytes

Both loaders are strict: the declared and parsed totals must equal the
published constants exactly, and no trailing bytes may remain.
"""
from __future__ import annotations

import logging
from typing import Sequence

from airdrop.crypto.hashing import HASH_SIZE
from airdrop.merkle import create_root
from airdrop.schemas.errors import FormatError
from airdrop.schemas.wire import BufferReader, BufferWriter


logger = logging.getLogger(__name__)

LeafGroup = list[bytes]

NOT_FOUND = -1


def load_bulk(data: bytes, total_groups: int, total_keys: int) -> list[LeafGroup]:
    """
    Parse the bulk tree file into leaf groups.

    Args:
        data: Raw file contents
        total_groups: Published number of leaf groups
        total_keys: Published number of hashes across all groups

    Returns:
        List of leaf groups, each a non-empty list of 32-byte hashes

    Raises:
        FormatError: On truncation, trailing data, empty groups or any
            mismatch against the published totals
    """
    br = BufferReader(data)
    declared = br.read_u32()

    if declared != total_groups:
        raise FormatError(
            f"Leaf group count mismatch: expected {total_groups}, got {declared}",
            details={"expected": total_groups, "actual": declared},
        )

    groups: list[LeafGroup] = []
    keys = 0

    for i in range(declared):
        count = br.read_u8()

        if count == 0:
            raise FormatError(f"Empty leaf group at index {i}")

        groups.append([br.read_bytes(HASH_SIZE) for _ in range(count)])
        keys += count

    br.verify_end()

    if keys != total_keys:
        raise FormatError(
            f"Key count mismatch: expected {total_keys}, got {keys}",
            details={"expected": total_keys, "actual": keys},
        )

    logger.debug(f"Loaded {len(groups)} leaf groups ({keys} keys)")

    return groups


def load_faucet(data: bytes, total_leaves: int) -> list[bytes]:
    """
    Parse the faucet file into a flat leaf list.

    Raises:
        FormatError: On truncation, trailing data or a leaf count that does
            not match ``total_leaves``
    """
    br = BufferReader(data)
    declared = br.read_u32()

    if declared != total_leaves:
        raise FormatError(
            f"Faucet leaf count mismatch: expected {total_leaves}, got {declared}",
            details={"expected": total_leaves, "actual": declared},
        )

    leaves = [br.read_bytes(HASH_SIZE) for _ in range(declared)]
    br.verify_end()

    logger.debug(f"Loaded {len(leaves)} faucet leaves")

    return leaves


def find_in_bulk(groups: Sequence[Sequence[bytes]], target: bytes) -> tuple[int, int]:
    """
    Locate ``target`` in the leaf groups.

    Returns:
        ``(group_index, position)`` of the first match, or ``(-1, -1)``
    """
    for i, hashes in enumerate(groups):
        for j, leaf in enumerate(hashes):
            if leaf == target:
                return i, j

    return NOT_FOUND, NOT_FOUND


def find_in_faucet(leaves: Sequence[bytes], target: bytes) -> int:
    """Index of ``target`` in the faucet leaves, or -1."""
    # The list is static, so a sorted copy with bisect would also work.
    for i, leaf in enumerate(leaves):
        if leaf == target:
            return i

    return NOT_FOUND


def flatten_leaves(groups: Sequence[Sequence[bytes]]) -> list[bytes]:
    """Top-level leaves: the merkle root of every leaf group, recomputed each call."""
    return [create_root(hashes) for hashes in groups]


def encode_bulk(groups: Sequence[Sequence[bytes]]) -> bytes:
    """Serialize leaf groups into the bulk tree file format."""
    bw = BufferWriter()
    bw.write_u32(len(groups))

    for hashes in groups:
        if not 0 < len(hashes) <= 0xff:
            raise FormatError(f"Leaf group size out of range: {len(hashes)}")
        bw.write_u8(len(hashes))
        for leaf in hashes:
            bw.write_bytes(leaf)

    return bw.render()


def encode_faucet(leaves: Sequence[bytes]) -> bytes:
    """Serialize faucet leaves into the faucet file format."""
    bw = BufferWriter()
    bw.write_u32(len(leaves))

    for leaf in leaves:
        bw.write_bytes(leaf)

    return bw.render()


__all__ = [
    "LeafGroup",
    "NOT_FOUND",
    "load_bulk",
    "load_faucet",
    "find_in_bulk",
    "find_in_faucet",
    "flatten_leaves",
    "encode_bulk",
    "encode_faucet",
]
