"""
Hashing Utilities
Digest primitives for identity commitments, merkle trees and dataset checksums.

This module provides:
- BLAKE2b-256 hashing for key commitments and merkle nodes
- SHA-256 hashing for published dataset checksums

Determinism Notes:
- Always hash raw bytes exactly as given
- All operations are deterministic
"""
from __future__ import annotations

import hashlib

# Digest size shared by every identity and merkle hash.
HASH_SIZE: int = 32


def blake2b256(data: bytes, key: bytes = b"") -> bytes:
    """
    Compute a 256-bit BLAKE2b digest of raw bytes.

    Args:
        data: Raw bytes to hash
        key: Optional MAC key (at most 64 bytes)

    Returns:
        32-byte BLAKE2b digest

    Example:
        >>> len(blake2b256(b"hello"))
        32
    """
    return hashlib.blake2b(data, digest_size=HASH_SIZE, key=key).digest()


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Used for the published checksums of downloaded datasets.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_concat(*parts: bytes) -> bytes:
    """BLAKE2b-256 of the concatenation of ``parts``."""
    h = hashlib.blake2b(digest_size=HASH_SIZE)
    for part in parts:
        h.update(part)
    return h.digest()


__all__ = [
    "HASH_SIZE",
    "blake2b256",
    "sha256",
    "hash_concat",
]
