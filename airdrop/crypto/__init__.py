"""
Core cryptographic utilities.

Hashing for commitments and checksums, plus the nonce envelope used to
seal one nonce to one public key.
"""
from .hashing import (
    HASH_SIZE,
    blake2b256,
    sha256,
    hash_concat,
)
from .envelope import (
    NONCE_SIZE,
    DecryptError,
    seal_nonce,
    open_nonce,
)

__all__ = [
    "HASH_SIZE",
    "blake2b256",
    "sha256",
    "hash_concat",
    "NONCE_SIZE",
    "DecryptError",
    "seal_nonce",
    "open_nonce",
]
