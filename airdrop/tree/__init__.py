"""
Published dataset handling: the leaf index and the nonce buckets.
"""
from .leaves import (
    NOT_FOUND,
    LeafGroup,
    encode_bulk,
    encode_faucet,
    find_in_bulk,
    find_in_faucet,
    flatten_leaves,
    load_bulk,
    load_faucet,
)
from .nonces import (
    BUCKET_COUNT,
    bucket_filename,
    encode_bucket,
    find_nonce,
    iter_ciphertexts,
)

__all__ = [
    "NOT_FOUND",
    "LeafGroup",
    "encode_bulk",
    "encode_faucet",
    "find_in_bulk",
    "find_in_faucet",
    "flatten_leaves",
    "load_bulk",
    "load_faucet",
    "BUCKET_COUNT",
    "bucket_filename",
    "encode_bucket",
    "find_nonce",
    "iter_ciphertexts",
]
