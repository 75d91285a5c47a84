"""
Schemas, errors and wire helpers.

Import the manifest and registry from their own modules
(``airdrop.schemas.manifest``, ``airdrop.schemas.registry``); they depend on
the key and proof packages, which themselves import from here.
"""

from .errors import (
    AirdropError,
    AirdropException,
    ChecksumError,
    ErrorCodes,
    FetchError,
    FetchTimeoutError,
    FormatError,
    InvalidAddressError,
    KeyFormatError,
    LeafNotFoundError,
    NonceNotFoundError,
    ProofVerificationError,
    StateError,
    SubmissionError,
)
from .wire import BufferReader, BufferWriter

__all__ = [
    "AirdropError",
    "AirdropException",
    "ChecksumError",
    "ErrorCodes",
    "FetchError",
    "FetchTimeoutError",
    "FormatError",
    "InvalidAddressError",
    "KeyFormatError",
    "LeafNotFoundError",
    "NonceNotFoundError",
    "ProofVerificationError",
    "StateError",
    "SubmissionError",
    "BufferReader",
    "BufferWriter",
]
