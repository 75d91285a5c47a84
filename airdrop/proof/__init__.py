"""
Airdrop proofs: the proof object and the builder that produces it.
"""
from .airdrop_proof import (
    MAX_PROOF_DEPTH,
    MAX_SUBPROOF_DEPTH,
    AirdropProof,
    ExpectedRoots,
)
from .builder import (
    DatasetSource,
    ProofBuilder,
    build_bulk_proof,
    build_faucet_proof,
)

__all__ = [
    "MAX_PROOF_DEPTH",
    "MAX_SUBPROOF_DEPTH",
    "AirdropProof",
    "ExpectedRoots",
    "DatasetSource",
    "ProofBuilder",
    "build_bulk_proof",
    "build_faucet_proof",
]
