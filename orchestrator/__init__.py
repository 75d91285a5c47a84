"""
Claim Orchestration

Runtime wiring around the proof core: checksum-verified dataset access,
node submission and the claim flows used by the CLI.

Public API:
- DatasetStore: Cached, checksum-verified dataset reader
- AirdropRPCClient: JSON-RPC client for ``sendrawairdrop``
- AirdropClaimer: Build, verify and submit proofs
- ClaimResult: Outcome of one claim
- finalize_proof: Fill in destination and fee, then verify
"""

from orchestrator.datasets import DatasetStore
from orchestrator.submit import AirdropRPCClient
from orchestrator.claim import (
    AirdropClaimer,
    ClaimResult,
    RegistrySource,
    finalize_proof,
)


__all__ = [
    "DatasetStore",
    "AirdropRPCClient",
    "AirdropClaimer",
    "ClaimResult",
    "RegistrySource",
    "finalize_proof",
]
