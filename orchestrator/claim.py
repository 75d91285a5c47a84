"""
Claim Flows

Wires credential, dataset store, proof builder and submission together:

1. Parse the destination address (before any I/O)
2. Build the proof with ProofBuilder
3. Fill in the destination ``version``/``address`` and ``fee``
4. Run ``verify()``; a failing proof is never submitted
5. Optionally submit it with ``sendrawairdrop``

``faucet_all`` repeats steps 2-5 for every faucet/sponsor registry entry.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from airdrop.keys.address import parse_address
from airdrop.keys.airdrop_key import AirdropKey
from airdrop.keys.loaders import LoadedCredential
from airdrop.proof import AirdropProof, DatasetSource, ExpectedRoots, ProofBuilder
from airdrop.schemas.errors import ProofVerificationError
from airdrop.schemas.registry import ProofRegistryEntry, find_registry_entry

from orchestrator.submit import AirdropRPCClient


logger = logging.getLogger(__name__)


class RegistrySource(DatasetSource, Protocol):
    """A dataset source that also serves the faucet/sponsor registry."""

    def read_proof_file(self) -> list[ProofRegistryEntry]:
        ...


# =============================================================================
# Claim Result
# =============================================================================

@dataclass
class ClaimResult:
    """Outcome of one claim."""
    proof: AirdropProof
    address: str
    submitted: bool = False
    result: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "submitted": self.submitted,
            "result": self.result,
            "proof": self.proof.to_json(),
            "base64": self.proof.to_base64(),
        }


def finalize_proof(
    proof: AirdropProof,
    address: str,
    fee: int,
    expected: Optional[ExpectedRoots] = None,
) -> AirdropProof:
    """
    Set the destination and fee, then verify.

    Raises:
        InvalidAddressError: If ``address`` is malformed
        ProofVerificationError: If the finished proof does not verify
    """
    target = parse_address(address)

    proof.version = target.version
    proof.address = target.hash
    proof.fee = fee

    if not proof.verify(expected):
        raise ProofVerificationError(
            "Proof failed verification.",
            details={"address": address, "index": proof.index},
        )

    return proof


# =============================================================================
# Claimer
# =============================================================================

class AirdropClaimer:
    """
    Builds, verifies and submits airdrop proofs.

    Usage:
        claimer = AirdropClaimer(store, rpc=rpc, expected=manifest.expected_roots())
        result = claimer.prove_key(credential, address, fee, submit=True)
    """

    def __init__(
        self,
        datasets: RegistrySource,
        *,
        rpc: Optional[AirdropRPCClient] = None,
        expected: Optional[ExpectedRoots] = None,
        bare: bool = False,
    ) -> None:
        """
        Args:
            datasets: Source of leaves, nonces and the registry
            rpc: Node client; required only for submission
            expected: Published roots/leaf counts passed to verify()
            bare: Default commitment mode for derived keys
        """
        self.datasets = datasets
        self.rpc = rpc
        self.expected = expected
        self.bare = bare
        self._builder = ProofBuilder(datasets)

    def submit(self, proof: AirdropProof) -> Any:
        if self.rpc is None:
            raise ValueError("No RPC client configured for submission")
        logger.info("Sending...")
        return self.rpc.send_raw_airdrop(proof.to_base64())

    def _finish(self, proof: AirdropProof, address: str, fee: int, submit: bool) -> ClaimResult:
        finalize_proof(proof, address, fee, self.expected)
        result = ClaimResult(proof=proof, address=address)

        if submit:
            result.result = self.submit(proof)
            result.submitted = True

        return result

    def prove_key(
        self,
        credential: LoadedCredential,
        address: str,
        fee: int,
        *,
        bare: Optional[bool] = None,
        submit: bool = False,
    ) -> ClaimResult:
        """
        Claim the bulk airdrop for an SSH or PGP credential.

        Raises:
            InvalidAddressError: Before any I/O if ``address`` is malformed
            StateError: If the credential has no private key
            NonceNotFoundError: If no nonce in the bucket opens
            LeafNotFoundError: If the committed key is not in the tree
            ProofVerificationError: If the built proof does not verify
        """
        parse_address(address)

        if bare is None:
            bare = self.bare

        proof = self._builder.create_proof(
            credential.key,
            credential.private_key,
            bare=bare,
        )
        return self._finish(proof, address, fee, submit)

    def prove_address(
        self,
        address: str,
        value: Optional[int] = None,
        sponsor: bool = False,
        fee: int = 0,
        *,
        submit: bool = False,
    ) -> ClaimResult:
        """
        Claim a faucet or sponsor award. Without ``value`` the award is looked
        up in the registry.

        Raises:
            InvalidAddressError: Before any I/O if ``address`` is malformed
            LeafNotFoundError: If the address has no award
            ProofVerificationError: If the built proof does not verify
        """
        parse_address(address)

        if value is None:
            entry = find_registry_entry(self.datasets.read_proof_file(), address)
            value, sponsor = entry.value, entry.sponsor

        key = AirdropKey.from_address(address, value, sponsor)
        proof = self._builder.create_proof(key)
        return self._finish(proof, address, fee, submit)

    def faucet_all(self, *, submit: bool = True) -> list[ClaimResult]:
        """
        Build, verify and (by default) submit a proof for every registry
        entry. Sponsors pay 500 HNS, faucet participants 100 HNS.

        Stops at the first failure.
        """
        results = []

        for entry in self.datasets.read_proof_file():
            logger.info(f"Attempting to create proof for address: {entry.address}")

            key = AirdropKey.from_address(entry.address, entry.value, entry.sponsor)
            proof = self._builder.create_proof(key)
            result = self._finish(proof, entry.address, entry.fee, submit)

            if result.submitted:
                logger.info(f"Submitted: {result.result}")

            results.append(result)

        return results


__all__ = [
    "RegistrySource",
    "ClaimResult",
    "finalize_proof",
    "AirdropClaimer",
]
