"""
Proof Submission

JSON-RPC client for the node's ``sendrawairdrop`` call. The node holds the
canonical roots and is the final verifier of every proof.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from airdrop.config import NetworkConfig
from airdrop.http import HttpClient
from airdrop.schemas.errors import SubmissionError


logger = logging.getLogger(__name__)


class AirdropRPCClient:
    """
    Minimal node RPC client.

    Usage:
        client = AirdropRPCClient(config.network, http)
        client.send_raw_airdrop(proof.to_base64())
    """

    def __init__(self, network: NetworkConfig, http: Optional[HttpClient] = None) -> None:
        self.network = network
        self.http = http or HttpClient()
        self._next_id = 0

    def execute(self, method: str, params: list[Any]) -> Any:
        """
        Call ``method`` on the node.

        Raises:
            SubmissionError: On an HTTP error status or an RPC error reply
            FetchError: On transport failure
        """
        self._next_id += 1
        body = {"method": method, "params": params, "id": self._next_id}
        auth = ("x", self.network.api_key) if self.network.api_key else None

        logger.debug(f"RPC {method} -> {self.network.rpc_url}")

        response = self.http.post(self.network.rpc_url, json=body, auth=auth)

        if response.status_code == 401:
            raise SubmissionError(
                "Unauthorized (bad API key).",
                details={"method": method, "status_code": 401},
            )

        try:
            reply = response.json()
        except ValueError as e:
            raise SubmissionError(
                f"Invalid RPC response (HTTP {response.status_code})",
                details={"method": method, "status_code": response.status_code},
            ) from e

        error = reply.get("error") if isinstance(reply, dict) else None
        if error:
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            raise SubmissionError(
                message,
                details={"method": method, "error": error},
            )

        if not response.ok:
            raise SubmissionError(
                f"RPC call failed (HTTP {response.status_code})",
                details={"method": method, "status_code": response.status_code},
            )

        return reply.get("result") if isinstance(reply, dict) else reply

    def send_raw_airdrop(self, proof_b64: str) -> Any:
        """Submit a base64-encoded airdrop proof."""
        return self.execute("sendrawairdrop", [proof_b64])


__all__ = ["AirdropRPCClient"]
