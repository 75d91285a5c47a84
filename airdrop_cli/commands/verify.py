"""
CLI Verify Command

Decode a base64 proof and run ``verify()`` on it. With a manifest the roots
and leaf counts are checked too; without one only the structure is.

Usage:
    hs-airdrop verify <base64> [--manifest PATH] [--json]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from typing import Any

from airdrop.proof import AirdropProof
from airdrop.schemas.errors import AirdropException
from airdrop.schemas.manifest import load_manifest
from airdrop_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    print_json,
    report_error,
)


logger = logging.getLogger(__name__)


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        Exit code (2 if the proof does not verify)
    """
    output_json = args.json

    try:
        proof = AirdropProof.from_base64(args.proof)
    except AirdropException as e:
        report_error(e, output_json)
        return EXIT_RUNTIME_ERROR

    expected = None
    if args.manifest:
        try:
            expected = load_manifest(args.manifest).expected_roots()
        except (OSError, ValueError) as e:
            print(f"Error loading manifest: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

    ok = proof.verify(expected)

    summary: dict[str, Any] = {
        "ok": ok,
        "roots_checked": expected is not None,
        "proof": proof.to_json(),
    }

    if output_json:
        print_json(summary)
    else:
        print_json(summary["proof"])
        print(f"\nverified: {str(ok).lower()}")
        if expected is None:
            print("(structure only; pass --manifest to check roots)")

    if ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
