"""
CLI Prove Command

Build (and optionally submit) the proof for one credential.

Usage:
    hs-airdrop prove <key-file> <id> <addr> <fee> [--bare]    # PGP keyring
    hs-airdrop prove <key-file> <addr> <fee> [--bare]         # SSH key
    hs-airdrop prove <addr>                                    # faucet/sponsor (registry)
    hs-airdrop prove <addr> <value> [--sponsor]                # faucet/sponsor (explicit)

Amounts are in HNS. The proof is printed as JSON followed by the base64
string to pass to ``hsd-rpc sendrawairdrop``.
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from airdrop.keys.address import parse_address
from airdrop.keys.loaders import get_key_type, read_key
from airdrop.schemas.errors import AirdropException
from airdrop_cli.amounts import parse_amount
from airdrop_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    is_debug,
    make_claimer,
    make_http,
    print_json,
    report_error,
)
from airdrop_cli.passphrase import read_passphrase


logger = logging.getLogger(__name__)


@dataclass
class ProveRequest:
    """Positional arguments resolved by credential type."""
    kind: str  # "ssh", "pgp" or "addr"
    address: str
    key_file: Optional[str] = None
    key_id: Optional[str] = None
    fee: int = 0
    value: Optional[int] = None


def parse_prove_args(items: list[str], fee_override: Optional[str] = None) -> ProveRequest:
    """
    Interpret the positional arguments of ``prove``.

    The destination address is validated here, before any file or network
    access.

    Raises:
        ValueError: On a wrong argument count or a malformed amount
        InvalidAddressError: If the address is malformed
    """
    if not items:
        raise ValueError("Missing arguments: expected a key file or an address")

    kind = get_key_type(items[0])

    # A lone argument, or a pair whose first item is not a file, is an address.
    if kind == "ssh" and (len(items) == 1 or (len(items) == 2 and not Path(items[0]).is_file())):
        kind = "addr"

    if kind == "addr":
        if len(items) > 2:
            raise ValueError("Usage: prove <addr> [value]")
        request = ProveRequest(kind=kind, address=items[0])
        if len(items) == 2:
            request.value = parse_amount(items[1])
    elif kind == "pgp":
        if len(items) != 4:
            raise ValueError("Usage: prove <key-file> <id> <addr> <fee>")
        request = ProveRequest(
            kind=kind,
            key_file=items[0],
            key_id=items[1],
            address=items[2],
            fee=parse_amount(items[3]),
        )
    else:
        if len(items) != 3:
            raise ValueError("Usage: prove <key-file> <addr> <fee>")
        request = ProveRequest(
            kind=kind,
            key_file=items[0],
            address=items[1],
            fee=parse_amount(items[2]),
        )

    if fee_override is not None:
        request.fee = parse_amount(fee_override)

    parse_address(request.address)

    return request


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = args.cli_config
    output_json = args.json

    try:
        request = parse_prove_args(args.args, args.fee)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except AirdropException as e:
        report_error(e, output_json)
        return EXIT_RUNTIME_ERROR

    if request.kind != "addr" and args.sponsor:
        print("Error: --sponsor only applies to addresses", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    bare = args.bare or config.runtime.pipeline.bare

    try:
        with make_http(config) as http:
            claimer = make_claimer(config, http)

            if request.kind == "addr":
                result = claimer.prove_address(
                    request.address,
                    request.value,
                    args.sponsor,
                    request.fee,
                    submit=args.submit,
                )
            else:
                credential = read_key(request.key_file, request.key_id, read_passphrase)
                result = claimer.prove_key(
                    credential,
                    request.address,
                    request.fee,
                    bare=bare,
                    submit=args.submit,
                )
    except AirdropException as e:
        if is_debug(args):
            raise
        report_error(e, output_json)
        return EXIT_RUNTIME_ERROR

    if output_json:
        print_json(result.to_dict())
    else:
        print_json(result.proof.to_json())
        print("")
        print("Base64 proof:")
        print(result.proof.to_base64())
        if result.submitted:
            print("")
            print(f"Submitted: {result.result}")

    logger.info("Proof created")
    return EXIT_SUCCESS
