"""
CLI Faucet-All Command

Build, verify and submit a proof for every faucet and sponsor award in the
published registry. Sponsors pay a 500 HNS fee, faucet participants 100 HNS.

Usage:
    hs-airdrop faucet-all [--dry-run] [--json]
"""

from __future__ import annotations

import logging
from argparse import Namespace

from airdrop.schemas.errors import AirdropException
from airdrop_cli.amounts import format_amount
from airdrop_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    is_debug,
    make_claimer,
    make_http,
    print_json,
    report_error,
)


logger = logging.getLogger(__name__)


def faucet_all_cmd(args: Namespace) -> int:
    """Execute the faucet-all command."""
    config = args.cli_config
    submit = not args.dry_run

    try:
        with make_http(config) as http:
            claimer = make_claimer(config, http)
            results = claimer.faucet_all(submit=submit)
    except AirdropException as e:
        if is_debug(args):
            raise
        report_error(e, args.json)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print_json([r.to_dict() for r in results])
    else:
        for r in results:
            status = "sent" if r.submitted else "built"
            print(f"{status}: {r.address} fee={format_amount(r.proof.fee)} index={r.proof.index}")
        print(f"\n{len(results)} proofs")

    return EXIT_SUCCESS
