"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    hs-airdrop prove ~/.gnupg/secring.gpg 0x12345678 <addr> 0.5
    hs-airdrop prove ~/.ssh/id_rsa <addr> 0.5 [--bare] [--submit]
    hs-airdrop prove <addr> [value] [--sponsor]
    hs-airdrop faucet-all [--dry-run]
    hs-airdrop verify <base64> [--manifest PATH]
    hs-airdrop config --init

Environment Variables:
    AIRDROP_NETWORK             Network (main, testnet, regtest, simnet)
    AIRDROP_API_KEY             Node API key
    AIRDROP_BUILD_DIR           Dataset cache directory (also BUILD_DIR)
    AIRDROP_MANIFEST            Dataset manifest path
    AIRDROP_PASSPHRASE          Key passphrase for non-interactive use
    AIRDROP_LOG_LEVEL           Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from airdrop_cli import __version__
from airdrop_cli.commands import faucet_all, prove, verify
from airdrop_cli.commands.common import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from airdrop_cli.config import get_default_config_template, load_config


EPILOG = """\
[key-file] can be an SSH private key file, an exported PGP armor keyring
(.asc) or an exported PGP raw keyring (.pgp/.gpg). [id] is only necessary
for PGP keys. [addr] must be a Handshake bech32 address. [value] and [fee]
are coin values in HNS.

The --bare flag uses your existing public key. This is not recommended as it
makes you identifiable on-chain.

The base64 string must be passed to:
  $ hsd-rpc sendrawairdrop "base64-string"
"""


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="hs-airdrop",
        description=(
            "Create the proof necessary to collect your faucet reward, "
            "airdrop reward, or sponsor reward on the Handshake blockchain."
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./hs-airdrop.json or ~/.config/hs-airdrop/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Create an airdrop proof for a key or address",
        description="Create an airdrop proof. Prints JSON and a base64 string.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    prove_parser.add_argument(
        "args",
        nargs="+",
        metavar="ARG",
        help="[key-file] [id] [addr] [fee] | [key-file] [addr] [fee] | [addr] [value]",
    )
    prove_parser.add_argument(
        "--bare",
        action="store_true",
        default=False,
        help="Commit to the bare public key instead of a tweaked one",
    )
    prove_parser.add_argument(
        "--sponsor",
        action="store_true",
        default=False,
        help="The address is a project sponsor",
    )
    prove_parser.add_argument(
        "--fee",
        type=str,
        default=None,
        help="Fee in HNS (overrides the positional fee)",
    )
    prove_parser.add_argument(
        "--submit",
        action="store_true",
        default=False,
        help="Send the proof to the configured node",
    )
    prove_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    prove_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Show tracebacks",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- faucet-all command ---
    faucet_parser = subparsers.add_parser(
        "faucet-all",
        help="Prove and submit every faucet and sponsor award",
        description="Build, verify and submit a proof for every registry entry.",
    )
    faucet_parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Build and verify without submitting",
    )
    faucet_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    faucet_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Show tracebacks",
    )
    faucet_parser.set_defaults(func=faucet_all.faucet_all_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a base64 airdrop proof",
        description="Decode a proof and check it. Roots are checked only with --manifest.",
    )
    verify_parser.add_argument(
        "proof",
        type=str,
        help="Base64-encoded proof",
    )
    verify_parser.add_argument(
        "--manifest",
        type=str,
        default=None,
        help="Dataset manifest with published roots and leaf counts",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="hs-airdrop.json",
        help="Path for config file (default: hs-airdrop.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (AIRDROP_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config = args.cli_config
        config_dict = {
            "log_level": config.log_level,
            "log_file": config.log_file,
            "manifest": str(config.manifest_path),
            **config.runtime.to_dict(),
        }
        print(json.dumps(config_dict, indent=2))
        return EXIT_SUCCESS

    print("Usage: hs-airdrop config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    if config.runtime.pipeline.debug and args.log_level is None:
        log_level = "DEBUG"
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
