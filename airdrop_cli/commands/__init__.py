"""
CLI command modules.
"""

from airdrop_cli.commands import faucet_all, prove, verify

__all__ = ["faucet_all", "prove", "verify"]
