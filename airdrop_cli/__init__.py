"""
hs-airdrop CLI

Command-line interface for creating and submitting Handshake airdrop proofs.

Usage:
    python -m airdrop_cli prove ~/.ssh/id_rsa <addr> 0.5
    python -m airdrop_cli prove <addr>
    python -m airdrop_cli verify <base64>
    python -m airdrop_cli faucet-all
"""

__version__ = "0.1.0"
