"""
Handshake airdrop proof construction.

Turns an SSH key, PGP key or faucet address into an AirdropProof that the
node accepts with ``sendrawairdrop``.
"""

__version__ = "0.1.0"
