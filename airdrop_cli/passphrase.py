"""
Passphrase prompting for encrypted key files.
"""

from __future__ import annotations

import getpass
import os
import sys
from typing import Optional

ENV_PASSPHRASE = "AIRDROP_PASSPHRASE"


def read_passphrase(prompt: str = "Passphrase: ") -> Optional[str]:
    """
    Read a passphrase without echo.

    ``AIRDROP_PASSPHRASE`` takes precedence for non-interactive use. Returns
    None when stdin is not a terminal and no passphrase is set.
    """
    value = os.getenv(ENV_PASSPHRASE)
    if value is not None:
        return value

    if not sys.stdin.isatty():
        return None

    return getpass.getpass(prompt)
