"""
Coin amounts.

Values and fees are integers in dollarydoos; users type them in HNS with up
to six decimal places.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

DECIMALS = 6
COIN = 10 ** DECIMALS
MAX_MONEY = 2_040_000_000 * COIN


def parse_amount(value: str) -> int:
    """
    Parse an HNS amount such as ``"0.5"`` into dollarydoos.

    Raises:
        ValueError: If the amount is not a plain non-negative decimal with at
            most six fractional digits, or exceeds the money supply
    """
    text = value.strip()

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}")

    if not amount.is_finite() or "e" in text.lower():
        raise ValueError(f"Invalid amount: {value!r}")

    if amount < 0:
        raise ValueError(f"Amount must not be negative: {value!r}")

    scaled = amount * COIN
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Too many decimal places (max {DECIMALS}): {value!r}")

    result = int(scaled)
    if result > MAX_MONEY:
        raise ValueError(f"Amount exceeds money supply: {value!r}")

    return result


def format_amount(value: int) -> str:
    """Format dollarydoos as HNS, e.g. ``500000`` -> ``"0.5"``."""
    whole, frac = divmod(value, COIN)
    if not frac:
        return str(whole)
    return f"{whole}.{frac:0{DECIMALS}d}".rstrip("0")
