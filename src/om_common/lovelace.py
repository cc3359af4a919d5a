"""Integer arithmetic for lovelace amounts.

All balances are Python int (arbitrary precision) internally and decimal
strings on the wire. No float anywhere a comparison is made.
1 ADA = 1_000_000 lovelace.
"""

from decimal import Decimal

LOVELACE_PER_ADA = 1_000_000


def parse_lovelace(value: object) -> int:
    """Coerce a DB numeric or decimal string to int lovelace.

    db-sync returns SUM() over lovelace columns as NUMERIC (Decimal). Rejects
    fractional and negative values.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid lovelace amount: {value!r}")
    if isinstance(value, int):
        amount = value
    elif isinstance(value, Decimal):
        if value != value.to_integral_value():
            raise ValueError(f"Lovelace amount must be integral, got {value}")
        amount = int(value)
    elif isinstance(value, str):
        if not value.isdigit():
            raise ValueError(f"Invalid lovelace amount: {value!r}")
        amount = int(value)
    else:
        raise ValueError(f"Invalid lovelace amount: {value!r}")
    if amount < 0:
        raise ValueError(f"Lovelace amount must be non-negative, got {amount}")
    return amount


def is_below_threshold(balance: int, threshold: int) -> bool:
    """Exact integer comparison; safe beyond 2**53."""
    return balance < threshold


def lovelace_to_ada(lovelace: int) -> Decimal:
    """Exact conversion: 1_500_000 -> Decimal('1.5')."""
    return Decimal(lovelace) / LOVELACE_PER_ADA


def lovelace_to_display(lovelace: int, decimals: int = 2) -> str:
    """Format for display: 1234567890 -> '1,234.57'."""
    ada = lovelace_to_ada(lovelace)
    return f"{ada:,.{decimals}f}"
