"""Plain-text rendering for the terminal dashboard.

Amounts arrive as decimal strings and are converted with Decimal so large
lovelace values display without float rounding.
"""

from collections.abc import Sequence
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from src.om_common.datetime_utils import as_utc
from src.om_common.lovelace import lovelace_to_ada


def format_ada(lovelace: str | int, decimals: int = 2) -> str:
    """'1234567890' -> '1,234.57'."""
    ada = lovelace_to_ada(int(lovelace))
    return _format_decimal(ada, decimals)


def format_token_amount(amount: str | int, decimals: int = 0) -> str:
    return _format_decimal(Decimal(str(amount)), decimals)


def format_usd(amount: float | Decimal, decimals: int = 2) -> str:
    value = Decimal(str(amount))
    sign = "-" if value < 0 else ""
    return f"{sign}${_format_decimal(abs(value), decimals)}"


def truncate_address(address: str, prefix_length: int = 10, suffix_length: int = 8) -> str:
    if len(address) <= prefix_length + suffix_length:
        return address
    return f"{address[:prefix_length]}...{address[-suffix_length:]}"


def format_date(value: str | datetime) -> str:
    """'2024-01-15T10:30:00.000Z' -> 'Jan 15, 2024, 10:30 UTC'."""
    dt = value if isinstance(value, datetime) else datetime.fromisoformat(value)
    return as_utc(dt).strftime("%b %d, %Y, %H:%M UTC")


def _format_decimal(value: Decimal, decimals: int) -> str:
    quantum = Decimal(1).scaleb(-decimals)
    return f"{value.quantize(quantum, rounding=ROUND_HALF_UP):,.{decimals}f}"


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def line(cells: Sequence[str]) -> str:
        return "  ".join(cell.ljust(widths[i]) for i, cell in enumerate(cells)).rstrip()

    out = [line(headers), line(["-" * w for w in widths])]
    out.extend(line(row) for row in rows)
    return "\n".join(out)


def render_nodes(payload: dict[str, Any]) -> str:
    rows = [
        [
            node["pair"],
            truncate_address(node["address"]),
            format_ada(node["currentBalance"]),
            "LOW" if node["isBelowThreshold"] else "OK",
        ]
        for node in payload.get("nodes", [])
    ]
    title = f"Oracle nodes (alert below {format_ada(payload['adaThreshold'])} ADA)"
    return f"{title}\n{render_table(['Pair', 'Address', 'Balance (ADA)', 'Status'], rows)}"


def render_reward(balance: dict[str, Any] | None, price: dict[str, Any] | None) -> str:
    lines = ["Reward"]
    if balance is not None:
        lines.append(f"  Address:  {truncate_address(balance['address'])}")
        lines.append(f"  Balance:  {format_token_amount(balance['balance'])}")
    if price is not None:
        lines.append(f"  Price:    {format_usd(price['price'], 4)} ({price['provider']})")
    if balance is not None and price is not None:
        value = Decimal(balance["balance"]) * Decimal(str(price["price"]))
        lines.append(f"  Value:    {format_usd(value)}")
    return "\n".join(lines)


def render_balance(payload: dict[str, Any]) -> str:
    return "\n".join(
        [
            f"Node {truncate_address(payload['address'])}",
            f"  Current balance:    {format_ada(payload['currentBalance'])} ADA",
            f"  Lifetime received:  {format_ada(payload['lifetimeReceived'])} ADA",
            f"  Lifetime spent:     {format_ada(payload['lifetimeSpent'])} ADA",
        ]
    )


def render_transactions(payload: dict[str, Any]) -> str:
    stats = payload["stats"]
    rows = [
        [
            format_date(tx["blockTime"]),
            f"{tx['txHash'][:16]}…#{tx['txIndex']}",
            format_ada(tx["value"]),
        ]
        for tx in payload.get("transactions", [])
    ]
    header = (
        f"Transactions for {truncate_address(payload['address'])}: "
        f"{stats['count']} txs, received {format_ada(stats['totalReceived'])} ADA, "
        f"spent {format_ada(stats['totalSpent'])} ADA"
    )
    return f"{header}\n{render_table(['Time', 'Tx', 'Value (ADA)'], rows)}"
