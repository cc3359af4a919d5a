"""Pydantic schemas for om_nodes requests and responses.

Lovelace amounts travel as decimal strings: they can exceed 2**53 and the
dashboard must not round them.

Address rule: bech32 Cardano payment address, mainnet or testnet prefix
followed by at least 5 characters of the bech32 alphabet.
"""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from src.om_common.datetime_utils import isoformat_z, parse_iso8601
from src.om_common.response import CamelModel
from src.om_indexer.domain.models import (
    AddressBalance,
    TimeWindow,
    TransactionRecord,
    TransactionStats,
)

BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
ADDRESS_PATTERN = re.compile(rf"^(addr1|addr_test1)[{BECH32_CHARSET}]{{5,}}$")
ADDRESS_ERROR = "address must be a valid bech32 Cardano address"


def address_errors(address: str) -> list[str]:
    """Empty list when valid; otherwise the messages for the `address` field."""
    if not address:
        return ["address should not be empty"]
    if not ADDRESS_PATTERN.match(address):
        return [ADDRESS_ERROR]
    return []


# ---------------------------------------------------------------------------
# Request: transaction window
# ---------------------------------------------------------------------------


class TransactionHistoryQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_date: datetime | None = Field(None, alias="fromDate")
    to_date: datetime | None = Field(None, alias="toDate")

    @field_validator("from_date", mode="before")
    @classmethod
    def parse_from_date(cls, v: object) -> object:
        return _parse_date_param(v, "fromDate", end_of_day=False)

    @field_validator("to_date", mode="before")
    @classmethod
    def parse_to_date(cls, v: object) -> object:
        # A bare date as the upper bound covers that whole day.
        return _parse_date_param(v, "toDate", end_of_day=True)

    @field_validator("to_date")
    @classmethod
    def not_before_from_date(cls, v: datetime | None, info: ValidationInfo) -> datetime | None:
        from_date = info.data.get("from_date")
        if v is not None and from_date is not None and v < from_date:
            raise ValueError("toDate must not be earlier than fromDate")
        return v

    def to_window(self) -> TimeWindow:
        return TimeWindow(from_date=self.from_date, to_date=self.to_date)


def _parse_date_param(v: object, name: str, end_of_day: bool) -> object:
    if v is None or isinstance(v, datetime):
        return v
    if isinstance(v, str):
        try:
            return parse_iso8601(v, end_of_day=end_of_day)
        except ValueError:
            pass
    raise ValueError(f"{name} must be a valid ISO 8601 date string")


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class BalanceOut(CamelModel):
    address: str
    current_balance: str
    lifetime_received: str
    lifetime_spent: str

    @classmethod
    def from_domain(cls, b: AddressBalance) -> "BalanceOut":
        return cls(
            address=b.address,
            current_balance=str(b.current_balance),
            lifetime_received=str(b.lifetime_received),
            lifetime_spent=str(b.lifetime_spent),
        )


class NodeStatusOut(BalanceOut):
    pair: str
    is_below_threshold: bool
    threshold: str


class NodesResponse(CamelModel):
    nodes: list[NodeStatusOut]
    ada_threshold: str


class TransactionOut(CamelModel):
    tx_hash: str
    block_time: str
    value: str
    tx_index: int

    @classmethod
    def from_domain(cls, t: TransactionRecord) -> "TransactionOut":
        return cls(
            tx_hash=t.tx_hash,
            block_time=isoformat_z(t.block_time),
            value=str(t.value),
            tx_index=t.tx_index,
        )


class TransactionStatsOut(CamelModel):
    count: int
    total_spent: str
    total_received: str

    @classmethod
    def from_domain(cls, s: TransactionStats) -> "TransactionStatsOut":
        return cls(
            count=s.count,
            total_spent=str(s.total_spent),
            total_received=str(s.total_received),
        )


class TransactionsResponse(CamelModel):
    address: str
    from_date: str | None = None
    to_date: str | None = None
    transactions: list[TransactionOut]
    stats: TransactionStatsOut
