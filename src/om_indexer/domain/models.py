"""Domain models for the chain-indexer read path. Amounts are int lovelace."""

from dataclasses import dataclass
from datetime import datetime

MAX_TRANSACTION_ROWS = 1000


@dataclass(frozen=True)
class AddressBalance:
    address: str
    lifetime_received: int
    lifetime_spent: int

    @property
    def current_balance(self) -> int:
        """Derived; equals the sum of the address's unspent outputs."""
        return self.lifetime_received - self.lifetime_spent


@dataclass(frozen=True)
class TransactionRecord:
    tx_hash: str
    block_time: datetime  # aware UTC
    value: int
    tx_index: int


@dataclass(frozen=True)
class TransactionStats:
    count: int
    total_spent: int
    total_received: int


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive [from_date, to_date] on block time; either bound optional."""

    from_date: datetime | None = None
    to_date: datetime | None = None

    def contains(self, ts: datetime) -> bool:
        if self.from_date is not None and ts < self.from_date:
            return False
        if self.to_date is not None and ts > self.to_date:
            return False
        return True
