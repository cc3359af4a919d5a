# src/om_indexer/domain/repository.py
"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from src.om_indexer.domain.models import (
    AddressBalance,
    TimeWindow,
    TransactionRecord,
    TransactionStats,
)


class IndexerRepositoryProtocol(Protocol):
    async def get_balance_info(self, address: str) -> AddressBalance: ...

    async def get_token_balance(self, address: str, policy_id: str) -> int: ...

    async def get_transactions(
        self,
        address: str,
        window: TimeWindow,
    ) -> tuple[list[TransactionRecord], TransactionStats]: ...

    async def ping(self) -> bool: ...

    async def close(self) -> None: ...
