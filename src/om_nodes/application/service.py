"""NodeApplicationService: composes indexer queries for the node endpoints.

All methods are read-only. Fan-out uses asyncio.gather: every sub-query must
succeed or the whole call fails (no partial results).
"""

import asyncio

from config.settings import NodeConfig
from src.om_common.datetime_utils import isoformat_z
from src.om_common.lovelace import is_below_threshold
from src.om_indexer.domain.models import TimeWindow
from src.om_indexer.domain.repository import IndexerRepositoryProtocol
from src.om_nodes.application.schemas import (
    BalanceOut,
    NodeStatusOut,
    NodesResponse,
    TransactionOut,
    TransactionsResponse,
    TransactionStatsOut,
)


class NodeApplicationService:
    def __init__(
        self,
        repo: IndexerRepositoryProtocol,
        nodes: list[NodeConfig],
        ada_threshold: int,
    ) -> None:
        self._repo = repo
        self._nodes = list(nodes)
        self._threshold = ada_threshold

    async def _node_status(self, node: NodeConfig) -> NodeStatusOut:
        balance = await self._repo.get_balance_info(node.address)
        return NodeStatusOut(
            **BalanceOut.from_domain(balance).model_dump(),
            pair=node.pair,
            is_below_threshold=is_below_threshold(balance.current_balance, self._threshold),
            threshold=str(self._threshold),
        )

    async def list_nodes(self) -> NodesResponse:
        statuses = await asyncio.gather(*(self._node_status(n) for n in self._nodes))
        return NodesResponse(nodes=list(statuses), ada_threshold=str(self._threshold))

    async def get_balance(self, address: str) -> BalanceOut:
        balance = await self._repo.get_balance_info(address)
        return BalanceOut.from_domain(balance)

    async def get_transactions(self, address: str, window: TimeWindow) -> TransactionsResponse:
        records, stats = await self._repo.get_transactions(address, window)
        return TransactionsResponse(
            address=address,
            from_date=isoformat_z(window.from_date) if window.from_date else None,
            to_date=isoformat_z(window.to_date) if window.to_date else None,
            transactions=[TransactionOut.from_domain(r) for r in records],
            stats=TransactionStatsOut.from_domain(stats),
        )
