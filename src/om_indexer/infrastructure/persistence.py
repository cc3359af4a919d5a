"""IndexerRepository: concrete implementation of IndexerRepositoryProtocol.

All queries use raw text() SQL against the db-sync schema (no ORM, SELECT only).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.

Each statement checks out its own pooled connection so independent aggregates
can run concurrently; an AsyncSession cannot multiplex statements.
"""

import asyncio
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql.elements import TextClause

from src.om_common.datetime_utils import as_utc, to_naive_utc
from src.om_common.lovelace import parse_lovelace
from src.om_indexer.domain.models import (
    MAX_TRANSACTION_ROWS,
    AddressBalance,
    TimeWindow,
    TransactionRecord,
    TransactionStats,
)

logger = logging.getLogger("om.indexer")

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_CURRENT_BALANCE_SQL = text("""
    SELECT COALESCE(SUM(value), 0) AS total
    FROM tx_out
    WHERE address = :address AND consumed_by_tx_id IS NULL
""")

_LIFETIME_RECEIVED_SQL = text("""
    SELECT COALESCE(SUM(value), 0) AS total
    FROM tx_out
    WHERE address = :address
""")

_LIFETIME_SPENT_SQL = text("""
    SELECT COALESCE(SUM(value), 0) AS total
    FROM tx_out
    WHERE address = :address AND consumed_by_tx_id IS NOT NULL
""")

_TOKEN_BALANCE_SQL = text("""
    SELECT COALESCE(SUM(ma.quantity), 0) AS total
    FROM ma_tx_out ma
    JOIN multi_asset m ON ma.ident = m.id
    JOIN tx_out txo ON ma.tx_out_id = txo.id
    WHERE txo.address = :address
      AND encode(m.policy, 'hex') = :policy_id
      AND txo.consumed_by_tx_id IS NULL
""")

_WINDOW_FILTER = """
      AND (CAST(:from_date AS TIMESTAMP) IS NULL OR b.time >= CAST(:from_date AS TIMESTAMP))
      AND (CAST(:to_date AS TIMESTAMP) IS NULL OR b.time <= CAST(:to_date AS TIMESTAMP))
"""

_TRANSACTION_HISTORY_SQL = text(f"""
    SELECT encode(t.hash, 'hex') AS tx_hash,
           b.time AS block_time,
           txo.value AS value,
           txo.index AS tx_index
    FROM tx t
    JOIN block b ON t.block_id = b.id
    JOIN tx_out txo ON t.id = txo.tx_id
    WHERE txo.address = :address
    {_WINDOW_FILTER}
    ORDER BY b.time DESC
    LIMIT :limit
""")

_TRANSACTION_STATS_SQL = text(f"""
    SELECT COUNT(DISTINCT t.id) AS tx_count,
           COALESCE(SUM(CASE WHEN txo.consumed_by_tx_id IS NOT NULL
                             THEN txo.value ELSE 0 END), 0) AS total_spent,
           COALESCE(SUM(txo.value), 0) AS total_received
    FROM tx t
    JOIN block b ON t.block_id = b.id
    JOIN tx_out txo ON t.id = txo.tx_id
    WHERE txo.address = :address
    {_WINDOW_FILTER}
""")

_PING_SQL = text("SELECT 1")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_transaction(row: object) -> TransactionRecord:
    return TransactionRecord(
        tx_hash=row.tx_hash,  # type: ignore[attr-defined]
        block_time=as_utc(row.block_time),  # type: ignore[attr-defined]
        value=parse_lovelace(row.value),  # type: ignore[attr-defined]
        tx_index=int(row.tx_index),  # type: ignore[attr-defined]
    )


def _row_to_stats(row: object) -> TransactionStats:
    return TransactionStats(
        count=int(row.tx_count),  # type: ignore[attr-defined]
        total_spent=parse_lovelace(row.total_spent),  # type: ignore[attr-defined]
        total_received=parse_lovelace(row.total_received),  # type: ignore[attr-defined]
    )


def _window_params(window: TimeWindow) -> dict[str, object]:
    # block.time is TIMESTAMP WITHOUT TIME ZONE; asyncpg rejects aware datetimes
    return {
        "from_date": to_naive_utc(window.from_date),
        "to_date": to_naive_utc(window.to_date),
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class IndexerRepository:
    """Concrete repository. All operations are read-only SQL queries."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def _fetch_one(self, sql: TextClause, params: dict[str, object]) -> object:
        async with self._engine.connect() as conn:
            result = await conn.execute(sql, params)
            return result.fetchone()

    async def _fetch_all(self, sql: TextClause, params: dict[str, object]) -> list[object]:
        async with self._engine.connect() as conn:
            result = await conn.execute(sql, params)
            return list(result.fetchall())

    async def _sum(self, sql: TextClause, params: dict[str, object]) -> int:
        row = await self._fetch_one(sql, params)
        return parse_lovelace(row.total)  # type: ignore[attr-defined]

    # --- balances ---

    async def get_current_balance(self, address: str) -> int:
        return await self._sum(_CURRENT_BALANCE_SQL, {"address": address})

    async def get_lifetime_received(self, address: str) -> int:
        return await self._sum(_LIFETIME_RECEIVED_SQL, {"address": address})

    async def get_lifetime_spent(self, address: str) -> int:
        return await self._sum(_LIFETIME_SPENT_SQL, {"address": address})

    async def get_balance_info(self, address: str) -> AddressBalance:
        unspent, received, spent = await asyncio.gather(
            self.get_current_balance(address),
            self.get_lifetime_received(address),
            self.get_lifetime_spent(address),
        )
        balance = AddressBalance(
            address=address, lifetime_received=received, lifetime_spent=spent
        )
        if balance.current_balance != unspent:
            # Statements ran on separate connections; a new block can land between them.
            logger.warning(
                "Balance mismatch for %s: unspent=%d received-spent=%d",
                address,
                unspent,
                balance.current_balance,
            )
        return balance

    async def get_token_balance(self, address: str, policy_id: str) -> int:
        return await self._sum(
            _TOKEN_BALANCE_SQL, {"address": address, "policy_id": policy_id.lower()}
        )

    # --- transactions ---

    async def get_transaction_history(
        self, address: str, window: TimeWindow
    ) -> list[TransactionRecord]:
        rows = await self._fetch_all(
            _TRANSACTION_HISTORY_SQL,
            {"address": address, "limit": MAX_TRANSACTION_ROWS, **_window_params(window)},
        )
        return [_row_to_transaction(row) for row in rows]

    async def get_transaction_stats(
        self, address: str, window: TimeWindow
    ) -> TransactionStats:
        row = await self._fetch_one(
            _TRANSACTION_STATS_SQL, {"address": address, **_window_params(window)}
        )
        return _row_to_stats(row)

    async def get_transactions(
        self, address: str, window: TimeWindow
    ) -> tuple[list[TransactionRecord], TransactionStats]:
        records, stats = await asyncio.gather(
            self.get_transaction_history(address, window),
            self.get_transaction_stats(address, window),
        )
        return records, stats

    # --- lifecycle ---

    async def ping(self) -> bool:
        try:
            await self._fetch_one(_PING_SQL, {})
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
            logger.error("Database ping failed: %s", exc)
            return False
        return True

    async def close(self) -> None:
        await self._engine.dispose()
