"""Async engine for the chain-indexer database.

The indexer schema is owned by db-sync; this service only reads. Every
connection is opened with default_transaction_read_only=on and a server-side
statement_timeout.
"""

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from config.settings import DatabaseSettings


def build_database_url(db: DatabaseSettings) -> URL:
    return URL.create(
        "postgresql+asyncpg",
        username=db.user,
        password=db.password,
        host=db.host,
        port=db.port,
        database=db.database,
    )


def create_indexer_engine(db: DatabaseSettings, echo: bool = False) -> AsyncEngine:
    """Bounded pool shared by all requests.

    pool_size connections, no overflow. A request that cannot get a connection
    within connect_timeout_seconds fails with a pool TimeoutError.
    """
    statement_timeout_ms = int(db.statement_timeout_seconds * 1000)
    return create_async_engine(
        build_database_url(db),
        echo=echo,
        pool_size=db.pool_size,
        max_overflow=0,
        pool_timeout=db.connect_timeout_seconds,
        pool_recycle=db.idle_timeout_seconds,
        pool_pre_ping=True,
        connect_args={
            "timeout": db.connect_timeout_seconds,
            "server_settings": {
                "statement_timeout": str(statement_timeout_ms),
                "default_transaction_read_only": "on",
            },
        },
    )
