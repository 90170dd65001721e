"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.persistence import SQLitePersistence

# Aliases used by the API layer
get_connection_pool = get_pool
close_connection_pool = close_pool

# Singleton instance
_persistence: SQLitePersistence | None = None


async def get_sqlite_persistence() -> SQLitePersistence:
    """Get singleton SQLite persistence instance."""
    global _persistence
    if _persistence is None:
        _persistence = SQLitePersistence()
    return _persistence


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_connection_pool",
    "close_connection_pool",
    # Persistence
    "SQLitePersistence",
    "get_sqlite_persistence",
]
