"""Storage infrastructure implementations."""

from src.config import get_settings
from src.core.interfaces.persistence import IPersistence
from src.infrastructure.storage.null import NullPersistence
from src.infrastructure.storage.sqlite import (
    SQLitePersistence,
    close_pool,
    get_connection,
    get_pool,
    get_sqlite_persistence,
    get_transaction,
)


async def get_persistence() -> IPersistence:
    """Persistence backend selected by ``storage.backend``."""
    if get_settings().storage.backend == "none":
        return NullPersistence()
    return await get_sqlite_persistence()


__all__ = [
    "get_persistence",
    # Backends
    "NullPersistence",
    "SQLitePersistence",
    "get_sqlite_persistence",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
